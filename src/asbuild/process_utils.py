"""Process helpers for running the SDK compilers.

- Propagating KeyboardInterrupt to the main thread from except blocks
- Terminating a compiler's whole process tree when a build is interrupted
"""

import _thread
import logging

import psutil


def handle_keyboard_interrupt_properly(ke: KeyboardInterrupt) -> None:
    """Propagate a KeyboardInterrupt to the main thread, then re-raise it.

    Usage:
        try:
            run_compiler()
        except KeyboardInterrupt as ke:
            handle_keyboard_interrupt_properly(ke)

    Raises:
        KeyboardInterrupt: Always
    """
    _thread.interrupt_main()
    raise ke


def terminate_process_tree(root_pid: int, timeout: float = 3.0) -> int:
    """Terminate a process and all of its children.

    Children are terminated before their parents. Processes still alive after
    `timeout` seconds are killed.

    Args:
        root_pid: PID of the root process (the java compiler launcher)
        timeout: Seconds to wait for graceful termination

    Returns:
        Number of processes signalled
    """
    try:
        root = psutil.Process(root_pid)
    except psutil.NoSuchProcess:
        return 0

    try:
        processes = root.children(recursive=True)
    except psutil.NoSuchProcess:
        processes = []
    processes = list(reversed(processes)) + [root]

    signalled = []
    for proc in processes:
        try:
            proc.terminate()
            signalled.append(proc)
            logging.debug(f"Terminated process {proc.pid}")
        except psutil.NoSuchProcess:
            pass  # Already dead
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to terminate process {proc.pid}: {e}")

    _gone, alive = psutil.wait_procs(signalled, timeout=timeout)

    for proc in alive:
        try:
            proc.kill()
            logging.warning(f"Force killed stubborn process {proc.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logging.warning(f"Failed to force kill process {proc.pid}: {e}")

    return len(signalled)
