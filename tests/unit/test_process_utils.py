"""Tests for process tree termination and interrupt handling."""

import subprocess
import sys
from unittest.mock import patch

import psutil
import pytest

from asbuild.process_utils import handle_keyboard_interrupt_properly, terminate_process_tree


def test_terminate_missing_process():
    with patch("asbuild.process_utils.psutil.Process", side_effect=psutil.NoSuchProcess(999999)):
        assert terminate_process_tree(999999) == 0


def test_terminate_running_process():
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    try:
        signalled = terminate_process_tree(proc.pid, timeout=5.0)

        assert signalled == 1
        assert proc.wait(timeout=5) is not None
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()


def test_keyboard_interrupt_is_reraised():
    ke = KeyboardInterrupt()

    with patch("asbuild.process_utils._thread.interrupt_main") as interrupt_main:
        with pytest.raises(KeyboardInterrupt) as exc_info:
            handle_keyboard_interrupt_properly(ke)

    interrupt_main.assert_called_once()
    assert exc_info.value is ke
