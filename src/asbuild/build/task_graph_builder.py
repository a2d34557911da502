"""
Task graph construction for asbuild workspaces.

This module declares the build steps of every project and wires them
together:

    prepare-sources ─┬─> compile-archive ──────────────┐
                     │        ·(run after)             │
                     │   extract-executable ───────────┼─> build
    enumerate-classes┴─> compile-executable ───────────┘

plus `clean` and `generate-ide-descriptor`. compile steps also depend on the
compile-archive step of every referenced project. The project's asbuild.ini
is an input of every step that produces an artifact, so editing defines,
options or dependencies rebuilds it.

Projects are declared in dependency order so project references always find
their producer step. All configuration errors surface here, before anything
runs.
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from ..config.project_config import ExecutableMode, qualify_step_name
from ..config.workspace import Project, Workspace
from ..errors import (
    CompilerError,
    InvalidArtifactSelectionError,
    MissingMainClassError,
    NothingToBuildError,
)
from ..ide.module_descriptor import ModuleDescriptorEmitter
from .archive_extractor import ArchiveExtractor
from .class_enumerator import ClassEnumerator
from .command_builder import CommandBuilder, CompilerMode
from .compiler_executor import CompilerExecutor
from .dependency_resolver import DependencyResolver
from .steps import BuildStep, StepBuilder, TaskGraph

GROUP_ACTIONSCRIPT = "actionscript"
GROUP_BUILD = "build"
GROUP_IDEA = "idea"

PREPARE_SOURCES = "prepare-sources"
COMPILE_ARCHIVE = "compile-archive"
ENUMERATE_CLASSES = "enumerate-classes"
COMPILE_EXECUTABLE = "compile-executable"
EXTRACT_EXECUTABLE = "extract-executable"
BUILD = "build"
CLEAN = "clean"
GENERATE_IDE_DESCRIPTOR = "generate-ide-descriptor"

STEP_NAMES = [
    BUILD,
    COMPILE_ARCHIVE,
    COMPILE_EXECUTABLE,
    ENUMERATE_CLASSES,
    EXTRACT_EXECUTABLE,
    CLEAN,
    GENERATE_IDE_DESCRIPTOR,
]


class TaskGraphBuilder:
    """
    Declares the build steps of a workspace.

    Example usage:
        graph = TaskGraphBuilder(Workspace.load(Path("."))).build_graph()
        for step in graph.execution_plan([":core:build"]):
            print(step.name)
    """

    def __init__(
        self,
        workspace: Workspace,
        executor: Optional[CompilerExecutor] = None,
        extractor: Optional[ArchiveExtractor] = None,
        emitter: Optional[ModuleDescriptorEmitter] = None,
    ):
        """
        Initialize task graph builder.

        Args:
            workspace: Loaded workspace (SDK path and projects)
            executor: Runs the compilers (default: CompilerExecutor())
            extractor: Extracts SWFs from SWCs (default: ArchiveExtractor())
            emitter: Writes IDE descriptors (default: ModuleDescriptorEmitter(workspace))
        """
        self.workspace = workspace
        self.executor = executor or CompilerExecutor()
        self.extractor = extractor or ArchiveExtractor()
        self.emitter = emitter or ModuleDescriptorEmitter(workspace)
        self.graph = TaskGraph()
        self.resolver = DependencyResolver(self.graph)

    def build_graph(self) -> TaskGraph:
        """
        Declare the steps of every project in the workspace.

        Returns:
            The populated TaskGraph

        Raises:
            BuildConfigurationError: For any configuration problem
        """
        for project in self.workspace.projects_in_dependency_order():
            self.declare_project(project)
        return self.graph

    def declare_project(self, project: Project) -> List[BuildStep]:
        """Declare all steps of a single project."""
        logging.debug(f"Declaring steps for project {project.path}")
        commands = CommandBuilder(project.config, self.workspace.sdk_dir, project.build_dir)

        clean = self._declare_clean(project)
        prepare = self._declare_prepare_sources(project)
        compile_archive = self._declare_compile_archive(project, commands, prepare)
        enumerate_classes = self._declare_enumerate_classes(project, commands)
        compile_executable = self._declare_compile_executable(
            project, commands, prepare, enumerate_classes
        )
        extract = self._declare_extract_executable(project, commands, compile_archive)
        ide = self._declare_generate_ide_descriptor(project)
        build = self._declare_build(project, compile_archive, compile_executable, extract)

        return [clean, prepare, compile_archive, enumerate_classes, compile_executable, extract, ide, build]

    def _step(self, project: Project, name: str, description: str, group: Optional[str]) -> StepBuilder:
        return StepBuilder(qualify_step_name(project.path, name), description, group)

    def _declare_clean(self, project: Project) -> BuildStep:
        build_dir = project.build_dir

        def clean() -> None:
            if build_dir.exists():
                shutil.rmtree(build_dir)
                logging.info(f"Deleted {build_dir}")

        step = self._step(project, CLEAN, "Cleans the ActionScript build directory", GROUP_BUILD)
        return self.graph.register(step.action(clean))

    def _declare_prepare_sources(self, project: Project) -> BuildStep:
        step = self._step(
            project, PREPARE_SOURCES, "Prepares ActionScript sources before compilation", GROUP_ACTIONSCRIPT
        )
        commands = list(project.config.prepare_commands)
        if commands:
            step.action(lambda: run_prepare_commands(commands, project.project_dir))
        return self.graph.register(step)

    def _declare_compile_archive(
        self, project: Project, commands: CommandBuilder, prepare: BuildStep
    ) -> BuildStep:
        config = project.config
        step = self._step(
            project, COMPILE_ARCHIVE, "Compiles ActionScript project into an SWC file", GROUP_ACTIONSCRIPT
        )
        step.depends_on(prepare)
        step.input(project.config_file, *config.sources, *config.configs)
        step.output(commands.layout.archive_path)

        bundled = self.resolver.resolve(step, config.dependencies.bundled)
        external = self.resolver.resolve(step, config.dependencies.external)
        step.input(*bundled, *external)

        cmd = commands.java_command(
            CompilerMode.ARCHIVE, self.workspace.java, commands.archive_args(bundled, external)
        )
        step.action(self._compile_action(cmd, project, commands.layout.libs_dir, "compc"))
        return self.graph.register(step)

    def _declare_enumerate_classes(self, project: Project, commands: CommandBuilder) -> BuildStep:
        sources = list(project.config.sources)
        manifest_path = commands.layout.class_manifest_path

        step = self._step(
            project, ENUMERATE_CLASSES, "Generates a list of classes for the ActionScript project", GROUP_ACTIONSCRIPT
        )
        step.input(*sources).output(manifest_path)
        step.action(lambda: ClassEnumerator(sources).generate(manifest_path))
        return self.graph.register(step)

    def _declare_compile_executable(
        self,
        project: Project,
        commands: CommandBuilder,
        prepare: BuildStep,
        enumerate_classes: BuildStep,
    ) -> BuildStep:
        config = project.config
        step = self._step(
            project, COMPILE_EXECUTABLE, "Compiles ActionScript project into an SWF file", GROUP_ACTIONSCRIPT
        )
        if config.swf_include_all_classes:
            step.depends_on(enumerate_classes)
        step.depends_on(prepare)
        step.input(project.config_file, *config.sources, *config.configs)
        step.output(commands.layout.executable_path)

        bundled = self.resolver.resolve(step, config.dependencies.bundled)
        external = self.resolver.resolve(step, config.dependencies.external)
        step.input(*bundled, *external)

        try:
            args = commands.executable_args(bundled, external)
        except MissingMainClassError as e:
            if config.swf == ExecutableMode.FROM_ENTRY_POINT:
                raise
            # Only fatal once someone actually asks for this step.
            error = e

            def missing_main_class() -> None:
                raise error

            step.action(missing_main_class)
        else:
            cmd = commands.java_command(CompilerMode.EXECUTABLE, self.workspace.java, args)
            step.action(self._compile_action(cmd, project, commands.layout.libs_dir, "mxmlc"))
        return self.graph.register(step)

    def _declare_extract_executable(
        self, project: Project, commands: CommandBuilder, compile_archive: BuildStep
    ) -> BuildStep:
        layout = commands.layout
        step = self._step(project, EXTRACT_EXECUTABLE, "Extracts SWF file from SWC", GROUP_ACTIONSCRIPT)
        step.must_run_after(compile_archive)
        step.input(project.config_file, layout.archive_path).output(layout.executable_path)
        step.action(
            lambda: self.extractor.extract_executable(
                layout.archive_path, layout.tmp_dir, layout.executable_path
            )
        )
        return self.graph.register(step)

    def _declare_generate_ide_descriptor(self, project: Project) -> BuildStep:
        step = self._step(
            project, GENERATE_IDE_DESCRIPTOR, "Generates IDEA module file for ActionScript project", GROUP_IDEA
        )
        step.action(lambda: self.emitter.generate(project))
        return self.graph.register(step)

    def _declare_build(
        self,
        project: Project,
        compile_archive: BuildStep,
        compile_executable: BuildStep,
        extract: BuildStep,
    ) -> BuildStep:
        config = project.config
        if not config.swc and config.swf == ExecutableMode.NONE:
            raise NothingToBuildError(
                f"Nothing to build in project '{project.path}'. Set either 'swc' or 'swf'."
            )

        step = self._step(project, BUILD, "Builds the ActionScript project", GROUP_BUILD)
        if config.swc:
            step.depends_on(compile_archive)

        if config.swf == ExecutableMode.FROM_ARCHIVE:
            if not config.swc:
                raise InvalidArtifactSelectionError(
                    f"Project '{project.path}': swf is set to 'swc', but SWC compilation is disabled"
                )
            step.depends_on(extract)
        elif config.swf == ExecutableMode.FROM_ENTRY_POINT:
            step.depends_on(compile_executable)

        return self.graph.register(step)

    def _compile_action(self, cmd: List[str], project: Project, libs_dir: Path, description: str):
        executor = self.executor

        def compile_step() -> None:
            libs_dir.mkdir(parents=True, exist_ok=True)
            executor.run(cmd, cwd=project.project_dir, description=description)

        return compile_step


def run_prepare_commands(commands: List[str], cwd: Path) -> None:
    """Run source-generation hooks in order, stopping at the first failure.

    Raises:
        CompilerError: If a command exits with a non-zero status
    """
    for command in commands:
        logging.info(f"Running prepare command: {command}")
        result = subprocess.run(shlex.split(command), cwd=str(cwd))
        if result.returncode != 0:
            raise CompilerError(
                f"Prepare command failed with exit code {result.returncode}: {command}",
                returncode=result.returncode,
            )
