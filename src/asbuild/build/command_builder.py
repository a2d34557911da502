"""Compiler Command Builder.

This module builds the argument lists passed to the SDK compilers: compc
for SWC archives and mxmlc for SWF executables.

Design:
    - Argument order is significant: the compilers apply `+=` flags in order,
      so later config files and options extend or override earlier ones
    - The baseline air-config.xml is always loaded first
    - Free-form options come before -output= so they cannot override it
    - The mxmlc entry-point source file is the trailing positional argument
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from ..config.project_config import ProjectConfig
from ..errors import MissingMainClassError

ARCHIVE_FILE_NAME = "library.swc"
EXECUTABLE_FILE_NAME = "executable.swf"
CLASS_MANIFEST_FILE_NAME = "classes.xml"


class CompilerMode(Enum):
    """Which SDK compiler a command targets."""

    ARCHIVE = "compc"
    EXECUTABLE = "mxmlc"

    @property
    def jar_name(self) -> str:
        return f"{self.value}-cli.jar"


@dataclass(frozen=True)
class BuildLayout:
    """Conventional output locations below a project's build directory."""

    build_dir: Path

    @property
    def libs_dir(self) -> Path:
        return self.build_dir / "libs"

    @property
    def tmp_dir(self) -> Path:
        return self.build_dir / "tmp"

    @property
    def archive_path(self) -> Path:
        return self.libs_dir / ARCHIVE_FILE_NAME

    @property
    def executable_path(self) -> Path:
        return self.libs_dir / EXECUTABLE_FILE_NAME

    @property
    def class_manifest_path(self) -> Path:
        return self.tmp_dir / CLASS_MANIFEST_FILE_NAME


class CommandBuilder:
    """Builds compc/mxmlc argument lists from a project configuration.

    The builder is pure: identical inputs always produce identical lists.
    """

    def __init__(self, config: ProjectConfig, sdk_dir: Path, build_dir: Path):
        """Initialize command builder.

        Args:
            config: Project configuration
            sdk_dir: AIR/Flex SDK root directory
            build_dir: Project build output directory
        """
        self.config = config
        self.sdk_dir = Path(sdk_dir)
        self.layout = BuildLayout(Path(build_dir))

    @property
    def baseline_config(self) -> Path:
        return self.sdk_dir / "frameworks" / "air-config.xml"

    def _common_args(self) -> List[str]:
        args = [f"-load-config={self.baseline_config}"]
        args.extend(f"-load-config+={config}" for config in self.config.configs)
        args.extend(f"-define+={name},{value}" for name, value in self.config.defines)
        args.extend(f"-source-path+={source}" for source in self.config.sources)
        return args

    @staticmethod
    def _library_args(bundled: Sequence[Path], external: Sequence[Path]) -> List[str]:
        args = []
        if bundled:
            args.append(f"-include-libraries+={_join(bundled)}")
        if external:
            args.append(f"-external-library-path+={_join(external)}")
        return args

    def archive_args(
        self,
        bundled: Sequence[Path] = (),
        external: Sequence[Path] = (),
        output: Optional[Path] = None,
    ) -> List[str]:
        """Build compc arguments for the SWC archive.

        Args:
            bundled: Resolved bundled library files (merged into the SWC)
            external: Resolved external library files (linked, not merged)
            output: Output path (defaults to build/libs/library.swc)

        Returns:
            Ordered list of compiler arguments
        """
        output = output or self.layout.archive_path

        args = self._common_args()
        args.extend(self._library_args(bundled, external))
        if self.config.sources:
            args.append(f"-include-sources+={_join(self.config.sources)}")
        args.extend(self.config.options)
        args.append(f"-output={output}")
        return args

    def executable_args(
        self,
        bundled: Sequence[Path] = (),
        external: Sequence[Path] = (),
        output: Optional[Path] = None,
    ) -> List[str]:
        """Build mxmlc arguments for the SWF executable.

        Args:
            bundled: Resolved bundled library files
            external: Resolved external library files
            output: Output path (defaults to build/libs/executable.swf)

        Returns:
            Ordered list of compiler arguments ending with the main class file

        Raises:
            MissingMainClassError: If no main class is configured
        """
        main_class_file = self.config.main_class_file()
        if main_class_file is None:
            if not self.config.main_class:
                raise MissingMainClassError(
                    "Missing main class. Set 'main_class' in the [actionscript] section."
                )
            raise MissingMainClassError(
                f"Main class '{self.config.main_class}' needs at least one source directory."
            )

        output = output or self.layout.executable_path

        args = self._common_args()
        if self.config.swf_include_all_classes:
            args.append(f"-load-config+={self.layout.class_manifest_path}")
        args.extend(self._library_args(bundled, external))
        args.extend(self.config.options)
        args.append(f"-output={output}")
        args.append(str(main_class_file))
        return args

    def java_command(self, mode: CompilerMode, java: str, args: Sequence[str]) -> List[str]:
        """Wrap compiler arguments in the java invocation of the SDK jar.

        Example:
            ['java', '-Dflexlib=<sdk>/frameworks', '-jar', '<sdk>/lib/compc-cli.jar', ...]
        """
        cmd = [
            java,
            f"-Dflexlib={self.sdk_dir / 'frameworks'}",
            "-jar",
            str(self.sdk_dir / "lib" / mode.jar_name),
        ]
        cmd.extend(args)
        return cmd


def _join(paths: Sequence[Path]) -> str:
    return ",".join(str(path) for path in paths)
