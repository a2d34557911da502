"""
Project configuration model.

Holds the build settings of a single ActionScript project as plain data:
source roots, extra compiler config files, defines, free-form options,
artifact selection and dependency declarations. Values are validated lazily
by the components that consume them (the task graph builder checks the
artifact selection, the command builder checks the main class).
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from ..errors import ProjectConfigError, UnsupportedDependencyError

SOURCE_EXTENSION = ".as"

# group:artifact:version style coordinates
_COORDINATES_RE = re.compile(r"^[\w.\-]+:[\w.\-]+(:[\w.\-]+)+$")


class ExecutableMode(Enum):
    """How (and whether) the SWF executable is produced."""

    NONE = "none"
    """Do not generate a SWF file."""

    FROM_ENTRY_POINT = "entry"
    """Invoke mxmlc; the SWF contains the configured main class as entry point."""

    FROM_ARCHIVE = "swc"
    """Extract the SWF from the SWC; keeps every class but has no entry point."""

    @classmethod
    def parse(cls, value: str) -> "ExecutableMode":
        """Parse an ini value such as 'none', 'entry' or 'swc'."""
        normalized = value.strip().lower()
        if normalized == "archive":
            normalized = "swc"
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ProjectConfigError(
            f"Invalid swf mode '{value}'. Expected one of: none, entry, swc"
        )


@dataclass(frozen=True)
class ProjectRef:
    """Dependency on the SWC produced by another workspace project."""

    project_path: str

    @property
    def name(self) -> str:
        """Last path segment; not unique across nested projects (':a:lib' and ':b:lib' are both 'lib')."""
        return self.project_path.rstrip(":").rsplit(":", 1)[-1]

    @property
    def step_name(self) -> str:
        """Qualified name of the producing compile-archive step."""
        return qualify_step_name(self.project_path, "compile-archive")


@dataclass(frozen=True)
class FileSetRef:
    """Dependency on a plain collection of SWC files."""

    paths: Tuple[Path, ...]

    @property
    def name(self) -> str:
        return ", ".join(path.name for path in self.paths)


DependencyEntry = Union[ProjectRef, FileSetRef]


@dataclass(frozen=True)
class DependencySet:
    """Bundled (merged) and external (runtime-provided) dependencies."""

    bundled: Tuple[DependencyEntry, ...] = ()
    external: Tuple[DependencyEntry, ...] = ()

    def __post_init__(self):
        for partition_name, partition in (("bundled", self.bundled), ("external", self.external)):
            if len(set(partition)) != len(partition):
                raise ProjectConfigError(f"Duplicate entry in '{partition_name}' dependencies")

        overlap = set(self.bundled) & set(self.external)
        if overlap:
            names = ", ".join(sorted(entry.name for entry in overlap))
            raise ProjectConfigError(
                f"Dependencies declared both as bundled and external: {names}"
            )

    def all(self) -> Tuple[DependencyEntry, ...]:
        return self.bundled + self.external

    def project_refs(self) -> Tuple[ProjectRef, ...]:
        return tuple(entry for entry in self.all() if isinstance(entry, ProjectRef))


@dataclass
class ProjectConfig:
    """Build settings for one ActionScript project."""

    project_dir: Path
    sources: Tuple[Path, ...] = ()
    configs: Tuple[Path, ...] = ()
    defines: Tuple[Tuple[str, str], ...] = ()
    options: Tuple[str, ...] = ()
    main_class: Optional[str] = None
    swc: bool = False
    swf: ExecutableMode = ExecutableMode.NONE
    swf_include_all_classes: bool = True
    prepare_commands: Tuple[str, ...] = ()
    dependencies: DependencySet = field(default_factory=DependencySet)

    def main_class_file(self) -> Optional[Path]:
        """Location of the entry-point source file, or None without a main class.

        The main class is looked up in the first source root only.
        """
        if not self.main_class or not self.sources:
            return None
        return self.sources[0] / (self.main_class.replace(".", "/") + SOURCE_EXTENSION)


def qualify_step_name(project_path: str, step: str) -> str:
    """Build a qualified step name, e.g. (':core', 'build') -> ':core:build'."""
    if project_path == ":":
        return f":{step}"
    return f"{project_path}:{step}"


def parse_dependency_notation(notation: str, project_dir: Path) -> DependencyEntry:
    """Turn one line of a [dependencies] list into a dependency entry.

    ':core' references another project, 'group:artifact:version' coordinates
    are rejected, anything else is a file path or glob relative to the project.

    Raises:
        UnsupportedDependencyError: For coordinates or empty notations
    """
    notation = notation.strip()
    if not notation:
        raise UnsupportedDependencyError("Empty dependency notation")

    if notation.startswith(":"):
        return ProjectRef(project_path=notation.rstrip(":") or ":")

    if _COORDINATES_RE.match(notation) and not Path(notation).drive:
        raise UnsupportedDependencyError(
            f"Unsupported dependency kind: '{notation}' (repository coordinates are not supported)"
        )

    pattern_path = Path(notation)
    if not pattern_path.is_absolute():
        pattern_path = project_dir / pattern_path

    if any(ch in notation for ch in "*?["):
        anchor = Path(pattern_path.anchor)
        matches = sorted(anchor.glob(str(pattern_path.relative_to(anchor))))
        return FileSetRef(paths=tuple(matches))

    return FileSetRef(paths=(pattern_path,))
