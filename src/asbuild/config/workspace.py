"""
Workspace loading.

A workspace is a root directory with an asbuild.ini containing a
[workspace] section. It names the SDK and lists sub-project directories,
each with its own asbuild.ini. The root directory is a project too when its
asbuild.ini has an [actionscript] section.

Layout:
    game/
    ├── asbuild.ini           # [workspace] sdk = ..., projects = core, client
    ├── core/
    │   ├── asbuild.ini       # [actionscript] ...
    │   └── build/            # per-project build directory
    └── client/
        └── asbuild.ini
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import CyclicDependencyError, SdkNotFoundError, WorkspaceError
from .ini_parser import CONFIG_FILE_NAME, AsbuildConfig
from .project_config import ProjectConfig

SDK_ENV_VAR = "ASBUILD_SDK"


@dataclass
class Project:
    """A configured project inside the workspace."""

    path: str
    project_dir: Path
    config: ProjectConfig

    @property
    def name(self) -> str:
        if self.path == ":":
            return self.project_dir.name
        return self.path.rsplit(":", 1)[-1]

    @property
    def build_dir(self) -> Path:
        return self.project_dir / "build"

    @property
    def config_file(self) -> Path:
        return self.project_dir / CONFIG_FILE_NAME


class Workspace:
    """Root directory, SDK location and the projects of a build."""

    def __init__(
        self,
        root_dir: Path,
        sdk_dir: Path,
        projects: Dict[str, Project],
        java: Optional[str] = None,
    ):
        self.root_dir = Path(root_dir).absolute()
        self.sdk_dir = Path(sdk_dir).absolute()
        self.projects = projects
        self.java = java or default_java()

    @classmethod
    def load(cls, root_dir: Path) -> "Workspace":
        """
        Load the workspace rooted at root_dir.

        Raises:
            WorkspaceError: If asbuild.ini is missing or lists unknown projects
            SdkNotFoundError: If the SDK path is unset or does not exist
            ProjectConfigError: If a project file is invalid
        """
        root_dir = Path(root_dir).absolute()
        ini_path = root_dir / CONFIG_FILE_NAME
        if not ini_path.exists():
            raise WorkspaceError(f"{CONFIG_FILE_NAME} not found in {root_dir}")

        root_config = AsbuildConfig(ini_path)
        sdk_dir = resolve_sdk_dir(root_dir, root_config.get_workspace_value("sdk"))

        projects: Dict[str, Project] = {}
        if root_config.is_project():
            projects[":"] = Project(":", root_dir, root_config.get_project_config())

        for relative in root_config.get_workspace_projects():
            project_dir = root_dir / relative
            project_ini = project_dir / CONFIG_FILE_NAME
            if not project_ini.exists():
                raise WorkspaceError(f"Project '{relative}' has no {CONFIG_FILE_NAME}: {project_ini}")

            path = project_path_for(relative)
            projects[path] = Project(path, project_dir.absolute(), AsbuildConfig(project_ini).get_project_config())

        if not projects:
            raise WorkspaceError(f"No ActionScript projects declared in {ini_path}")

        return cls(root_dir, sdk_dir, projects, java=root_config.get_workspace_value("java") or None)

    def get_project(self, path: str) -> Project:
        if path not in self.projects:
            available = ", ".join(self.projects) or "none"
            raise WorkspaceError(f"Project '{path}' not found. Available projects: {available}")
        return self.projects[path]

    def projects_in_dependency_order(self) -> List[Project]:
        """
        Order projects so every project comes after the projects it references.

        Raises:
            WorkspaceError: If a project reference names an unknown project
            CyclicDependencyError: If project references form a cycle
        """
        ordered: List[Project] = []
        done = set()
        visiting: List[str] = []

        def visit(path: str) -> None:
            if path in done:
                return
            if path in visiting:
                raise CyclicDependencyError(visiting[visiting.index(path):] + [path])

            project = self.get_project(path)
            visiting.append(path)
            for ref in project.config.dependencies.project_refs():
                visit(ref.project_path)
            visiting.pop()

            done.add(path)
            ordered.append(project)

        for path in self.projects:
            visit(path)
        return ordered


def project_path_for(relative: str) -> str:
    """Map a project directory to its hierarchical path ('client/app' -> ':client:app')."""
    parts = [part for part in Path(relative).parts if part not in ("", ".")]
    return ":" + ":".join(parts) if parts else ":"


def resolve_sdk_dir(root_dir: Path, configured: str) -> Path:
    """
    Resolve the SDK root from ASBUILD_SDK or the [workspace] sdk value.

    Raises:
        SdkNotFoundError: If neither is set or the path does not exist
    """
    value = os.environ.get(SDK_ENV_VAR) or configured
    if not value:
        raise SdkNotFoundError(
            "Missing ActionScript SDK path. Set 'sdk' in the [workspace] section "
            + f"of {CONFIG_FILE_NAME} or the {SDK_ENV_VAR} environment variable."
        )

    sdk_dir = Path(value)
    if not sdk_dir.is_absolute():
        sdk_dir = root_dir / sdk_dir
    if not sdk_dir.exists():
        raise SdkNotFoundError(f"ActionScript SDK path does not exist: {sdk_dir}")
    return sdk_dir.absolute()


def default_java() -> str:
    """Java executable from JAVA_HOME, falling back to 'java' on PATH."""
    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        candidate = Path(java_home) / "bin" / ("java.exe" if os.name == "nt" else "java")
        if candidate.exists():
            return str(candidate)
    return shutil.which("java") or "java"
