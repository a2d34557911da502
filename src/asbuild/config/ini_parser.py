"""
asbuild.ini configuration parser.

This module parses the per-project asbuild.ini file and the workspace
section of the root asbuild.ini.

Example project asbuild.ini:
    [actionscript]
    sources = src
    configs = config.xml
    defines =
        CONFIG::debug, true
    main_class = game.Main
    swc = true
    swf = entry

    [dependencies]
    bundled = :core
    external = libs/airglobal.swc

Values use extended interpolation: ${key} and ${section:key} are expanded,
so a literal dollar sign in options or defines must be written as $$.
"""

import configparser
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import ProjectConfigError
from .project_config import (
    DependencySet,
    ExecutableMode,
    ProjectConfig,
    parse_dependency_notation,
)

CONFIG_FILE_NAME = "asbuild.ini"


class AsbuildConfig:
    """
    Parser for asbuild.ini files.

    Usage:
        config = AsbuildConfig(Path("core/asbuild.ini"))
        project = config.get_project_config()
    """

    PROJECT_SECTION = "actionscript"
    DEPENDENCIES_SECTION = "dependencies"
    WORKSPACE_SECTION = "workspace"

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with an asbuild.ini file.

        Args:
            ini_path: Path to the asbuild.ini file

        Raises:
            ProjectConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = Path(ini_path)
        self.project_dir = self.ini_path.parent.absolute()

        if not self.ini_path.exists():
            raise ProjectConfigError(f"Configuration file not found: {self.ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            self.config.read(self.ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to parse {self.ini_path}: {e}") from e

    def is_project(self) -> bool:
        """Whether the file declares an [actionscript] project section."""
        return self.PROJECT_SECTION in self.config

    def is_workspace(self) -> bool:
        return self.WORKSPACE_SECTION in self.config

    def _get(self, section: str, key: str) -> str:
        if section not in self.config:
            return ""
        try:
            value = self.config[section].get(key, "")
        except configparser.Error as e:
            raise ProjectConfigError(f"Invalid value for '{key}' in {self.ini_path}: {e}") from e
        return (value or "").strip()

    def get_list(self, section: str, key: str) -> List[str]:
        """
        Parse a multi-line value into a list, one entry per line.

        Example:
            For sources =
                src
                generated
            Returns: ['src', 'generated']
        """
        value = self._get(section, key)
        return [line.strip() for line in value.split("\n") if line.strip()]

    def get_path_list(self, section: str, key: str) -> List[str]:
        """Like get_list, but commas also separate entries."""
        items = []
        for line in self.get_list(section, key):
            items.extend(item.strip() for item in line.split(",") if item.strip())
        return items

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        if section not in self.config or key not in self.config[section]:
            return default
        try:
            return self.config[section].getboolean(key)
        except ValueError as e:
            raise ProjectConfigError(f"Invalid boolean for '{key}' in {self.ini_path}: {e}") from e

    def get_defines(self) -> List[Tuple[str, str]]:
        """
        Parse define lines into (name, value) pairs.

        The value starts after the first comma so it may contain commas itself.

        Example:
            For defines = CONFIG::debug, true
            Returns: [('CONFIG::debug', 'true')]
        """
        defines = []
        for line in self.get_list(self.PROJECT_SECTION, "defines"):
            if "," not in line:
                raise ProjectConfigError(
                    f"Invalid define '{line}' in {self.ini_path}. Expected 'name, value'"
                )
            name, value = line.split(",", 1)
            defines.append((name.strip(), value.strip()))
        return defines

    def get_dependencies(self) -> DependencySet:
        """Parse the [dependencies] section into a DependencySet."""
        bundled = tuple(
            parse_dependency_notation(notation, self.project_dir)
            for notation in self.get_list(self.DEPENDENCIES_SECTION, "bundled")
        )
        external = tuple(
            parse_dependency_notation(notation, self.project_dir)
            for notation in self.get_list(self.DEPENDENCIES_SECTION, "external")
        )
        return DependencySet(bundled=bundled, external=external)

    def get_project_config(self) -> ProjectConfig:
        """
        Build the ProjectConfig described by this file.

        Raises:
            ProjectConfigError: If the [actionscript] section is missing or invalid
        """
        if not self.is_project():
            raise ProjectConfigError(
                f"No [{self.PROJECT_SECTION}] section found in {self.ini_path}"
            )

        section = self.PROJECT_SECTION
        swf_value = self._get(section, "swf")
        main_class: Optional[str] = self._get(section, "main_class") or None

        return ProjectConfig(
            project_dir=self.project_dir,
            sources=tuple(self._resolve(p) for p in self.get_path_list(section, "sources")),
            configs=tuple(self._resolve(p) for p in self.get_path_list(section, "configs")),
            defines=tuple(self.get_defines()),
            options=tuple(self.get_list(section, "options")),
            main_class=main_class,
            swc=self.get_bool(section, "swc", False),
            swf=ExecutableMode.parse(swf_value) if swf_value else ExecutableMode.NONE,
            swf_include_all_classes=self.get_bool(section, "swf_include_all_classes", True),
            prepare_commands=tuple(self.get_list(section, "prepare")),
            dependencies=self.get_dependencies(),
        )

    def get_workspace_value(self, key: str) -> str:
        return self._get(self.WORKSPACE_SECTION, key)

    def get_workspace_projects(self) -> List[str]:
        return self.get_path_list(self.WORKSPACE_SECTION, "projects")

    def _resolve(self, value: str) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = self.project_dir / path
        return path
