"""Configuration parsing modules for asbuild."""

from .ini_parser import CONFIG_FILE_NAME, AsbuildConfig
from .project_config import (
    DependencyEntry,
    DependencySet,
    ExecutableMode,
    FileSetRef,
    ProjectConfig,
    ProjectRef,
    qualify_step_name,
)
from .workspace import Project, Workspace

__all__ = [
    "CONFIG_FILE_NAME",
    "AsbuildConfig",
    "DependencyEntry",
    "DependencySet",
    "ExecutableMode",
    "FileSetRef",
    "ProjectConfig",
    "ProjectRef",
    "Project",
    "Workspace",
    "qualify_step_name",
]
