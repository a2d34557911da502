"""
Build system components for asbuild.

This module provides the build system implementation including:
- Step declarations and the task graph
- Dependency resolution
- Class enumeration
- compc/mxmlc command construction and execution
- Step execution with up-to-date checks
"""

from .archive_extractor import ArchiveExtractor
from .class_enumerator import ClassEnumerator, ClassManifest
from .command_builder import BuildLayout, CommandBuilder, CompilerMode
from .compiler_executor import CompilerExecutor
from .dependency_resolver import DependencyResolver
from .runner import BuildResult, StepRunner
from .steps import BuildStep, StepBuilder, TaskGraph
from .task_graph_builder import TaskGraphBuilder

__all__ = [
    "ArchiveExtractor",
    "BuildLayout",
    "BuildResult",
    "BuildStep",
    "ClassEnumerator",
    "ClassManifest",
    "CommandBuilder",
    "CompilerExecutor",
    "CompilerMode",
    "DependencyResolver",
    "StepBuilder",
    "StepRunner",
    "TaskGraph",
    "TaskGraphBuilder",
]
