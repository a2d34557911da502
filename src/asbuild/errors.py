"""Exception hierarchy shared across asbuild.

Configuration errors are raised while the step graph is being declared and
are never retried. Execution errors are raised while a step runs.
"""


class AsbuildError(Exception):
    """Base class for all asbuild errors."""
    pass


class BuildConfigurationError(AsbuildError):
    """Raised when the workspace or a project is configured incorrectly."""
    pass


class ProjectConfigError(BuildConfigurationError):
    """Raised for malformed or inconsistent asbuild.ini files."""
    pass


class WorkspaceError(BuildConfigurationError):
    """Raised when the workspace layout cannot be loaded."""
    pass


class SdkNotFoundError(BuildConfigurationError):
    """Raised when the SDK path is unset or does not exist."""
    pass


class UnsupportedDependencyError(BuildConfigurationError):
    """Raised for dependency notations that cannot be resolved."""
    pass


class CyclicDependencyError(BuildConfigurationError):
    """Raised when projects or steps depend on each other in a cycle."""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__(f"Cyclic dependency detected: {' -> '.join(self.cycle)}")


class MissingMainClassError(BuildConfigurationError):
    """Raised when an executable is requested without a main class."""
    pass


class NothingToBuildError(BuildConfigurationError):
    """Raised when neither an archive nor an executable is requested."""
    pass


class InvalidArtifactSelectionError(BuildConfigurationError):
    """Raised when the executable mode conflicts with the archive flag."""
    pass


class UnknownStepError(AsbuildError):
    """Raised when a step name is not declared in the task graph."""
    pass


class CompilerError(AsbuildError):
    """Raised when an SDK compiler exits with a non-zero status."""

    def __init__(self, message: str, returncode: int = 1, output: str = ""):
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class ArchiveExtractionError(AsbuildError):
    """Raised when the executable cannot be extracted from the archive."""
    pass


class StepExecutionError(AsbuildError):
    """Raised when a build step's action fails."""

    def __init__(self, step_name: str, cause: BaseException):
        self.step_name = step_name
        self.cause = cause
        super().__init__(f"Execution failed for step '{step_name}': {cause}")
