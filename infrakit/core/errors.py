"""Exception types raised by infrakit services."""


class InfrakitError(Exception):
    """Base class for errors the CLI reports to the user."""
    pass


class TemplateRenderError(InfrakitError):
    """Raised when a bundled template is missing or fails to render."""
    pass


class GitError(InfrakitError):
    """Raised when cloning or pulling the application repository fails."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class WebhookError(InfrakitError):
    """Raised when the GitHub webhook cannot be created."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class FileWriteError(InfrakitError):
    """Raised when a pipeline file cannot be written into the checkout."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr
