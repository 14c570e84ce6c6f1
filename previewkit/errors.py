"""
Exceptions raised inside the preview pipeline.

Every exception carries the name of the file it is about. The orchestrator
turns them into a CompileFailure before anything reaches the caller.
"""


class PreviewError(Exception):
    """Base class for pipeline errors."""

    def __init__(self, message: str, file: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.file = file


class MissingEntryError(PreviewError):
    """Raised when a file the framework needs is not in the source set."""
    pass


class UnsupportedFrameworkError(PreviewError):
    """Raised when the framework identifier is not one we know."""

    def __init__(self, framework: object):
        super().__init__(f"Unsupported framework: {framework}", file="unknown")
        self.framework = framework


class TransformError(PreviewError):
    """Raised when the in-process JSX transform rejects the source."""
    pass


class RemoteUnavailableError(PreviewError):
    """Raised when an out-of-process compiler cannot be reached or gives up."""
    pass
