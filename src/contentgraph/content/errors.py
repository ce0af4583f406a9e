"""Error kinds raised by the content core."""
import errno


class ContentError(Exception):
    """Base class for content access failures.

    Attributes:
        path: Logical path the failure relates to.
    """

    def __init__(self, message: str, path: str) -> None:
        """Initialize content error.

        Args:
            message: Error description.
            path: The offending logical path.
        """
        super().__init__(message)
        self.path = path


class PathTraversalError(ContentError):
    """Raised when a path resolves outside the content root."""


class ContentNotFoundError(ContentError):
    """Raised when a logical path does not exist."""


class InvalidOperationError(ContentError):
    """Raised when an operation does not apply to the target, e.g. reading a directory."""


class ContentIOError(ContentError):
    """Raised when the underlying filesystem call fails."""

    def __init__(self, message: str, path: str, code: str | None = None) -> None:
        """Initialize I/O error.

        Args:
            message: Error description.
            path: Logical path that caused the error.
            code: Optional errno name (e.g., EACCES).
        """
        super().__init__(message, path)
        self.code = code


def from_os_error(error: OSError, path: str) -> ContentError:
    """Translate an OSError into the matching content error kind.

    Args:
        error: The exception raised by the filesystem call.
        path: Logical path the call was made for.

    Returns:
        ContentNotFoundError for missing paths, InvalidOperationError for
        file/directory mismatches, ContentIOError otherwise.
    """
    if isinstance(error, FileNotFoundError):
        return ContentNotFoundError(f"Content not found: {path}", path)
    if isinstance(error, (NotADirectoryError, IsADirectoryError)):
        return InvalidOperationError(f"Unsupported operation on: {path}", path)
    if isinstance(error, PermissionError):
        return ContentIOError(f"Permission denied: {path}", path, "EACCES")

    code = errno.errorcode.get(error.errno) if error.errno else None
    return ContentIOError(f"Filesystem error on {path}: {error}", path, code)
