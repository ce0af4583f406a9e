"""Security-first path resolution against the content root."""
import os
import re
from pathlib import Path

from contentgraph.content.errors import PathTraversalError

_SEPARATOR_RUN = re.compile(r"/{2,}")
_STRIP_CHARS = "/ \t\r\n\f\v"


def normalize_path(logical_path: str | None) -> str:
    """Normalize a logical path to its canonical root-relative form.

    None, empty and "/" all map to the root, "". Backslashes become forward
    slashes, repeated separators collapse, and leading or trailing separators
    and whitespace are stripped. Applying it twice gives the same result.

    Args:
        logical_path: User-supplied path, possibly None.

    Returns:
        Canonical logical path without leading or trailing slash.
    """
    if not logical_path:
        return ""

    cleaned = logical_path.strip().replace("\\", "/")
    cleaned = _SEPARATOR_RUN.sub("/", cleaned)
    return cleaned.strip(_STRIP_CHARS)


def parent_path(logical_path: str) -> str:
    """Return the logical parent of a normalized path ("" for top-level entries)."""
    head, _, _ = normalize_path(logical_path).rpartition("/")
    return head


def base_name(logical_path: str) -> str:
    """Return the final segment of a logical path ("" for the root)."""
    return normalize_path(logical_path).rpartition("/")[2]


class PathResolver:
    """Maps logical paths to absolute paths contained in a content root.

    `..` and `.` segments are collapsed lexically before the containment
    check. The symlink-resolved location must then lie under the symlink-
    resolved root as well, so links inside the root cannot lead out of it.

    Attributes:
        root: Absolute, normalized content root.
    """

    def __init__(self, root: Path) -> None:
        """Initialize resolver.

        Args:
            root: Content root directory, relative or absolute.
        """
        self.root = Path(os.path.normpath(os.path.abspath(root)))

    def normalize(self, logical_path: str | None) -> str:
        """Normalize a logical path. See `normalize_path`."""
        return normalize_path(logical_path)

    def resolve(self, logical_path: str | None, follow_symlinks: bool = True) -> Path:
        """Resolve a logical path to an absolute path under the root.

        Args:
            logical_path: Root-relative path, with or without leading slash.
            follow_symlinks: When False, a symlink in the final segment is
                not followed for the containment check, so the link itself
                can be addressed.

        Returns:
            Absolute Path for the location.

        Raises:
            PathTraversalError: If the path contains a null byte or resolves
                outside the content root, lexically or through a symlink.
        """
        raw = logical_path or ""
        if "\0" in raw:
            raise PathTraversalError("Path contains null byte", raw)

        relative = normalize_path(raw)
        if not relative:
            return self.root

        resolved = Path(os.path.normpath(self.root / relative))
        if resolved == self.root:
            return self.root
        if not resolved.is_relative_to(self.root):
            raise PathTraversalError(
                f"Path resolves outside content root: {self.root}", raw
            )

        self._check_real_location(resolved if follow_symlinks else resolved.parent, raw)
        return resolved

    def _check_real_location(self, path: Path, raw: str) -> None:
        real_root = Path(os.path.realpath(self.root))
        real = Path(os.path.realpath(path))
        if real != real_root and not real.is_relative_to(real_root):
            raise PathTraversalError(
                f"Path leaves content root through a symlink: {self.root}", raw
            )

    def relative(self, absolute_path: Path) -> str:
        """Convert an absolute path under the root back to a logical path.

        Args:
            absolute_path: Path previously produced by `resolve` or a walk.

        Returns:
            Forward-slash logical path, "" for the root itself.

        Raises:
            PathTraversalError: If the path is not under the root.
        """
        try:
            relative = absolute_path.relative_to(self.root)
        except ValueError as e:
            raise PathTraversalError(
                f"Path is outside content root: {self.root}", str(absolute_path)
            ) from e

        posix = relative.as_posix()
        return "" if posix == "." else posix
