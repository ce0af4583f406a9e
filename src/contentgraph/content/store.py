"""Filesystem-backed content store."""
from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path, PurePosixPath

import structlog

from contentgraph.content.errors import (
    ContentIOError,
    ContentNotFoundError,
    InvalidOperationError,
    from_os_error,
)
from contentgraph.content.metadata import derive_title, extract, extract_headings
from contentgraph.content.options import ContentOptions
from contentgraph.content.paths import PathResolver, base_name
from contentgraph.content.related import RelatedDocumentScorer
from contentgraph.content.schemas import ContentItem, MarkdownDocument, RelatedDocument
from contentgraph.content.walker import ContentTreeScanner

logger = structlog.get_logger()

DEFAULT_FILE_MODE = 0o644


class ContentStore:
    """Read, list, save and delete content under a single root.

    Items are computed from the filesystem on every call. Logical paths are
    root-relative; a leading slash is accepted and ignored.

    Attributes:
        options: Content root and listing policy.
        resolver: Path resolver bound to the root.
        scanner: Directory scanner.
        scorer: Related-document scorer.
    """

    def __init__(self, options: ContentOptions) -> None:
        """Initialize store.

        Args:
            options: Content root and listing policy.
        """
        self.options = options
        self.resolver = PathResolver(options.root)
        self.scanner = ContentTreeScanner(self.resolver, options)
        self.scorer = RelatedDocumentScorer(self.scanner)

    @property
    def root(self) -> Path:
        """Absolute content root."""
        return self.resolver.root

    def ensure_root(self) -> None:
        """Create the content root if it does not exist.

        Raises:
            ContentIOError: If the directory cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ContentIOError(
                f"Failed to create content root: {e}", str(self.root)
            ) from e
        logger.info("content_root_ready", root=str(self.root))

    def exists(self, path: str) -> bool:
        """Check whether a logical path exists."""
        return self.resolver.resolve(path).exists()

    def _stat(self, target: Path, logical: str) -> os.stat_result:
        try:
            return target.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise ContentNotFoundError(f"Content not found: {logical}", logical) from e
        except OSError as e:
            raise from_os_error(e, logical) from e

    def locate_file(self, path: str) -> tuple[str, Path]:
        """Find the file for a logical path, trying `.md` for extensionless paths."""
        logical = self.resolver.normalize(path)
        target = self.resolver.resolve(logical)

        if logical and not target.exists() and not PurePosixPath(logical).suffix:
            candidate = f"{logical}.md"
            candidate_target = self.resolver.resolve(candidate)
            if candidate_target.is_file():
                return candidate, candidate_target

        return logical, target

    def get(self, path: str) -> ContentItem:
        """Get the item at a logical path.

        Args:
            path: Logical path; "" or "/" is the root.

        Returns:
            Item with attributes and metadata.

        Raises:
            PathTraversalError: If the path escapes the content root.
            ContentNotFoundError: If nothing exists at the path.
        """
        logical = self.resolver.normalize(path)
        target = self.resolver.resolve(logical)
        return self.scanner.build_item(target, self._stat(target, logical))

    def _read_text(self, path: str) -> tuple[str, str]:
        logical, target = self.locate_file(path)
        if stat.S_ISDIR(self._stat(target, logical).st_mode):
            raise InvalidOperationError(
                f"Cannot read content of a directory: {logical}", logical
            )

        try:
            with target.open(encoding="utf-8", newline="") as f:
                return logical, f.read()
        except UnicodeDecodeError as e:
            raise ContentIOError(
                f"File is not valid UTF-8: {logical}", logical, "EILSEQ"
            ) from e
        except OSError as e:
            raise from_os_error(e, logical) from e

    def read_body(self, path: str) -> str:
        """Read a file's text exactly as stored.

        Args:
            path: Logical file path. Extensionless paths that do not exist
                fall back to the `.md` file of the same name.

        Returns:
            Full file content, front matter included.

        Raises:
            PathTraversalError: If the path escapes the content root.
            ContentNotFoundError: If the file does not exist.
            InvalidOperationError: If the path is a directory.
            ContentIOError: If the file cannot be read.
        """
        _, text = self._read_text(path)
        return text

    def read_document(self, path: str) -> MarkdownDocument:
        """Read a markdown file split into metadata, body and headings.

        The title comes from the `title` key, then the first heading, then
        the filename.

        Args:
            path: Logical markdown file path.

        Returns:
            Parsed document.

        Raises:
            InvalidOperationError: If the file is not markdown or is a directory.
            ContentNotFoundError: If the file does not exist.
        """
        logical, text = self._read_text(path)
        name = base_name(logical)
        if not self.options.is_markdown(name):
            raise InvalidOperationError(f"Not a markdown file: {logical}", logical)

        front = extract(text)
        return MarkdownDocument(
            name=PurePosixPath(name).stem,
            path=logical,
            title=derive_title(front.metadata, front.body, name),
            body=front.body,
            headings=extract_headings(front.body),
            order=front.order,
            metadata=front.metadata,
        )

    def list(self, path: str, recursive: bool = False) -> list[ContentItem]:
        """List a directory.

        Args:
            path: Logical directory path.
            recursive: List all descendants in pre-order instead of children.

        Returns:
            Sorted items.

        Raises:
            ContentNotFoundError: If the directory does not exist.
            InvalidOperationError: If the path is a file.
        """
        logical = self.resolver.normalize(path)
        target = self.resolver.resolve(logical)
        if not stat.S_ISDIR(self._stat(target, logical).st_mode):
            raise InvalidOperationError(f"Path is not a directory: {logical}", logical)

        if recursive:
            items = self.scanner.list_descendants(logical)
        else:
            items = self.scanner.list_children(logical)
        logger.debug("content_listed", path=logical, recursive=recursive, count=len(items))
        return items

    def save(self, path: str, body: str) -> ContentItem:
        """Write a file, creating missing parent directories.

        The body is written to a temporary file in the target directory and
        renamed over the target, so readers never see a partial write.

        Args:
            path: Logical file path.
            body: Full text to store.

        Returns:
            The freshly read item.

        Raises:
            PathTraversalError: If the path escapes the content root.
            InvalidOperationError: If the path is the root or a directory.
            ContentIOError: If the write fails.
        """
        logical = self.resolver.normalize(path)
        target = self.resolver.resolve(logical)
        if target == self.root:
            raise InvalidOperationError("Cannot write to the content root", logical)
        if target.is_dir():
            raise InvalidOperationError(f"Cannot overwrite a directory: {logical}", logical)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            mode = (
                stat.S_IMODE(target.stat().st_mode)
                if target.exists()
                else DEFAULT_FILE_MODE
            )
            self._write_atomic(target, body, mode)
        except OSError as e:
            logger.error("content_save_failed", path=logical, error=str(e))
            raise from_os_error(e, logical) from e
        except UnicodeEncodeError as e:
            raise ContentIOError(
                f"Body is not encodable as UTF-8: {logical}", logical, "EILSEQ"
            ) from e

        logger.info("content_saved", path=logical, length=len(body))
        return self.get(logical)

    @staticmethod
    def _write_atomic(target: Path, body: str, mode: int) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.name}-",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                os.fchmod(f.fileno(), mode)
                f.write(body)
            os.replace(temp_path, target)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def delete(self, path: str) -> bool:
        """Delete a file or a directory tree.

        Directories are removed bottom-up, children before their parent. A
        symlink at the path is unlinked and its target left alone.

        Args:
            path: Logical path.

        Returns:
            True if something was deleted, False if the path did not exist.

        Raises:
            PathTraversalError: If the path escapes the content root.
            InvalidOperationError: If the path is the content root.
            ContentIOError: If removal fails part way.
        """
        logical = self.resolver.normalize(path)
        target = self.resolver.resolve(logical, follow_symlinks=False)
        if target == self.root:
            raise InvalidOperationError("Cannot delete the content root", logical)
        if not target.exists() and not target.is_symlink():
            return False

        try:
            if target.is_dir() and not target.is_symlink():
                _remove_tree(target)
            else:
                target.unlink()
        except OSError as e:
            logger.error("content_delete_failed", path=logical, error=str(e))
            raise from_os_error(e, logical) from e

        logger.info("content_deleted", path=logical)
        return True

    def first_document(self, path: str = "") -> ContentItem:
        """Find the first markdown file under a directory in display order.

        Args:
            path: Logical directory path; "" for the root.

        Returns:
            The first markdown file of the pre-order walk.

        Raises:
            ContentNotFoundError: If the directory is missing or holds no
                markdown files.
            InvalidOperationError: If the path is a file.
        """
        logical = self.resolver.normalize(path)
        for item in self.list(logical, recursive=True):
            if not item.is_directory and self.options.is_markdown(item.name):
                return item
        raise ContentNotFoundError(f"No markdown files found in: {logical}", logical)

    def find_related(self, path: str, limit: int = 5) -> list[RelatedDocument]:
        """Suggest documents related to a document. Never raises."""
        return self.scorer.find_related(path, limit)


def _raise_walk_error(error: OSError) -> None:
    raise error


def _remove_tree(directory: Path) -> None:
    """Remove a directory tree in post-order.

    Symlinks are unlinked, never followed.
    """
    for current, dirnames, filenames in os.walk(
        directory, topdown=False, onerror=_raise_walk_error
    ):
        for name in filenames:
            os.unlink(os.path.join(current, name))
        for name in dirnames:
            child = os.path.join(current, name)
            if os.path.islink(child):
                os.unlink(child)
            else:
                os.rmdir(child)
    directory.rmdir()
