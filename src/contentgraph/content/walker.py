"""Directory enumeration with filtering and deterministic ordering."""

import os
import stat
from datetime import UTC, datetime
from pathlib import Path

import structlog

from contentgraph.content.errors import from_os_error
from contentgraph.content.metadata import FrontMatter, extract, extract_directory
from contentgraph.content.options import ContentOptions
from contentgraph.content.paths import PathResolver
from contentgraph.content.schemas import ContentItem

logger = structlog.get_logger()


def sort_key(item: ContentItem) -> tuple[bool, int, bool, str, str]:
    """Ordering key for listings.

    Items with an `order` come first, ascending. Among items without an
    order, or with equal order, directories precede files. Ties fall back
    to the case-insensitive name, then the exact name.

    Args:
        item: Item to rank.

    Returns:
        Sortable tuple.
    """
    return (
        item.order is None,
        item.order if item.order is not None else 0,
        not item.is_directory,
        item.name.casefold(),
        item.name,
    )


class ContentTreeScanner:
    """Lists directory contents as ContentItems.

    Hidden entries, the metadata sidecar, denylisted names, names holding a
    backslash and symlinks are never listed. With `markdown_only` set, files
    without a markdown extension are skipped as well. Directory items carry
    the metadata of their sidecar; markdown files carry their own front
    matter only.
    """

    def __init__(self, resolver: PathResolver, options: ContentOptions) -> None:
        """Initialize scanner.

        Args:
            resolver: Resolver bound to the content root.
            options: Listing policy.
        """
        self.resolver = resolver
        self.options = options

    def is_listed(self, name: str, is_dir: bool) -> bool:
        """Check whether an entry should appear in listings.

        Args:
            name: Entry name.
            is_dir: Whether the entry is a directory.

        Returns:
            True if the entry is surfaced as a child.
        """
        if name.startswith(".") or name == self.options.metadata_filename:
            return False
        if "\\" in name:
            # logical paths read backslashes as separators
            return False
        if name in self.options.excluded_names:
            return False
        if not is_dir and self.options.markdown_only:
            return self.options.is_markdown(name)
        return True

    def load_metadata(self, absolute_path: Path, is_dir: bool) -> FrontMatter:
        """Read the metadata that applies to an entry.

        Unreadable sidecars and files yield empty metadata.

        Args:
            absolute_path: Entry location.
            is_dir: Whether the entry is a directory.

        Returns:
            Extracted front matter; body is empty for directories.
        """
        if is_dir:
            source = absolute_path / self.options.metadata_filename
            if not source.is_file():
                return FrontMatter(body="")
        elif self.options.is_markdown(absolute_path.name):
            source = absolute_path
        else:
            return FrontMatter(body="")

        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("metadata_read_failed", file=str(source), error=str(e))
            return FrontMatter(body="")

        return extract_directory(text) if is_dir else extract(text)

    def build_item(self, absolute_path: Path, st: os.stat_result) -> ContentItem:
        """Project a filesystem entry to a ContentItem.

        Args:
            absolute_path: Entry location under the root.
            st: Result of stat or lstat for the entry.

        Returns:
            Item with attributes and metadata.
        """
        is_dir = stat.S_ISDIR(st.st_mode)
        logical = self.resolver.relative(absolute_path)
        front = self.load_metadata(absolute_path, is_dir)

        return ContentItem(
            name=absolute_path.name if logical else "",
            type="directory" if is_dir else "file",
            path=logical,
            size=0 if is_dir else st.st_size,
            last_modified=datetime.fromtimestamp(st.st_mtime, tz=UTC),
            order=front.order,
            metadata=front.metadata,
        )

    def scan(self, directory: Path) -> list[tuple[ContentItem, Path]]:
        """List the listed entries of one directory, sorted.

        Entries that cannot be stat'ed are logged and skipped.

        Args:
            directory: Absolute directory path.

        Returns:
            Sorted (item, absolute path) pairs.

        Raises:
            OSError: If the directory itself cannot be read.
        """
        entries = list(directory.iterdir())
        scanned: list[tuple[ContentItem, Path]] = []

        for entry in entries:
            try:
                st = entry.lstat()
            except OSError as e:
                logger.warning("entry_stat_failed", file=str(entry), error=str(e))
                continue

            if stat.S_ISLNK(st.st_mode):
                continue
            is_dir = stat.S_ISDIR(st.st_mode)
            if not is_dir and not stat.S_ISREG(st.st_mode):
                continue
            if not self.is_listed(entry.name, is_dir):
                continue

            scanned.append((self.build_item(entry, st), entry))

        scanned.sort(key=lambda pair: sort_key(pair[0]))
        return scanned

    def list_children(self, dir_path: str) -> list[ContentItem]:
        """List the immediate children of a directory.

        Args:
            dir_path: Logical directory path.

        Returns:
            Sorted child items.

        Raises:
            PathTraversalError: If the path escapes the content root.
            ContentNotFoundError: If the directory does not exist.
            InvalidOperationError: If the path is not a directory.
            ContentIOError: If the directory cannot be read.
        """
        directory = self.resolver.resolve(dir_path)
        try:
            return [item for item, _ in self.scan(directory)]
        except OSError as e:
            raise from_os_error(e, self.resolver.normalize(dir_path)) from e

    def list_descendants(self, dir_path: str) -> list[ContentItem]:
        """List every descendant of a directory in pre-order.

        Each directory is followed by its own contents before its next
        sibling; the starting directory is not included. Unreadable
        subtrees are logged and skipped, and nesting deeper than
        `max_depth` is not visited.

        Args:
            dir_path: Logical directory path.

        Returns:
            Descendant items.

        Raises:
            PathTraversalError: If the path escapes the content root.
            ContentNotFoundError: If the directory does not exist.
            InvalidOperationError: If the path is not a directory.
            ContentIOError: If the starting directory cannot be read.
        """
        directory = self.resolver.resolve(dir_path)
        try:
            top = self.scan(directory)
        except OSError as e:
            raise from_os_error(e, self.resolver.normalize(dir_path)) from e

        descendants: list[ContentItem] = []
        stack = [(item, path, 1) for item, path in reversed(top)]

        while stack:
            item, path, depth = stack.pop()
            descendants.append(item)

            if not item.is_directory:
                continue
            if depth >= self.options.max_depth:
                logger.warning("walk_depth_limit_reached", path=item.path, depth=depth)
                continue

            try:
                children = self.scan(path)
            except OSError as e:
                logger.warning("walk_subtree_skipped", path=item.path, error=str(e))
                continue

            stack.extend(
                (child, child_path, depth + 1)
                for child, child_path in reversed(children)
            )

        return descendants
