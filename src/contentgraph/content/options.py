"""Immutable configuration value shared by the content components."""
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXCLUDED_NAMES: frozenset[str] = frozenset({
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    "__pycache__",
    ".venv",
})

DEFAULT_MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md", ".markdown")


class ContentOptions(BaseModel):
    """Content root and listing policy.

    Built once at startup and passed to the store, which hands it to its
    collaborators.

    Attributes:
        root: Filesystem directory all logical paths resolve under.
        metadata_filename: Name of the per-directory sidecar file.
        excluded_names: Entry names skipped with their whole subtree.
        markdown_only: List only directories and markdown files when True.
        markdown_extensions: Lowercase suffixes treated as markdown.
        max_depth: Deepest nesting level visited by descendant walks.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    metadata_filename: str = ".metadata"
    excluded_names: frozenset[str] = DEFAULT_EXCLUDED_NAMES
    markdown_only: bool = True
    markdown_extensions: tuple[str, ...] = DEFAULT_MARKDOWN_EXTENSIONS
    max_depth: int = Field(default=64, ge=1)

    def is_markdown(self, name: str) -> bool:
        """Check whether a filename carries a markdown extension.

        Args:
            name: Filename or path to check.

        Returns:
            True if the lowercased name ends with a markdown extension.
        """
        return name.lower().endswith(self.markdown_extensions)
