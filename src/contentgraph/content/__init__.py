"""Content module for filesystem-backed content access."""

from contentgraph.content.errors import (
    ContentError,
    ContentIOError,
    ContentNotFoundError,
    InvalidOperationError,
    PathTraversalError,
)
from contentgraph.content.metadata import (
    FrontMatter,
    derive_title,
    extract,
    extract_directory,
    extract_headings,
)
from contentgraph.content.options import ContentOptions
from contentgraph.content.paths import PathResolver, normalize_path
from contentgraph.content.related import RelatedDocumentScorer, format_title
from contentgraph.content.schemas import (
    ContentItem,
    ContentListing,
    ErrorResponse,
    MarkdownDocument,
    RelatedDocument,
    RelatedResponse,
    StructureResponse,
)
from contentgraph.content.store import ContentStore
from contentgraph.content.walker import ContentTreeScanner, sort_key

__all__ = [
    "ContentError",
    "ContentIOError",
    "ContentItem",
    "ContentListing",
    "ContentNotFoundError",
    "ContentOptions",
    "ContentStore",
    "ContentTreeScanner",
    "ErrorResponse",
    "FrontMatter",
    "InvalidOperationError",
    "MarkdownDocument",
    "PathResolver",
    "PathTraversalError",
    "RelatedDocument",
    "RelatedDocumentScorer",
    "RelatedResponse",
    "StructureResponse",
    "derive_title",
    "extract",
    "extract_directory",
    "extract_headings",
    "format_title",
    "normalize_path",
    "sort_key",
]
