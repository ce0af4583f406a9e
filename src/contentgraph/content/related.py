"""Related-document suggestions by directory proximity."""
import re
from pathlib import PurePosixPath

import structlog

from contentgraph.content.paths import normalize_path, parent_path
from contentgraph.content.schemas import RelatedDocument
from contentgraph.content.walker import ContentTreeScanner

logger = structlog.get_logger()

SIBLING_SCORE = 2.0
DESCENDANT_SCORE = 1.0

_WORD_SEPARATORS = re.compile(r"[-_]")


def format_title(filename: str) -> str:
    """Turn a filename into a display title.

    Drops the extension, turns hyphens and underscores into spaces, and
    capitalizes each word.

    Args:
        filename: Final path segment, e.g. "getting-started.md".

    Returns:
        Title such as "Getting Started".
    """
    stem = PurePosixPath(filename).stem
    words = _WORD_SEPARATORS.sub(" ", stem).split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


class RelatedDocumentScorer:
    """Scores markdown files near a document.

    Every markdown file under the document's parent directory is a
    candidate. Siblings score 2.0, anything nested deeper scores 1.0.
    """

    def __init__(self, scanner: ContentTreeScanner) -> None:
        """Initialize scorer.

        Args:
            scanner: Scanner used to enumerate candidates.
        """
        self.scanner = scanner

    def document_path(self, logical_path: str) -> str:
        """Normalize a document path, adding `.md` when it has no markdown extension."""
        normalized = normalize_path(logical_path)
        if normalized and not self.scanner.options.is_markdown(normalized):
            normalized = f"{normalized}.md"
        return normalized

    def find_related(self, document_path: str, limit: int = 5) -> list[RelatedDocument]:
        """Find documents related to the given one.

        Suggestions are best effort: any failure is logged and produces an
        empty list.

        Args:
            document_path: Logical path of the document.
            limit: Maximum number of results.

        Returns:
            Related documents by score descending, ties in walk order.
        """
        if limit <= 0:
            return []

        try:
            target = self.document_path(document_path)
            directory = parent_path(target)
            candidates = self.scanner.list_descendants(directory)

            related = [
                RelatedDocument(
                    path=item.path,
                    title=format_title(item.name),
                    score=(
                        SIBLING_SCORE
                        if parent_path(item.path) == directory
                        else DESCENDANT_SCORE
                    ),
                )
                for item in candidates
                if not item.is_directory
                and item.path != target
                and self.scanner.options.is_markdown(item.name)
            ]
        except Exception as e:
            logger.error(
                "related_search_failed",
                path=document_path,
                error=str(e),
            )
            return []

        related.sort(key=lambda doc: doc.score, reverse=True)
        logger.debug(
            "related_documents_found",
            path=target,
            count=min(len(related), limit),
        )
        return related[:limit]
