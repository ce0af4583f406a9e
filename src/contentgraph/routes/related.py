"""Related-document suggestion endpoint."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from contentgraph.config import Settings
from contentgraph.content import ContentStore, ErrorResponse, RelatedResponse
from contentgraph.routes.deps import get_settings, get_store

router = APIRouter(tags=["related"])


@router.get(
    "/related",
    response_model=RelatedResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Suggest related documents",
    description="Ranks markdown files near a document: siblings 2.0, deeper files 1.0.",
)
def get_related(
    path: str | None = Query(default=None, description="Document path"),
    limit: int | None = Query(default=None, ge=1, le=50, description="Maximum results"),
    store: ContentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> RelatedResponse:
    """Suggest documents related to the given one.

    Args:
        path: Logical document path.
        limit: Maximum results; defaults to the configured limit.
        store: Content store.
        settings: Service settings.

    Returns:
        Related documents, best first.

    Raises:
        HTTPException: 400 if path is missing.
    """
    if path is None or not path.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing document path",
        )

    effective_limit = limit if limit is not None else settings.related_limit
    return RelatedResponse(
        path=store.scorer.document_path(path),
        related=store.find_related(path, effective_limit),
    )
