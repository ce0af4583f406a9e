"""Directory structure endpoints."""
import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from contentgraph.content import (
    ContentError,
    ContentStore,
    ErrorResponse,
    StructureResponse,
)
from contentgraph.routes.deps import get_store, to_http_exception

logger = structlog.get_logger()

router = APIRouter(prefix="/structure", tags=["structure"])


@router.get(
    "",
    response_model=StructureResponse,
    summary="Get root structure",
)
@router.get(
    "/{path:path}",
    response_model=StructureResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get directory structure",
    description="Returns a directory with its children in display order.",
)
def get_structure(
    path: str = "",
    store: ContentStore = Depends(get_store),
) -> StructureResponse:
    """Get a directory and its ordered children.

    Args:
        path: Logical directory path; empty for the root.
        store: Content store.

    Returns:
        Directory item with children.

    Raises:
        HTTPException: 400 if the path is a file, 404 if missing.
    """
    try:
        item = store.get(path)
        if not item.is_directory:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Path is not a directory: {item.path}",
            )
        children = store.list(item.path)
    except ContentError as e:
        logger.warning("structure_request_failed", path=path, error=str(e))
        raise to_http_exception(e) from e

    return StructureResponse(path=item.path, item=item, children=children)
