"""Shared route dependencies and error translation."""
from fastapi import HTTPException, Request, status

from contentgraph.config import Settings
from contentgraph.content import (
    ContentError,
    ContentNotFoundError,
    ContentStore,
    InvalidOperationError,
    PathTraversalError,
)


def get_store(request: Request) -> ContentStore:
    """Return the content store built at startup."""
    return request.app.state.content_store


def get_settings(request: Request) -> Settings:
    """Return the settings the app was created with."""
    return request.app.state.settings


def to_http_exception(error: ContentError) -> HTTPException:
    """Map a content error to the HTTP status clients expect.

    Args:
        error: Error raised by the content store.

    Returns:
        HTTPException with 403, 404, 400 or 500.
    """
    if isinstance(error, PathTraversalError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Path not allowed")
    if isinstance(error, ContentNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Content not found: {error.path}",
        )
    if isinstance(error, InvalidOperationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Filesystem error: {error.path}",
    )
