"""Content REST API endpoints."""
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from contentgraph.content import (
    ContentError,
    ContentItem,
    ContentListing,
    ContentStore,
    ErrorResponse,
    MarkdownDocument,
)
from contentgraph.routes.deps import get_store, to_http_exception

logger = structlog.get_logger()

router = APIRouter(tags=["content"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get(
    "/content",
    response_model=None,
    responses=ERROR_RESPONSES,
    summary="Get root listing",
)
@router.get(
    "/content/{path:path}",
    response_model=None,
    responses=ERROR_RESPONSES,
    summary="Get content at path",
    description=(
        "Directories return a listing, markdown files return the parsed "
        "document, other files return their raw text."
    ),
)
def get_content(
    path: str = "",
    recursive: bool = Query(default=False, description="List all descendants"),
    store: ContentStore = Depends(get_store),
) -> ContentListing | MarkdownDocument | PlainTextResponse:
    """Get a directory listing, a markdown document, or raw file text.

    Args:
        path: Logical path; empty for the root.
        recursive: For directories, list all descendants.
        store: Content store.

    Returns:
        Listing, parsed document, or plain text response.

    Raises:
        HTTPException: 403 on traversal, 404 if missing.
    """
    try:
        logical, _ = store.locate_file(path)
        item = store.get(logical)
        if item.is_directory:
            return ContentListing(
                path=item.path,
                items=store.list(logical, recursive=recursive),
                recursive=recursive,
            )
        if store.options.is_markdown(item.name):
            return store.read_document(logical)
        return PlainTextResponse(store.read_body(logical))
    except ContentError as e:
        logger.warning("content_request_failed", path=path, error=str(e))
        raise to_http_exception(e) from e


@router.get(
    "/file-content/{path:path}",
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
    summary="Get raw file content",
)
def get_file_content(
    path: str,
    store: ContentStore = Depends(get_store),
) -> PlainTextResponse:
    """Return a file's text exactly as stored.

    Raises:
        HTTPException: 400 for directories, 403 on traversal, 404 if missing.
    """
    try:
        return PlainTextResponse(store.read_body(path))
    except ContentError as e:
        logger.warning("file_content_request_failed", path=path, error=str(e))
        raise to_http_exception(e) from e


@router.put(
    "/content/{path:path}",
    response_model=ContentItem,
    responses=ERROR_RESPONSES,
    summary="Create or replace a file",
    description="The raw request body is stored as UTF-8 text.",
)
async def save_content(
    path: str,
    request: Request,
    store: ContentStore = Depends(get_store),
) -> ContentItem:
    """Store the request body at a path, creating parent directories.

    Args:
        path: Logical file path.
        request: Incoming request carrying the body.
        store: Content store.

    Returns:
        The saved item.

    Raises:
        HTTPException: 400 for non UTF-8 bodies or directory targets,
            403 on traversal.
    """
    raw = await request.body()
    try:
        body = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Body must be UTF-8 text",
        ) from e

    try:
        return await run_in_threadpool(store.save, path, body)
    except ContentError as e:
        logger.warning("content_save_request_failed", path=path, error=str(e))
        raise to_http_exception(e) from e


@router.delete(
    "/content/{path:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    summary="Delete a file or directory tree",
)
def delete_content(
    path: str,
    store: ContentStore = Depends(get_store),
) -> Response:
    """Delete the content at a path.

    Raises:
        HTTPException: 400 for the root, 403 on traversal, 404 if missing.
    """
    try:
        deleted = store.delete(path)
    except ContentError as e:
        logger.warning("content_delete_request_failed", path=path, error=str(e))
        raise to_http_exception(e) from e

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Content not found: {store.resolver.normalize(path)}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/first-document",
    response_model=ContentItem,
    responses=ERROR_RESPONSES,
    summary="Get the first document of a directory",
)
def get_first_document(
    directory: str = Query(default="", description="Directory to search; empty for the root"),
    store: ContentStore = Depends(get_store),
) -> ContentItem:
    """Return the first markdown file under a directory in display order.

    Raises:
        HTTPException: 400 for files, 403 on traversal, 404 if the directory
            is missing or has no markdown files.
    """
    try:
        return store.first_document(directory)
    except ContentError as e:
        logger.warning("first_document_request_failed", directory=directory, error=str(e))
        raise to_http_exception(e) from e
