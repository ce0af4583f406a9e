"""Liveness and readiness checks for the content service."""
import os
from pathlib import Path
from typing import Literal

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from contentgraph.content import ContentStore
from contentgraph.routes.deps import get_store

router = APIRouter(prefix="/health", tags=["health"])

CheckStatus = Literal["ok", "failed"]


class LivenessResponse(BaseModel):
    """Process is up and serving requests."""

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Outcome of one content root check.

    Attributes:
        name: Check identifier, suffixed with the root it ran against.
        status: 'ok' or 'failed'.
        message: Failure reason, None on success.
    """

    name: str
    status: CheckStatus
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Aggregated check results; 'ready' only when every check passed."""

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def check_content_root(root: Path) -> ReadinessCheck:
    """Check that the content root exists and can be listed.

    Args:
        root: Absolute content root.

    Returns:
        Check outcome.
    """
    name = f"content_root:{root}"
    try:
        if not root.is_dir():
            return ReadinessCheck(name=name, status="failed", message="Directory not found")
        next(root.iterdir(), None)
    except PermissionError as e:
        return ReadinessCheck(name=name, status="failed", message=f"Permission denied: {e}")
    except OSError as e:
        return ReadinessCheck(name=name, status="failed", message=str(e))
    return ReadinessCheck(name=name, status="ok")


def check_content_writable(root: Path) -> ReadinessCheck:
    """Check that saves and deletes under the content root are permitted."""
    name = f"content_writable:{root}"
    if os.access(root, os.W_OK | os.X_OK):
        return ReadinessCheck(name=name, status="ok")
    return ReadinessCheck(name=name, status="failed", message="Directory is not writable")


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Answer immediately while the process is running."""
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
def readiness(store: ContentStore = Depends(get_store)) -> JSONResponse:
    """Report whether the content root can be served and edited.

    Responds 200 when every check passes and 503 otherwise, with the
    individual check results in the body.
    """
    checks = [check_content_root(store.root), check_content_writable(store.root)]
    ready = all(check.status == "ok" for check in checks)
    body = ReadinessResponse(status="ready" if ready else "not_ready", checks=checks)
    return JSONResponse(
        content=body.model_dump(),
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
