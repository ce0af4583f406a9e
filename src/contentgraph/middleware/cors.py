"""CORS middleware configuration."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contentgraph.middleware.logging import REQUEST_ID_HEADER

ALLOWED_METHODS = ["GET", "PUT", "DELETE", "OPTIONS"]


def configure_cors(app: FastAPI, allowed_origins: list[str]) -> None:
    """Allow browser clients on the given origins to read and edit content.

    Args:
        app: FastAPI application instance.
        allowed_origins: List of allowed origin URLs.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
