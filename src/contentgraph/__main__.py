"""Entry point for the content API server."""

import contextlib
import sys

import structlog
import uvicorn

from contentgraph.app import create_app
from contentgraph.config import Settings
from contentgraph.logging import configure_logging

logger = structlog.get_logger()


def serve(settings: Settings) -> None:
    """Run uvicorn until SIGINT or SIGTERM.

    In-flight requests get `shutdown_timeout` seconds to finish.

    Args:
        settings: Server configuration.
    """
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )
    uvicorn.Server(config).run()


def main() -> None:
    """Entry point for python -m contentgraph."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.log_json)
    logger.info("content_root_configured", root=str(settings.root))

    with contextlib.suppress(KeyboardInterrupt):
        serve(settings)

    sys.exit(0)


if __name__ == "__main__":
    main()
