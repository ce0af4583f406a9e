"""Service configuration loaded from environment variables."""
from pathlib import Path

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from contentgraph.content.options import ContentOptions


class Settings(BaseSettings):
    """Service configuration loaded from environment variables.

    Attributes:
        host: Bind address for the API server.
        port: Port number for the API server.
        debug: Enable debug logging and API documentation.
        log_json: Render logs as JSON lines instead of console output.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds to wait for graceful shutdown.
        root: Content root directory.
        metadata_filename: Name of the per-directory sidecar file.
        excluded_names_raw: Comma-separated entry names never listed.
        markdown_only: List only directories and markdown files.
        markdown_extensions_raw: Comma-separated markdown suffixes.
        max_depth: Deepest nesting visited by recursive listings.
        related_limit: Default number of related-document suggestions.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_json: bool = True
    cors_origins_raw: str = "http://localhost:3000"
    shutdown_timeout: float = 30.0

    root: Path = Path("content")
    metadata_filename: str = ".metadata"
    excluded_names_raw: str = ".git,.svn,.hg,node_modules,__pycache__,.venv"
    markdown_only: bool = True
    markdown_extensions_raw: str = ".md,.markdown"
    max_depth: int = 64
    related_limit: int = 5

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]

    @computed_field
    @property
    def excluded_names(self) -> list[str]:
        """Parse excluded entry names from comma-separated string."""
        return [
            name.strip()
            for name in self.excluded_names_raw.split(",")
            if name.strip()
        ]

    @computed_field
    @property
    def markdown_extensions(self) -> list[str]:
        """Parse markdown suffixes, lowercased and dot-prefixed."""
        extensions = []
        for ext in self.markdown_extensions_raw.split(","):
            ext = ext.strip().lower()
            if ext:
                extensions.append(ext if ext.startswith(".") else f".{ext}")
        return extensions

    def content_options(self) -> ContentOptions:
        """Build the immutable content configuration.

        Returns:
            Options passed to the content store.
        """
        return ContentOptions(
            root=self.root,
            metadata_filename=self.metadata_filename,
            excluded_names=frozenset(self.excluded_names),
            markdown_only=self.markdown_only,
            markdown_extensions=tuple(self.markdown_extensions),
            max_depth=self.max_depth,
        )
