"""Pydantic schemas for content items and API responses."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ContentType = Literal["file", "directory"]


class ContentItem(BaseModel):
    """A file or directory under the content root.

    Computed from the filesystem on every call and never cached. Paths are
    root-relative with no leading or trailing slash; the root itself is "".
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: ContentType
    path: str = Field(description="Relative path from the content root")
    size: int = Field(default=0, ge=0, description="File size in bytes")
    last_modified: datetime
    order: int | None = Field(default=None, description="Display priority, lower first")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject paths carrying a leading or trailing slash."""
        if v.startswith("/") or v.endswith("/"):
            raise ValueError("path must not start or end with '/'")
        return v

    @model_validator(mode="after")
    def validate_directory_size(self) -> "ContentItem":
        """Directories always report a size of zero."""
        if self.type == "directory" and self.size != 0:
            raise ValueError("directory size must be 0")
        return self

    @property
    def is_directory(self) -> bool:
        """Whether the item is a directory."""
        return self.type == "directory"


class RelatedDocument(BaseModel):
    """A related-content suggestion."""

    path: str
    title: str
    score: float = Field(description="2.0 for siblings, 1.0 for deeper descendants")


class MarkdownDocument(BaseModel):
    """A markdown file split into metadata and body."""

    name: str = Field(description="Filename without extension")
    path: str
    title: str
    body: str = Field(description="Raw markdown content after front matter")
    headings: list[str]
    order: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContentListing(BaseModel):
    """Directory listing response."""

    path: str
    items: list[ContentItem]
    recursive: bool = False


class StructureResponse(BaseModel):
    """Directory item with its ordered children."""

    path: str
    item: ContentItem
    children: list[ContentItem]


class RelatedResponse(BaseModel):
    """Related documents response."""

    path: str
    related: list[RelatedDocument]


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
