"""Content, structure and related endpoint tests."""

import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from contentgraph.app import create_app
from contentgraph.config import Settings
from contentgraph.content import (
    ContentIOError,
    ContentNotFoundError,
    InvalidOperationError,
    PathTraversalError,
)
from contentgraph.routes.deps import to_http_exception


def item_paths(payload: list[dict]) -> list[str]:
    return [item["path"] for item in payload]


def test_root_listing(client: TestClient, docs_tree: Path) -> None:
    """The root lists its visible children in display order."""
    response = client.get("/api/v1/content")

    assert response.status_code == 200
    data = response.json()
    assert data["path"] == ""
    assert data["recursive"] is False
    assert item_paths(data["items"]) == ["docs", "guide.md"]


def test_directory_listing(client: TestClient, docs_tree: Path) -> None:
    """Directory items carry type, order and metadata."""
    response = client.get("/api/v1/content/docs")

    assert response.status_code == 200
    items = response.json()["items"]
    assert item_paths(items) == ["docs/sub", "docs/x.md", "docs/y.md"]
    assert items[0]["type"] == "directory"
    assert items[1]["metadata"] == {"title": "X", "tags": ["alpha", "beta"]}


def test_recursive_listing(client: TestClient, docs_tree: Path) -> None:
    """Recursive listings are flattened in pre-order."""
    response = client.get("/api/v1/content/docs", params={"recursive": "true"})

    assert response.status_code == 200
    data = response.json()
    assert data["recursive"] is True
    assert item_paths(data["items"]) == [
        "docs/sub",
        "docs/sub/z.md",
        "docs/x.md",
        "docs/y.md",
    ]


def test_markdown_document(client: TestClient, docs_tree: Path) -> None:
    """Markdown files return the parsed document."""
    response = client.get("/api/v1/content/docs/x.md")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "X"
    assert data["body"] == "# Heading X\n"
    assert data["headings"] == ["Heading X"]


def test_extensionless_markdown_document(client: TestClient, docs_tree: Path) -> None:
    """A path without extension serves the `.md` file."""
    response = client.get("/api/v1/content/docs/y")

    assert response.status_code == 200
    assert response.json()["path"] == "docs/y.md"


def test_non_markdown_file_is_plain_text(client: TestClient, docs_tree: Path) -> None:
    """Other files are returned as raw text."""
    response = client.get("/api/v1/content/docs/notes.txt")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "plain"


def test_missing_content_is_404(client: TestClient, docs_tree: Path) -> None:
    """Missing paths return 404 with the logical path."""
    response = client.get("/api/v1/content/docs/missing.md")

    assert response.status_code == 404
    assert response.json()["detail"] == "Content not found: docs/missing.md"


def test_traversal_is_403(client: TestClient, docs_tree: Path) -> None:
    """Paths escaping the root are forbidden."""
    response = client.get("/api/v1/content/..%2F..%2Fetc%2Fpasswd")

    assert response.status_code == 403
    assert response.json()["detail"] == "Path not allowed"


def test_file_content_returns_exact_text(client: TestClient, docs_tree: Path) -> None:
    """Raw file content keeps the front matter."""
    response = client.get("/api/v1/file-content/guide.md")

    assert response.status_code == 200
    assert response.text == "---\norder: 2\n---\nGuide body\n"


def test_file_content_of_directory_is_400(client: TestClient, docs_tree: Path) -> None:
    """Directories have no raw content."""
    response = client.get("/api/v1/file-content/docs")
    assert response.status_code == 400


def test_put_then_read(client: TestClient, content_root: Path) -> None:
    """A saved file can be read back and its ancestors exist."""
    response = client.put("/api/v1/content/new/dir/page.md", content="# New\n")

    assert response.status_code == 200
    data = response.json()
    assert data["path"] == "new/dir/page.md"
    assert data["type"] == "file"
    assert data["size"] == 6
    assert (content_root / "new" / "dir").is_dir()

    response = client.get("/api/v1/file-content/new/dir/page.md")
    assert response.text == "# New\n"


def test_put_non_utf8_is_400(client: TestClient, content_root: Path) -> None:
    """Bodies must be UTF-8 text."""
    response = client.put("/api/v1/content/page.md", content=b"\xff\xfe")

    assert response.status_code == 400
    assert not (content_root / "page.md").exists()


def test_put_over_directory_is_400(client: TestClient, docs_tree: Path) -> None:
    """Directories cannot be replaced by a file."""
    response = client.put("/api/v1/content/docs", content="text")
    assert response.status_code == 400


def test_delete_then_missing(client: TestClient, docs_tree: Path) -> None:
    """Deleting returns 204 and the path is gone afterwards."""
    response = client.delete("/api/v1/content/docs")
    assert response.status_code == 204

    response = client.get("/api/v1/content/docs")
    assert response.status_code == 404

    response = client.delete("/api/v1/content/docs")
    assert response.status_code == 404
    assert response.json()["detail"] == "Content not found: docs"


def test_structure_of_root(client: TestClient, docs_tree: Path) -> None:
    """The root structure is the root item with its children."""
    response = client.get("/api/v1/structure")

    assert response.status_code == 200
    data = response.json()
    assert data["path"] == ""
    assert data["item"]["type"] == "directory"
    assert item_paths(data["children"]) == ["docs", "guide.md"]


def test_structure_of_directory(client: TestClient, docs_tree: Path) -> None:
    """A directory structure carries the sidecar metadata."""
    response = client.get("/api/v1/structure/docs")

    assert response.status_code == 200
    data = response.json()
    assert data["item"]["order"] == 1
    assert data["item"]["metadata"] == {"title": "Documentation"}
    assert item_paths(data["children"]) == ["docs/sub", "docs/x.md", "docs/y.md"]


@pytest.mark.parametrize(
    ("path", "status_code"),
    [("guide.md", 400), ("missing", 404)],
)
def test_structure_errors(
    client: TestClient, docs_tree: Path, path: str, status_code: int
) -> None:
    """Files and missing paths have no structure."""
    response = client.get(f"/api/v1/structure/{path}")
    assert response.status_code == status_code


def test_related_documents(client: TestClient, docs_tree: Path) -> None:
    """Siblings rank above deeper documents."""
    response = client.get("/api/v1/related", params={"path": "docs/x"})

    assert response.status_code == 200
    data = response.json()
    assert data["path"] == "docs/x.md"
    assert [(doc["path"], doc["score"]) for doc in data["related"]] == [
        ("docs/y.md", 2.0),
        ("docs/sub/z.md", 1.0),
    ]


def test_related_limit(client: TestClient, docs_tree: Path) -> None:
    """The limit parameter truncates results and is validated."""
    response = client.get("/api/v1/related", params={"path": "docs/x.md", "limit": 1})
    assert [doc["path"] for doc in response.json()["related"]] == ["docs/y.md"]

    response = client.get("/api/v1/related", params={"path": "docs/x.md", "limit": 0})
    assert response.status_code == 422


def test_related_default_limit_from_settings(content_root: Path, docs_tree: Path) -> None:
    """Without a limit parameter the configured default applies."""
    settings = Settings(_env_file=None, root=content_root, related_limit=1)
    client = TestClient(create_app(settings))

    response = client.get("/api/v1/related", params={"path": "docs/x.md"})
    assert len(response.json()["related"]) == 1


@pytest.mark.parametrize("params", [{}, {"path": ""}, {"path": "   "}])
def test_related_requires_path(client: TestClient, params: dict) -> None:
    """A document path is required."""
    response = client.get("/api/v1/related", params=params)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing document path"


def test_related_unknown_document_is_empty(client: TestClient, docs_tree: Path) -> None:
    """Suggestions for unknown locations are empty, not errors."""
    response = client.get("/api/v1/related", params={"path": "nowhere/doc.md"})

    assert response.status_code == 200
    assert response.json()["related"] == []


def test_request_id_is_echoed(client: TestClient) -> None:
    """An incoming request id is returned on the response."""
    response = client.get("/api/v1/content", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client: TestClient) -> None:
    """Requests without an id get a fresh one."""
    response = client.get("/api/v1/content")
    assert len(response.headers["X-Request-ID"]) == 32


def test_lifespan_creates_missing_root(tmp_path: Path) -> None:
    """Startup creates the content root."""
    root = tmp_path / "later"
    settings = Settings(_env_file=None, root=root)

    with TestClient(create_app(settings)) as client:
        response = client.get("/api/v1/health/ready")

    assert root.is_dir()
    assert response.status_code == 200


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (PathTraversalError("outside", "../x"), 403),
        (ContentNotFoundError("missing", "x"), 404),
        (InvalidOperationError("directory", "x"), 400),
        (ContentIOError("disk", "x", "EIO"), 500),
    ],
)
def test_error_mapping(error, status_code: int) -> None:
    """Content errors map onto HTTP status codes."""
    assert to_http_exception(error).status_code == status_code


def test_first_document(client: TestClient, docs_tree: Path) -> None:
    """The first document of a directory is returned as an item."""
    response = client.get("/api/v1/first-document", params={"directory": "docs"})

    assert response.status_code == 200
    assert response.json()["path"] == "docs/sub/z.md"


@pytest.mark.parametrize(
    ("directory", "status_code"),
    [("missing", 404), ("guide.md", 400), ("../..", 403)],
)
def test_first_document_errors(
    client: TestClient, docs_tree: Path, directory: str, status_code: int
) -> None:
    """Missing directories, files and traversal are rejected."""
    response = client.get("/api/v1/first-document", params={"directory": directory})
    assert response.status_code == status_code


def test_symlink_escape_is_403(client: TestClient, content_root: Path, tmp_path: Path) -> None:
    """Links leading out of the root are forbidden over HTTP too."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("TOPSECRET", encoding="utf-8")
    os.symlink(outside, content_root / "link")

    assert client.get("/api/v1/file-content/link/secret.txt").status_code == 403
    assert client.put("/api/v1/content/link/planted.md", content="x").status_code == 403
    assert not (outside / "planted.md").exists()


def test_delete_dot_segment_root_is_400(client: TestClient, docs_tree: Path) -> None:
    """A path collapsing to the root cannot be deleted."""
    response = client.delete("/api/v1/content/docs%2F..")

    assert response.status_code == 400
    assert (docs_tree / "docs").is_dir()
