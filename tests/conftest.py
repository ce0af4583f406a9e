"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from contentgraph.app import create_app
from contentgraph.config import Settings
from contentgraph.content import ContentOptions, ContentStore

MakeFile = Callable[[str, str], Path]


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create an empty content root."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def make_file(content_root: Path) -> MakeFile:
    """Return a helper that writes a file under the content root."""

    def _make(relative: str, text: str = "") -> Path:
        path = content_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def docs_tree(make_file: MakeFile, content_root: Path) -> Path:
    """Populate a small documentation tree.

    Layout:
        docs/.metadata        title Documentation, order 1
        docs/x.md             front matter title X
        docs/y.md
        docs/notes.txt
        docs/sub/z.md
        guide.md              order 2
        .hidden.md
        node_modules/pkg/readme.md
    """
    make_file("docs/.metadata", "title: Documentation\norder: 1\n")
    make_file("docs/x.md", "---\ntitle: X\ntags: [alpha, beta]\n---\n# Heading X\n")
    make_file("docs/y.md", "# Y\n")
    make_file("docs/notes.txt", "plain")
    make_file("docs/sub/z.md", "# Z\n")
    make_file("guide.md", "---\norder: 2\n---\nGuide body\n")
    make_file(".hidden.md", "hidden")
    make_file("node_modules/pkg/readme.md", "# Vendored\n")
    return content_root


@pytest.fixture
def options(content_root: Path) -> ContentOptions:
    """Default content options rooted at the test content root."""
    return ContentOptions(root=content_root)


@pytest.fixture
def store(options: ContentOptions) -> ContentStore:
    """Content store over the test content root."""
    return ContentStore(options)


@pytest.fixture
def settings(content_root: Path) -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        host="127.0.0.1",
        port=8000,
        debug=True,
        root=content_root,
    )


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Create test client with configured app."""
    app = create_app(settings)
    return TestClient(app)
