"""Related-document suggestion tests."""

from pathlib import Path

import pytest

from contentgraph.content import ContentStore, format_title


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("getting-started.md", "Getting Started"),
        ("api_reference.md", "Api Reference"),
        ("README.md", "Readme"),
        ("plain", "Plain"),
    ],
)
def test_format_title(filename: str, expected: str) -> None:
    """Filenames become capitalized, space separated titles."""
    assert format_title(filename) == expected


def test_siblings_rank_above_descendants(store: ContentStore, docs_tree: Path) -> None:
    """Siblings score 2.0, deeper documents 1.0, the document itself excluded."""
    related = store.find_related("docs/x.md")

    assert [(doc.path, doc.score) for doc in related] == [
        ("docs/y.md", 2.0),
        ("docs/sub/z.md", 1.0),
    ]
    assert [doc.title for doc in related] == ["Y", "Z"]


def test_extensionless_document_path(store: ContentStore, docs_tree: Path) -> None:
    """A path without extension refers to the markdown document."""
    related = store.find_related("/docs/x")
    assert [doc.path for doc in related] == ["docs/y.md", "docs/sub/z.md"]


def test_limit_truncates_after_ranking(store: ContentStore, docs_tree: Path) -> None:
    """The limit keeps the highest scores."""
    assert [doc.path for doc in store.find_related("docs/x.md", limit=1)] == ["docs/y.md"]
    assert store.find_related("docs/x.md", limit=0) == []


def test_ties_keep_walk_order(store: ContentStore, make_file) -> None:
    """Equal scores keep the listing order."""
    make_file("guides/target.md", "")
    make_file("guides/b.md", "---\norder: 1\n---\n")
    make_file("guides/a.md", "")
    make_file("guides/c.md", "")

    related = store.find_related("guides/target.md")
    assert [doc.path for doc in related] == ["guides/b.md", "guides/a.md", "guides/c.md"]


def test_top_level_document_considers_whole_tree(store: ContentStore, docs_tree: Path) -> None:
    """A root-level document is related to every other listed document."""
    related = store.find_related("guide.md", limit=10)

    assert [(doc.path, doc.score) for doc in related] == [
        ("docs/sub/z.md", 1.0),
        ("docs/x.md", 1.0),
        ("docs/y.md", 1.0),
    ]


@pytest.mark.parametrize(
    "path",
    ["../outside.md", "missing/doc.md", "docs/../../x.md"],
)
def test_failures_yield_empty_list(store: ContentStore, docs_tree: Path, path: str) -> None:
    """Suggestions never raise."""
    assert store.find_related(path) == []
