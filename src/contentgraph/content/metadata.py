"""Front matter and sidecar metadata extraction.

Metadata blocks are parsed by a small pipeline of strategies tried in order:
a restricted YAML loader first, then a line-based ``key: value`` parser when
YAML raises or does not produce a mapping. The YAML loader only recognises the
scalar types the line parser produces, so both strategies agree on that
subset. Extraction never raises.
"""
import math
import re
from collections.abc import Callable
from pathlib import PurePosixPath
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|\Z)(.*)\Z",
    re.DOTALL,
)
HEADING_PATTERN = re.compile(r"^#+[ \t]+(.+?)[ \t]*$", re.MULTILINE)
LINK_PATTERN = re.compile(r"\[(.*?)\]\(.*?\)")

INT_PATTERN = re.compile(r"^[-+]?[0-9]+$")
FLOAT_PATTERN = re.compile(r"^[-+]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?$")
BOOL_PATTERN = re.compile(r"^(?:[Tt][Rr][Uu][Ee]|[Ff][Aa][Ll][Ss][Ee])$")
NULL_PATTERN = re.compile(r"^(?:[Nn][Uu][Ll][Ll]|)$")

# Constructs YAML reads differently from the line grammar: inline comments,
# escapes in double quotes, doubled single quotes, and flow mappings,
# anchors, aliases or tags at the start of a value.
YAML_DIVERGENCE_PATTERN = re.compile(
    r"""
    ^[ \t]*[^#\s][^\n]*?[ \t]\#
    | "[^"\n]*\\
    | '[^'\n]*''
    | :[ \t]+[{&*!]
    """,
    re.MULTILINE | re.VERBOSE,
)

ORDER_KEY = "order"
TAGS_KEY = "tags"
TITLE_KEY = "title"

Metadata = dict[str, Any]
MetadataParser = Callable[[str], Metadata | None]


class FrontMatter:
    """Result of splitting a text into metadata and body.

    Attributes:
        body: Content after the front matter block.
        metadata: Parsed keys with `order` removed and `tags` normalized.
        order: Integer display order, or None when absent or invalid.
    """

    def __init__(
        self, body: str, metadata: Metadata | None = None, order: int | None = None
    ) -> None:
        """Initialize front matter result.

        Args:
            body: Content after the front matter block.
            metadata: Parsed metadata keys.
            order: Display order.
        """
        self.body = body
        self.metadata = metadata if metadata is not None else {}
        self.order = order

    def __repr__(self) -> str:
        return f"FrontMatter(order={self.order!r}, metadata={self.metadata!r})"


class _MetadataLoader(yaml.SafeLoader):
    """SafeLoader limited to the scalar grammar of the line parser.

    Quoted scalars are resolved like plain ones, and mapping keys and
    sequence items always load as strings.
    """

    yaml_implicit_resolvers: dict = {}

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self._parents: list[tuple[yaml.Node | None, object]] = []

    def descend_resolver(
        self, current_node: yaml.Node | None, current_index: object
    ) -> None:
        self._parents.append((current_node, current_index))

    def ascend_resolver(self) -> None:
        self._parents.pop()

    def resolve(
        self,
        kind: type[yaml.Node],
        value: str | None,
        implicit: tuple[bool, bool],
    ) -> str:
        if kind is yaml.ScalarNode:
            parent, index = self._parents[-1] if self._parents else (None, None)
            if isinstance(parent, yaml.SequenceNode):
                return self.DEFAULT_SCALAR_TAG
            if isinstance(parent, yaml.MappingNode) and index is None:
                return self.DEFAULT_SCALAR_TAG
            if implicit[1]:
                implicit = (True, False)
        return super().resolve(kind, value, implicit)


_MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool", BOOL_PATTERN, list("tTfF")
)
_MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:null", NULL_PATTERN, ["n", "N", ""]
)
_MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int", INT_PATTERN, list("-+0123456789")
)
_MetadataLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float", FLOAT_PATTERN, list("-+.0123456789")
)
_MetadataLoader.add_constructor(
    "tag:yaml.org,2002:int",
    lambda loader, node: int(loader.construct_scalar(node)),
)
_MetadataLoader.add_constructor(
    "tag:yaml.org,2002:float",
    lambda loader, node: float(loader.construct_scalar(node)),
)


def _strip_quotes(value: str) -> str:
    """Remove one layer of matching single or double quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _split_list(inner: str) -> list[str]:
    items = (_strip_quotes(part.strip()).strip() for part in inner.split(","))
    return [item for item in items if item]


def coerce_scalar(value: str) -> Any:
    """Coerce a raw `key: value` token to its typed value.

    Args:
        value: Trimmed value text.

    Returns:
        bool, None, int, float, list of strings, or the unquoted string.
    """
    value = _strip_quotes(value)
    if BOOL_PATTERN.match(value):
        return value.lower() == "true"
    if NULL_PATTERN.match(value):
        return None
    if INT_PATTERN.match(value):
        return int(value)
    if FLOAT_PATTERN.match(value):
        return float(value)
    if len(value) >= 2 and value.startswith("[") and value.endswith("]"):
        return _split_list(value[1:-1])
    return value


def parse_yaml_block(text: str) -> Metadata | None:
    """Parse a metadata block with the restricted YAML loader.

    Args:
        text: Metadata block without delimiters.

    Returns:
        Mapping of string keys to values, or None when the block is not
        valid YAML, not a mapping, or uses YAML syntax the line parser would
        read differently.
    """
    if YAML_DIVERGENCE_PATTERN.search(text):
        logger.debug("metadata_yaml_declined")
        return None

    try:
        data = yaml.load(text, Loader=_MetadataLoader)  # noqa: S506
    except (yaml.YAMLError, ValueError, RecursionError) as e:
        logger.debug("metadata_yaml_rejected", error=str(e))
        return None

    if not isinstance(data, dict):
        return None
    return {str(key): value for key, value in data.items()}


def parse_key_value_lines(text: str) -> Metadata:
    """Parse a metadata block line by line as `key: value` pairs.

    Blank lines, `#` comments and lines without a key are skipped.

    Args:
        text: Metadata block without delimiters.

    Returns:
        Mapping of keys to coerced values.
    """
    result: Metadata = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue

        result[key] = coerce_scalar(value.strip())
    return result


PARSERS: tuple[MetadataParser, ...] = (parse_yaml_block, parse_key_value_lines)


def parse_metadata_block(text: str) -> Metadata:
    """Run the parser pipeline over a metadata block.

    Args:
        text: Metadata block without delimiters.

    Returns:
        The first mapping a strategy produces, or an empty mapping.
    """
    for parser in PARSERS:
        result = parser(text)
        if result is not None:
            return result
    return {}


def coerce_order(value: Any) -> int | None:
    """Convert an `order` value to an int.

    Args:
        value: Raw metadata value.

    Returns:
        The integer order, or None for booleans, non-finite floats and
        strings that are not integers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str) and INT_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def normalize_tags(value: Any) -> list[str] | None:
    """Normalize tags to a list of trimmed, non-empty strings.

    Args:
        value: A list, or a comma separated string optionally in brackets.

    Returns:
        List of tags, or None when the value is neither a list nor a string.
    """
    if isinstance(value, list):
        tags = (str(tag).strip() for tag in value if tag is not None)
        return [tag for tag in tags if tag]

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        return _split_list(text)

    return None


def _finalize(raw: Metadata) -> tuple[Metadata, int | None]:
    metadata = dict(raw)
    order = coerce_order(metadata.pop(ORDER_KEY, None))

    if TAGS_KEY in metadata:
        tags = normalize_tags(metadata[TAGS_KEY])
        if tags is None:
            del metadata[TAGS_KEY]
        else:
            metadata[TAGS_KEY] = tags

    return metadata, order


def extract(raw_text: str) -> FrontMatter:
    """Split file content into front matter metadata and body.

    The content must open with a line that is exactly `---` and contain a
    second such line; otherwise the whole input is body.

    Args:
        raw_text: Full file content.

    Returns:
        FrontMatter with body, metadata and order.
    """
    match = FRONTMATTER_PATTERN.match(raw_text)
    if not match:
        return FrontMatter(body=raw_text)

    metadata, order = _finalize(parse_metadata_block(match.group(1) or ""))
    return FrontMatter(body=match.group(2), metadata=metadata, order=order)


def extract_directory(sidecar_text: str) -> FrontMatter:
    """Parse a directory sidecar file.

    The sidecar uses the same `key: value` grammar; surrounding `---`
    delimiters are tolerated.

    Args:
        sidecar_text: Full sidecar file content.

    Returns:
        FrontMatter with an empty body.
    """
    match = FRONTMATTER_PATTERN.match(sidecar_text)
    block = (match.group(1) or "") if match else sidecar_text
    metadata, order = _finalize(parse_metadata_block(block))
    return FrontMatter(body="", metadata=metadata, order=order)


def extract_headings(body: str) -> list[str]:
    """Collect heading texts from markdown, with links collapsed to their text.

    Args:
        body: Markdown content.

    Returns:
        Heading texts in document order.
    """
    return [
        LINK_PATTERN.sub(r"\1", match.group(1)).strip()
        for match in HEADING_PATTERN.finditer(body)
    ]


def derive_title(metadata: Metadata, body: str, filename: str) -> str:
    """Pick a display title for a document.

    Uses the `title` key, then the first heading in the body, then the
    filename without its extension.

    Args:
        metadata: Extracted metadata.
        body: Markdown body after front matter.
        filename: Final path segment of the document.

    Returns:
        Non-empty title when any source provides one.
    """
    title = metadata.get(TITLE_KEY)
    if title is not None and str(title).strip():
        return str(title).strip()

    headings = extract_headings(body)
    if headings:
        return headings[0]

    return PurePosixPath(filename).stem
