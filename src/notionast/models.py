"""Data models for notionast.

Three groups of types live here:

* the **input** side: :class:`RawBlockRecord`, one block as the Notion
  service stores it, and the :class:`StyledRun` / :class:`StyleMarker`
  pair that makes up its inline text;
* the **AST**: :class:`Node` and its type-specific subclasses, tagged with
  the closed :class:`NodeType` enumeration;
* the **diagnostics**: :class:`ConversionWarning` and :class:`WarningCode`.

All AST nodes are frozen, keyword-only dataclasses.  They are built once,
bottom-up, and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from notionast.utils.urls import to_dash_id

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NodeType(str, Enum):
    """Every kind of AST node the transformer can produce."""

    PAGE = "page"
    EMBEDDED_PAGE = "embedded_page"
    TEXT = "text"
    HEADING = "heading"
    TO_DO = "to_do"
    BULLETED_LIST = "bulleted_list"
    NUMBERED_LIST = "numbered_list"
    LIST_ITEM = "list_item"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    CODE = "code"
    EQUATION = "equation"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    EMBED = "embed"
    FILE = "file"
    BOOKMARK = "bookmark"
    TABLE = "table"
    TABLE_ROW = "table_row"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    ALIAS = "alias"
    TABLE_OF_CONTENTS = "table_of_contents"
    BREADCRUMB = "breadcrumb"
    UNSUPPORTED = "unsupported"


class WarningCode(str, Enum):
    """Codes of the non-fatal issues reported through the warning channel."""

    UNSUPPORTED_MARKER = "UNSUPPORTED_MARKER"
    UNSUPPORTED_BLOCK_TYPE = "UNSUPPORTED_BLOCK_TYPE"
    UNRESOLVED_CHILD = "UNRESOLVED_CHILD"
    CYCLIC_STRUCTURE = "CYCLIC_STRUCTURE"
    DUPLICATE_CHILD = "DUPLICATE_CHILD"
    DEPTH_LIMIT_EXCEEDED = "DEPTH_LIMIT_EXCEEDED"


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered while transforming or rendering.

    Attributes
    ----------
    code:
        A :class:`WarningCode` value.
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics (``block_id``,
        ``marker``, ...).
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StyleMarker:
    """One inline style annotation, e.g. ``("a", "https://...")``."""

    code: str
    payload: Any = None


@dataclass(frozen=True)
class StyledRun:
    """A span of text and the markers applied to it, in declaration order."""

    text: str
    markers: tuple[StyleMarker, ...] = ()


def _as_dict(value: Any) -> dict | None:
    return value if isinstance(value, dict) else None


def _as_timestamp(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


@dataclass(frozen=True)
class RawBlockRecord:
    """One block record as stored by the Notion service.

    Which ``properties`` and ``format`` keys are meaningful depends on
    ``type``; unknown keys are carried along untouched and ignored by the
    transformer.

    Attributes
    ----------
    id:
        Block id in dash form.
    type:
        Open-ended type tag (``"text"``, ``"to_do"``, ``"image"``, ...).
    properties:
        Property name -> styled-string value, or ``None`` when absent.
    format:
        Rendering hints (``block_color``, ``page_icon``, ...), or ``None``.
    content:
        Declared child ids, in display order.
    created_time, last_edited_time:
        Epoch milliseconds.
    parent_id:
        Id of the parent record, when the service reports it.
    alive:
        ``False`` for deleted blocks still present in the record set.
    """

    id: str
    type: str
    properties: dict | None = None
    format: dict | None = None
    content: tuple[str, ...] = ()
    created_time: int | None = None
    last_edited_time: int | None = None
    parent_id: str | None = None
    alive: bool = True

    @classmethod
    def from_dict(cls, value: dict) -> RawBlockRecord:
        """Build a record from the service's JSON value.

        Wrong-shaped fields are treated as absent rather than rejected.
        """
        content = value.get("content")
        if not isinstance(content, list):
            content = []
        parent_id = value.get("parent_id")
        return cls(
            id=to_dash_id(str(value.get("id", ""))),
            type=str(value.get("type", "")),
            properties=_as_dict(value.get("properties")),
            format=_as_dict(value.get("format")),
            content=tuple(to_dash_id(c) for c in content if isinstance(c, str)),
            created_time=_as_timestamp(value.get("created_time")),
            last_edited_time=_as_timestamp(value.get("last_edited_time")),
            parent_id=to_dash_id(parent_id) if isinstance(parent_id, str) else None,
            alive=value.get("alive", True) is not False,
        )

    def get_property(self, name: str) -> list | None:
        if self.properties is None:
            return None
        prop = self.properties.get(name)
        return prop if isinstance(prop, list) else None

    def get_format(self, key: str, default: Any = None) -> Any:
        if self.format is None:
            return default
        return self.format.get(key, default)

    def first_text(self, name: str) -> str | None:
        """Text of the first run of property *name* (``properties[name][0][0]``)."""
        prop = self.get_property(name)
        if not prop:
            return None
        first = prop[0]
        if isinstance(first, list) and first and isinstance(first[0], str):
            return first[0]
        return None


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------

Title = tuple[StyledRun, ...]


@dataclass(frozen=True, kw_only=True)
class Node:
    """Base AST node.

    Synthetic nodes (list containers) have an empty ``id``.  ``color`` is
    the resolved theme class (``"color-red"``), not the raw token.
    """

    id: str = ""
    type: NodeType
    color: str | None = None
    created_time: int | None = None
    last_edited_time: int | None = None
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, kw_only=True)
class TextNode(Node):
    """Paragraphs, quotes and toggles."""

    title: Title = ()


@dataclass(frozen=True, kw_only=True)
class ListItemNode(TextNode):
    """A bulleted (``ordered=False``) or numbered list item."""

    ordered: bool = False


@dataclass(frozen=True, kw_only=True)
class HeadingNode(TextNode):
    level: int = 1


@dataclass(frozen=True, kw_only=True)
class ToDoNode(TextNode):
    checked: bool = False


@dataclass(frozen=True, kw_only=True)
class CalloutNode(TextNode):
    icon: str | None = None


@dataclass(frozen=True, kw_only=True)
class PageNode(TextNode):
    """The root page, or a reference to a nested page (``embedded_page``)."""

    icon: str | None = None
    cover: str | None = None
    uri: str = ""


@dataclass(frozen=True, kw_only=True)
class CodeNode(TextNode):
    language: str = "Plain Text"
    wrap: bool = False


@dataclass(frozen=True, kw_only=True)
class EquationNode(Node):
    latex: str = ""


@dataclass(frozen=True, kw_only=True)
class MediaNode(Node):
    """Images, videos, audio and generic embeds."""

    url: str = ""
    caption: Title = ()
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True, kw_only=True)
class FileNode(Node):
    url: str = ""
    title: Title = ()
    size: str | None = None
    caption: Title = ()


@dataclass(frozen=True, kw_only=True)
class BookmarkNode(Node):
    url: str = ""
    title: Title = ()
    description: Title = ()
    icon: str | None = None
    cover: str | None = None
    caption: Title = ()


@dataclass(frozen=True, kw_only=True)
class TableNode(Node):
    column_order: tuple[str, ...] = ()
    has_column_header: bool = False
    has_row_header: bool = False


@dataclass(frozen=True, kw_only=True)
class TableRowNode(Node):
    """One table row.

    ``cells[i]`` holds the content of column ``column_ids[i]``.  Inside a
    table both follow the table's column order.
    """

    column_ids: tuple[str, ...] = ()
    cells: tuple[Title, ...] = ()


@dataclass(frozen=True, kw_only=True)
class ColumnNode(Node):
    ratio: float | None = None


@dataclass(frozen=True, kw_only=True)
class AliasNode(Node):
    """A link to another block; owns no content, color or icon."""

    target_id: str = ""


@dataclass(frozen=True, kw_only=True)
class UnsupportedNode(Node):
    """Passthrough for raw types the transformer does not know."""

    raw_type: str = ""


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------

@dataclass
class RenderResult:
    """Output of a full records -> AST -> HTML conversion.

    Attributes
    ----------
    html:
        The rendered markup.
    ast:
        The assembled root node, for callers that post-process the tree.
    warnings:
        Non-fatal issues from assembling, transforming and rendering, in
        the order they were raised.
    """

    html: str
    ast: Node
    warnings: list[ConversionWarning] = field(default_factory=list)
