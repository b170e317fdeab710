"""Raw block records to typed AST nodes.

:class:`BlockTransformer` maps one :class:`RawBlockRecord` plus its already
transformed children to one AST node.  Dispatch is a lookup of
``record.type`` in a registration table; unknown types become an
:class:`UnsupportedNode` and a single ``UNSUPPORTED_BLOCK_TYPE`` warning.

Structural work that the record format leaves implicit happens here:

* consecutive list items among siblings are grouped under a synthetic
  ``bulleted_list`` / ``numbered_list`` container;
* table rows are aligned to their table's column order;
* nested pages become ``embedded_page`` references;
* media sources are normalized (signed, relative, absolute URLs).

Usage::

    from notionast.converter.block_transformer import BlockTransformer

    transformer = BlockTransformer()
    node = transformer.transform(record, children)
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from typing import Any

from notionast.config import NastConfig
from notionast.converter.colors import resolve_color
from notionast.converter.diagnostics import emit_warning
from notionast.converter.records import parse_styled_string, plain_text
from notionast.converter.tables import align_rows, column_order, row_cells
from notionast.models import (
    AliasNode,
    BookmarkNode,
    CalloutNode,
    CodeNode,
    ColumnNode,
    ConversionWarning,
    EquationNode,
    FileNode,
    HeadingNode,
    ListItemNode,
    MediaNode,
    Node,
    NodeType,
    PageNode,
    RawBlockRecord,
    TableNode,
    TableRowNode,
    TextNode,
    Title,
    ToDoNode,
    UnsupportedNode,
    WarningCode,
)
from notionast.observability import NoopMetricsHook
from notionast.utils.urls import (
    get_block_uri,
    normalize_file_url,
    normalize_image_url,
    to_dash_id,
)

_HEADING_LEVELS: dict[str, int] = {
    "header": 1,
    "sub_header": 2,
    "sub_sub_header": 3,
}

# Raw types carrying only children (or nothing at all).
_BARE_TYPES: dict[str, NodeType] = {
    "divider": NodeType.DIVIDER,
    "table_of_contents": NodeType.TABLE_OF_CONTENTS,
    "breadcrumb": NodeType.BREADCRUMB,
    "column_list": NodeType.COLUMN_LIST,
}

# Raw types rendered through an iframe-like embed.
_EMBED_TYPES: frozenset[str] = frozenset({
    "embed",
    "pdf",
    "codepen",
    "drive",
    "figma",
    "gist",
    "maps",
    "tweet",
    "typeform",
})


class BlockTransformer:
    """Transform raw block records into AST nodes.

    The transformer accumulates :class:`ConversionWarning` instances in
    :attr:`warnings`.  It holds no other state, but the warning list makes
    an instance single-use per conversion.

    Parameters
    ----------
    config:
        Pipeline configuration.  ``expand_subpages`` and ``metrics`` are
        read here.
    """

    def __init__(self, config: NastConfig | None = None) -> None:
        self._config = config or NastConfig()
        self._metrics = self._config.metrics or NoopMetricsHook()
        self.warnings: list[ConversionWarning] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def transform(
        self,
        record: RawBlockRecord,
        children: tuple[Node, ...] | list[Node] = (),
        *,
        is_root: bool = False,
    ) -> Node:
        """Build the AST node for *record*.

        Parameters
        ----------
        record:
            The raw record.
        children:
            The record's transformed children, in content order.
        is_root:
            Whether *record* is the root of the tree being assembled.
            Decides between ``page`` and ``embedded_page``.

        Returns
        -------
        Node
            The typed node.  Never raises for unknown types.
        """
        grouped = group_list_items(tuple(children))
        transform_fn = _TRANSFORMERS.get(record.type)
        if transform_fn is None:
            node = self._transform_unsupported(record, grouped)
        else:
            node = transform_fn(self, record, grouped, is_root)
        self._metrics.increment(
            "notionast.blocks_transformed_total",
            tags={"type": node.type.value},
        )
        return node

    # ------------------------------------------------------------------
    # Shared field extraction
    # ------------------------------------------------------------------

    def _common(self, record: RawBlockRecord, children: tuple[Node, ...]) -> dict[str, Any]:
        return {
            "id": record.id,
            "color": _block_color(record),
            "created_time": record.created_time,
            "last_edited_time": record.last_edited_time,
            "children": children,
        }

    # ------------------------------------------------------------------
    # Type-specific transforms
    # ------------------------------------------------------------------

    def _transform_page(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        if is_root or self._config.expand_subpages:
            node_type = NodeType.PAGE
        else:
            node_type = NodeType.EMBEDDED_PAGE
            children = ()
        cover = record.get_format("page_cover")
        return PageNode(
            **self._common(record, children),
            type=node_type,
            title=_title(record),
            icon=_block_icon(record),
            cover=normalize_image_url(record.id, cover) if isinstance(cover, str) else None,
            uri=get_block_uri(record.id),
        )

    def _transform_text(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return TextNode(**self._common(record, children), type=NodeType.TEXT, title=_title(record))

    def _transform_quote(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return TextNode(**self._common(record, children), type=NodeType.QUOTE, title=_title(record))

    def _transform_toggle(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return TextNode(**self._common(record, children), type=NodeType.TOGGLE, title=_title(record))

    def _transform_heading(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return HeadingNode(
            **self._common(record, children),
            type=NodeType.HEADING,
            title=_title(record),
            level=_HEADING_LEVELS[record.type],
        )

    def _transform_to_do(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return ToDoNode(
            **self._common(record, children),
            type=NodeType.TO_DO,
            title=_title(record),
            checked=record.first_text("checked") == "Yes",
        )

    def _transform_list_item(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return ListItemNode(
            **self._common(record, children),
            type=NodeType.LIST_ITEM,
            title=_title(record),
            ordered=record.type == "numbered_list",
        )

    def _transform_callout(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return CalloutNode(
            **self._common(record, children),
            type=NodeType.CALLOUT,
            title=_title(record),
            icon=_block_icon(record),
        )

    def _transform_bare(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return Node(**self._common(record, children), type=_BARE_TYPES[record.type])

    def _transform_column(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        ratio = record.get_format("column_ratio")
        return ColumnNode(
            **self._common(record, children),
            type=NodeType.COLUMN,
            ratio=float(ratio) if _is_number(ratio) else None,
        )

    def _transform_code(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return CodeNode(
            **self._common(record, children),
            type=NodeType.CODE,
            title=_title(record),
            language=record.first_text("language") or "Plain Text",
            wrap=record.get_format("code_wrap") is True,
        )

    def _transform_equation(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return EquationNode(
            **self._common(record, children),
            type=NodeType.EQUATION,
            latex=plain_text(_title(record)),
        )

    def _transform_image(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        width = _dimension(record.get_format("block_width"))
        return MediaNode(
            **self._common(record, children),
            type=NodeType.IMAGE,
            url=normalize_image_url(record.id, _media_source(record), width),
            caption=parse_styled_string(record.get_property("caption")),
            width=width,
            height=_dimension(record.get_format("block_height")),
        )

    def _transform_media(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        if record.type == "video":
            node_type = NodeType.VIDEO
        elif record.type == "audio":
            node_type = NodeType.AUDIO
        else:
            node_type = NodeType.EMBED
        return MediaNode(
            **self._common(record, children),
            type=node_type,
            url=normalize_file_url(record.id, _media_source(record)),
            caption=parse_styled_string(record.get_property("caption")),
            width=_dimension(record.get_format("block_width")),
            height=_dimension(record.get_format("block_height")),
        )

    def _transform_file(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        return FileNode(
            **self._common(record, children),
            type=NodeType.FILE,
            url=normalize_file_url(record.id, record.first_text("source") or ""),
            title=_title(record),
            size=record.first_text("size"),
            caption=parse_styled_string(record.get_property("caption")),
        )

    def _transform_bookmark(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        icon = record.get_format("bookmark_icon")
        cover = record.get_format("bookmark_cover")
        return BookmarkNode(
            **self._common(record, children),
            type=NodeType.BOOKMARK,
            url=record.first_text("link") or "",
            title=_title(record),
            description=parse_styled_string(record.get_property("description")),
            icon=icon if isinstance(icon, str) else None,
            cover=cover if isinstance(cover, str) else None,
            caption=parse_styled_string(record.get_property("caption")),
        )

    def _transform_table(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        aligned, order = align_rows(children, column_order(record))
        return TableNode(
            **self._common(record, aligned),
            type=NodeType.TABLE,
            column_order=order,
            has_column_header=record.get_format("table_block_column_header") is True,
            has_row_header=record.get_format("table_block_row_header") is True,
        )

    def _transform_table_row(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        column_ids, cells = row_cells(record)
        return TableRowNode(
            **self._common(record, children),
            type=NodeType.TABLE_ROW,
            column_ids=column_ids,
            cells=cells,
        )

    def _transform_alias(
        self, record: RawBlockRecord, children: tuple[Node, ...], is_root: bool
    ) -> Node:
        pointer = record.get_format("alias_pointer")
        target_id = pointer.get("id") if isinstance(pointer, dict) else None
        return AliasNode(
            **self._common(record, ()),
            type=NodeType.ALIAS,
            target_id=to_dash_id(target_id) if isinstance(target_id, str) else "",
        )

    def _transform_unsupported(
        self, record: RawBlockRecord, children: tuple[Node, ...]
    ) -> Node:
        emit_warning(
            self.warnings,
            WarningCode.UNSUPPORTED_BLOCK_TYPE,
            f"Unsupported block type: {record.type}",
            metrics=self._metrics,
            block_id=record.id,
            block_type=record.type,
        )
        return UnsupportedNode(
            **self._common(record, children),
            type=NodeType.UNSUPPORTED,
            raw_type=record.type,
        )


# ------------------------------------------------------------------
# Transform dispatch table
# ------------------------------------------------------------------

_TransformFn = _Callable[
    ["BlockTransformer", RawBlockRecord, tuple[Node, ...], bool], Node
]

_TRANSFORMERS: dict[str, _TransformFn] = {
    "page": BlockTransformer._transform_page,
    "text": BlockTransformer._transform_text,
    "header": BlockTransformer._transform_heading,
    "sub_header": BlockTransformer._transform_heading,
    "sub_sub_header": BlockTransformer._transform_heading,
    "to_do": BlockTransformer._transform_to_do,
    "bulleted_list": BlockTransformer._transform_list_item,
    "numbered_list": BlockTransformer._transform_list_item,
    "toggle": BlockTransformer._transform_toggle,
    "quote": BlockTransformer._transform_quote,
    "callout": BlockTransformer._transform_callout,
    "column": BlockTransformer._transform_column,
    "code": BlockTransformer._transform_code,
    "equation": BlockTransformer._transform_equation,
    "image": BlockTransformer._transform_image,
    "video": BlockTransformer._transform_media,
    "audio": BlockTransformer._transform_media,
    "file": BlockTransformer._transform_file,
    "bookmark": BlockTransformer._transform_bookmark,
    "table": BlockTransformer._transform_table,
    "table_row": BlockTransformer._transform_table_row,
    "alias": BlockTransformer._transform_alias,
    **{raw_type: BlockTransformer._transform_bare for raw_type in _BARE_TYPES},
    **{raw_type: BlockTransformer._transform_media for raw_type in _EMBED_TYPES},
}


def supported_types() -> frozenset[str]:
    """Raw type tags with a dedicated transform."""
    return frozenset(_TRANSFORMERS)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def group_list_items(children: tuple[Node, ...]) -> tuple[Node, ...]:
    """Wrap runs of consecutive same-kind list items in a list container.

    The containers are synthetic: they have no id and no color.
    """
    grouped: list[Node] = []
    run: list[ListItemNode] = []

    def flush() -> None:
        if run:
            list_type = NodeType.NUMBERED_LIST if run[0].ordered else NodeType.BULLETED_LIST
            grouped.append(Node(type=list_type, children=tuple(run)))
            run.clear()

    for child in children:
        if isinstance(child, ListItemNode):
            if run and run[0].ordered != child.ordered:
                flush()
            run.append(child)
        else:
            flush()
            grouped.append(child)
    flush()
    return tuple(grouped)


def _title(record: RawBlockRecord) -> Title:
    return parse_styled_string(record.get_property("title"))


def _block_color(record: RawBlockRecord) -> str | None:
    if record.type == "alias":
        return None
    token = record.get_format("block_color")
    if not isinstance(token, str):
        return None
    return resolve_color(token) or None


def _block_icon(record: RawBlockRecord) -> str | None:
    """Emoji or public URL of the record's icon."""
    if record.type == "alias":
        return None
    icon = record.get_format("page_icon")
    if not isinstance(icon, str) or not icon:
        return None
    return normalize_image_url(record.id, icon)


def _media_source(record: RawBlockRecord) -> str:
    display_source = record.get_format("display_source")
    if isinstance(display_source, str) and display_source:
        return display_source
    return record.first_text("source") or ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _dimension(value: Any) -> int | None:
    return int(value) if _is_number(value) else None
