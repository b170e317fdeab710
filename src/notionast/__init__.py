"""notionast — Notion block records to an AST, and the AST to HTML.

Public re-exports
-----------------

* **Pipeline:** :class:`RecordToHtmlConverter`, :func:`render_records`
* **Stages:** :class:`TreeAssembler`, :class:`BlockTransformer`,
  :class:`HtmlRenderer`
* **Configuration:** :class:`NastConfig`
* **Errors:** Every :class:`NastError` subclass and :class:`ErrorCode`
* **Models:** Records, AST nodes, warnings and results

Usage::

    from notionast import RecordToHtmlConverter

    result = RecordToHtmlConverter().convert(page_id, record_map)
    print(result.html)
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from notionast.config import Highlighter, NastConfig

# ── Pipeline ────────────────────────────────────────────────────────────
from notionast.converter import (
    BlockTransformer,
    HtmlRenderer,
    PygmentsHighlighter,
    RecordToHtmlConverter,
    TreeAssembler,
    render_records,
)

# ── Errors ──────────────────────────────────────────────────────────────
from notionast.errors import (
    CyclicStructureError,
    ErrorCode,
    MissingRecordError,
    NastError,
    NastStructureError,
    UnresolvedChildError,
)

# ── Models ──────────────────────────────────────────────────────────────
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
    RenderResult,
    StyledRun,
    StyleMarker,
    TableNode,
    TableRowNode,
    TextNode,
    ToDoNode,
    UnsupportedNode,
    WarningCode,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "RecordToHtmlConverter",
    "render_records",
    "TreeAssembler",
    "BlockTransformer",
    "HtmlRenderer",
    "PygmentsHighlighter",
    # Configuration
    "NastConfig",
    "Highlighter",
    # Errors
    "NastError",
    "NastStructureError",
    "MissingRecordError",
    "UnresolvedChildError",
    "CyclicStructureError",
    "ErrorCode",
    # Models
    "RawBlockRecord",
    "StyledRun",
    "StyleMarker",
    "Node",
    "NodeType",
    "TextNode",
    "ListItemNode",
    "HeadingNode",
    "ToDoNode",
    "CalloutNode",
    "PageNode",
    "CodeNode",
    "EquationNode",
    "MediaNode",
    "FileNode",
    "BookmarkNode",
    "TableNode",
    "TableRowNode",
    "ColumnNode",
    "AliasNode",
    "UnsupportedNode",
    "ConversionWarning",
    "WarningCode",
    "RenderResult",
]
