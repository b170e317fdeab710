"""Notion records -> AST -> HTML conversion pipeline.

Public API:

- :class:`RecordToHtmlConverter` — records → :class:`RenderResult`.
- :class:`TreeAssembler` — records → AST.
- :class:`BlockTransformer` — one record → one AST node.
- :class:`HtmlRenderer` — AST → HTML.
- :class:`PygmentsHighlighter` — default code highlighter.
- :func:`render_title` — styled runs → HTML.
- :func:`resolve_color` — color token → CSS class.
"""

from notionast.converter.block_transformer import BlockTransformer
from notionast.converter.colors import resolve_color
from notionast.converter.highlight import PygmentsHighlighter, resolve_language
from notionast.converter.html_renderer import HtmlRenderer
from notionast.converter.inline_renderer import escape_html, render_title
from notionast.converter.record_to_html import RecordToHtmlConverter, render_records
from notionast.converter.records import parse_styled_string, records_from_record_map
from notionast.converter.tree_assembler import TreeAssembler

__all__ = [
    "BlockTransformer",
    "HtmlRenderer",
    "PygmentsHighlighter",
    "RecordToHtmlConverter",
    "TreeAssembler",
    "escape_html",
    "parse_styled_string",
    "records_from_record_map",
    "render_records",
    "render_title",
    "resolve_color",
    "resolve_language",
]
