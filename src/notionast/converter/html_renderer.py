"""AST to HTML renderer.

Every node becomes a block wrapper::

    <div class="block block--<type> <color>">...</div>

and every child of a container is additionally wrapped in
``<div id="<no-dash id>">`` so ``#<id>`` links produced by
:func:`~notionast.utils.urls.to_local_anchor` resolve inside the page.
Synthetic nodes (list containers) get an empty ``id`` attribute.

Inline text goes through :mod:`notionast.converter.inline_renderer`;
code blocks go through the configured highlighter.

Usage::

    from notionast.converter.html_renderer import HtmlRenderer

    html = HtmlRenderer().render(root)
"""

from __future__ import annotations

import time
from collections.abc import Callable as _Callable

from notionast.config import Highlighter, NastConfig
from notionast.converter.colors import resolve_color
from notionast.converter.highlight import PygmentsHighlighter, resolve_language
from notionast.converter.inline_renderer import escape_attribute, escape_html, render_title
from notionast.converter.records import plain_text
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
    TableNode,
    TableRowNode,
    TextNode,
    Title,
    ToDoNode,
    UnsupportedNode,
)
from notionast.observability import NoopMetricsHook
from notionast.utils.urls import get_block_uri, to_no_dash_id

_BLOCK_CLASS = "block"


class HtmlRenderer:
    """Stateful renderer that converts an AST to HTML.

    The renderer accumulates :class:`ConversionWarning` instances (unknown
    style markers) in :attr:`warnings` during a :meth:`render` call.

    Parameters
    ----------
    config:
        Pipeline configuration.  ``default_block_color``,
        ``unsupported_block_policy``, ``highlight_code``, ``highlighter``
        and ``metrics`` are read here.
    """

    def __init__(self, config: NastConfig | None = None) -> None:
        self._config = config or NastConfig()
        self._metrics = self._config.metrics or NoopMetricsHook()
        self._highlighter: Highlighter | None = None
        if self._config.highlight_code:
            self._highlighter = self._config.highlighter or PygmentsHighlighter()
        self._headings: list[HeadingNode] = []
        self.warnings: list[ConversionWarning] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, node: Node) -> str:
        """Render *node* and its descendants to an HTML string."""
        self.warnings = []
        self._headings = list(_collect_headings(node))
        started = time.perf_counter()
        html = self._dispatch(node)
        self._metrics.timing(
            "notionast.render_duration_ms",
            (time.perf_counter() - started) * 1000,
            tags={"type": node.type.value},
        )
        return html

    def render_children(self, nodes: tuple[Node, ...]) -> str:
        """Render *nodes* in order, each inside an ``id`` wrapper."""
        return "".join(
            f'<div id="{_anchor_id(node)}">{self._dispatch(node)}</div>'
            for node in nodes
        )

    # ------------------------------------------------------------------
    # Internal: dispatch and shared pieces
    # ------------------------------------------------------------------

    def _dispatch(self, node: Node) -> str:
        renderer = _BLOCK_RENDERERS.get(node.type)
        if renderer is None:
            return self._render_unsupported(node)
        return renderer(self, node)

    def _block(self, node: Node, content: str, tag: str = "div", attrs: str = "") -> str:
        classes = f"{_BLOCK_CLASS} {_BLOCK_CLASS}--{node.type.value}"
        color = node.color or resolve_color(self._config.default_block_color)
        if color:
            classes += f" {escape_attribute(color)}"
        return f'<{tag} class="{classes}"{attrs}>{content}</{tag}>'

    def _title(self, runs: Title) -> str:
        return render_title(runs, warnings=self.warnings, metrics=self._metrics)

    def _nested(self, node: Node) -> str:
        if not node.children:
            return ""
        return f'<div class="{_BLOCK_CLASS}__children">{self.render_children(node.children)}</div>'

    def _caption(self, runs: Title) -> str:
        if not runs:
            return ""
        return f"<figcaption>{self._title(runs)}</figcaption>"

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_page(self, node: PageNode) -> str:
        header = ""
        if node.cover:
            header += f'<img class="page__cover" src="{escape_attribute(node.cover)}" alt="">'
        if node.icon:
            header += _render_icon(node.icon)
        header += f'<h1 class="page__title">{self._title(node.title)}</h1>'
        content = f"<header>{header}</header>{self.render_children(node.children)}"
        return self._block(node, content, tag="article")

    def _render_embedded_page(self, node: PageNode) -> str:
        icon = _render_icon(node.icon) if node.icon else ""
        content = f'<a href="{escape_attribute(node.uri)}">{icon}{self._title(node.title)}</a>'
        return self._block(node, content + self._nested(node))

    def _render_text(self, node: TextNode) -> str:
        return self._block(node, f"<p>{self._title(node.title)}</p>{self._nested(node)}")

    def _render_heading(self, node: HeadingNode) -> str:
        level = min(max(node.level, 1), 3)
        content = f"<h{level}>{self._title(node.title)}</h{level}>{self._nested(node)}"
        return self._block(node, content)

    def _render_to_do(self, node: ToDoNode) -> str:
        checked = " checked" if node.checked else ""
        content = (
            f'<input type="checkbox" disabled{checked}>'
            f"{self._title(node.title)}{self._nested(node)}"
        )
        return self._block(node, content)

    def _render_list(self, node: Node) -> str:
        tag = "ol" if node.type is NodeType.NUMBERED_LIST else "ul"
        items = "".join(
            self._render_list_item(child) if isinstance(child, ListItemNode) else self._dispatch(child)
            for child in node.children
        )
        return self._block(node, f"<{tag}>{items}</{tag}>")

    def _render_list_item(self, node: ListItemNode) -> str:
        return (
            f'<li id="{_anchor_id(node)}">'
            f"{self._title(node.title)}{self._nested(node)}</li>"
        )

    def _render_toggle(self, node: TextNode) -> str:
        content = (
            f"<details><summary>{self._title(node.title)}</summary>"
            f"{self.render_children(node.children)}</details>"
        )
        return self._block(node, content)

    def _render_quote(self, node: TextNode) -> str:
        content = f"<blockquote>{self._title(node.title)}</blockquote>{self._nested(node)}"
        return self._block(node, content)

    def _render_callout(self, node: CalloutNode) -> str:
        icon = f'<div class="callout__icon">{_render_icon(node.icon)}</div>' if node.icon else ""
        content = (
            f'{icon}<div class="callout__content">'
            f"{self._title(node.title)}{self.render_children(node.children)}</div>"
        )
        return self._block(node, content)

    def _render_divider(self, node: Node) -> str:
        return self._block(node, "<hr>" + self._nested(node))

    def _render_code(self, node: CodeNode) -> str:
        language = resolve_language(node.language)
        code = render_title(
            node.title,
            code=True,
            language=language,
            highlighter=self._highlighter,
            warnings=self.warnings,
            metrics=self._metrics,
        )
        css_class = f"language-{language or 'plaintext'}"
        if node.wrap:
            css_class += " code--wrap"
        content = f'<pre><code class="{escape_attribute(css_class)}">{code}</code></pre>'
        return self._block(node, content + self._nested(node))

    def _render_equation(self, node: EquationNode) -> str:
        content = f'<div class="equation">{escape_html(node.latex)}</div>'
        return self._block(node, content + self._nested(node))

    def _render_image(self, node: MediaNode) -> str:
        width = f' width="{node.width}"' if node.width else ""
        alt = escape_attribute(plain_text(node.caption))
        content = (
            f'<figure><img src="{escape_attribute(node.url)}" alt="{alt}"{width}>'
            f"{self._caption(node.caption)}</figure>"
        )
        return self._block(node, content + self._nested(node))

    def _render_embed(self, node: MediaNode) -> str:
        size = ""
        if node.width:
            size += f' width="{node.width}"'
        if node.height:
            size += f' height="{node.height}"'
        content = (
            f'<figure><iframe src="{escape_attribute(node.url)}"{size} '
            f'frameborder="0" allowfullscreen></iframe>{self._caption(node.caption)}</figure>'
        )
        return self._block(node, content + self._nested(node))

    def _render_audio(self, node: MediaNode) -> str:
        content = (
            f'<figure><audio controls src="{escape_attribute(node.url)}"></audio>'
            f"{self._caption(node.caption)}</figure>"
        )
        return self._block(node, content + self._nested(node))

    def _render_file(self, node: FileNode) -> str:
        name = self._title(node.title) if node.title else escape_html(_file_name(node.url))
        size = f' <span class="file__size">{escape_html(node.size)}</span>' if node.size else ""
        content = f'<a class="file" href="{escape_attribute(node.url)}">{name}</a>{size}'
        return self._block(node, content + self._caption(node.caption) + self._nested(node))

    def _render_bookmark(self, node: BookmarkNode) -> str:
        title = self._title(node.title) if node.title else escape_html(node.url)
        parts = [f'<div class="bookmark__title">{title}</div>']
        if node.description:
            parts.append(f'<div class="bookmark__description">{self._title(node.description)}</div>')
        if node.icon:
            parts.append(f'<img class="bookmark__icon" src="{escape_attribute(node.icon)}" alt="">')
        parts.append(f'<div class="bookmark__link">{escape_html(node.url)}</div>')
        if node.cover:
            parts.append(f'<img class="bookmark__cover" src="{escape_attribute(node.cover)}" alt="">')
        content = f'<a class="bookmark" href="{escape_attribute(node.url)}">{"".join(parts)}</a>'
        return self._block(node, content + self._caption(node.caption) + self._nested(node))

    def _render_table(self, node: TableNode) -> str:
        rows = [child for child in node.children if isinstance(child, TableRowNode)]
        # Non-row children are rendered below the table.
        others = tuple(child for child in node.children if not isinstance(child, TableRowNode))
        head = ""
        if node.has_column_header and rows:
            head = f"<thead>{self._render_row(rows[0], node, header=True)}</thead>"
            rows = rows[1:]
        body = "".join(self._render_row(row, node) for row in rows)
        content = f"<table>{head}<tbody>{body}</tbody></table>"
        if others:
            content += f'<div class="{_BLOCK_CLASS}__children">{self.render_children(others)}</div>'
        return self._block(node, content)

    def _render_row(self, row: TableRowNode, table: TableNode | None = None, header: bool = False) -> str:
        row_header = table is not None and table.has_row_header
        cells: list[str] = []
        for index, cell in enumerate(row.cells):
            tag = "th" if header or (row_header and index == 0) else "td"
            cells.append(f"<{tag}>{self._title(cell)}</{tag}>")
        return f'<tr id="{_anchor_id(row)}">{"".join(cells)}</tr>'

    def _render_table_row(self, node: TableRowNode) -> str:
        content = f"<table><tbody>{self._render_row(node)}</tbody></table>"
        return self._block(node, content + self._nested(node))

    def _render_column_list(self, node: Node) -> str:
        return self._block(node, self.render_children(node.children))

    def _render_column(self, node: ColumnNode) -> str:
        style = ""
        if node.ratio is not None:
            style = f' style="width: calc({node.ratio:g} * 100%)"'
        return self._block(node, self.render_children(node.children), attrs=style)

    def _render_alias(self, node: AliasNode) -> str:
        uri = get_block_uri(node.target_id) if node.target_id else ""
        content = f'<a href="{escape_attribute(uri)}">{escape_html(uri)}</a>'
        return self._block(node, content + self._nested(node))

    def _render_table_of_contents(self, node: Node) -> str:
        items = "".join(
            f'<li class="toc__item toc__item--h{heading.level}">'
            f'<a href="#{to_no_dash_id(heading.id)}">{self._title(heading.title)}</a></li>'
            for heading in self._headings
        )
        return self._block(node, f"<nav><ul>{items}</ul></nav>{self._nested(node)}")

    def _render_breadcrumb(self, node: Node) -> str:
        return self._block(node, "<nav></nav>" + self._nested(node))

    # ------------------------------------------------------------------
    # Unsupported node fallback
    # ------------------------------------------------------------------

    def _render_unsupported(self, node: Node) -> str:
        """Render children of a node whose raw type is unknown.

        ``"comment"`` policy prefixes an HTML comment naming the raw type;
        ``"skip"`` emits only the children.
        """
        raw_type = node.raw_type if isinstance(node, UnsupportedNode) else node.type.value
        comment = ""
        if self._config.unsupported_block_policy == "comment":
            comment = f"<!-- unsupported: {escape_html(raw_type)} -->"
        return self._block(node, comment + self.render_children(node.children))


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["HtmlRenderer", Node], str]

_BLOCK_RENDERERS: dict[NodeType, _BlockRenderer] = {
    NodeType.PAGE: HtmlRenderer._render_page,
    NodeType.EMBEDDED_PAGE: HtmlRenderer._render_embedded_page,
    NodeType.TEXT: HtmlRenderer._render_text,
    NodeType.HEADING: HtmlRenderer._render_heading,
    NodeType.TO_DO: HtmlRenderer._render_to_do,
    NodeType.BULLETED_LIST: HtmlRenderer._render_list,
    NodeType.NUMBERED_LIST: HtmlRenderer._render_list,
    NodeType.LIST_ITEM: HtmlRenderer._render_text,
    NodeType.TOGGLE: HtmlRenderer._render_toggle,
    NodeType.QUOTE: HtmlRenderer._render_quote,
    NodeType.CALLOUT: HtmlRenderer._render_callout,
    NodeType.DIVIDER: HtmlRenderer._render_divider,
    NodeType.CODE: HtmlRenderer._render_code,
    NodeType.EQUATION: HtmlRenderer._render_equation,
    NodeType.IMAGE: HtmlRenderer._render_image,
    NodeType.VIDEO: HtmlRenderer._render_embed,
    NodeType.EMBED: HtmlRenderer._render_embed,
    NodeType.AUDIO: HtmlRenderer._render_audio,
    NodeType.FILE: HtmlRenderer._render_file,
    NodeType.BOOKMARK: HtmlRenderer._render_bookmark,
    NodeType.TABLE: HtmlRenderer._render_table,
    NodeType.TABLE_ROW: HtmlRenderer._render_table_row,
    NodeType.COLUMN_LIST: HtmlRenderer._render_column_list,
    NodeType.COLUMN: HtmlRenderer._render_column,
    NodeType.ALIAS: HtmlRenderer._render_alias,
    NodeType.TABLE_OF_CONTENTS: HtmlRenderer._render_table_of_contents,
    NodeType.BREADCRUMB: HtmlRenderer._render_breadcrumb,
    # NodeType.UNSUPPORTED falls through to _render_unsupported
}

# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _anchor_id(node: Node) -> str:
    return escape_attribute(to_no_dash_id(node.id)) if node.id else ""


def _render_icon(icon: str) -> str:
    """Image for URL icons, text for emoji icons."""
    if icon.startswith(("http://", "https://", "/")):
        return f'<img class="icon" src="{escape_attribute(icon)}" alt="">'
    return f'<span class="icon">{escape_html(icon)}</span>'


def _file_name(url: str) -> str:
    if not url:
        return "File"
    return url.split("?", 1)[0].rsplit("/", 1)[-1] or url


def _collect_headings(node: Node):
    if isinstance(node, HeadingNode):
        yield node
    for child in node.children:
        yield from _collect_headings(child)
