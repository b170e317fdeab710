"""Inline rendering: styled runs to HTML.

A run's text is escaped first, then its markers are applied from the last
to the first, each wrapping the markup built so far.  The first-declared
marker therefore ends up outermost::

    StyledRun("x", (StyleMarker("b"), StyleMarker("i")))
    -> <strong><em>x</em></strong>

Code runs skip the escaping step; the highlighter owns escaping for them.
Unknown marker codes are reported through the warning channel and
otherwise ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from notionast.config import Highlighter
from notionast.converter.colors import resolve_color
from notionast.converter.diagnostics import emit_warning
from notionast.models import ConversionWarning, StyledRun, StyleMarker, WarningCode
from notionast.utils.urls import to_local_anchor

_ESCAPE_TABLE = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    "/": "&#x2F;",
    '"': "&quot;",
    "'": "&#x27;",
})

_ATTRIBUTE_ESCAPE_TABLE = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "<": "&lt;",
    ">": "&gt;",
})


def escape_html(text: str) -> str:
    """Replace ``< > & / " '`` with their entities; nothing else changes."""
    return text.translate(_ESCAPE_TABLE)


def escape_attribute(value: str) -> str:
    """Escape a value for a double-quoted attribute, keeping URLs readable."""
    return value.translate(_ATTRIBUTE_ESCAPE_TABLE)


# ---------------------------------------------------------------------------
# Marker wrappers
# ---------------------------------------------------------------------------

def _text_payload(payload: Any) -> str:
    return payload if isinstance(payload, str) else ""


def _wrap_link(html: str, payload: Any) -> str:
    href = escape_attribute(to_local_anchor(_text_payload(payload)))
    return f'<a href="{href}">{html}</a>'


def _wrap_color(html: str, payload: Any) -> str:
    css_class = escape_attribute(resolve_color(_text_payload(payload)))
    return f'<span class="{css_class}">{html}</span>'


def _user_mention(html: str, payload: Any) -> str:
    return f'<span class="color-mention">@user_id:{escape_html(_text_payload(payload))}</span>'


def _page_mention(html: str, payload: Any) -> str:
    return f'<span class="color-mention">@page_id:{escape_html(_text_payload(payload))}</span>'


def _date_mention(html: str, payload: Any) -> str:
    start_date = payload.get("start_date", "") if isinstance(payload, dict) else ""
    return f'<span class="color-mention">@{escape_html(str(start_date))}</span>'


def _inline_equation(html: str, payload: Any) -> str:
    return f'<span class="equation">{escape_html(_text_payload(payload))}</span>'


_MarkerWrapper = Callable[[str, Any], str]

_MARKER_WRAPPERS: dict[str, _MarkerWrapper] = {
    "b": lambda html, _: f"<strong>{html}</strong>",
    "i": lambda html, _: f"<em>{html}</em>",
    "s": lambda html, _: f"<del>{html}</del>",
    "_": lambda html, _: f'<span class="underline">{html}</span>',
    "a": _wrap_link,
    "c": lambda html, _: f"<code>{html}</code>",
    "h": _wrap_color,
    "u": _user_mention,
    "p": _page_mention,
    "d": _date_mention,
    "m": lambda html, _: f'<span class="color-comment">{html}</span>',
    "e": _inline_equation,
}


def apply_markers(
    html: str,
    markers: tuple[StyleMarker, ...],
    *,
    warnings: list[ConversionWarning] | None = None,
    metrics: Any | None = None,
) -> str:
    """Wrap *html* with *markers*, last marker innermost."""
    for marker in reversed(markers):
        wrapper = _MARKER_WRAPPERS.get(marker.code)
        if wrapper is None:
            emit_warning(
                warnings,
                WarningCode.UNSUPPORTED_MARKER,
                f"Unsupported style: {marker.code}",
                metrics=metrics,
                marker=marker.code,
            )
            continue
        html = wrapper(html, marker.payload)
    return html


# ---------------------------------------------------------------------------
# Runs and titles
# ---------------------------------------------------------------------------

def render_code_text(
    text: str,
    language: str | None,
    highlighter: Highlighter | None,
) -> str:
    """Highlight *text*, or escape it when there is no highlighter or language."""
    if highlighter is None or not language:
        return escape_html(text)
    return highlighter(text, language)


def render_run(
    run: StyledRun,
    *,
    code: bool = False,
    language: str | None = None,
    highlighter: Highlighter | None = None,
    warnings: list[ConversionWarning] | None = None,
    metrics: Any | None = None,
) -> str:
    """Render one styled run to HTML.

    Parameters
    ----------
    run:
        The run to render.
    code:
        Treat the text as source code: it goes to *highlighter* unescaped.
    language:
        Highlighter language token (``"python"``), already resolved from
        the Notion language name.  ``None`` means plain text.
    highlighter:
        ``highlight(text, lexer_alias) -> markup``.
    warnings:
        Optional list collecting ``UNSUPPORTED_MARKER`` warnings.
    metrics:
        Optional metrics hook.
    """
    if code:
        html = render_code_text(run.text, language, highlighter)
    else:
        html = escape_html(run.text)
    return apply_markers(html, run.markers, warnings=warnings, metrics=metrics)


def render_title(
    runs: tuple[StyledRun, ...],
    *,
    code: bool = False,
    language: str | None = None,
    highlighter: Highlighter | None = None,
    warnings: list[ConversionWarning] | None = None,
    metrics: Any | None = None,
) -> str:
    """Render a sequence of runs inside a single ``<span>``."""
    parts = [
        render_run(
            run,
            code=code,
            language=language,
            highlighter=highlighter,
            warnings=warnings,
            metrics=metrics,
        )
        for run in runs
    ]
    return f"<span>{''.join(parts)}</span>"
