"""Syntax highlighting for code blocks.

Notion labels code blocks with display names (``"JavaScript"``,
``"C++"``, ``"Plain Text"``).  :func:`resolve_language` maps those names
to Pygments lexer aliases; names without an entry resolve to ``None`` and
are rendered as escaped plain text.

:class:`PygmentsHighlighter` is the default ``highlight(text, language)``
collaborator.  It emits bare ``<span class="...">`` tokens (no wrapping
``<pre>``), so the HTML renderer controls the surrounding markup.
"""

from __future__ import annotations

from functools import lru_cache

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from notionast.converter.inline_renderer import escape_html

# Notion language name -> Pygments lexer alias.
LANGUAGE_MAP: dict[str, str] = {
    "ABAP": "abap",
    "Arduino": "arduino",
    "Bash": "bash",
    "C": "c",
    "Clojure": "clojure",
    "CoffeeScript": "coffeescript",
    "C++": "cpp",
    "C#": "csharp",
    "CSS": "css",
    "Dart": "dart",
    "Diff": "diff",
    "Docker": "docker",
    "Elixir": "elixir",
    "Elm": "elm",
    "Erlang": "erlang",
    "F#": "fsharp",
    "Flow": "javascript",
    "Fortran": "fortran",
    "Gherkin": "gherkin",
    "GLSL": "glsl",
    "Go": "go",
    "GraphQL": "graphql",
    "Groovy": "groovy",
    "Haskell": "haskell",
    "HTML": "html",
    "Java": "java",
    "JavaScript": "javascript",
    "JSON": "json",
    "Julia": "julia",
    "Kotlin": "kotlin",
    "LaTeX": "latex",
    "Less": "less",
    "Lisp": "common-lisp",
    "LiveScript": "livescript",
    "Lua": "lua",
    "Makefile": "make",
    "Markdown": "markdown",
    "Markup": "html",
    "MATLAB": "matlab",
    "Nix": "nix",
    "Objective-C": "objective-c",
    "OCaml": "ocaml",
    "Pascal": "delphi",
    "Perl": "perl",
    "PHP": "php",
    "PowerShell": "powershell",
    "Prolog": "prolog",
    "Protobuf": "protobuf",
    "Python": "python",
    "R": "r",
    "Reason": "reasonml",
    "Ruby": "ruby",
    "Rust": "rust",
    "Sass": "sass",
    "Scala": "scala",
    "Scheme": "scheme",
    "SCSS": "scss",
    "Shell": "shell",
    "SQL": "sql",
    "Swift": "swift",
    "TypeScript": "typescript",
    "VB.Net": "vbnet",
    "Verilog": "verilog",
    "VHDL": "vhdl",
    "Visual Basic": "vbnet",
    "XML": "xml",
    "YAML": "yaml",
}

_LANGUAGE_MAP_FOLDED: dict[str, str] = {
    name.casefold(): alias for name, alias in LANGUAGE_MAP.items()
}


def resolve_language(name: str | None) -> str | None:
    """Map a Notion language name to a Pygments alias.

    Lookup is exact first, then case-insensitive.  ``"Plain Text"``,
    ``None`` and unknown names resolve to ``None``.
    """
    if not name:
        return None
    alias = LANGUAGE_MAP.get(name)
    if alias is None:
        alias = _LANGUAGE_MAP_FOLDED.get(name.casefold())
    return alias


@lru_cache(maxsize=64)
def _get_lexer(alias: str) -> Lexer | None:
    try:
        return get_lexer_by_name(alias, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


class PygmentsHighlighter:
    """``highlight(text, language) -> markup`` backed by Pygments.

    Parameters
    ----------
    formatter:
        Pygments HTML formatter.  Defaults to ``HtmlFormatter(nowrap=True)``,
        which emits only the token spans.

    Examples
    --------
    >>> PygmentsHighlighter()("x = 1", "python")  # doctest: +ELLIPSIS
    '<span class="n">x</span>...'
    """

    def __init__(self, formatter: HtmlFormatter | None = None) -> None:
        self._formatter = formatter or HtmlFormatter(nowrap=True)

    def __call__(self, text: str, language: str) -> str:
        lexer = _get_lexer(language)
        if lexer is None:
            return escape_html(text)
        return highlight(text, lexer, self._formatter)
