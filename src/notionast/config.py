"""Configuration for notionast.

:class:`NastConfig` is a plain dataclass that captures every tuneable knob
of the record -> AST -> HTML pipeline.  One instance is shared by the
:class:`~notionast.converter.tree_assembler.TreeAssembler`, the
:class:`~notionast.converter.block_transformer.BlockTransformer` and the
:class:`~notionast.converter.html_renderer.HtmlRenderer`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

Highlighter = Callable[[str, str], str]
"""``highlight(text, language) -> markup``.  The highlighter owns escaping."""

_MISSING_CHILD_POLICIES = ("skip", "raise")
_CYCLE_POLICIES = ("raise", "skip")
_UNSUPPORTED_BLOCK_POLICIES = ("comment", "skip")


@dataclass
class NastConfig:
    """Complete configuration for a notionast pipeline.

    Every parameter has a default, so ``NastConfig()`` is a valid
    configuration.

    Parameters
    ----------
    missing_child_policy:
        What the tree assembler does when a record declares a child id
        that is not in the record set.

        * ``"skip"`` — drop the child and record an ``UNRESOLVED_CHILD``
          warning.  Partial content is kept.
        * ``"raise"`` — raise :class:`~notionast.errors.UnresolvedChildError`.
    cycle_policy:
        What the tree assembler does when a record lists one of its own
        ancestors as a child.

        * ``"raise"`` — raise :class:`~notionast.errors.CyclicStructureError`
          and abort the whole assembly.
        * ``"skip"`` — drop only the offending child edge and record a
          ``CYCLIC_STRUCTURE`` warning.
    expand_subpages:
        Descend into the content of nested ``page`` records.  When false
        (the default) a nested page becomes an ``embedded_page`` link.
    max_depth:
        Deepest level below the root that is assembled.  Blocks nested
        further are dropped with a ``DEPTH_LIMIT_EXCEEDED`` warning.
    unsupported_block_policy:
        How the renderer emits nodes whose raw type is unknown.

        * ``"comment"`` — ``<!-- unsupported: <type> -->`` plus children.
        * ``"skip"`` — children only.
    default_block_color:
        Color token applied by the renderer to blocks that carry none.
    highlight_code:
        Pass code block content through the highlighter.  When false, code
        is only escaped.
    highlighter:
        ``highlight(text, language) -> markup`` collaborator.  ``None``
        selects the bundled :class:`~notionast.converter.highlight.PygmentsHighlighter`.
    metrics:
        A :class:`~notionast.observability.MetricsHook` implementation.
    debug_dump_ast:
        Write the assembled AST as JSON to *stderr* on each conversion.
    """

    # ── Structure ───────────────────────────────────────────────────────
    missing_child_policy: Literal["skip", "raise"] = "skip"

    cycle_policy: Literal["raise", "skip"] = "raise"

    expand_subpages: bool = False

    max_depth: int = 64

    # ── Rendering ───────────────────────────────────────────────────────
    unsupported_block_policy: Literal["comment", "skip"] = "comment"

    default_block_color: str = ""

    highlight_code: bool = True

    highlighter: Highlighter | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.missing_child_policy not in _MISSING_CHILD_POLICIES:
            raise ValueError(
                f"missing_child_policy must be one of {_MISSING_CHILD_POLICIES}, "
                f"got {self.missing_child_policy!r}"
            )
        if self.cycle_policy not in _CYCLE_POLICIES:
            raise ValueError(
                f"cycle_policy must be one of {_CYCLE_POLICIES}, got {self.cycle_policy!r}"
            )
        if (
            not isinstance(self.max_depth, int)
            or isinstance(self.max_depth, bool)
            or self.max_depth < 1
        ):
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if self.unsupported_block_policy not in _UNSUPPORTED_BLOCK_POLICIES:
            raise ValueError(
                f"unsupported_block_policy must be one of {_UNSUPPORTED_BLOCK_POLICIES}, "
                f"got {self.unsupported_block_policy!r}"
            )
        if self.highlighter is not None and not callable(self.highlighter):
            raise ValueError("highlighter must be callable as highlight(text, language)")
