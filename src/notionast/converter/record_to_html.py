"""Full records-to-HTML conversion pipeline.

:class:`RecordToHtmlConverter` runs the two stages back to back:

1. **Assemble** — :class:`TreeAssembler` resolves the record set into an
   AST, transforming each record with :class:`BlockTransformer`.
2. **Render** — :class:`HtmlRenderer` turns the AST into markup.

The result is a :class:`RenderResult` holding the HTML, the AST and every
non-fatal warning of both stages.
"""

from __future__ import annotations

import dataclasses
import json
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from notionast.config import NastConfig
from notionast.converter.block_transformer import BlockTransformer
from notionast.converter.html_renderer import HtmlRenderer
from notionast.converter.tree_assembler import TreeAssembler
from notionast.models import Node, RenderResult


class RecordToHtmlConverter:
    """Convert a Notion record set to HTML.

    A converter holds no per-call state: each :meth:`convert` builds its
    own assembler and renderer, so one instance may be shared between
    threads.

    Parameters
    ----------
    config:
        Pipeline configuration.  Defaults to ``NastConfig()``.

    Examples
    --------
    >>> converter = RecordToHtmlConverter()
    >>> records = {
    ...     "root": {"id": "root", "type": "page", "content": ["b1"],
    ...              "properties": {"title": [["Home"]]}},
    ...     "b1": {"id": "b1", "type": "text",
    ...            "properties": {"title": [["Hi", [["b"]]]]}},
    ... }
    >>> result = converter.convert("root", records)
    >>> "<strong>Hi</strong>" in result.html
    True
    """

    def __init__(self, config: NastConfig | None = None) -> None:
        self._config = config or NastConfig()

    def build_ast(
        self,
        root_id: str,
        records: Mapping[str, Any],
        child_ids_by_parent: Mapping[str, Sequence[str]] | None = None,
    ) -> tuple[Node, list]:
        """Assemble the AST only.

        Returns
        -------
        tuple
            The root node and the warnings raised while assembling.
        """
        assembler = TreeAssembler(self._config, BlockTransformer(self._config))
        root = assembler.assemble(root_id, records, child_ids_by_parent)
        return root, list(assembler.warnings)

    def convert(
        self,
        root_id: str,
        records: Mapping[str, Any],
        child_ids_by_parent: Mapping[str, Sequence[str]] | None = None,
    ) -> RenderResult:
        """Full pipeline: assemble -> render -> collect warnings.

        Parameters
        ----------
        root_id:
            Id of the page (or block) to render.
        records:
            ``id -> record`` map; see :meth:`TreeAssembler.assemble`.
        child_ids_by_parent:
            Optional explicit child index.

        Returns
        -------
        RenderResult
            ``html``, ``ast`` and ``warnings``.

        Raises
        ------
        NastStructureError
            Subclasses are raised for a missing root, and for missing
            children or cycles when the matching policy is ``"raise"``.
        """
        root, warnings = self.build_ast(root_id, records, child_ids_by_parent)

        if self._config.debug_dump_ast:
            print(
                "[notionast] Assembled AST:",
                json.dumps(dataclasses.asdict(root), indent=2, ensure_ascii=False, default=str),
                file=sys.stderr,
            )

        renderer = HtmlRenderer(self._config)
        html = renderer.render(root)
        warnings.extend(renderer.warnings)

        return RenderResult(html=html, ast=root, warnings=warnings)


def render_records(
    root_id: str,
    records: Mapping[str, Any],
    child_ids_by_parent: Mapping[str, Sequence[str]] | None = None,
    config: NastConfig | None = None,
) -> str:
    """Shortcut for ``RecordToHtmlConverter(config).convert(...).html``."""
    return RecordToHtmlConverter(config).convert(root_id, records, child_ids_by_parent).html
