"""Flat record sets to a finished AST.

:class:`TreeAssembler` resolves the parent -> children structure of a
record set, starting from a root id, and hands each record to the
:class:`~notionast.converter.block_transformer.BlockTransformer` once all
of its children are built.

Failure policy:

* a missing **root** always raises :class:`MissingRecordError`;
* a missing **child** is dropped with an ``UNRESOLVED_CHILD`` warning, or
  raises :class:`UnresolvedChildError` when
  ``missing_child_policy="raise"``;
* a **cycle** (a record listing one of its ancestors) raises
  :class:`CyclicStructureError` and aborts the assembly, or, when
  ``cycle_policy="skip"``, drops just that edge with a
  ``CYCLIC_STRUCTURE`` warning;
* a record already placed elsewhere in the tree is dropped with a
  ``DUPLICATE_CHILD`` warning, so every node keeps exactly one parent;
* a record deeper than ``max_depth`` below the root is dropped, with its
  subtree, under a ``DEPTH_LIMIT_EXCEEDED`` warning;
* records marked not ``alive`` are dropped silently.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from notionast.config import NastConfig
from notionast.converter.block_transformer import BlockTransformer
from notionast.converter.diagnostics import emit_warning
from notionast.converter.records import records_from_record_map
from notionast.errors import CyclicStructureError, MissingRecordError, UnresolvedChildError
from notionast.models import ConversionWarning, Node, RawBlockRecord, WarningCode
from notionast.observability import NoopMetricsHook
from notionast.utils.urls import to_dash_id


class TreeAssembler:
    """Assemble an AST from a flat collection of records.

    Warnings raised while assembling are appended to the transformer's
    warning list, exposed here as :attr:`warnings`, so one list holds
    every non-fatal issue of the pass.

    Parameters
    ----------
    config:
        Pipeline configuration (``missing_child_policy``,
        ``cycle_policy``, ``expand_subpages``, ``max_depth``).
    transformer:
        Block transformer to use.  A new one is created when omitted.
    """

    def __init__(
        self,
        config: NastConfig | None = None,
        transformer: BlockTransformer | None = None,
    ) -> None:
        self._config = config or NastConfig()
        self._transformer = transformer or BlockTransformer(self._config)
        self._metrics = self._config.metrics or NoopMetricsHook()

    @property
    def warnings(self) -> list[ConversionWarning]:
        return self._transformer.warnings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assemble(
        self,
        root_id: str,
        records_by_id: Mapping[str, Any],
        child_ids_by_parent: Mapping[str, Sequence[str]] | None = None,
    ) -> Node:
        """Build the AST rooted at *root_id*.

        Parameters
        ----------
        root_id:
            Id of the root record, dash or no-dash form.
        records_by_id:
            ``id -> record``.  Values may be :class:`RawBlockRecord`
            instances, raw block dicts, or record-map entries; the service
            envelope (``{"block": {...}}``) is accepted as well.
        child_ids_by_parent:
            Explicit ``parent id -> child ids`` index.  When omitted, each
            record's ``content`` list is used.

        Returns
        -------
        Node
            The root node with every reachable descendant attached.

        Raises
        ------
        MissingRecordError
            If *root_id* is not in *records_by_id*.
        UnresolvedChildError
            If a declared child is missing and ``missing_child_policy`` is
            ``"raise"``.
        CyclicStructureError
            If a record lists an ancestor as a child and ``cycle_policy``
            is ``"raise"``.
        """
        records = records_from_record_map(records_by_id)
        index = _normalize_index(child_ids_by_parent)

        root_key = to_dash_id(root_id)
        root = records.get(root_key)
        if root is None:
            raise MissingRecordError(
                message=f"Root record not found: {root_id}",
                context={"block_id": root_id},
            )

        placed = {root_key}
        tree = self._build(
            root,
            records,
            index,
            ancestors=[root_key],
            placed=placed,
            is_root=True,
        )
        self._metrics.gauge(
            "notionast.assembled_blocks",
            len(placed),
            tags={"root_type": root.type},
        )
        return tree

    # ------------------------------------------------------------------
    # Internal: recursion
    # ------------------------------------------------------------------

    def _child_ids(
        self,
        record: RawBlockRecord,
        index: dict[str, list[str]] | None,
        is_root: bool,
    ) -> list[str]:
        if record.type == "page" and not is_root and not self._config.expand_subpages:
            return []
        if index is not None:
            return index.get(record.id, [])
        return list(record.content)

    def _build(
        self,
        record: RawBlockRecord,
        records: dict[str, RawBlockRecord],
        index: dict[str, list[str]] | None,
        *,
        ancestors: list[str],
        placed: set[str],
        is_root: bool = False,
    ) -> Node:
        children: list[Node] = []

        for raw_child_id in self._child_ids(record, index, is_root):
            child_id = to_dash_id(raw_child_id)

            if child_id in ancestors:
                self._on_cycle(record.id, child_id, ancestors)
                continue

            child = records.get(child_id)
            if child is None:
                self._on_missing_child(record.id, child_id)
                continue

            if not child.alive:
                continue

            if len(ancestors) > self._config.max_depth:
                emit_warning(
                    self.warnings,
                    WarningCode.DEPTH_LIMIT_EXCEEDED,
                    f"Block {child_id} is nested deeper than {self._config.max_depth} levels; skipping it",
                    metrics=self._metrics,
                    parent_id=record.id,
                    child_id=child_id,
                    max_depth=self._config.max_depth,
                )
                continue

            if child_id in placed:
                emit_warning(
                    self.warnings,
                    WarningCode.DUPLICATE_CHILD,
                    f"Block {child_id} already has a parent; skipping it under {record.id}",
                    metrics=self._metrics,
                    parent_id=record.id,
                    child_id=child_id,
                )
                continue

            placed.add(child_id)
            ancestors.append(child_id)
            try:
                children.append(
                    self._build(child, records, index, ancestors=ancestors, placed=placed)
                )
            finally:
                ancestors.pop()

        return self._transformer.transform(record, children, is_root=is_root)

    def _on_missing_child(self, parent_id: str, child_id: str) -> None:
        if self._config.missing_child_policy == "raise":
            raise UnresolvedChildError(
                message=f"Child record not found: {child_id} (parent {parent_id})",
                context={"parent_id": parent_id, "child_id": child_id},
            )
        emit_warning(
            self.warnings,
            WarningCode.UNRESOLVED_CHILD,
            f"Child record not found: {child_id}",
            metrics=self._metrics,
            parent_id=parent_id,
            child_id=child_id,
        )

    def _on_cycle(self, parent_id: str, child_id: str, ancestors: list[str]) -> None:
        if self._config.cycle_policy == "raise":
            raise CyclicStructureError(
                message=f"Block {parent_id} lists its ancestor {child_id} as a child",
                context={
                    "parent_id": parent_id,
                    "child_id": child_id,
                    "path": list(ancestors),
                },
            )
        emit_warning(
            self.warnings,
            WarningCode.CYCLIC_STRUCTURE,
            f"Skipping cyclic child {child_id} of {parent_id}",
            metrics=self._metrics,
            parent_id=parent_id,
            child_id=child_id,
            path=list(ancestors),
        )


def _normalize_index(
    child_ids_by_parent: Mapping[str, Sequence[str]] | None,
) -> dict[str, list[str]] | None:
    if child_ids_by_parent is None:
        return None
    return {
        to_dash_id(parent_id): [to_dash_id(c) for c in child_ids]
        for parent_id, child_ids in child_ids_by_parent.items()
    }
