"""Shared test fixtures for the notionast test suite."""

from __future__ import annotations

from typing import Any

import pytest

from notionast.config import NastConfig
from notionast.converter.block_transformer import BlockTransformer
from notionast.converter.html_renderer import HtmlRenderer
from notionast.converter.tree_assembler import TreeAssembler

PAGE_ID = "0eeee000-cccc-bbbb-aaaa-123450000000"


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})


def make_block(block_id: str, block_type: str, *, title=None, content=None, **extra) -> dict:
    """Build a raw block value as the service returns it."""
    block: dict[str, Any] = {"id": block_id, "type": block_type}
    if title is not None:
        block["properties"] = {"title": title}
    if content is not None:
        block["content"] = list(content)
    for key, value in extra.items():
        if key in ("properties", "format") and key in block:
            block[key].update(value)
        else:
            block[key] = value
    return block


def make_records(*blocks: dict) -> dict[str, dict]:
    """Key raw block values by id."""
    return {block["id"]: block for block in blocks}


@pytest.fixture
def config() -> NastConfig:
    """Default configuration without syntax highlighting."""
    return NastConfig(highlight_code=False)


@pytest.fixture
def transformer(config: NastConfig) -> BlockTransformer:
    return BlockTransformer(config)


@pytest.fixture
def assembler(config: NastConfig) -> TreeAssembler:
    return TreeAssembler(config)


@pytest.fixture
def renderer(config: NastConfig) -> HtmlRenderer:
    return HtmlRenderer(config)


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()
