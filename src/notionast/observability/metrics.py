"""Metrics hook protocol and no-op default implementation.

The pipeline emits a few counters, a timing and a gauge.  By default a
:class:`NoopMetricsHook` is used; callers can pass anything satisfying
:class:`MetricsHook` through :attr:`NastConfig.metrics` to route them to
their own backend.

Emitted metric names:

* ``notionast.blocks_transformed_total``   -- counter
* ``notionast.conversion_warnings_total``  -- counter, tagged with ``code``
* ``notionast.render_duration_ms``         -- timing
* ``notionast.assembled_blocks``           -- gauge, tagged with ``root_type``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
