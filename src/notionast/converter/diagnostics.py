"""The non-fatal warning channel.

A warning is appended to the caller's list, logged at ``WARNING`` through
the structured logger and counted on the metrics hook.  It never raises.
"""

from __future__ import annotations

from typing import Any

from notionast.models import ConversionWarning, WarningCode
from notionast.observability import NoopMetricsHook, get_logger

log = get_logger("notionast.converter")

_NOOP_METRICS = NoopMetricsHook()


def emit_warning(
    sink: list[ConversionWarning] | None,
    code: WarningCode,
    message: str,
    *,
    metrics: Any | None = None,
    **context: Any,
) -> ConversionWarning:
    """Record a :class:`ConversionWarning` and return it.

    Parameters
    ----------
    sink:
        List the warning is appended to; ``None`` only logs it.
    code:
        Warning category.
    message:
        Human-readable description.
    metrics:
        Optional :class:`~notionast.observability.MetricsHook`.
    **context:
        Diagnostic fields stored on the warning and merged into the log
        record.
    """
    warning = ConversionWarning(code=code, message=message, context=context)
    if sink is not None:
        sink.append(warning)
    log.warning(
        message,
        extra={"extra_fields": {"code": code.value, **context}},
    )
    (metrics or _NOOP_METRICS).increment(
        "notionast.conversion_warnings_total",
        tags={"code": code.value},
    )
    return warning
