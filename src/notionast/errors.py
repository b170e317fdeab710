"""Error hierarchy for notionast.

Every public error class inherits from :class:`NastError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Only structural problems raise.  Malformed styling data and unknown block
types never do; they are reported as :class:`~notionast.models.ConversionWarning`
entries instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    MISSING_RECORD = "MISSING_RECORD"
    UNRESOLVED_CHILD = "UNRESOLVED_CHILD"
    CYCLIC_STRUCTURE = "CYCLIC_STRUCTURE"
    STRUCTURE_ERROR = "STRUCTURE_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NastError(Exception):
    """Base exception for all notionast errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Structural errors (tree assembly)
# ---------------------------------------------------------------------------

class NastStructureError(NastError):
    """Base class for errors in the parent/child structure of a record set.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.STRUCTURE_ERROR,
        message: str = "Structure error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class MissingRecordError(NastStructureError):
    """The root record is not present in the record set.

    Context keys: ``block_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MISSING_RECORD,
            message=message,
            context=context,
            cause=cause,
        )


class UnresolvedChildError(NastStructureError):
    """A record declares a child id that is not in the record set and the
    configured ``missing_child_policy`` is ``"raise"``.

    Context keys: ``parent_id``, ``child_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNRESOLVED_CHILD,
            message=message,
            context=context,
            cause=cause,
        )


class CyclicStructureError(NastStructureError):
    """A record lists one of its own ancestors as a child.

    Context keys: ``parent_id``, ``child_id``, ``path`` (ancestor ids from
    the root down to the offending parent).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CYCLIC_STRUCTURE,
            message=message,
            context=context,
            cause=cause,
        )
