"""Error hierarchy for mdblocks.

Every public error class inherits from :class:`MdBlocksError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and
an optional ``cause`` (chained exception).

Only failures at a boundary are raised: decoding an externally supplied
payload and dispatching work to a worker.  Recognition and classification
problems inside a decomposition are recovered where they happen.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    DECODE_ERROR = "DECODE_ERROR"
    WORKER_ERROR = "WORKER_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class MdBlocksError(Exception):
    """Base exception for all mdblocks errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
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
# Boundary errors
# ---------------------------------------------------------------------------

class MdBlocksDecodeError(MdBlocksError):
    """A serialized block payload could not be decoded.

    Context keys: ``field`` (the missing or malformed key), ``index``
    (position in the block list, when decoding a list).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class MdBlocksWorkerError(MdBlocksError):
    """Decomposition on a worker failed; no partial result is returned.

    Context keys: ``source_length``, ``executor``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.WORKER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
