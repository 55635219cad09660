"""Local error taxonomy for fftsearch.

The search core is compute-only and must not depend on any host runtime. We
keep a small, stable error enum/envelope that downstream applications can
translate into their own error formats, plus the two exception classes the
core raises on its own.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    INVALID_DATA = "INVALID_DATA"
    INVALID_CANDIDATE_COUNT = "INVALID_CANDIDATE_COUNT"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ErrorType
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


def make_error(error_type: ErrorType, message: str, **context: Any) -> ErrorEnvelope:
    return ErrorEnvelope(type=error_type, message=message, context=dict(context))


class SearchResourceError(MemoryError):
    """Raised when a working buffer or candidate list cannot be allocated.

    A search cannot proceed without its working memory, so this is never
    recovered from inside the library.

    Attributes:
        what: Short name of the buffer that failed to allocate.
        size: Requested number of elements.
    """

    def __init__(self, what: str, size: int) -> None:
        self.what = what
        self.size = int(size)
        super().__init__(f"Unable to allocate {what} of {self.size} elements")


class InvalidCandidateCountError(ValueError):
    """Raised when a candidate count is zero or negative where output is required."""

    def __init__(self, count: int, where: str) -> None:
        self.count = int(count)
        self.where = where
        super().__init__(f"{where} requires at least 1 candidate (got {self.count})")


def error_envelope_for(exc: BaseException) -> ErrorEnvelope:
    """Translate an exception raised by the library into an `ErrorEnvelope`."""
    if isinstance(exc, InvalidCandidateCountError):
        return make_error(
            ErrorType.INVALID_CANDIDATE_COUNT, str(exc), count=exc.count, where=exc.where
        )
    if isinstance(exc, SearchResourceError):
        return make_error(ErrorType.RESOURCE_EXHAUSTED, str(exc), what=exc.what, size=exc.size)
    if isinstance(exc, ValueError):
        return make_error(ErrorType.INVALID_DATA, str(exc))
    return make_error(ErrorType.INTERNAL_ERROR, f"{type(exc).__name__}: {exc}")
