"""
Exception hierarchy for promquery.

Every failure surfaced by the library derives from PromQueryError so callers
can catch broadly or match on the concrete type. None of them inherit from
ValueError, so a DecodeError raised inside a pydantic validator reaches the
caller unwrapped.
"""

from enum import Enum
from typing import Optional


class PromQueryError(Exception):
    """Base class for all promquery errors."""


class TransportError(PromQueryError):
    """Network or connection failure reported by the HTTP layer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedContentType(PromQueryError):
    """Response media type is not JSON; the body was not parsed."""

    def __init__(self, content_type: Optional[str], status_code: Optional[int] = None):
        super().__init__(f"unexpected content type: {content_type!r}")
        self.content_type = content_type
        self.status_code = status_code


class DecodeError(PromQueryError):
    """Response body could not be decoded into the result model."""


class MalformedPayload(DecodeError):
    """JSON structure does not match the expected shape."""


class UnknownResultType(DecodeError):
    """resultType discriminant outside vector/matrix/scalar."""

    def __init__(self, result_type):
        super().__init__(f"unknown result type: {result_type!r}")
        self.result_type = result_type


class InvalidNumber(DecodeError):
    """Sample value is not a decimal float or one of the special tokens."""

    def __init__(self, raw):
        super().__init__(f"invalid sample value: {raw!r}")
        self.raw = raw


class InvalidTimestamp(DecodeError):
    """Timestamp is not a finite number of seconds."""

    def __init__(self, raw):
        super().__init__(f"invalid timestamp: {raw!r}")
        self.raw = raw


class EmptySeriesSelector(PromQueryError):
    """The series endpoint needs at least one selector."""

    def __init__(self):
        super().__init__("at least one series selector must be provided")


class InvalidSelector(PromQueryError):
    """Selector cannot be rendered (reserved metric name or nothing to match)."""


class ErrorType(str, Enum):
    """errorType values documented for the Prometheus HTTP API."""

    TIMEOUT = "timeout"
    CANCELED = "canceled"
    EXECUTION = "execution"
    BAD_DATA = "bad_data"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"


class ApiError(PromQueryError):
    """
    The server answered with a "status": "error" envelope.

    error_type and message are kept verbatim. kind maps the error type onto
    ErrorType and is None for values this library does not know, so a newer
    server never turns an API error into a decode failure.
    """

    def __init__(self, error_type: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{error_type}: {message}")
        self.error_type = error_type
        self.message = message
        self.status_code = status_code

    @property
    def kind(self) -> Optional[ErrorType]:
        try:
            return ErrorType(self.error_type)
        except ValueError:
            return None

    def is_timeout(self) -> bool:
        return self.kind is ErrorType.TIMEOUT

    def is_canceled(self) -> bool:
        return self.kind is ErrorType.CANCELED

    def is_execution(self) -> bool:
        return self.kind is ErrorType.EXECUTION

    def is_bad_data(self) -> bool:
        return self.kind is ErrorType.BAD_DATA

    def is_internal(self) -> bool:
        return self.kind is ErrorType.INTERNAL

    def is_unavailable(self) -> bool:
        return self.kind is ErrorType.UNAVAILABLE

    def is_not_found(self) -> bool:
        return self.kind is ErrorType.NOT_FOUND
