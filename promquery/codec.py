"""
Wire codec for Prometheus values, timestamps, durations and dates.

Sample values travel as JSON strings so that NaN and the infinities survive;
timestamps travel as JSON numbers holding seconds since the epoch with a
fractional sub-second part.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Union

from .errors import InvalidNumber, InvalidTimestamp, MalformedPayload

NAN_TOKEN = "NaN"
POS_INF_TOKEN = "+Inf"
NEG_INF_TOKEN = "-Inf"

_SPECIAL_VALUES = {
    NAN_TOKEN: math.nan,
    POS_INF_TOKEN: math.inf,
    NEG_INF_TOKEN: -math.inf,
}

# Plain base-10 literal; keeps float() from accepting "nan", "infinity", "1_0" or padding
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

_DURATION_PART_RE = re.compile(r"(\d+)(ms|y|w|d|h|m|s)")

_DURATION_UNITS_MS = {
    "y": 1000 * 60 * 60 * 24 * 365,
    "w": 1000 * 60 * 60 * 24 * 7,
    "d": 1000 * 60 * 60 * 24,
    "h": 1000 * 60 * 60,
    "m": 1000 * 60,
    "s": 1000,
    "ms": 1,
}

# Trailing fraction and offset of an RFC 3339 timestamp, e.g. ".60602144+02:00"
_RFC3339_FRACTION_RE = re.compile(r"\.(\d+)(Z|z|[+-]\d{2}:\d{2})?$")

BUILD_DATE_FORMAT = "%Y%m%d-%H:%M:%S"

Number = Union[int, float]


def _is_number(raw) -> bool:
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def decode_value(raw: Union[str, Number]) -> float:
    """
    Decode a sample value.

    Args:
        raw: Wire value, normally a string such as "12.3", "NaN", "+Inf" or "-Inf".
             Bare JSON numbers are accepted too since Prometheus uses them in
             per-step query statistics.

    Returns:
        The value as a float

    Raises:
        InvalidNumber: string is neither a special token nor a decimal literal,
                       or a bare number that is not a finite float64
        MalformedPayload: value is not a string or number at all
    """
    if isinstance(raw, str):
        special = _SPECIAL_VALUES.get(raw)
        if special is not None:
            return special
        if not _DECIMAL_RE.fullmatch(raw):
            raise InvalidNumber(raw)
        value = float(raw)
        if math.isinf(value):
            # finite literal overflowing float64
            raise InvalidNumber(raw)
        return value

    if _is_number(raw):
        try:
            value = float(raw)
        except OverflowError:
            raise InvalidNumber(raw) from None
        if not math.isfinite(value):
            # NaN and infinities only come from the string tokens
            raise InvalidNumber(raw)
        return value

    raise MalformedPayload(f"sample value must be a string, got {type(raw).__name__}")


def encode_value(value: float) -> str:
    """Encode a sample value; special values map back to their exact tokens."""
    if math.isnan(value):
        return NAN_TOKEN
    if math.isinf(value):
        return POS_INF_TOKEN if value > 0 else NEG_INF_TOKEN
    return repr(float(value))


def decode_timestamp(raw: Number) -> float:
    """
    Decode a timestamp in seconds since the epoch.

    Raises:
        InvalidTimestamp: NaN or infinite number
        MalformedPayload: not a JSON number
    """
    if not _is_number(raw):
        raise MalformedPayload(f"timestamp must be a number, got {type(raw).__name__}")
    try:
        value = float(raw)
    except OverflowError:
        raise InvalidTimestamp(raw) from None
    if not math.isfinite(value):
        raise InvalidTimestamp(raw)
    return value


def encode_timestamp(timestamp: float) -> float:
    """Timestamps are already held in their wire representation."""
    if not math.isfinite(timestamp):
        raise InvalidTimestamp(timestamp)
    return timestamp


def timestamp_to_datetime(timestamp: float) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def parse_duration(raw: str) -> timedelta:
    """
    Parse a Prometheus duration string such as "15s", "1m", "1d12h10m" or "500ms".

    Raises:
        MalformedPayload: empty string or unknown unit
    """
    if not isinstance(raw, str) or not raw:
        raise MalformedPayload(f"invalid duration: {raw!r}")

    total_ms = 0
    pos = 0
    for match in _DURATION_PART_RE.finditer(raw):
        if match.start() != pos:
            break
        total_ms += int(match.group(1)) * _DURATION_UNITS_MS[match.group(2)]
        pos = match.end()

    if pos != len(raw):
        raise MalformedPayload(f"invalid duration: {raw!r}")
    return timedelta(milliseconds=total_ms)


def parse_rfc3339(raw: str) -> datetime:
    """
    Parse an RFC 3339 timestamp as emitted by Prometheus.

    Go writes nanosecond fractions ("2018-07-04T20:27:12.60602144+02:00"); they
    are truncated to microseconds before handing the string to datetime.
    """
    if not isinstance(raw, str):
        raise MalformedPayload(f"expected RFC 3339 string, got {type(raw).__name__}")

    def _trim(match):
        offset = match.group(2) or ""
        if offset in ("Z", "z"):
            offset = "+00:00"
        return "." + match.group(1)[:6].ljust(6, "0") + offset

    text = _RFC3339_FRACTION_RE.sub(_trim, raw)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedPayload(f"invalid RFC 3339 timestamp: {raw!r}") from None
    if parsed.tzinfo is None:
        raise MalformedPayload(f"RFC 3339 timestamp without offset: {raw!r}")
    return parsed


def parse_build_date(raw: str) -> datetime:
    """Parse the build date format of /status/buildinfo, e.g. "20191102-16:19:59"."""
    try:
        return datetime.strptime(raw, BUILD_DATE_FORMAT)
    except (TypeError, ValueError):
        raise MalformedPayload(f"invalid build date: {raw!r}") from None


def format_time(value: Union[Number, datetime, str]) -> str:
    """
    Render a request time parameter.

    Accepts epoch seconds, a datetime (naive values are taken as UTC) or a
    string that is already either epoch seconds or RFC 3339.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if _is_number(value):
        if not math.isfinite(value):
            raise ValueError(f"time must be finite: {value!r}")
        return repr(value) if isinstance(value, float) else str(value)
    if isinstance(value, str):
        if _DECIMAL_RE.fullmatch(value):
            return value
        try:
            parse_rfc3339(value)
        except MalformedPayload:
            raise ValueError(f"time must be epoch seconds or RFC 3339: {value!r}") from None
        return value
    raise ValueError(f"unsupported time value: {value!r}")


def format_duration(value: Union[Number, timedelta, str]) -> str:
    """
    Render a duration parameter (step, timeout).

    Numbers and timedeltas become float seconds; strings must be valid
    Prometheus durations or plain seconds.
    """
    if isinstance(value, timedelta):
        value = value.total_seconds()
    if _is_number(value):
        if value <= 0 or not math.isfinite(value):
            raise ValueError(f"duration must be positive: {value!r}")
        return repr(value) if isinstance(value, float) else str(value)
    if isinstance(value, str):
        if _DECIMAL_RE.fullmatch(value):
            return value
        try:
            parse_duration(value)
        except MalformedPayload:
            raise ValueError(f"invalid duration: {value!r}") from None
        return value
    raise ValueError(f"unsupported duration value: {value!r}")
