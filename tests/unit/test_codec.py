"""Unit tests for the wire codec

Tests value/timestamp decoding and the request-side formatters:
- special tokens NaN, +Inf, -Inf
- rejection of non-decimal strings
- durations, RFC 3339 and build dates
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from promquery.codec import (
    decode_timestamp,
    decode_value,
    encode_timestamp,
    encode_value,
    format_duration,
    format_time,
    parse_build_date,
    parse_duration,
    parse_rfc3339,
    timestamp_to_datetime,
)
from promquery.errors import DecodeError, InvalidNumber, InvalidTimestamp, MalformedPayload


class TestDecodeValue:
    """Test sample value decoding"""

    def test_special_tokens(self):
        assert math.isnan(decode_value("NaN"))
        assert decode_value("+Inf") == math.inf
        assert decode_value("-Inf") == -math.inf

    @pytest.mark.parametrize("raw,expected", [
        ("1", 1.0),
        ("0", 0.0),
        ("-3.5", -3.5),
        ("12.3", 12.3),
        ("1e+00", 1.0),
        ("2.5E-3", 0.0025),
        (".5", 0.5),
        ("+7", 7.0),
    ])
    def test_decimal_literals(self, raw, expected):
        assert decode_value(raw) == expected

    @pytest.mark.parametrize("raw", [
        "not-a-number-token",
        "nan",
        "inf",
        "Infinity",
        " 1",
        "1 ",
        "",
        "1_000",
        "0x10",
        "1\n",
    ])
    def test_invalid_strings(self, raw):
        with pytest.raises(InvalidNumber) as exc_info:
            decode_value(raw)
        assert exc_info.value.raw == raw

    def test_overflowing_literal_is_invalid(self):
        with pytest.raises(InvalidNumber):
            decode_value("1e999")

    def test_bare_numbers_accepted(self):
        assert decode_value(4) == 4.0
        assert decode_value(2.5) == 2.5

    def test_huge_bare_integer_is_invalid(self):
        raw = int("1" * 400)
        with pytest.raises(InvalidNumber) as exc_info:
            decode_value(raw)
        assert exc_info.value.raw == raw

    @pytest.mark.parametrize("raw", [math.inf, -math.inf, math.nan])
    def test_non_finite_bare_numbers_are_invalid(self, raw):
        with pytest.raises(InvalidNumber):
            decode_value(raw)

    @pytest.mark.parametrize("raw", [None, True, [], {}])
    def test_wrong_json_type(self, raw):
        with pytest.raises(MalformedPayload):
            decode_value(raw)

    def test_decode_errors_are_not_value_errors(self):
        """They must reach callers unwrapped from pydantic validators"""
        assert issubclass(InvalidNumber, DecodeError)
        assert not issubclass(InvalidNumber, ValueError)


class TestEncodeValue:
    """Test sample value encoding"""

    def test_special_values(self):
        assert encode_value(math.nan) == "NaN"
        assert encode_value(math.inf) == "+Inf"
        assert encode_value(-math.inf) == "-Inf"

    @pytest.mark.parametrize("value", [0.0, 1.0, -3.5, 12.3, 1e-300, 1.7976931348623157e308])
    def test_finite_values_survive(self, value):
        assert decode_value(encode_value(value)) == value

    def test_tokens_survive(self):
        for token in ("NaN", "+Inf", "-Inf"):
            assert encode_value(decode_value(token)) == token


class TestTimestamps:
    """Test timestamp decoding"""

    def test_fractional_seconds(self):
        assert decode_timestamp(1435781451.781) == 1435781451.781
        assert decode_timestamp(1659268100) == 1659268100.0

    @pytest.mark.parametrize("raw", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, raw):
        with pytest.raises(InvalidTimestamp):
            decode_timestamp(raw)

    @pytest.mark.parametrize("raw", ["1435781451.781", None, False])
    def test_non_numbers_rejected(self, raw):
        with pytest.raises(MalformedPayload):
            decode_timestamp(raw)

    def test_encode_is_identity(self):
        assert encode_timestamp(1435781451.781) == 1435781451.781

    def test_encode_rejects_nan(self):
        with pytest.raises(InvalidTimestamp):
            encode_timestamp(math.nan)

    def test_to_datetime_is_utc(self):
        dt = timestamp_to_datetime(0.5)
        assert dt.tzinfo is timezone.utc
        assert dt == datetime(1970, 1, 1, 0, 0, 0, 500000, tzinfo=timezone.utc)


class TestParseDuration:
    """Test Prometheus duration strings"""

    @pytest.mark.parametrize("raw,expected", [
        ("15s", timedelta(seconds=15)),
        ("1m", timedelta(minutes=1)),
        ("2h", timedelta(hours=2)),
        ("1d12h10m", timedelta(days=1, hours=12, minutes=10)),
        ("500ms", timedelta(milliseconds=500)),
        ("1m30s500ms", timedelta(minutes=1, seconds=30, milliseconds=500)),
        ("2w", timedelta(weeks=2)),
        ("1y", timedelta(days=365)),
        ("0s", timedelta(0)),
    ])
    def test_valid(self, raw, expected):
        assert parse_duration(raw) == expected

    @pytest.mark.parametrize("raw", ["", "15", "s", "1x", "1.5s", "15s ", "-1s", None])
    def test_invalid(self, raw):
        with pytest.raises(MalformedPayload):
            parse_duration(raw)


class TestParseRfc3339:
    """Test RFC 3339 timestamps as written by Prometheus"""

    def test_utc_suffix(self):
        dt = parse_rfc3339("2018-07-04T20:27:12Z")
        assert dt == datetime(2018, 7, 4, 20, 27, 12, tzinfo=timezone.utc)

    def test_nanosecond_fraction_truncated(self):
        dt = parse_rfc3339("2018-07-04T20:27:12.60602144+02:00")
        assert dt.microsecond == 606021
        assert dt.utcoffset() == timedelta(hours=2)

    def test_nanosecond_fraction_with_z(self):
        dt = parse_rfc3339("2019-11-02T17:23:59.301361365Z")
        assert dt == datetime(2019, 11, 2, 17, 23, 59, 301361, tzinfo=timezone.utc)

    def test_short_fraction(self):
        assert parse_rfc3339("2020-01-01T00:00:00.5Z").microsecond == 500000

    @pytest.mark.parametrize("raw", ["2018-07-04T20:27:12", "yesterday", "", 1530735432])
    def test_invalid(self, raw):
        with pytest.raises(MalformedPayload):
            parse_rfc3339(raw)


class TestParseBuildDate:
    """Test /status/buildinfo build dates"""

    def test_valid(self):
        assert parse_build_date("20191102-16:19:59") == datetime(2019, 11, 2, 16, 19, 59)

    @pytest.mark.parametrize("raw", ["2019-11-02", "", None])
    def test_invalid(self, raw):
        with pytest.raises(MalformedPayload):
            parse_build_date(raw)


class TestFormatTime:
    """Test request time parameters"""

    def test_numbers(self):
        assert format_time(1435781451.781) == "1435781451.781"
        assert format_time(1700000000) == "1700000000"

    def test_aware_datetime(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert format_time(dt) == "2024-01-02T03:04:05+00:00"

    def test_naive_datetime_taken_as_utc(self):
        assert format_time(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05+00:00"

    def test_strings_passed_through(self):
        assert format_time("1700000000.5") == "1700000000.5"
        assert format_time("2024-01-02T03:04:05Z") == "2024-01-02T03:04:05Z"

    @pytest.mark.parametrize("raw", ["now", math.nan, None, [1]])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            format_time(raw)


class TestFormatDuration:
    """Test step and timeout parameters"""

    def test_values(self):
        assert format_duration(15) == "15"
        assert format_duration(0.5) == "0.5"
        assert format_duration(timedelta(minutes=1)) == "60.0"
        assert format_duration("1m") == "1m"
        assert format_duration("30") == "30"

    @pytest.mark.parametrize("raw", [0, -5, "soon", timedelta(0), None])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            format_duration(raw)
