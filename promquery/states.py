"""
Closed-set enumerations used on the wire.

Each member's value is its exact wire string, so the Enum itself is the
bidirectional mapping table. from_wire() refuses anything outside the set.
"""

from enum import Enum

from .errors import MalformedPayload


class WireEnum(str, Enum):
    """str-valued Enum with strict wire decoding."""

    @classmethod
    def from_wire(cls, raw: str) -> "WireEnum":
        if isinstance(raw, cls):
            return raw
        for member in cls:
            if member.value == raw:
                return member
        raise MalformedPayload(f"unknown {cls.__name__} value: {raw!r}")

    def to_wire(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class ResultType(WireEnum):
    VECTOR = "vector"
    MATRIX = "matrix"
    SCALAR = "scalar"


class RuleHealth(WireEnum):
    GOOD = "ok"
    BAD = "err"
    UNKNOWN = "unknown"

    def is_good(self) -> bool:
        return self is RuleHealth.GOOD

    def is_bad(self) -> bool:
        return self is RuleHealth.BAD

    def is_unknown(self) -> bool:
        return self is RuleHealth.UNKNOWN


class AlertState(WireEnum):
    INACTIVE = "inactive"
    PENDING = "pending"
    FIRING = "firing"

    def is_inactive(self) -> bool:
        return self is AlertState.INACTIVE

    def is_pending(self) -> bool:
        return self is AlertState.PENDING

    def is_firing(self) -> bool:
        return self is AlertState.FIRING


class TargetHealth(WireEnum):
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"

    def is_up(self) -> bool:
        return self is TargetHealth.UP

    def is_down(self) -> bool:
        return self is TargetHealth.DOWN

    def is_unknown(self) -> bool:
        return self is TargetHealth.UNKNOWN


class MetricType(WireEnum):
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    GAUGE_HISTOGRAM = "gaugehistogram"
    SUMMARY = "summary"
    INFO = "info"
    STATESET = "stateset"
    UNKNOWN = "unknown"

    def is_counter(self) -> bool:
        return self is MetricType.COUNTER

    def is_gauge(self) -> bool:
        return self is MetricType.GAUGE

    def is_histogram(self) -> bool:
        return self is MetricType.HISTOGRAM

    def is_gauge_histogram(self) -> bool:
        return self is MetricType.GAUGE_HISTOGRAM

    def is_summary(self) -> bool:
        return self is MetricType.SUMMARY

    def is_info(self) -> bool:
        return self is MetricType.INFO

    def is_stateset(self) -> bool:
        return self is MetricType.STATESET

    def is_unknown(self) -> bool:
        return self is MetricType.UNKNOWN


class WalReplayState(WireEnum):
    WAITING = "waiting"
    IN_PROGRESS = "in progress"
    DONE = "done"

    def is_waiting(self) -> bool:
        return self is WalReplayState.WAITING

    def is_in_progress(self) -> bool:
        return self is WalReplayState.IN_PROGRESS

    def is_done(self) -> bool:
        return self is WalReplayState.DONE


# Request-side filters

class TargetState(WireEnum):
    ACTIVE = "active"
    DROPPED = "dropped"
    ANY = "any"


class RuleType(WireEnum):
    ALERT = "alert"
    RECORD = "record"
