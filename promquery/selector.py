"""
Time series selectors for the match[] parameter of the series, labels and
metadata endpoints.

    Selector().metric("up").eq("job", "node").regex("instance", "web-.*")
    -> up{job="node",instance=~"web-.*"}
"""

from typing import List, Optional, Tuple

from .errors import InvalidSelector

# Keywords that PromQL would not read as a metric name
RESERVED_METRIC_NAMES = frozenset({"bool", "on", "ignoring", "group_left", "group_right"})

EQUAL = "="
NOT_EQUAL = "!="
REGEX_MATCH = "=~"
REGEX_NO_MATCH = "!~"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


class Selector:
    """Fluent builder for a vector selector. Each call returns a new Selector."""

    def __init__(self, metric: Optional[str] = None, matchers: Tuple[Tuple[str, str, str], ...] = ()):
        self._metric = metric
        self._matchers = tuple(matchers)

    def metric(self, name: str) -> "Selector":
        if name in RESERVED_METRIC_NAMES:
            raise InvalidSelector(f"{name!r} is a reserved keyword and cannot be a metric name")
        return Selector(name, self._matchers)

    def _with(self, label: str, op: str, value: str) -> "Selector":
        return Selector(self._metric, self._matchers + ((label, op, value),))

    def eq(self, label: str, value: str) -> "Selector":
        return self._with(label, EQUAL, value)

    def ne(self, label: str, value: str) -> "Selector":
        return self._with(label, NOT_EQUAL, value)

    def regex(self, label: str, value: str) -> "Selector":
        return self._with(label, REGEX_MATCH, value)

    def not_regex(self, label: str, value: str) -> "Selector":
        return self._with(label, REGEX_NO_MATCH, value)

    @property
    def matchers(self) -> List[Tuple[str, str, str]]:
        return list(self._matchers)

    def __str__(self) -> str:
        if self._metric is None and not self._matchers:
            raise InvalidSelector("selector needs a metric name or at least one label matcher")
        labels = ",".join(f"{label}{op}{_quote(value)}" for label, op, value in self._matchers)
        if self._metric is None:
            return "{" + labels + "}"
        if not labels:
            return self._metric
        return f"{self._metric}{{{labels}}}"

    def __repr__(self) -> str:
        return f"Selector(metric={self._metric!r}, matchers={self._matchers!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Selector):
            return NotImplemented
        return (self._metric, self._matchers) == (other._metric, other._matchers)

    def __hash__(self) -> int:
        return hash((self._metric, self._matchers))
