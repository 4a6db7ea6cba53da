"""
Query parameter objects.

InstantQuery and RangeQuery hold the optional parameters of /query and
/query_range as named fields with explicit defaults and render the request
path and parameter list.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple, Union

from .codec import format_duration, format_time

TimeValue = Union[int, float, datetime, str]
DurationValue = Union[int, float, timedelta, str]

QUERY_PATH = "/query"
QUERY_RANGE_PATH = "/query_range"


def _common_params(timeout, limit, stats) -> List[Tuple[str, str]]:
    params = []
    if timeout is not None:
        params.append(("timeout", format_duration(timeout)))
    if limit is not None:
        if limit < 0:
            raise ValueError(f"limit must not be negative: {limit}")
        params.append(("limit", str(limit)))
    if stats:
        params.append(("stats", "all"))
    return params


@dataclass(frozen=True)
class InstantQuery:
    """Evaluate an expression at a single point in time (server time if omitted)."""
    query: str
    time: Optional[TimeValue] = None
    timeout: Optional[DurationValue] = None
    limit: Optional[int] = None
    stats: bool = False

    path = QUERY_PATH

    def to_params(self) -> List[Tuple[str, str]]:
        params = [("query", str(self.query))]
        if self.time is not None:
            params.append(("time", format_time(self.time)))
        return params + _common_params(self.timeout, self.limit, self.stats)


@dataclass(frozen=True)
class RangeQuery:
    """Evaluate an expression over [start, end] at the given resolution step."""
    query: str
    start: TimeValue
    end: TimeValue
    step: DurationValue
    timeout: Optional[DurationValue] = None
    limit: Optional[int] = None
    stats: bool = False

    path = QUERY_RANGE_PATH

    def to_params(self) -> List[Tuple[str, str]]:
        params = [
            ("query", str(self.query)),
            ("start", format_time(self.start)),
            ("end", format_time(self.end)),
            ("step", format_duration(self.step)),
        ]
        return params + _common_params(self.timeout, self.limit, self.stats)
