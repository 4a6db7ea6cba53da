"""
Query result data model.

A query answers with one of three shapes, selected by the resultType
discriminant of the data object:

- vector: instant samples, one per series   {"metric": {...}, "value": [ts, "v"]}
- matrix: sample series, one per series     {"metric": {...}, "values": [[ts, "v"], ...]}
- scalar: a bare sample                     [ts, "v"]

Decoding is strict: an unknown discriminant raises UnknownResultType and a
payload that does not fit the announced shape raises MalformedPayload. Matrix
samples keep the order the server sent them in; nothing is re-sorted.
"""

import logging
from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BeforeValidator, Field, model_serializer

from .base import LabelSet, WireModel
from .codec import decode_timestamp, decode_value, encode_value, timestamp_to_datetime
from .errors import MalformedPayload, UnknownResultType
from .states import ResultType

logger = logging.getLogger("promquery.results")


class Sample(WireModel):
    """A (timestamp, value) pair. Serializes back to its wire form [ts, "value"]."""

    timestamp: float
    value: float

    @property
    def time(self) -> datetime:
        return timestamp_to_datetime(self.timestamp)

    @classmethod
    def from_wire(cls, raw: Any) -> "Sample":
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise MalformedPayload(f"sample must be a [timestamp, value] pair, got {raw!r}")
        return cls(timestamp=decode_timestamp(raw[0]), value=decode_value(raw[1]))

    @model_serializer
    def serialize_wire(self) -> List[Any]:
        return [self.timestamp, encode_value(self.value)]


WireSample = Annotated[Sample, BeforeValidator(Sample.from_wire)]


class InstantVector(WireModel):
    """One series of an instant vector: its labels and a single sample."""

    metric: LabelSet
    sample: WireSample = Field(alias="value")


class RangeVector(WireModel):
    """One series of a range vector: its labels and samples in server order."""

    metric: LabelSet
    samples: Tuple[WireSample, ...] = Field(alias="values")


class QueryData(WireModel):
    """
    Base of the result variants.

    The as_* accessors return a read-only view (tuple or frozen Sample) and the
    into_* accessors return a value the caller owns (fresh list). Both return
    None when the stored variant is a different one.
    """

    result_type: ClassVar[ResultType]

    def is_vector(self) -> bool:
        return self.result_type is ResultType.VECTOR

    def is_matrix(self) -> bool:
        return self.result_type is ResultType.MATRIX

    def is_scalar(self) -> bool:
        return self.result_type is ResultType.SCALAR

    def is_empty(self) -> bool:
        return False

    def as_vector(self) -> Optional[Tuple[InstantVector, ...]]:
        return None

    def as_matrix(self) -> Optional[Tuple[RangeVector, ...]]:
        return None

    def as_scalar(self) -> Optional[Sample]:
        return None

    def into_vector(self) -> Optional[List[InstantVector]]:
        view = self.as_vector()
        return list(view) if view is not None else None

    def into_matrix(self) -> Optional[List[RangeVector]]:
        view = self.as_matrix()
        return list(view) if view is not None else None

    def into_scalar(self) -> Optional[Sample]:
        return self.as_scalar()

    def to_wire(self) -> Dict[str, Any]:
        return {
            "resultType": self.result_type.value,
            "result": self.model_dump(mode="json", by_alias=True)["result"],
        }

    def to_frame(self):
        """Convert to a long-format pandas DataFrame (see promquery.frames)."""
        from .frames import data_to_frame

        return data_to_frame(self)


class VectorData(QueryData):
    result_type: ClassVar[ResultType] = ResultType.VECTOR

    result: Tuple[InstantVector, ...]

    def is_empty(self) -> bool:
        return not self.result

    def as_vector(self) -> Optional[Tuple[InstantVector, ...]]:
        return self.result


class MatrixData(QueryData):
    result_type: ClassVar[ResultType] = ResultType.MATRIX

    result: Tuple[RangeVector, ...]

    def is_empty(self) -> bool:
        return not self.result

    def as_matrix(self) -> Optional[Tuple[RangeVector, ...]]:
        return self.result


class ScalarData(QueryData):
    result_type: ClassVar[ResultType] = ResultType.SCALAR

    result: WireSample

    def as_scalar(self) -> Optional[Sample]:
        return self.result


_VARIANTS = {
    ResultType.VECTOR.value: VectorData,
    ResultType.MATRIX.value: MatrixData,
    ResultType.SCALAR.value: ScalarData,
}


def decode_query_data(payload: Any) -> QueryData:
    """
    Decode a {"resultType": ..., "result": ...} object into its variant.

    Raises:
        UnknownResultType: resultType is not vector, matrix or scalar
        MalformedPayload: missing fields or result shape not matching resultType
        InvalidNumber / InvalidTimestamp: a sample failed numeric decoding
    """
    if not isinstance(payload, dict):
        raise MalformedPayload(f"query data must be an object, got {type(payload).__name__}")
    if "resultType" not in payload or "result" not in payload:
        raise MalformedPayload("query data needs both resultType and result")

    raw_type = payload["resultType"]
    if not isinstance(raw_type, str):
        raise MalformedPayload(f"resultType must be a string, got {type(raw_type).__name__}")

    variant = _VARIANTS.get(raw_type)
    if variant is None:
        raise UnknownResultType(raw_type)

    data = variant.decode({"result": payload["result"]})
    logger.debug(f"Decoded {raw_type} result")
    return data


class Timings(WireModel):
    eval_total_time: float
    result_sort_time: float
    query_preparation_time: float
    inner_eval_time: float
    exec_queue_time: float
    exec_total_time: float


class SampleStats(WireModel):
    total_queryable_samples_per_step: Optional[Tuple[WireSample, ...]] = None
    total_queryable_samples: int
    peak_samples: int


class Stats(WireModel):
    """Query execution statistics, present when the query asked for stats."""

    timings: Timings
    samples: SampleStats


class QueryResponse:
    """
    Decoded answer to an instant or range query.

    Holds the result variant, the optional execution statistics and whatever
    warnings/infos the server attached.
    """

    __slots__ = ("_data", "_stats", "_warnings", "_infos")

    def __init__(
        self,
        data: QueryData,
        stats: Optional[Stats] = None,
        warnings: Tuple[str, ...] = (),
        infos: Tuple[str, ...] = (),
    ):
        self._data = data
        self._stats = stats
        self._warnings = tuple(warnings)
        self._infos = tuple(infos)

    @property
    def data(self) -> QueryData:
        return self._data

    @property
    def stats(self) -> Optional[Stats]:
        return self._stats

    @property
    def warnings(self) -> Tuple[str, ...]:
        return self._warnings

    @property
    def infos(self) -> Tuple[str, ...]:
        return self._infos

    def into_data(self) -> QueryData:
        return self._data

    def to_wire(self) -> Dict[str, Any]:
        wire = self._data.to_wire()
        if self._stats is not None:
            wire["stats"] = self._stats.to_wire()
        return wire

    def __eq__(self, other) -> bool:
        if not isinstance(other, QueryResponse):
            return NotImplemented
        return (self._data, self._stats, self._warnings, self._infos) == (
            other._data, other._stats, other._warnings, other._infos
        )

    def __repr__(self) -> str:
        return f"QueryResponse(data={self._data!r}, stats={self._stats!r})"


def decode_query_response(
    data: Any,
    stats: Any = None,
    warnings: Optional[List[str]] = None,
    infos: Optional[List[str]] = None,
) -> QueryResponse:
    """
    Build a QueryResponse from the "data" object of a success envelope.

    Prometheus nests "stats" inside "data"; a stats object passed separately
    (from next to "data") is used when the nested one is absent.
    """
    query_data = decode_query_data(data)

    raw_stats = data.get("stats", stats)
    decoded_stats = Stats.decode(raw_stats) if raw_stats is not None else None

    return QueryResponse(
        query_data,
        stats=decoded_stats,
        warnings=tuple(warnings or ()),
        infos=tuple(infos or ()),
    )
