"""
pandas conversion of query results.

Results become long-format DataFrames: one row per sample, one column per
label, plus "timestamp" (UTC datetimes) and "value". Row order follows the
result order, so matrix samples stay in the order the server sent them.
"""

from typing import Iterable, List

import pandas as pd

from .results import InstantVector, MatrixData, QueryData, RangeVector, ScalarData, VectorData

VALUE_COLUMNS = ["timestamp", "value"]


def _build_frame(rows: List[dict]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=VALUE_COLUMNS)

    df = pd.DataFrame(rows)
    df["timestamp"] = pd.to_datetime(df["timestamp"], unit="s", utc=True)

    # Labels first (sorted for a stable layout), sample columns last
    label_columns = sorted(c for c in df.columns if c not in VALUE_COLUMNS)
    return df[label_columns + VALUE_COLUMNS]


def vector_to_frame(vector: Iterable[InstantVector]) -> pd.DataFrame:
    """One row per series."""
    rows = [
        {**entry.metric, "timestamp": entry.sample.timestamp, "value": entry.sample.value}
        for entry in vector
    ]
    return _build_frame(rows)


def matrix_to_frame(matrix: Iterable[RangeVector]) -> pd.DataFrame:
    """One row per sample, series after series."""
    rows = [
        {**series.metric, "timestamp": sample.timestamp, "value": sample.value}
        for series in matrix
        for sample in series.samples
    ]
    return _build_frame(rows)


def data_to_frame(data: QueryData) -> pd.DataFrame:
    """Convert any result variant; a scalar becomes a single label-less row."""
    if isinstance(data, VectorData):
        return vector_to_frame(data.result)
    if isinstance(data, MatrixData):
        return matrix_to_frame(data.result)
    if isinstance(data, ScalarData):
        return _build_frame([{"timestamp": data.result.timestamp, "value": data.result.value}])
    raise TypeError(f"unsupported result type: {type(data).__name__}")
