"""
promquery - typed client for the Prometheus HTTP API

Organized by concern:
- codec.py: sample value / timestamp / duration wire codec
- states.py: closed-set enumerations (rule health, alert state, ...)
- results.py: vector / matrix / scalar result model and QueryResponse
- metadata.py: targets, rules, alerts, metadata and status models
- envelope.py: content-type check and status envelope decoding
- selector.py, query.py: request-side selectors and query parameters
- http_client.py, client.py: urllib transport and PrometheusClient
- frames.py: pandas DataFrame conversion
"""

__version__ = "0.4.0"

# Client and configuration
from .client import PrometheusClient
from .config import ClientConfig, load_config

# Requests
from .query import InstantQuery, RangeQuery
from .selector import Selector

# Decoding entry points
from .envelope import parse_envelope, parse_response
from .results import decode_query_data
from .codec import decode_timestamp, decode_value, encode_timestamp, encode_value

# Result model
from .results import (
    InstantVector,
    MatrixData,
    QueryData,
    QueryResponse,
    RangeVector,
    Sample,
    ScalarData,
    SampleStats,
    Stats,
    Timings,
    VectorData,
)

# Metadata models
from .metadata import (
    ActiveTarget,
    Alert,
    AlertingRule,
    Alertmanager,
    Alertmanagers,
    BuildInformation,
    DroppedTarget,
    HeadStatistics,
    MetricMetadata,
    RecordingRule,
    RuleGroup,
    RuntimeInformation,
    TargetMetadata,
    Targets,
    TsdbItemCount,
    TsdbStatistics,
    WalReplayStatistics,
)

# Enumerations
from .states import (
    AlertState,
    MetricType,
    ResultType,
    RuleHealth,
    RuleType,
    TargetHealth,
    TargetState,
    WalReplayState,
)

# Errors
from .errors import (
    ApiError,
    DecodeError,
    EmptySeriesSelector,
    ErrorType,
    InvalidNumber,
    InvalidSelector,
    InvalidTimestamp,
    MalformedPayload,
    PromQueryError,
    TransportError,
    UnexpectedContentType,
    UnknownResultType,
)

__all__ = [
    # Client
    'PrometheusClient',
    'ClientConfig',
    'load_config',

    # Requests
    'InstantQuery',
    'RangeQuery',
    'Selector',

    # Decoding
    'parse_envelope',
    'parse_response',
    'decode_query_data',
    'decode_value',
    'encode_value',
    'decode_timestamp',
    'encode_timestamp',

    # Results
    'QueryResponse',
    'QueryData',
    'VectorData',
    'MatrixData',
    'ScalarData',
    'InstantVector',
    'RangeVector',
    'Sample',
    'Stats',
    'Timings',
    'SampleStats',

    # Metadata
    'Targets',
    'ActiveTarget',
    'DroppedTarget',
    'RuleGroup',
    'AlertingRule',
    'RecordingRule',
    'Alert',
    'Alertmanagers',
    'Alertmanager',
    'TargetMetadata',
    'MetricMetadata',
    'BuildInformation',
    'RuntimeInformation',
    'TsdbStatistics',
    'HeadStatistics',
    'TsdbItemCount',
    'WalReplayStatistics',

    # Enumerations
    'ResultType',
    'RuleHealth',
    'AlertState',
    'TargetHealth',
    'MetricType',
    'WalReplayState',
    'TargetState',
    'RuleType',

    # Errors
    'PromQueryError',
    'TransportError',
    'UnexpectedContentType',
    'DecodeError',
    'MalformedPayload',
    'UnknownResultType',
    'InvalidNumber',
    'InvalidTimestamp',
    'ApiError',
    'ErrorType',
    'EmptySeriesSelector',
    'InvalidSelector',
]
