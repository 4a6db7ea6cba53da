"""
Metadata models returned by the non-query endpoints.

Targets, rules, alerts, alertmanagers, metric metadata and the status
endpoints. Embedded sample values and timestamps go through the same codec as
query results; state fields use the closed enumerations of states.py.
"""

from datetime import datetime, timedelta
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BeforeValidator, Field

from .base import LabelSet, WireModel, decode_as
from .codec import decode_value, parse_build_date, parse_duration, parse_rfc3339
from .errors import MalformedPayload
from .states import AlertState, MetricType, RuleHealth, TargetHealth, WalReplayState


def _rfc3339(raw: Any) -> datetime:
    return raw if isinstance(raw, datetime) else parse_rfc3339(raw)


def _duration(raw: Any) -> timedelta:
    return raw if isinstance(raw, timedelta) else parse_duration(raw)


def _build_date(raw: Any) -> datetime:
    return raw if isinstance(raw, datetime) else parse_build_date(raw)


def _sample_value(raw: Any) -> float:
    return raw if isinstance(raw, float) else decode_value(raw)


WireDatetime = Annotated[datetime, BeforeValidator(_rfc3339)]
WireDuration = Annotated[timedelta, BeforeValidator(_duration)]
WireValue = Annotated[float, BeforeValidator(_sample_value)]


# ---------------- Targets ----------------

class ActiveTarget(WireModel):
    discovered_labels: LabelSet
    labels: LabelSet
    scrape_pool: str
    scrape_url: str
    global_url: str
    last_error: str
    last_scrape: WireDatetime
    last_scrape_duration: float
    health: TargetHealth
    scrape_interval: WireDuration
    scrape_timeout: WireDuration


class DroppedTarget(WireModel):
    discovered_labels: LabelSet


class Targets(WireModel):
    active: Tuple[ActiveTarget, ...] = Field(default=(), alias="activeTargets")
    dropped: Tuple[DroppedTarget, ...] = Field(default=(), alias="droppedTargets")


# ---------------- Alerts and rules ----------------

class Alert(WireModel):
    active_at: WireDatetime
    annotations: LabelSet
    labels: LabelSet
    state: AlertState
    value: WireValue
    keep_firing_since: Optional[WireDatetime] = None


class AlertingRule(WireModel):
    type: Literal["alerting"] = "alerting"
    alerts: Tuple[Alert, ...]
    annotations: LabelSet
    duration: float
    health: RuleHealth
    labels: LabelSet
    name: str
    query: str
    last_error: Optional[str] = None
    evaluation_time: Optional[float] = None
    last_evaluation: Optional[WireDatetime] = None

    def is_alerting(self) -> bool:
        return True

    def is_recording(self) -> bool:
        return False


class RecordingRule(WireModel):
    type: Literal["recording"] = "recording"
    health: RuleHealth
    name: str
    query: str
    labels: Optional[LabelSet] = None
    last_error: Optional[str] = None
    evaluation_time: Optional[float] = None
    last_evaluation: Optional[WireDatetime] = None

    def is_alerting(self) -> bool:
        return False

    def is_recording(self) -> bool:
        return True


Rule = Annotated[Union[AlertingRule, RecordingRule], Field(discriminator="type")]


class RuleGroup(WireModel):
    rules: Tuple[Rule, ...]
    file: str
    interval: float
    name: str
    limit: Optional[int] = None
    evaluation_time: Optional[float] = None
    last_evaluation: Optional[WireDatetime] = None

    def alerting_rules(self) -> List[AlertingRule]:
        return [r for r in self.rules if r.is_alerting()]

    def recording_rules(self) -> List[RecordingRule]:
        return [r for r in self.rules if r.is_recording()]


class Alertmanager(WireModel):
    url: str


class Alertmanagers(WireModel):
    active: Tuple[Alertmanager, ...] = Field(default=(), alias="activeAlertmanagers")
    dropped: Tuple[Alertmanager, ...] = Field(default=(), alias="droppedAlertmanagers")


# ---------------- Metric metadata ----------------

class TargetMetadata(WireModel):
    target: LabelSet
    metric_type: MetricType = Field(alias="type")
    metric: Optional[str] = None
    help: str
    unit: str


class MetricMetadata(WireModel):
    metric_type: MetricType = Field(alias="type")
    help: str
    unit: str


# ---------------- Status ----------------

class BuildInformation(WireModel):
    version: str
    revision: str
    branch: str
    build_user: str
    build_date: Annotated[datetime, BeforeValidator(_build_date)]
    go_version: str


class RuntimeInformation(WireModel):
    start_time: WireDatetime
    cwd: str = Field(alias="CWD")
    reload_config_success: bool
    last_config_time: WireDatetime
    corruption_count: int
    goroutine_count: int
    go_max_procs: int = Field(alias="GOMAXPROCS")
    go_gc: str = Field(alias="GOGC")
    go_debug: str = Field(alias="GODEBUG")
    storage_retention: str
    time_series_count: Optional[int] = None

    @property
    def retention_period(self) -> Optional[timedelta]:
        """
        Time-based part of storage_retention.

        Newer servers report e.g. "15d or 10GiB"; a size-only retention has
        no time part and yields None.
        """
        head = self.storage_retention.split(" or ")[0].strip()
        try:
            return parse_duration(head)
        except MalformedPayload:
            return None


class HeadStatistics(WireModel):
    num_series: int
    chunk_count: int
    min_time: int
    max_time: int
    num_label_pairs: Optional[int] = None


class TsdbItemCount(WireModel):
    name: str
    value: int


class TsdbStatistics(WireModel):
    head_stats: HeadStatistics
    series_count_by_metric_name: Tuple[TsdbItemCount, ...]
    label_value_count_by_label_name: Tuple[TsdbItemCount, ...]
    memory_in_bytes_by_label_name: Tuple[TsdbItemCount, ...]
    series_count_by_label_value_pair: Tuple[TsdbItemCount, ...]


class WalReplayStatistics(WireModel):
    min: int
    max: int
    current: int
    state: Optional[WalReplayState] = None


# ---------------- Decoders for list/dict shaped payloads ----------------

class _RuleGroups(WireModel):
    groups: Tuple[RuleGroup, ...]


class _Alerts(WireModel):
    alerts: Tuple[Alert, ...]


def decode_rule_groups(payload: Any) -> List[RuleGroup]:
    return list(_RuleGroups.decode(payload).groups)


def decode_alerts(payload: Any) -> List[Alert]:
    return list(_Alerts.decode(payload).alerts)


def decode_target_metadata(payload: Any) -> List[TargetMetadata]:
    return decode_as(List[TargetMetadata], payload, "target metadata")


def decode_metric_metadata(payload: Any) -> Dict[str, List[MetricMetadata]]:
    return decode_as(Dict[str, List[MetricMetadata]], payload, "metric metadata")


def decode_series(payload: Any) -> List[LabelSet]:
    return decode_as(List[LabelSet], payload, "series")


def decode_string_list(payload: Any, what: str) -> List[str]:
    return decode_as(List[str], payload, what)


def decode_flags(payload: Any) -> Dict[str, str]:
    return decode_as(Dict[str, str], payload, "flags")
