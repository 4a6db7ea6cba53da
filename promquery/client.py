"""
Prometheus HTTP API client.

Each public method issues one request, decodes the envelope and returns typed
models. Errors propagate as PromQueryError subclasses; nothing is retried.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import quote

from .base import LabelSet
from .codec import format_time
from .config import ClientConfig
from .envelope import Envelope, parse_envelope
from .errors import EmptySeriesSelector
from .http_client import HttpResponse, Params, PrometheusHttpClient, repeated
from .metadata import (
    Alert,
    Alertmanagers,
    BuildInformation,
    MetricMetadata,
    RuleGroup,
    RuntimeInformation,
    TargetMetadata,
    Targets,
    TsdbStatistics,
    WalReplayStatistics,
    decode_alerts,
    decode_flags,
    decode_metric_metadata,
    decode_rule_groups,
    decode_series,
    decode_string_list,
    decode_target_metadata,
)
from .query import DurationValue, InstantQuery, RangeQuery, TimeValue
from .results import QueryResponse
from .selector import Selector
from .states import RuleType, TargetState

logger = logging.getLogger("promquery.client")

API_PREFIX = "/api/v1"

SelectorLike = Union[Selector, str]


def _selector_params(selectors: Optional[Iterable[SelectorLike]]) -> List[tuple]:
    if not selectors:
        return []
    return repeated("match[]", [str(s) for s in selectors])


def _range_params(start: Optional[TimeValue], end: Optional[TimeValue], limit: Optional[int] = None) -> List[tuple]:
    params = []
    if start is not None:
        params.append(("start", format_time(start)))
    if end is not None:
        params.append(("end", format_time(end)))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


class PrometheusClient:
    """Client for a single Prometheus server."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:9090",
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
        use_post: bool = False,
    ):
        """
        Initialize the client.

        Args:
            base_url: Server URL without the API prefix, e.g. http://prometheus:9090
            timeout: Request timeout in seconds
            headers: Extra headers for every request
            use_post: Send query, query_range, series and labels as form POSTs
        """
        self.base_url = base_url.rstrip("/")
        self.use_post = use_post
        self._http = PrometheusHttpClient(self.base_url + API_PREFIX, timeout, headers)
        self._root = PrometheusHttpClient(self.base_url, timeout, headers)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "PrometheusClient":
        return cls(
            config.base_url,
            timeout=config.timeout,
            headers=config.headers,
            use_post=config.use_post,
        )

    def __repr__(self) -> str:
        return f"PrometheusClient({self.base_url!r})"

    # ---------------- Plumbing ----------------

    def _request(self, endpoint: str, params: Params = (), postable: bool = False) -> HttpResponse:
        if postable and self.use_post:
            return self._http.post_form(endpoint, params)
        return self._http.get(endpoint, params)

    def _fetch(self, endpoint: str, params: Params = (), postable: bool = False) -> Envelope:
        resp = self._request(endpoint, params, postable)
        return parse_envelope(resp.content_type, resp.body, resp.status)

    # ---------------- Expression queries ----------------

    def execute(self, query: Union[InstantQuery, RangeQuery]) -> QueryResponse:
        """Run a prepared InstantQuery or RangeQuery."""
        logger.debug(f"Executing {type(query).__name__}: {query.query}")
        return self._fetch(query.path, query.to_params(), postable=True).to_query_response()

    def query(
        self,
        query: str,
        time: Optional[TimeValue] = None,
        timeout: Optional[DurationValue] = None,
        limit: Optional[int] = None,
        stats: bool = False,
    ) -> QueryResponse:
        """Evaluate an instant query at a single point in time."""
        return self.execute(InstantQuery(query, time=time, timeout=timeout, limit=limit, stats=stats))

    def query_range(
        self,
        query: str,
        start: TimeValue,
        end: TimeValue,
        step: DurationValue,
        timeout: Optional[DurationValue] = None,
        limit: Optional[int] = None,
        stats: bool = False,
    ) -> QueryResponse:
        """Evaluate an expression over a range of time."""
        return self.execute(
            RangeQuery(query, start, end, step, timeout=timeout, limit=limit, stats=stats)
        )

    # ---------------- Series and labels ----------------

    def series(
        self,
        selectors: Iterable[SelectorLike],
        start: Optional[TimeValue] = None,
        end: Optional[TimeValue] = None,
        limit: Optional[int] = None,
    ) -> List[LabelSet]:
        """
        Find series matching the selectors.

        Raises:
            EmptySeriesSelector: no selector given
        """
        selectors = list(selectors or [])
        if not selectors:
            raise EmptySeriesSelector()
        params = _selector_params(selectors) + _range_params(start, end, limit)
        return decode_series(self._fetch("/series", params, postable=True).data)

    def label_names(
        self,
        selectors: Optional[Iterable[SelectorLike]] = None,
        start: Optional[TimeValue] = None,
        end: Optional[TimeValue] = None,
        limit: Optional[int] = None,
    ) -> List[str]:
        params = _selector_params(selectors) + _range_params(start, end, limit)
        return decode_string_list(self._fetch("/labels", params, postable=True).data, "label names")

    def label_values(
        self,
        label: str,
        selectors: Optional[Iterable[SelectorLike]] = None,
        start: Optional[TimeValue] = None,
        end: Optional[TimeValue] = None,
        limit: Optional[int] = None,
    ) -> List[str]:
        params = _selector_params(selectors) + _range_params(start, end, limit)
        endpoint = f"/label/{quote(label, safe='')}/values"
        return decode_string_list(self._fetch(endpoint, params).data, "label values")

    # ---------------- Targets, rules, alerts ----------------

    def targets(self, state: Optional[Union[TargetState, str]] = None) -> Targets:
        params = []
        if state is not None:
            params.append(("state", TargetState(state).value))
        return Targets.decode(self._fetch("/targets", params).data)

    def rules(
        self,
        rule_type: Optional[Union[RuleType, str]] = None,
        rule_names: Optional[List[str]] = None,
        group_names: Optional[List[str]] = None,
        files: Optional[List[str]] = None,
    ) -> List[RuleGroup]:
        params = []
        if rule_type is not None:
            params.append(("type", RuleType(rule_type).value))
        params += repeated("rule_name[]", list(rule_names or []))
        params += repeated("rule_group[]", list(group_names or []))
        params += repeated("file[]", list(files or []))
        return decode_rule_groups(self._fetch("/rules", params).data)

    def alerts(self) -> List[Alert]:
        return decode_alerts(self._fetch("/alerts").data)

    def alertmanagers(self) -> Alertmanagers:
        return Alertmanagers.decode(self._fetch("/alertmanagers").data)

    # ---------------- Metadata ----------------

    def target_metadata(
        self,
        metric: Optional[str] = None,
        match_target: Optional[SelectorLike] = None,
        limit: Optional[int] = None,
    ) -> List[TargetMetadata]:
        params = []
        if match_target is not None:
            params.append(("match_target", str(match_target)))
        if metric is not None:
            params.append(("metric", metric))
        if limit is not None:
            params.append(("limit", str(limit)))
        return decode_target_metadata(self._fetch("/targets/metadata", params).data)

    def metric_metadata(
        self,
        metric: Optional[str] = None,
        limit: Optional[int] = None,
        limit_per_metric: Optional[int] = None,
    ) -> Dict[str, List[MetricMetadata]]:
        params = []
        if metric is not None:
            params.append(("metric", metric))
        if limit is not None:
            params.append(("limit", str(limit)))
        if limit_per_metric is not None:
            params.append(("limit_per_metric", str(limit_per_metric)))
        return decode_metric_metadata(self._fetch("/metadata", params).data)

    # ---------------- Status ----------------

    def flags(self) -> Dict[str, str]:
        return decode_flags(self._fetch("/status/flags").data)

    def build_information(self) -> BuildInformation:
        return BuildInformation.decode(self._fetch("/status/buildinfo").data)

    def runtime_information(self) -> RuntimeInformation:
        return RuntimeInformation.decode(self._fetch("/status/runtimeinfo").data)

    def tsdb_statistics(self, limit: Optional[int] = None) -> TsdbStatistics:
        params = [("limit", str(limit))] if limit is not None else []
        return TsdbStatistics.decode(self._fetch("/status/tsdb", params).data)

    def wal_replay_statistics(self) -> WalReplayStatistics:
        return WalReplayStatistics.decode(self._fetch("/status/walreplay").data)

    # ---------------- Management API ----------------

    def is_server_healthy(self) -> bool:
        """True when /-/healthy answers 200. Connection failures raise TransportError."""
        return self._root.get("/-/healthy").status == 200

    def is_server_ready(self) -> bool:
        """True when /-/ready answers 200 (server finished replaying its WAL)."""
        return self._root.get("/-/ready").status == 200
