"""
HTTP transport for promquery.

Thin wrapper over urllib that performs one request and hands back status code,
content type and body bytes. Non-2xx answers are returned as responses too,
since Prometheus explains 4xx/5xx failures in a JSON error envelope.
Connection level failures raise TransportError.
"""

import logging
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from .errors import TransportError

logger = logging.getLogger("promquery.http")

Params = Sequence[Tuple[str, str]]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    content_type: Optional[str]
    body: bytes


class PrometheusHttpClient:
    """HTTP client for the Prometheus API root (e.g. http://host:9090/api/v1)."""

    def __init__(self, api_base: str, timeout: float = 30, headers: Optional[Dict[str, str]] = None):
        """
        Initialize HTTP client.

        Args:
            api_base: Base URL including the API prefix
            timeout: Socket timeout in seconds
            headers: Extra headers sent with every request (e.g. Authorization)
        """
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.headers = dict(headers or {})

    def url_for(self, endpoint: str, params: Params = ()) -> str:
        url = f"{self.api_base}{endpoint}"
        if params:
            url += "?" + urlencode(list(params))
        return url

    def get(self, endpoint: str, params: Params = ()) -> HttpResponse:
        """
        Make a GET request.

        Args:
            endpoint: API endpoint path (e.g. /query)
            params: Query string parameters; repeated keys such as match[] allowed

        Raises:
            TransportError: On connection errors and timeouts
        """
        req = urllib.request.Request(self.url_for(endpoint, params), headers=self._headers(), method="GET")
        return self._send(req)

    def post_form(self, endpoint: str, params: Params = ()) -> HttpResponse:
        """Make a POST request with form-encoded parameters (for long queries)."""
        hdrs = self._headers()
        hdrs["Content-Type"] = "application/x-www-form-urlencoded"
        body = urlencode(list(params)).encode("utf-8")
        req = urllib.request.Request(self.url_for(endpoint), data=body, headers=hdrs, method="POST")
        return self._send(req)

    def _headers(self) -> Dict[str, str]:
        hdrs = {"Accept": "application/json"}
        hdrs.update(self.headers)
        return hdrs

    def _send(self, req: urllib.request.Request) -> HttpResponse:
        logger.debug(f"{req.get_method()} {req.full_url}")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return HttpResponse(
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type"),
                    body=resp.read(),
                )
        except urllib.error.HTTPError as e:
            # Error statuses still carry a body worth decoding
            try:
                body = e.read() or b""
            finally:
                e.close()
            content_type = e.headers.get("Content-Type") if e.headers else None
            logger.debug(f"HTTP {e.code} from {req.full_url}")
            return HttpResponse(status=e.code, content_type=content_type, body=body)
        except (urllib.error.URLError, socket.timeout, ConnectionError) as e:
            logger.error(f"Request to {req.full_url} failed: {e}")
            raise TransportError(f"request to {req.full_url} failed: {e}") from e


def repeated(key: str, values: List[str]) -> List[Tuple[str, str]]:
    """Expand a multi-valued parameter such as match[] into repeated pairs."""
    return [(key, value) for value in values]
