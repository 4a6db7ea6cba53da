"""
Response envelope decoding.

Every Prometheus API answer is wrapped in
    {"status": "success", "data": ..., "warnings": [...], "infos": [...]}
or
    {"status": "error", "errorType": "...", "error": "..."}

The content type is checked before anything is parsed; a non-JSON body is
reported as UnexpectedContentType without attempting to decode it.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from .errors import ApiError, MalformedPayload, UnexpectedContentType
from .results import QueryResponse, decode_query_response

logger = logging.getLogger("promquery.envelope")

JSON_MEDIA_TYPE = "application/json"


@dataclass
class Envelope:
    """Payload of a success envelope."""
    data: Any
    warnings: List[str] = field(default_factory=list)
    infos: List[str] = field(default_factory=list)
    stats: Any = None

    def to_query_response(self) -> QueryResponse:
        """Decode the data of a /query or /query_range answer, logging server warnings."""
        response = decode_query_response(
            self.data,
            stats=self.stats,
            warnings=self.warnings,
            infos=self.infos,
        )
        for warning in response.warnings:
            logger.info(f"Prometheus warning: {warning}")
        return response


def is_json_media_type(content_type: Optional[str]) -> bool:
    """True for application/json, with or without parameters, and +json suffixes."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == JSON_MEDIA_TYPE:
        return True
    return media_type.startswith("application/") and media_type.endswith("+json")


def _string_list(envelope: dict, key: str) -> List[str]:
    raw = envelope.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise MalformedPayload(f"{key} must be a list of strings")
    return raw


def parse_envelope(
    content_type: Optional[str],
    body: Union[bytes, str],
    status_code: Optional[int] = None,
) -> Envelope:
    """
    Check the media type, parse the JSON body and unwrap the status envelope.

    Args:
        content_type: Content-Type header of the response
        body: Raw response body
        status_code: HTTP status, attached to errors for the caller's benefit

    Returns:
        Envelope holding the "data" member of a success response

    Raises:
        UnexpectedContentType: media type is not JSON
        MalformedPayload: body is not JSON or not a valid envelope
        ApiError: server answered with "status": "error"
    """
    if not is_json_media_type(content_type):
        raise UnexpectedContentType(content_type, status_code)

    try:
        decoded = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedPayload(f"response body is not valid JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise MalformedPayload("response envelope must be a JSON object")

    status = decoded.get("status")
    if status == "error":
        error_type = decoded.get("errorType")
        message = decoded.get("error")
        if not isinstance(error_type, str) or not isinstance(message, str):
            raise MalformedPayload("error envelope needs string errorType and error fields")
        logger.warning(f"Prometheus API error ({status_code}): {error_type}: {message}")
        raise ApiError(error_type, message, status_code)

    if status != "success":
        raise MalformedPayload(f"unknown response status: {status!r}")
    if "data" not in decoded:
        raise MalformedPayload("success envelope without data")

    return Envelope(
        data=decoded["data"],
        warnings=_string_list(decoded, "warnings"),
        infos=_string_list(decoded, "infos"),
        stats=decoded.get("stats"),
    )


def parse_response(
    content_type: Optional[str],
    body: Union[bytes, str],
    status_code: Optional[int] = None,
) -> QueryResponse:
    """
    Decode the body of a /query or /query_range response.

    All-or-nothing: either a complete QueryResponse is returned or a typed
    PromQueryError is raised.
    """
    return parse_envelope(content_type, body, status_code).to_query_response()
