"""Pytest configuration and shared fixtures"""
import json
from unittest.mock import MagicMock

import pytest


def make_http_response(payload, status=200, content_type="application/json"):
    """Build a urlopen() context-manager mock returning the given payload"""
    mock_response = MagicMock()
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    mock_response.read.return_value = body
    mock_response.status = status
    mock_response.headers = {"Content-Type": content_type}
    mock_response.__enter__.return_value = mock_response
    return mock_response


@pytest.fixture
def http_response():
    """Factory for mocked HTTP responses"""
    return make_http_response


@pytest.fixture
def vector_data():
    """Instant vector from the Prometheus API documentation"""
    return {
        "resultType": "vector",
        "result": [
            {
                "metric": {"__name__": "up", "job": "prometheus", "instance": "localhost:9090"},
                "value": [1435781451.781, "1"]
            },
            {
                "metric": {"__name__": "up", "job": "node", "instance": "localhost:9100"},
                "value": [1435781451.781, "0"]
            }
        ]
    }


@pytest.fixture
def matrix_data():
    """Range vector from the Prometheus API documentation"""
    return {
        "resultType": "matrix",
        "result": [
            {
                "metric": {"__name__": "up", "job": "prometheus", "instance": "localhost:9090"},
                "values": [[1435781430.781, "1"], [1435781445.781, "1"], [1435781460.781, "1"]]
            },
            {
                "metric": {"__name__": "up", "job": "node", "instance": "localhost:9091"},
                "values": [[1435781430.781, "0"], [1435781445.781, "0"], [1435781460.781, "1"]]
            }
        ]
    }


@pytest.fixture
def scalar_data():
    return {"resultType": "scalar", "result": [1435781451.781, "42.5"]}


@pytest.fixture
def stats_data():
    """Execution statistics as returned with stats=all"""
    return {
        "timings": {
            "evalTotalTime": 0.000102139,
            "resultSortTime": 8.7e-07,
            "queryPreparationTime": 5.4169e-05,
            "innerEvalTime": 3.787e-05,
            "execQueueTime": 4.07e-05,
            "execTotalTime": 0.000151989
        },
        "samples": {
            "totalQueryableSamplesPerStep": [
                [1659268100, 1], [1659268160, 1], [1659268220, 1], [1659268280, 1]
            ],
            "totalQueryableSamples": 4,
            "peakSamples": 4
        }
    }


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Working directory and HOME without any promquery config or env overrides"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in ("PROMQUERY_CONFIG", "PROMQUERY_URL", "PROMQUERY_TIMEOUT", "PROMQUERY_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
