"""Unit tests for the promquery command line"""
import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from promquery.cli import build_parser, main


@pytest.fixture(autouse=True)
def clean_config(isolated_env):
    with patch('promquery.config.load_dotenv'):
        yield isolated_env


def _ok(data):
    return {"status": "success", "data": data}


class TestParser:
    """Test argument parsing"""

    def test_query_arguments(self):
        args = build_parser().parse_args(["--url", "http://p:9090", "query", "up", "--time", "1700000000"])
        assert args.command == "query"
        assert args.expr == "up"
        assert args.time == 1700000000.0
        assert args.url == "http://p:9090"

    def test_rfc3339_time_kept_as_string(self):
        args = build_parser().parse_args(["query", "up", "--time", "2024-01-01T00:00:00Z"])
        assert args.time == "2024-01-01T00:00:00Z"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Test end-to-end CLI runs against a mocked server"""

    @patch('urllib.request.urlopen')
    def test_query_prints_json(self, mock_urlopen, http_response, vector_data, capsys):
        mock_urlopen.return_value = http_response(_ok(vector_data))

        assert main(["--url", "http://prom:9090", "query", "up"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["resultType"] == "vector"
        assert output["result"][0]["value"] == [1435781451.781, "1.0"]
        assert mock_urlopen.call_args[0][0].full_url == "http://prom:9090/api/v1/query?query=up"

    @patch('urllib.request.urlopen')
    def test_query_range(self, mock_urlopen, http_response, matrix_data, capsys):
        mock_urlopen.return_value = http_response(_ok(matrix_data))

        code = main(["query-range", "up", "--start", "1435781430", "--end", "1435781460", "--step", "15s"])

        assert code == 0
        assert len(json.loads(capsys.readouterr().out)["result"]) == 2

    @patch('urllib.request.urlopen')
    def test_label_values(self, mock_urlopen, http_response, capsys):
        mock_urlopen.return_value = http_response(_ok(["node", "prometheus"]))

        assert main(["label-values", "job"]) == 0
        assert json.loads(capsys.readouterr().out) == ["node", "prometheus"]

    @patch('urllib.request.urlopen')
    def test_buildinfo(self, mock_urlopen, http_response, capsys):
        mock_urlopen.return_value = http_response(_ok({
            "version": "2.13.1",
            "revision": "cb7cbad5f9a2823a622aaa668833ca04f50a0ea7",
            "branch": "master",
            "buildUser": "julius@desktop",
            "buildDate": "20191102-16:19:59",
            "goVersion": "go1.13.1"
        }))

        assert main(["buildinfo"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["version"] == "2.13.1"
        assert output["buildUser"] == "julius@desktop"

    @patch('urllib.request.urlopen')
    def test_api_error_exit_code(self, mock_urlopen, capsys):
        body = json.dumps({"status": "error", "errorType": "bad_data", "error": "parse error"}).encode()
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "http://127.0.0.1:9090/api/v1/query", 400, "Bad Request",
            {"Content-Type": "application/json"}, io.BytesIO(body)
        )

        assert main(["query", "up{"]) == 2
        assert "parse error" in capsys.readouterr().err

    @patch('urllib.request.urlopen')
    def test_transport_error_exit_code(self, mock_urlopen, capsys):
        mock_urlopen.side_effect = urllib.error.URLError("Connection refused")

        assert main(["labels"]) == 1
        assert "Connection refused" in capsys.readouterr().err

    @patch('urllib.request.urlopen')
    def test_config_file_url(self, mock_urlopen, http_response, clean_config):
        (clean_config / "promquery.yaml").write_text("base_url: http://from-config:9090\n")
        mock_urlopen.return_value = http_response(_ok([]))

        assert main(["labels"]) == 0
        assert mock_urlopen.call_args[0][0].full_url == "http://from-config:9090/api/v1/labels"

    @patch('urllib.request.urlopen')
    def test_post_flag(self, mock_urlopen, http_response, scalar_data):
        mock_urlopen.return_value = http_response(_ok(scalar_data))

        assert main(["--post", "query", "scalar(up)"]) == 0

        request = mock_urlopen.call_args[0][0]
        assert request.get_method() == "POST"
        assert request.data == b"query=scalar%28up%29"

    @patch('urllib.request.urlopen')
    def test_use_post_from_config_file(self, mock_urlopen, http_response, scalar_data, clean_config):
        (clean_config / "promquery.yaml").write_text("use_post: true\n")
        mock_urlopen.return_value = http_response(_ok(scalar_data))

        assert main(["query", "1"]) == 0
        assert mock_urlopen.call_args[0][0].get_method() == "POST"
