#!/usr/bin/env python3
"""
promquery command line

Runs a single API call against a Prometheus server and prints the decoded
result as JSON:

    promquery --url http://prometheus:9090 query 'up{job="node"}'
    promquery query-range 'rate(http_requests_total[5m])' --start 1700000000 --end 1700003600 --step 60
    promquery label-values job
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .client import PrometheusClient
from .config import load_config
from .errors import ApiError, PromQueryError

logger = logging.getLogger("promquery.cli")


def _dump(value: Any) -> Any:
    """Make models and lists of models JSON-serializable."""
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def _time_arg(raw: str):
    """Epoch seconds stay numeric, anything else is passed on as RFC 3339."""
    try:
        return float(raw)
    except ValueError:
        return raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="promquery", description="Prometheus HTTP API client")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--url", help="Prometheus base URL (e.g., http://prometheus:9090)")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds")
    parser.add_argument("--log-level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    parser.add_argument("--post", dest="use_post", action="store_true", default=None,
                        help="send queries as form-encoded POST requests")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("query", help="instant query")
    p.add_argument("expr")
    p.add_argument("--time", type=_time_arg, help="evaluation time (epoch seconds or RFC 3339)")
    p.add_argument("--stats", action="store_true", help="include execution statistics")

    p = sub.add_parser("query-range", help="range query")
    p.add_argument("expr")
    p.add_argument("--start", type=_time_arg, required=True)
    p.add_argument("--end", type=_time_arg, required=True)
    p.add_argument("--step", required=True, help="resolution step (seconds or duration like 1m)")
    p.add_argument("--stats", action="store_true", help="include execution statistics")

    p = sub.add_parser("series", help="find series by selectors")
    p.add_argument("selectors", nargs="+")

    sub.add_parser("labels", help="list label names")

    p = sub.add_parser("label-values", help="list values of a label")
    p.add_argument("label")

    p = sub.add_parser("targets", help="scrape targets")
    p.add_argument("--state", choices=["active", "dropped", "any"])

    p = sub.add_parser("rules", help="recording and alerting rules")
    p.add_argument("--type", dest="rule_type", choices=["alert", "record"])

    sub.add_parser("alerts", help="active alerts")
    sub.add_parser("buildinfo", help="server build information")

    return parser


def run_command(client: PrometheusClient, args: argparse.Namespace) -> Any:
    if args.command == "query":
        return client.query(args.expr, time=args.time, stats=args.stats).to_wire()
    if args.command == "query-range":
        return client.query_range(
            args.expr, args.start, args.end, args.step, stats=args.stats
        ).to_wire()
    if args.command == "series":
        return client.series(args.selectors)
    if args.command == "labels":
        return client.label_names()
    if args.command == "label-values":
        return client.label_values(args.label)
    if args.command == "targets":
        return _dump(client.targets(args.state))
    if args.command == "rules":
        return _dump(client.rules(args.rule_type))
    if args.command == "alerts":
        return _dump(client.alerts())
    if args.command == "buildinfo":
        return _dump(client.build_information())
    raise ValueError(f"unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load config: YAML first, then CLI overrides
    config = load_config(args.config).override_with_args(args)

    # Configure logging
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))
    logger.debug(f"promquery using {config.base_url}")

    client = PrometheusClient.from_config(config)
    try:
        result = run_command(client, args)
    except ApiError as e:
        print(f"error: server rejected request: {e}", file=sys.stderr)
        return 2
    except PromQueryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
