"""
Configuration loader for promquery using dataclasses.

Priority:
1. Provided config path
2. Environment variable PROMQUERY_CONFIG
3. ./promquery.yaml (if exists)
4. ~/.config/promquery/config.yaml (if exists)
5. Defaults

Environment variables PROMQUERY_URL, PROMQUERY_TIMEOUT and PROMQUERY_LOG_LEVEL
(optionally from a .env file) override whatever the file says.
"""

import argparse
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger("promquery.config")

DEFAULT_CONFIG_FILES = (
    "./promquery.yaml",
    "~/.config/promquery/config.yaml",
)


@dataclass
class ClientConfig:
    """promquery client configuration"""
    base_url: str = "http://127.0.0.1:9090"
    timeout: float = 30.0
    log_level: str = "INFO"
    use_post: bool = False
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """Create ClientConfig from dictionary, using defaults for missing values"""
        # Filter only known fields to avoid dataclass errors
        known_fields = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known_fields)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        filtered_data = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered_data)

    def apply_env(self) -> "ClientConfig":
        """Override fields from PROMQUERY_* environment variables"""
        url = os.getenv("PROMQUERY_URL")
        if url:
            self.base_url = url
        timeout = os.getenv("PROMQUERY_TIMEOUT")
        if timeout:
            try:
                self.timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid PROMQUERY_TIMEOUT: {timeout!r}")
        log_level = os.getenv("PROMQUERY_LOG_LEVEL")
        if log_level:
            self.log_level = log_level
        return self

    def override_with_args(self, args: argparse.Namespace) -> "ClientConfig":
        """Override config with command line arguments if provided"""
        # Only override if explicitly provided - preserves config file values
        self.base_url = args.url if args.url is not None else self.base_url
        self.timeout = args.timeout if args.timeout is not None else self.timeout
        self.log_level = args.log_level if args.log_level is not None else self.log_level
        self.use_post = args.use_post if args.use_post is not None else self.use_post
        return self


def load_config(config_path: Optional[str] = None) -> ClientConfig:
    """
    Load configuration from YAML file with simple fallbacks, then apply
    environment overrides.
    """
    load_dotenv()

    if config_path:
        config_files = [config_path]
    else:
        config_files = [os.environ.get("PROMQUERY_CONFIG"), *DEFAULT_CONFIG_FILES]

    for config_file in config_files:
        if not config_file:
            continue

        path = Path(config_file).expanduser()
        if not path.exists():
            if config_path:
                raise FileNotFoundError(f"Config file not found: {path}")
            continue

        logger.info(f"Loading configuration from: {path}")
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return ClientConfig.from_dict(data).apply_env()

    logger.debug("Using default configuration")
    return ClientConfig().apply_env()
