#!/usr/bin/env python3
"""
Configuration module for the Gemini chat proxy.
Loads settings from an optional YAML file, applies environment overrides,
and initializes logging with Pydantic validation.
"""

import os
import sys
import logging
from contextvars import ContextVar
from typing import Dict, Any, Mapping, Optional

import yaml
from pydantic import BaseModel, ValidationError

CONFIG_FILE = "config.yml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5555
    log_level: str = "INFO"
    http_log_level: str = "INFO"


class GeminiConfig(BaseModel):
    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    timeout: float = 300.0


class RequestProxyConfig(BaseModel):
    enabled: bool = False
    url: Optional[str] = None


def load_config(
    path: str = CONFIG_FILE, environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Load and validate configuration with Pydantic models."""
    environ = os.environ if environ is None else environ
    try:
        try:
            with open(path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file) or {}
        except FileNotFoundError:
            # Serverless deployments only provide the environment.
            config_data = {}

        if environ.get("GEMINI_API_KEY"):
            config_data.setdefault("gemini", {})["api_key"] = environ["GEMINI_API_KEY"]
        if environ.get("GEMINI_MODEL"):
            config_data.setdefault("gemini", {})["model"] = environ["GEMINI_MODEL"]

        config_data["server"] = ServerConfig(**config_data.get("server", {})).model_dump()
        config_data["gemini"] = GeminiConfig(**config_data.get("gemini", {})).model_dump()
        config_data["requestProxy"] = RequestProxyConfig(
            **config_data.get("requestProxy", {})
        ).model_dump()

        return config_data
    except (yaml.YAMLError, ValidationError) as e:
        print(f"Error in configuration: {e}")
        sys.exit(1)


# Request id of the call being served; "-" outside of a request.
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Stamps each record with the id of the request it was logged under."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "req_id"):
            record.req_id = request_id_var.get()
        return True


def setup_logging(config_: Dict[str, Any]) -> logging.Logger:
    """Configure logging based on validated configuration."""
    log_level = config_["server"]["log_level"]
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(req_id)s] %(message)s",
    )
    request_id_filter = RequestIdFilter()
    for handler in logging.getLogger().handlers:
        handler.addFilter(request_id_filter)
    # httpx logs full request URLs at INFO and the upstream key travels in the query string.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger_ = logging.getLogger("gemini-proxy")
    logger_.addFilter(request_id_filter)
    logger_.info("Logging level set to %s", log_level)
    return logger_


# Load and validate configuration once at startup
config = load_config()
logger = setup_logging(config)
