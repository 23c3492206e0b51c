"""Configuration loading, validation, and defaults."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import (
    ConfigurationError,
    RelayConfig,
    ServerConfig,
    StreamConfig,
    UpstreamConfig,
)

CONFIG_FILENAMES = [
    "appgen-relay.yaml",
    "appgen-relay.yml",
    "appgen-relay.json",
]

DEFAULTS = RelayConfig()


def _discover_config() -> Path | None:
    """Search CWD then parent dirs up to home for a config file."""
    cwd = Path.cwd()
    home = Path.home()
    search = cwd
    while True:
        for name in CONFIG_FILENAMES:
            candidate = search / name
            if candidate.is_file():
                return candidate
        if search == home or search == search.parent:
            break
        search = search.parent
    return None


def _build_config(raw: dict[str, Any], environ: Mapping[str, str] | None = None) -> RelayConfig:
    """Build a RelayConfig from a raw dict."""
    env = os.environ if environ is None else environ

    upstream_raw = raw.get("upstream", {}) or {}
    upstream = UpstreamConfig(
        url=upstream_raw.get("url", DEFAULTS.upstream.url),
        api_version=str(upstream_raw.get("api_version", DEFAULTS.upstream.api_version)),
        api_key_env=upstream_raw.get("api_key_env", DEFAULTS.upstream.api_key_env),
        connect_timeout=float(upstream_raw.get("connect_timeout", DEFAULTS.upstream.connect_timeout)),
        read_timeout=float(upstream_raw.get("read_timeout", DEFAULTS.upstream.read_timeout)),
    )

    # PORT env var wins over the built-in default but not over the file
    server_raw = raw.get("server", {}) or {}
    default_port = int(env.get("PORT") or DEFAULTS.server.port)
    origins = server_raw.get("cors_origins", DEFAULTS.server.cors_origins)
    if isinstance(origins, str):
        origins = [origins]
    server = ServerConfig(
        host=server_raw.get("host", DEFAULTS.server.host),
        port=int(server_raw.get("port", default_port)),
        cors_origins=list(origins),
    )

    stream_raw = raw.get("stream", {}) or {}
    stream = StreamConfig(
        keep_alive_interval=float(
            stream_raw.get("keep_alive_interval", DEFAULTS.stream.keep_alive_interval)
        ),
        keep_alive_text=stream_raw.get("keep_alive_text", DEFAULTS.stream.keep_alive_text),
        status_delay=float(stream_raw.get("status_delay", DEFAULTS.stream.status_delay)),
    )

    return RelayConfig(upstream=upstream, server=server, stream=stream)


def validate_config(config: RelayConfig) -> list[str]:
    """Validate a config. Returns list of error strings (empty = valid)."""
    errors: list[str] = []

    if not config.upstream.url.startswith(("http://", "https://")):
        errors.append(f"upstream.url must be an http(s) URL, got '{config.upstream.url}'")

    if not config.upstream.api_key_env:
        errors.append("upstream.api_key_env must name an environment variable")

    if config.upstream.connect_timeout <= 0 or config.upstream.read_timeout <= 0:
        errors.append("upstream timeouts must be > 0")

    if not 0 < config.server.port < 65536:
        errors.append(f"server.port ({config.server.port}) must be between 1 and 65535")

    if config.stream.keep_alive_interval <= 0:
        errors.append(
            f"stream.keep_alive_interval ({config.stream.keep_alive_interval}) must be > 0"
        )

    if "\n" in config.stream.keep_alive_text or "\r" in config.stream.keep_alive_text:
        errors.append("stream.keep_alive_text must be a single line")

    if config.stream.status_delay < 0:
        errors.append("stream.status_delay must be >= 0")

    return errors


def resolve_api_key(config: RelayConfig, environ: Mapping[str, str] | None = None) -> str:
    """Return the upstream credential or raise ``ConfigurationError``."""
    env = os.environ if environ is None else environ
    name = config.upstream.api_key_env
    api_key = env.get(name, "")
    if not api_key:
        raise ConfigurationError(f"{name} environment variable is required")
    return api_key


def load_config(
    config_path: str | Path | None = None,
    config_dict: dict | None = None,
) -> RelayConfig:
    """Load config from dict, explicit path, or auto-discover."""
    if config_dict is not None:
        return _build_config(config_dict)

    if config_path is not None:
        path = Path(config_path)
    else:
        path = _discover_config()

    if path is None:
        # Return defaults
        return _build_config({})

    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    text = path.read_text()
    if path.suffix == ".json":
        raw = json.loads(text)
    else:
        raw = yaml.safe_load(text) or {}

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    return _build_config(raw)
