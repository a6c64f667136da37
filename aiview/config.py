from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG_PATH = "configs/app.yaml"

DEFAULT_MESSAGES: Dict[str, str] = {
    "request_failed": "Failed to get AI response",
    "copied": "Copied to clipboard",
    "copy_failed": "Failed to copy to clipboard",
    "loading": "Generating...",
}


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


def _resolve_env(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_key = value[2:-1]
        return os.getenv(env_key, "")
    if isinstance(value, dict):
        return {k: _resolve_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env(item) for item in value]
    return value


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Missing configuration file: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")
    return _resolve_env(data)


@lru_cache(maxsize=4)
def load_app_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the application config, honouring ``AIVIEW_CONFIG``."""

    path = Path(config_path or os.getenv("AIVIEW_CONFIG") or DEFAULT_CONFIG_PATH)
    return _load_yaml(path)


def messages(config: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
    """User-facing notification strings with defaults filled in."""

    config = load_app_config() if config is None else config
    merged = dict(DEFAULT_MESSAGES)
    merged.update({k: str(v) for k, v in (config.get("messages") or {}).items()})
    return merged
