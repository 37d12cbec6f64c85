"""Configuration loader for the credential cache.

Loads settings from an optional YAML file over built-in defaults. Supports
environment variable overrides using the CREDCACHE_ prefix with
double-underscore nesting (e.g., CREDCACHE_STORAGE__FILE_NAME=auth.json).
"""

from __future__ import annotations

import os
import pathlib
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Config sub-models
# ---------------------------------------------------------------------------

class StorageConfig(BaseModel):
    base_dir: str | None = None
    directory_name: str = ".ipatool"
    file_name: str = "ipatool-auth.json"
    fallback_to_temp: bool = True


class LoggingConfig(BaseModel):
    verbose: bool = False
    format: Literal["text", "json"] = "text"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Deep merge helper
# ---------------------------------------------------------------------------

def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* into *base*, returning a new dict."""
    merged = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "CREDCACHE_"


def _collect_env_overrides() -> dict[str, Any]:
    """Collect CREDCACHE_* env vars into a nested dict of raw strings.

    Double-underscore separates nesting levels, so
    CREDCACHE_STORAGE__DIRECTORY_NAME=2024 becomes
    ``{"storage": {"directory_name": "2024"}}``. Values are left as strings;
    the pydantic models convert them to the field types.
    """
    overrides: dict[str, Any] = {}
    for name, value in os.environ.items():
        if not name.startswith(_ENV_PREFIX):
            continue
        *sections, field = name.removeprefix(_ENV_PREFIX).lower().split("__")
        target = overrides
        for section in sections:
            nested = target.get(section)
            if not isinstance(nested, dict):
                nested = target[section] = {}
            target = nested
        target[field] = value
    return overrides


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load_settings(
    config_path: pathlib.Path | None = None,
) -> Settings:
    """Load settings with layered precedence: defaults < file < env vars.

    Parameters
    ----------
    config_path:
        Path to a YAML config file. If ``None`` or the file does not exist,
        built-in defaults are used.
    """
    base: dict[str, Any] = {}

    if config_path is not None and config_path.exists():
        with open(config_path) as fh:
            file_data = yaml.safe_load(fh)
        if isinstance(file_data, dict):
            base = _deep_merge(base, file_data)

    env_overrides = _collect_env_overrides()
    if env_overrides:
        base = _deep_merge(base, env_overrides)

    return Settings(**base)
