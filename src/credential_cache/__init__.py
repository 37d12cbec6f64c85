"""Credential cache -- file-backed secret storage for command-line tools."""

from importlib import metadata as _metadata
from pathlib import Path as _Path

# src/credential_cache/__init__.py -> checkout root
_CHECKOUT_VERSION = _Path(__file__).resolve().parents[2] / "VERSION"


def _read_version() -> str:
    """VERSION from a source checkout, else the installed distribution's metadata."""
    if _CHECKOUT_VERSION.is_file():
        return _CHECKOUT_VERSION.read_text().strip()
    try:
        return _metadata.version("credential-cache")
    except _metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = _read_version()
