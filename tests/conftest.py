"""Shared test fixtures for credential cache tests."""

import os
import pathlib

import pytest

from credential_cache.config import Settings, StorageConfig

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]


@pytest.fixture
def repo_root() -> pathlib.Path:
    return REPO_ROOT


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CREDCACHE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("CREDCACHE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def keyring_file(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "ipatool-auth.json"


@pytest.fixture
def settings(tmp_path: pathlib.Path) -> Settings:
    """Settings rooted at a temporary base directory."""
    return Settings(storage=StorageConfig(base_dir=str(tmp_path / "home")))
