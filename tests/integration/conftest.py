# tests/integration/conftest.py
from pathlib import Path

import pytest
import yaml


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write a minimal YAML config to a temporary file."""
    config = {"storage": {"base_dir": str(tmp_path / "home")}}
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(config))
    return config_path


@pytest.fixture()
def keyring_file(tmp_path: Path) -> Path:
    """Where the CLI keeps the keyring for ``config_file``."""
    return tmp_path / "home" / ".ipatool" / "ipatool-auth.json"
