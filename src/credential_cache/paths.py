"""Filesystem locations for the keyring file."""

from __future__ import annotations

import logging
import os
import pathlib
import stat
import tempfile
from typing import Callable

from credential_cache.config import Settings
from credential_cache.errors import ConfigDirectoryError

logger = logging.getLogger(__name__)

HomeResolver = Callable[[], pathlib.Path]

_DIR_MODE = 0o700


def resolve_base_directory(settings: Settings, home_resolver: HomeResolver = pathlib.Path.home) -> pathlib.Path:
    """Directory that holds the config directory: ``storage.base_dir`` or the user's home."""
    if settings.storage.base_dir:
        return pathlib.Path(settings.storage.base_dir).expanduser()
    return home_resolver()


def config_directory(settings: Settings, home_resolver: HomeResolver = pathlib.Path.home) -> pathlib.Path:
    return resolve_base_directory(settings, home_resolver) / settings.storage.directory_name


def keyring_path(settings: Settings, home_resolver: HomeResolver = pathlib.Path.home) -> pathlib.Path:
    return config_directory(settings, home_resolver) / settings.storage.file_name


def fallback_keyring_path(settings: Settings) -> pathlib.Path:
    """Non-persistent location used when the config directory is unusable.

    The file lives in a per-user directory under the system temp dir, so one
    account cannot plant a keyring that another account then loads.
    """
    private_dir = pathlib.Path(tempfile.gettempdir()) / f"credential-cache-{os.getuid()}"
    return private_dir / settings.storage.file_name


def ensure_config_directory(path: pathlib.Path) -> None:
    """Create *path* with owner-only access if it does not exist yet.

    An existing directory is left as it is, permissions included.

    Raises
    ------
    ConfigDirectoryError
        If the directory cannot be created or its metadata cannot be read.
    """
    try:
        path.stat()
    except FileNotFoundError:
        try:
            # mkdir applies the umask to mode
            path.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
            os.chmod(path, _DIR_MODE)
        except OSError as exc:
            raise ConfigDirectoryError(f"failed to create config directory {path}: {exc}") from exc
        logger.debug("Created config directory %s", path)
    except OSError as exc:
        raise ConfigDirectoryError(f"could not read metadata of {path}: {exc}") from exc


def ensure_private_directory(path: pathlib.Path) -> None:
    """Like ``ensure_config_directory``, and also reject a directory that is
    a symlink, belongs to another user, or is open to group or others.
    """
    ensure_config_directory(path)
    try:
        info = path.lstat()
    except OSError as exc:
        raise ConfigDirectoryError(f"could not read metadata of {path}: {exc}") from exc
    if (
        not stat.S_ISDIR(info.st_mode)
        or info.st_uid != os.getuid()
        or stat.S_IMODE(info.st_mode) & 0o077
    ):
        raise ConfigDirectoryError(f"{path} is not a private directory of the current user")
