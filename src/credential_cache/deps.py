"""Construction of the shared collaborators used by CLI commands.

``build_dependencies`` returns a fresh ``Dependencies`` object on each call;
nothing is cached at module level, so tests can build as many independent
instances as they need.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass

from credential_cache.config import Settings
from credential_cache.errors import ConfigDirectoryError, StorageUnavailableError
from credential_cache.keychain import Keychain
from credential_cache.paths import (
    HomeResolver,
    ensure_config_directory,
    ensure_private_directory,
    fallback_keyring_path,
    keyring_path,
)
from credential_cache.secrets.json_file import JSONKeyring

_LOGGER_NAME = "credential_cache"


@dataclass
class Dependencies:
    settings: Settings
    logger: logging.Logger
    keychain: Keychain
    keyring_path: pathlib.Path
    persistent: bool = True


def open_keyring(
    settings: Settings,
    logger: logging.Logger,
    home_resolver: HomeResolver = pathlib.Path.home,
) -> tuple[JSONKeyring, bool]:
    """Open the keyring under the config directory, or in the temp directory.

    Returns the keyring and whether it lives at the persistent location.
    ``MalformedStoreError`` is never handled here: a corrupt file must reach
    the user rather than be replaced by an empty temporary keyring.

    Raises
    ------
    StorageUnavailableError
        If neither location can be used, or the fallback is disabled.
    """
    primary = keyring_path(settings, home_resolver)
    try:
        ensure_config_directory(primary.parent)
        return JSONKeyring(primary), True
    except (ConfigDirectoryError, OSError) as exc:
        logger.error("failed to open keyring at %s: %s", primary, exc)
        if not settings.storage.fallback_to_temp:
            raise StorageUnavailableError(f"keyring unavailable at {primary}") from exc

    fallback = fallback_keyring_path(settings)
    logger.warning("Falling back to temporary storage: %s", fallback)
    try:
        ensure_private_directory(fallback.parent)
        return JSONKeyring(fallback), False
    except (ConfigDirectoryError, OSError) as exc:
        logger.error("failed to open keyring in temp directory: %s", exc)
        raise StorageUnavailableError(
            f"keyring unavailable at {primary} and at {fallback}"
        ) from exc


def build_dependencies(
    settings: Settings,
    logger: logging.Logger | None = None,
    home_resolver: HomeResolver = pathlib.Path.home,
) -> Dependencies:
    """Build the collaborators for one command invocation."""
    if logger is None:
        logger = logging.getLogger(_LOGGER_NAME)

    keyring, persistent = open_keyring(settings, logger, home_resolver)
    return Dependencies(
        settings=settings,
        logger=logger,
        keychain=Keychain(keyring),
        keyring_path=keyring.path,
        persistent=persistent,
    )
