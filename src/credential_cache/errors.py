"""Exception hierarchy for the credential cache.

Every error raised on purpose by this package derives from
``CredentialCacheError``. Plain ``OSError`` from file I/O is allowed to
propagate out of the keyring untouched; the ``Keychain`` facade wraps it.
"""

from __future__ import annotations

from pathlib import Path


class CredentialCacheError(Exception):
    """Base class for credential cache errors."""


class ItemNotFoundError(CredentialCacheError, KeyError):
    """The requested key has no item in the keyring."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"item not found: {self.key!r}"


class MalformedStoreError(CredentialCacheError):
    """The backing file exists but does not hold a valid keyring document."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"malformed keyring file {path}: {reason}")
        self.path = path
        self.reason = reason


class KeychainError(CredentialCacheError):
    """A keychain operation failed; the underlying error is chained."""


class ConfigDirectoryError(CredentialCacheError):
    """The configuration directory could not be created or inspected."""


class StorageUnavailableError(CredentialCacheError):
    """No location could be opened for the keyring file."""
