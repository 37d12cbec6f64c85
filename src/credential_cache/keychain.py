"""Keychain facade over a keyring backend.

Callers deal in keys and raw bytes; the facade builds ``Item`` instances
and wraps backend failures in ``KeychainError``. ``ItemNotFoundError``
passes through unchanged so callers can tell a cache miss from a broken
store.
"""

from __future__ import annotations

from credential_cache.errors import ItemNotFoundError, KeychainError
from credential_cache.models import Item
from credential_cache.secrets.store import Keyring


class Keychain:
    """Bytes-level access to a ``Keyring``.

    Parameters
    ----------
    keyring:
        The backend holding the items.
    """

    def __init__(self, keyring: Keyring) -> None:
        self._keyring = keyring

    @property
    def keyring(self) -> Keyring:
        return self._keyring

    def get(self, key: str) -> bytes:
        return self.get_item(key).data

    def get_item(self, key: str) -> Item:
        """Return the full item, including label and description."""
        try:
            return self._keyring.get(key)
        except ItemNotFoundError:
            raise
        except Exception as exc:
            raise KeychainError(f"failed to get item: {exc}") from exc

    def set(
        self,
        key: str,
        data: bytes,
        label: str | None = None,
        description: str | None = None,
    ) -> None:
        item = Item(key=key, data=data, label=label, description=description)
        try:
            self._keyring.set(item)
        except Exception as exc:
            raise KeychainError(f"failed to set item: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._keyring.remove(key)
        except Exception as exc:
            raise KeychainError(f"failed to remove item: {exc}") from exc
