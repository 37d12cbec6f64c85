"""Abstract interface for keyring storage."""

from __future__ import annotations

from abc import ABC, abstractmethod

from credential_cache.models import Item


class Keyring(ABC):
    """Abstract keyring. Implementations own where and how items are kept.

    All methods block until the operation, including any persistence, has
    completed or failed.
    """

    @abstractmethod
    def get(self, key: str) -> Item:
        """Return the item stored under *key*.

        Raises ``ItemNotFoundError`` if there is none.
        """

    @abstractmethod
    def set(self, item: Item) -> None:
        """Store *item*, replacing any existing item with the same key."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the item under *key*. Does not raise if it does not exist."""
