"""
Token Storage Interface - Abstract base class for durable client-side storage.
This interface enables seamless switching between cookie-backed and in-memory storage.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Raised when the durable storage backend cannot be reached."""


class TokenStorage(ABC):
    """
    Abstract string key/value store that survives page reloads.
    Mirrors the subset of browser storage the session layer relies on.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key (e.g., "token")

        Returns:
            Optional[str]: Stored value, or None if the key is absent

        Raises:
            StorageError: If the backend is unavailable
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Store a string value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: String value to store

        Raises:
            StorageError: If the backend is unavailable
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Args:
            key: Storage key

        Raises:
            StorageError: If the backend is unavailable
        """
        pass
