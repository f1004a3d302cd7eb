"""
In-Memory Storage Implementation.
Backed by a plain mapping; used when no durable client storage is available.
"""

from typing import MutableMapping, Optional

from .interface import TokenStorage


class MemoryStorage(TokenStorage):
    """Token storage over a mutable mapping."""

    def __init__(self, data: Optional[MutableMapping[str, str]] = None):
        """
        Initialize memory storage.

        Args:
            data: Backing mapping. Pass the same mapping to two instances to
                simulate a page reload over shared storage.
        """
        self.data = data if data is not None else {}

    async def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove_item(self, key: str) -> None:
        self.data.pop(key, None)
