"""
Session Store - keeps the bearer token in durable storage and in memory.
"""

import logging
from typing import Optional

from ..models import Session
from ..storage import TokenStorage, StorageError

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class SessionStore:
    """
    Client session backed by a durable token storage.

    The in-memory token is hydrated from storage by init() and kept in sync
    by login() and logout(). Storage failures degrade to "no token".
    """

    def __init__(self, storage: TokenStorage, key: str = TOKEN_KEY):
        self.storage = storage
        self.key = key
        self._token: Optional[str] = None
        self._initialized = False

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self.snapshot().is_authenticated

    def snapshot(self) -> Session:
        """Immutable copy of the in-memory session."""
        return Session(token=self._token)

    async def init(self) -> None:
        """Hydrate the in-memory token from durable storage. Runs once."""
        if self._initialized:
            return
        self._initialized = True

        try:
            stored = await self.storage.get_item(self.key)
        except StorageError as e:
            logger.warning(f"Token storage unavailable, starting unauthenticated: {e}")
            stored = None

        # An empty string is treated like a missing key
        self._token = stored or None
        logger.debug(f"Session initialized: authenticated={self.is_authenticated}")

    async def login(self, token: str) -> None:
        """
        Persist a token and mark the session authenticated.

        Args:
            token: Bearer token returned by the authentication API
        """
        self._initialized = True
        try:
            await self.storage.set_item(self.key, token)
        except StorageError as e:
            logger.warning(f"Failed to persist session token: {e}")
        self._token = token
        logger.info("Session authenticated")

    async def logout(self) -> None:
        """Clear the token from durable storage and memory."""
        self._initialized = True
        try:
            await self.storage.remove_item(self.key)
        except StorageError as e:
            logger.warning(f"Failed to remove session token: {e}")
        self._token = None
        logger.info("Session cleared")
