"""
Navigation - application routes and the Navigator capability.
"""

from enum import Enum
from typing import List, Optional, Protocol


class Route(str, Enum):
    """Application routes."""
    ROOT = "/"
    AUTH = "/auth"
    CHAT = "/chat"


class Navigator(Protocol):
    """Capability to move the client to another route."""

    def navigate(self, path: str) -> None:
        ...


class RedirectNavigator:
    """
    Navigator that records where the client should go.
    The HTTP layer turns the final location into a redirect response.
    """

    def __init__(self):
        self.history: List[str] = []

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        self.history.append(path.value if isinstance(path, Route) else path)


class RedirectRequired(Exception):
    """Raised to abort request handling and redirect the client."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location
