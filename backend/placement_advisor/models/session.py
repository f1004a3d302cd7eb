"""
Session Models - Defines the client session and application state.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class AppState(str, Enum):
    """Whole-application authentication state."""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """Snapshot of the client's belief about authentication."""

    model_config = ConfigDict(frozen=True)

    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None
