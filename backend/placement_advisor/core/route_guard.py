"""
Route Guard - only lets authenticated sessions reach protected views.
"""

from typing import Callable, Optional, TypeVar

from .navigation import Navigator, Route
from .session_store import SessionStore

T = TypeVar("T")


class RouteGuard:
    """Wraps a protected view; unauthenticated clients are sent to the auth view."""

    def __init__(self, session_store: SessionStore, navigator: Navigator,
                 redirect_to: str = Route.AUTH):
        self.session_store = session_store
        self.navigator = navigator
        self.redirect_to = redirect_to

    def allow(self) -> bool:
        if self.session_store.is_authenticated:
            return True
        self.navigator.navigate(self.redirect_to)
        return False

    def render(self, view: Callable[[], T]) -> Optional[T]:
        """Return view() when allowed, otherwise redirect and return None."""
        if not self.allow():
            return None
        return view()
