"""
Unit tests for the Route Guard and navigation.
"""

import pytest

from placement_advisor.core import RedirectNavigator, Route, RouteGuard


class TestRedirectNavigator:

    def test_no_location_initially(self):
        assert RedirectNavigator().location is None

    def test_records_last_location(self):
        navigator = RedirectNavigator()
        navigator.navigate(Route.AUTH)
        navigator.navigate("/chat")
        assert navigator.history == ["/auth", "/chat"]
        assert navigator.location == "/chat"


class TestRouteGuard:

    @pytest.mark.asyncio
    async def test_unauthenticated_is_redirected(self, session_store):
        await session_store.init()
        navigator = RedirectNavigator()
        guard = RouteGuard(session_store, navigator)

        assert guard.allow() is False
        assert navigator.location == Route.AUTH.value

    @pytest.mark.asyncio
    async def test_authenticated_is_allowed(self, session_store):
        await session_store.login("abc")
        navigator = RedirectNavigator()
        guard = RouteGuard(session_store, navigator)

        assert guard.allow() is True
        assert navigator.location is None

    @pytest.mark.asyncio
    async def test_render_only_when_allowed(self, session_store):
        navigator = RedirectNavigator()
        guard = RouteGuard(session_store, navigator)
        assert guard.render(lambda: "chat") is None

        await session_store.login("abc")
        assert guard.render(lambda: "chat") == "chat"

    @pytest.mark.asyncio
    async def test_logout_locks_view_again(self, session_store):
        await session_store.login("abc")
        await session_store.logout()
        navigator = RedirectNavigator()

        assert RouteGuard(session_store, navigator).allow() is False
        assert navigator.location == "/auth"
