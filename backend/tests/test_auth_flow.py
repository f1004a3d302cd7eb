"""
Unit tests for the Auth Flow.
"""

import asyncio
import pytest
from pydantic import ValidationError

from placement_advisor.core import AuthFlow, AuthFlowRegistry, RedirectNavigator, Route
from placement_advisor.core.auth_flow import GENERIC_ERROR_MESSAGE
from placement_advisor.models import (
    AppState, AuthMode, ErrorKind, LoginForm, RegisterForm, Result
)


@pytest.fixture
def navigator():
    return RedirectNavigator()


@pytest.fixture
def flow(session_store, fake_auth_client, navigator):
    return AuthFlow(session_store, fake_auth_client, navigator)


class TestForms:
    """Client-side presence and format validation."""

    def test_login_form_valid(self):
        form = LoginForm(email="a@b.com", password="x")
        assert form.mode == AuthMode.LOGIN

    def test_login_form_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            LoginForm(email="not-an-email", password="x")

    def test_login_form_requires_password(self):
        with pytest.raises(ValidationError):
            LoginForm(email="a@b.com", password="")

    def test_register_form_requires_name(self):
        with pytest.raises(ValidationError):
            RegisterForm(name="", email="a@b.com", password="x")


class TestAuthFlow:
    """Tests for AuthFlow.submit and its state."""

    @pytest.mark.asyncio
    async def test_login_success(self, flow, session_store, fake_auth_client, navigator):
        ok = await flow.submit(LoginForm(email="a@b.com", password="x"))

        assert ok is True
        assert fake_auth_client.calls == [("login", "a@b.com", "x")]
        assert session_store.token == "abc"
        assert session_store.is_authenticated is True
        assert navigator.location == Route.CHAT.value
        assert flow.error is None
        assert flow.is_loading is False
        assert flow.state == AppState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_register_success(self, flow, session_store, fake_auth_client, navigator):
        fake_auth_client.result = Result.success("new-token")

        ok = await flow.submit(RegisterForm(name="Asha", email="a@b.com", password="x"))

        assert ok is True
        assert fake_auth_client.calls == [("register", "Asha", "a@b.com", "x")]
        assert session_store.token == "new-token"
        assert flow.mode == AuthMode.REGISTER
        assert navigator.location == Route.CHAT.value

    @pytest.mark.asyncio
    async def test_failure_shows_message(self, flow, session_store, fake_auth_client, navigator):
        fake_auth_client.result = Result.failure(ErrorKind.REJECTED, "Invalid credentials")

        ok = await flow.submit(LoginForm(email="a@b.com", password="wrong"))

        assert ok is False
        assert flow.error == "Invalid credentials"
        assert session_store.is_authenticated is False
        assert navigator.location is None
        assert flow.is_loading is False
        assert flow.state == AppState.UNAUTHENTICATED

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_generic_text(self, flow, fake_auth_client):
        fake_auth_client.result = Result.failure(ErrorKind.NETWORK)

        await flow.submit(LoginForm(email="a@b.com", password="x"))

        assert flow.error == GENERIC_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_new_submission_clears_previous_error(self, flow, fake_auth_client):
        fake_auth_client.result = Result.failure(ErrorKind.REJECTED, "nope")
        await flow.submit(LoginForm(email="a@b.com", password="x"))
        assert flow.error == "nope"

        fake_auth_client.result = Result.success("abc")
        await flow.submit(LoginForm(email="a@b.com", password="x"))
        assert flow.error is None

    @pytest.mark.asyncio
    async def test_no_automatic_retry(self, flow, fake_auth_client):
        fake_auth_client.result = Result.failure(ErrorKind.NETWORK, "down")
        await flow.submit(LoginForm(email="a@b.com", password="x"))
        assert len(fake_auth_client.calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_submission_suppressed(self, session_store, navigator):
        release = asyncio.Event()
        calls = []

        class SlowAuthClient:
            async def login(self, email, password):
                calls.append(email)
                await release.wait()
                return Result.success("abc")

        flow = AuthFlow(session_store, SlowAuthClient(), navigator)
        form = LoginForm(email="a@b.com", password="x")

        first = asyncio.create_task(flow.submit(form))
        await asyncio.sleep(0)
        assert flow.is_loading is True
        assert flow.state == AppState.AUTHENTICATING

        assert await flow.submit(form) is False
        assert len(calls) == 1

        release.set()
        assert await first is True
        assert flow.is_loading is False

    @pytest.mark.asyncio
    async def test_loading_cleared_when_client_raises(self, session_store, navigator):
        class BrokenAuthClient:
            async def login(self, email, password):
                raise RuntimeError("boom")

        flow = AuthFlow(session_store, BrokenAuthClient(), navigator)
        with pytest.raises(RuntimeError):
            await flow.submit(LoginForm(email="a@b.com", password="x"))
        assert flow.is_loading is False

    def test_select_mode(self, flow):
        flow.select_mode(AuthMode.REGISTER)
        state = flow.view_state()
        assert state.mode == AuthMode.REGISTER
        assert state.modes == [AuthMode.LOGIN, AuthMode.REGISTER]
        assert state.is_loading is False


class TestAuthFlowRegistry:
    """Submissions shared across separately built flows."""

    @pytest.mark.asyncio
    async def test_second_flow_for_same_client_is_suppressed(self, session_store, fake_auth_client):
        fake_auth_client.gate = asyncio.Event()
        flows = AuthFlowRegistry()
        form = LoginForm(email="a@b.com", password="x")
        first_flow = AuthFlow(session_store, fake_auth_client, RedirectNavigator())

        first = asyncio.create_task(flows.submit("client:1", first_flow, form))
        await asyncio.wait_for(fake_auth_client.entered.wait(), timeout=5)

        assert flows.pending("client:1") is first_flow
        assert flows.pending("client:1").state == AppState.AUTHENTICATING
        second_flow = AuthFlow(session_store, fake_auth_client, RedirectNavigator())
        assert await flows.submit("client:1", second_flow, form) is False
        assert len(fake_auth_client.calls) == 1

        fake_auth_client.gate.set()
        assert await first is True
        assert flows.pending("client:1") is None

    @pytest.mark.asyncio
    async def test_other_clients_are_independent(self, session_store, fake_auth_client):
        flows = AuthFlowRegistry()
        form = LoginForm(email="a@b.com", password="x")

        assert await flows.submit("client:1", AuthFlow(session_store, fake_auth_client, RedirectNavigator()), form)
        assert await flows.submit("client:2", AuthFlow(session_store, fake_auth_client, RedirectNavigator()), form)
        assert len(fake_auth_client.calls) == 2

    @pytest.mark.asyncio
    async def test_released_after_failure(self, session_store, fake_auth_client):
        fake_auth_client.result = Result.failure(ErrorKind.REJECTED, "Invalid credentials")
        flows = AuthFlowRegistry()
        flow = AuthFlow(session_store, fake_auth_client, RedirectNavigator())

        assert await flows.submit("client:1", flow, LoginForm(email="a@b.com", password="x")) is False
        assert flow.error == "Invalid credentials"
        assert flows.pending("client:1") is None
