"""
Auth Flow - submits login/registration forms and establishes the session.
"""

import logging
from typing import Dict, Optional, Union

from ..models import AppState, AuthMode, AuthViewState, LoginForm, RegisterForm, Result
from ..services.auth_client import AuthAPIClient
from .navigation import Navigator, Route
from .session_store import SessionStore

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred"

AuthForm = Union[LoginForm, RegisterForm]


class AuthFlow:
    """
    Drives the auth view: one submission at a time, error shown inline,
    session written and navigation to the chat on success.
    """

    def __init__(
        self,
        session_store: SessionStore,
        auth_client: AuthAPIClient,
        navigator: Navigator,
        mode: AuthMode = AuthMode.LOGIN,
    ):
        self.session_store = session_store
        self.auth_client = auth_client
        self.navigator = navigator
        self.mode = mode
        self.is_loading = False
        self.error: Optional[str] = None

    @property
    def state(self) -> AppState:
        if self.is_loading:
            return AppState.AUTHENTICATING
        if self.session_store.is_authenticated:
            return AppState.AUTHENTICATED
        return AppState.UNAUTHENTICATED

    def select_mode(self, mode: AuthMode) -> None:
        self.mode = mode

    def view_state(self) -> AuthViewState:
        return AuthViewState(
            mode=self.mode,
            state=self.state,
            is_loading=self.is_loading,
            error=self.error,
        )

    async def submit(self, form: AuthForm) -> bool:
        """
        Submit a validated login or registration form.

        Args:
            form: LoginForm or RegisterForm; its type selects the mode

        Returns:
            bool: True if the session was established, False on failure or
            when another submission is still in flight
        """
        if self.is_loading:
            logger.debug("Auth submission suppressed: request already in flight")
            return False

        self.mode = form.mode
        self.is_loading = True
        self.error = None

        try:
            result = await self._call_api(form)
            if not result.ok:
                self.error = result.error.message or GENERIC_ERROR_MESSAGE
                logger.info(
                    f"Auth {self.mode.value} failed: {result.error.kind.value}",
                    extra={"extra_fields": {"mode": self.mode.value, "error_kind": result.error.kind.value}}
                )
                return False

            await self.session_store.login(result.value)
            self.navigator.navigate(Route.CHAT)
            return True
        finally:
            self.is_loading = False

    async def _call_api(self, form: AuthForm) -> Result[str]:
        if isinstance(form, RegisterForm):
            return await self.auth_client.register(form.name, form.email, form.password)
        return await self.auth_client.login(form.email, form.password)


class AuthFlowRegistry:
    """
    Auth submissions in flight, keyed by client.

    Each HTTP request builds its own AuthFlow, so the loading guard only holds
    across requests when the pending flow is shared. A client has at most one
    registered flow, and it is released as soon as its submission settles.
    """

    def __init__(self):
        self._flows: Dict[str, AuthFlow] = {}

    def pending(self, client_key: str) -> Optional[AuthFlow]:
        """The client's in-flight flow, if any."""
        return self._flows.get(client_key)

    async def submit(self, client_key: str, flow: AuthFlow, form: AuthForm) -> bool:
        """
        Submit ``form`` through ``flow`` while it is registered for the client.

        Returns:
            bool: False without calling the API if the client already has a
            submission in flight, otherwise the flow's own result
        """
        if client_key in self._flows:
            logger.debug("Auth submission suppressed: client has a request in flight")
            return False

        self._flows[client_key] = flow
        try:
            return await flow.submit(form)
        finally:
            self._flows.pop(client_key, None)
