"""
Authentication view endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, Form, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from ..config import settings
from ..core import AuthFlow, AuthFlowRegistry, ChatViewRegistry, RedirectNavigator, Route, SessionStore
from ..models import AuthMode, AuthViewState, LoginForm, RegisterForm
from ..services import AuthAPIClient
from .deps import commit_session, get_auth_client, get_auth_flows, get_session_store, get_view_registry

router = APIRouter(prefix="/auth", tags=["authentication"])


def _client_key(request: Request, email: str) -> str:
    """Key for in-flight submissions: the pre-auth client cookie, else the account."""
    client_id = request.cookies.get(settings.auth_client_cookie_name)
    if client_id:
        return f"client:{client_id}"
    return f"email:{email.lower()}"


async def _submit(
    request: Request,
    form: LoginForm | RegisterForm,
    session_store: SessionStore,
    auth_client: AuthAPIClient,
    flows: AuthFlowRegistry,
    registry: ChatViewRegistry,
    failure_status: int,
):
    """Run the auth flow; redirect to the chat on success, re-render the view on failure."""
    client_key = _client_key(request, form.email)
    pending = flows.pending(client_key)
    if pending is not None:
        return JSONResponse(
            pending.view_state().model_dump(mode="json"),
            status_code=status.HTTP_409_CONFLICT,
        )

    previous_token = session_store.token
    navigator = RedirectNavigator()
    flow = AuthFlow(session_store, auth_client, navigator)

    if await flows.submit(client_key, flow, form):
        # The replaced session's conversation is no longer reachable
        if previous_token and previous_token != session_store.token:
            registry.unmount(previous_token)
        response = RedirectResponse(navigator.location, status_code=status.HTTP_303_SEE_OTHER)
        return commit_session(response, session_store)

    return JSONResponse(flow.view_state().model_dump(mode="json"), status_code=failure_status)


@router.get("", response_model=AuthViewState)
async def auth_view(
    request: Request,
    response: Response,
    mode: AuthMode = Query(AuthMode.LOGIN, description="Which form to show"),
    session_store: SessionStore = Depends(get_session_store),
    auth_client: AuthAPIClient = Depends(get_auth_client),
    flows: AuthFlowRegistry = Depends(get_auth_flows),
):
    """
    Current state of the auth view.

    Reports ``authenticating`` while this client's submission is pending.
    Clients without one get a pre-auth cookie identifying their submissions.
    """
    client_id = request.cookies.get(settings.auth_client_cookie_name)
    if client_id:
        pending = flows.pending(f"client:{client_id}")
        if pending is not None:
            return pending.view_state()
    else:
        response.set_cookie(
            settings.auth_client_cookie_name,
            uuid.uuid4().hex,
            httponly=True,
            samesite="lax",
            secure=settings.token_cookie_secure,
        )

    flow = AuthFlow(session_store, auth_client, RedirectNavigator(), mode=mode)
    return flow.view_state()


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    session_store: SessionStore = Depends(get_session_store),
    auth_client: AuthAPIClient = Depends(get_auth_client),
    flows: AuthFlowRegistry = Depends(get_auth_flows),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """
    Log in through the authentication API.

    Returns:
        303 to /chat with the token cookie set, 401 with the auth view state,
        or 409 while this client's previous submission is pending

    Raises:
        RequestValidationError: If a field is empty or the email is malformed
    """
    try:
        form = LoginForm(email=email, password=password)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    return await _submit(
        request, form, session_store, auth_client, flows, registry, status.HTTP_401_UNAUTHORIZED
    )


@router.post("/register")
async def register(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    session_store: SessionStore = Depends(get_session_store),
    auth_client: AuthAPIClient = Depends(get_auth_client),
    flows: AuthFlowRegistry = Depends(get_auth_flows),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """
    Create an account through the authentication API.

    Returns:
        303 to /chat with the token cookie set, 400 with the auth view state,
        or 409 while this client's previous submission is pending
    """
    try:
        form = RegisterForm(name=name, email=email, password=password)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    return await _submit(
        request, form, session_store, auth_client, flows, registry, status.HTTP_400_BAD_REQUEST
    )


@router.post("/logout")
async def logout(
    session_store: SessionStore = Depends(get_session_store),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """Clear the session and go back to the auth view."""
    if session_store.token:
        registry.unmount(session_store.token)
    await session_store.logout()

    response = RedirectResponse(Route.AUTH.value, status_code=status.HTTP_303_SEE_OTHER)
    return commit_session(response, session_store)
