"""
Shared FastAPI dependencies: session, route guard and service wiring.
"""

from fastapi import Depends, Request
from starlette.responses import Response

from ..config import settings
from ..core import (
    AuthFlowRegistry, ChatViewRegistry, RedirectNavigator, RedirectRequired, RouteGuard, SessionStore
)
from ..llm import GenerationConfig, create_llm_provider
from ..services import AuthAPIClient, PlacementAdvisor
from ..storage import CookieStorage

# Process-wide state: pending auth submissions and active chat views
auth_flows = AuthFlowRegistry()
view_registry = ChatViewRegistry(
    max_views=settings.chat_max_views,
    idle_timeout=settings.chat_view_idle_timeout,
)


async def get_session_store(request: Request) -> SessionStore:
    """Session Store over the client's cookies, hydrated for this request."""
    storage = CookieStorage(
        request.cookies,
        max_age=settings.token_cookie_max_age,
        secure=settings.token_cookie_secure,
    )
    session_store = SessionStore(storage, key=settings.token_cookie_name)
    await session_store.init()
    return session_store


async def require_session(session_store: SessionStore = Depends(get_session_store)) -> SessionStore:
    """
    Route guard dependency.

    Raises:
        RedirectRequired: If the session is not authenticated
    """
    navigator = RedirectNavigator()
    allowed = RouteGuard(session_store, navigator).render(lambda: session_store)
    if allowed is None:
        raise RedirectRequired(navigator.location)
    return allowed


def commit_session(response: Response, session_store: SessionStore) -> Response:
    """Write pending token changes onto the response."""
    storage = session_store.storage
    if isinstance(storage, CookieStorage) and storage.has_changes:
        storage.apply(response)
    return response


def get_auth_client() -> AuthAPIClient:
    return AuthAPIClient(settings.auth_api_base_url, timeout=settings.auth_api_timeout)


def get_auth_flows() -> AuthFlowRegistry:
    return auth_flows


def get_advisor() -> PlacementAdvisor:
    """Placement advisor over the configured LLM provider (None if no key)."""
    api_key = settings.llm_api_key or settings.google_api_key
    llm_provider = create_llm_provider(
        provider=settings.llm_provider,
        api_key=api_key or "",
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout,
    )
    generation_config = GenerationConfig(
        temperature=settings.generation_temperature,
        top_p=settings.generation_top_p,
        top_k=settings.generation_top_k,
        max_output_tokens=settings.generation_max_output_tokens,
        response_mime_type=settings.generation_response_mime_type,
    )
    persona = {}
    if settings.advisor_system_instruction:
        persona["system_instruction"] = settings.advisor_system_instruction
    if settings.advisor_greeting:
        persona["greeting"] = settings.advisor_greeting
    return PlacementAdvisor(llm_provider, generation_config=generation_config, **persona)


def get_view_registry() -> ChatViewRegistry:
    return view_registry
