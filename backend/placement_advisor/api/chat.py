"""
Chat view endpoints. All routes require an authenticated session.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import settings
from ..core import ChatView, ChatViewRegistry, ConversationEngine, SessionStore, resolve_key_action
from ..models import ChatViewState, KeyAction, KeyPressRequest, SendMessageRequest
from ..services import PlacementAdvisor
from .deps import get_advisor, get_view_registry, require_session

router = APIRouter(prefix="/chat", tags=["chat"])


def _get_view(view_id: str, session_store: SessionStore, registry: ChatViewRegistry) -> ChatView:
    view = registry.get(session_store.token, view_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat view not found"
        )
    return view


def _ensure_idle(view: ChatView) -> None:
    if view.engine.is_loading:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A response is still being generated"
        )


@router.get("", response_model=ChatViewState)
async def mount_chat_view(
    session_store: SessionStore = Depends(require_session),
    advisor: PlacementAdvisor = Depends(get_advisor),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """Open the chat view with an empty conversation, replacing any earlier one."""
    if settings.chat_fallback_message:
        engine = ConversationEngine(advisor.generate_response, settings.chat_fallback_message)
    else:
        engine = ConversationEngine(advisor.generate_response)
    view = registry.mount(session_store.token, engine)
    return view.state()


@router.get("/{view_id}", response_model=ChatViewState)
async def get_chat_view(
    view_id: str,
    session_store: SessionStore = Depends(require_session),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    return _get_view(view_id, session_store, registry).state()


@router.post("/{view_id}/messages", response_model=ChatViewState)
async def send_message(
    view_id: str,
    message: SendMessageRequest,
    session_store: SessionStore = Depends(require_session),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """
    Send a message and wait for the advisor's reply.

    Blank messages leave the conversation unchanged.

    Raises:
        HTTPException: 404 for an unknown view, 409 while a reply is pending
    """
    view = _get_view(view_id, session_store, registry)
    _ensure_idle(view)
    await view.send(message.text)
    return view.state()


@router.post("/{view_id}/keys", response_model=ChatViewState)
async def key_press(
    view_id: str,
    key_press: KeyPressRequest,
    session_store: SessionStore = Depends(require_session),
    registry: ChatViewRegistry = Depends(get_view_registry),
):
    """Forward a key press from the message input (Enter sends)."""
    view = _get_view(view_id, session_store, registry)
    if resolve_key_action(key_press.key, key_press.shift_key) == KeyAction.SUBMIT:
        _ensure_idle(view)
    await view.handle_key(key_press.key, key_press.shift_key, key_press.text)
    return view.state()
