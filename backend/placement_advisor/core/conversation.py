"""
Conversation Engine - the chat view's append-only list of turns.

Only one completion request may be outstanding at a time. A user turn is
always followed by exactly one model turn: the reply, or a fallback message
when the request fails.
"""

import hashlib
import logging
import time
import uuid
from collections import OrderedDict
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from ..models import ChatViewState, KeyAction, Result, Role, Turn

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, I encountered an error. Please try again."

Responder = Callable[[str], Awaitable[Result[str]]]
ChangeListener = Callable[[Tuple[Turn, ...]], None]


def resolve_key_action(key: str, shift_key: bool = False) -> KeyAction:
    """Enter submits, Shift+Enter inserts a line break."""
    if key != "Enter":
        return KeyAction.NONE
    return KeyAction.NEWLINE if shift_key else KeyAction.SUBMIT


class ConversationEngine:
    """Ordered turns plus the single-flight send operation."""

    def __init__(self, responder: Responder, fallback_message: str = FALLBACK_MESSAGE):
        self._responder = responder
        self.fallback_message = fallback_message
        self._turns: List[Turn] = []
        self._listeners: List[ChangeListener] = []
        self.is_loading = False

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def subscribe(self, listener: ChangeListener) -> None:
        """Call listener with the full turn sequence after every append."""
        self._listeners.append(listener)

    def _append(self, role: Role, content: str) -> None:
        self._turns.append(Turn(role=role, content=content))
        snapshot = self.turns
        for listener in self._listeners:
            listener(snapshot)

    async def send(self, text: str) -> bool:
        """
        Send a user message and append the model's reply.

        Args:
            text: Raw input text

        Returns:
            bool: False if the text is blank or a request is already in flight
        """
        message = text.strip() if text else ""
        if not message or self.is_loading:
            return False

        self._append(Role.USER, message)
        self.is_loading = True

        try:
            result = await self._responder(message)
            if result.ok:
                self._append(Role.MODEL, result.value)
            else:
                logger.error(
                    f"Error generating response: {result.error.message}",
                    extra={"extra_fields": {"error_kind": result.error.kind.value}}
                )
                self._append(Role.MODEL, self.fallback_message)
        except Exception as e:
            logger.error(f"Error generating response: {e}", exc_info=True)
            self._append(Role.MODEL, self.fallback_message)
        finally:
            self.is_loading = False

        return True


class ChatView:
    """
    A mounted chat view: owns one conversation and keeps the newest turn
    scrolled into view.
    """

    def __init__(self, engine: ConversationEngine, view_id: Optional[str] = None):
        self.view_id = view_id or uuid.uuid4().hex
        self.engine = engine
        self.scroll_position: Optional[int] = None
        engine.subscribe(self._scroll_to_newest)

    def _scroll_to_newest(self, turns: Tuple[Turn, ...]) -> None:
        self.scroll_position = len(turns) - 1 if turns else None

    async def send(self, text: str) -> bool:
        return await self.engine.send(text)

    async def handle_key(self, key: str, shift_key: bool, text: str) -> KeyAction:
        """Apply a key press from the input; submits the text on Enter."""
        action = resolve_key_action(key, shift_key)
        if action == KeyAction.SUBMIT:
            await self.engine.send(text)
        return action

    def state(self) -> ChatViewState:
        return ChatViewState(
            view_id=self.view_id,
            turns=list(self.engine.turns),
            is_loading=self.engine.is_loading,
            scroll_position=self.scroll_position,
        )


class ChatViewRegistry:
    """
    Active chat views, one per session token. Mounting replaces the previous
    view, so its conversation starts empty.

    The registry is bounded: views unused for ``idle_timeout`` seconds are
    dropped, and past ``max_views`` the least recently used view goes first.
    """

    def __init__(
        self,
        max_views: int = 1000,
        idle_timeout: Optional[float] = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_views < 1:
            raise ValueError("max_views must be at least 1")
        self.max_views = max_views
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._views: "OrderedDict[str, ChatView]" = OrderedDict()
        self._last_used: Dict[str, float] = {}

    @staticmethod
    def _owner_key(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def _touch(self, key: str) -> None:
        self._views.move_to_end(key)
        self._last_used[key] = self._clock()

    def _is_idle(self, key: str, now: float) -> bool:
        if self.idle_timeout is None:
            return False
        return now - self._last_used[key] >= self.idle_timeout

    def _evict(self, key: str, reason: str) -> None:
        view = self._views.pop(key)
        self._last_used.pop(key, None)
        logger.debug(f"Chat view evicted ({reason}): {view.view_id}, {len(self)} active")

    def mount(self, token: str, engine: ConversationEngine) -> ChatView:
        key = self._owner_key(token)
        view = ChatView(engine)
        self._views.pop(key, None)
        self._views[key] = view
        self._touch(key)
        self.prune()
        logger.debug(f"Chat view mounted: {view.view_id}, {len(self)} active")
        return view

    def get(self, token: str, view_id: str) -> Optional[ChatView]:
        key = self._owner_key(token)
        view = self._views.get(key)
        if view is None or view.view_id != view_id:
            return None
        if self._is_idle(key, self._clock()) and not view.engine.is_loading:
            self._evict(key, "idle")
            return None
        self._touch(key)
        return view

    def unmount(self, token: str) -> None:
        key = self._owner_key(token)
        if key in self._views:
            self._evict(key, "unmounted")

    def prune(self) -> int:
        """
        Drop idle views, then the least recently used ones over capacity.

        Views with a reply in flight are never dropped for idleness.

        Returns:
            int: Number of views removed
        """
        evicted = 0
        now = self._clock()
        idle = [
            key for key, view in self._views.items()
            if self._is_idle(key, now) and not view.engine.is_loading
        ]
        for key in idle:
            self._evict(key, "idle")
            evicted += 1

        while len(self._views) > self.max_views:
            self._evict(next(iter(self._views)), "capacity")
            evicted += 1
        return evicted

    def __len__(self) -> int:
        return len(self._views)
