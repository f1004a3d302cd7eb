"""Core module - session, auth flow, conversation and routing logic."""

from .navigation import Route, Navigator, RedirectNavigator, RedirectRequired
from .session_store import SessionStore
from .auth_flow import AuthFlow, AuthFlowRegistry
from .conversation import ConversationEngine, ChatView, ChatViewRegistry, resolve_key_action
from .route_guard import RouteGuard

__all__ = [
    'Route', 'Navigator', 'RedirectNavigator', 'RedirectRequired',
    'SessionStore', 'AuthFlow', 'AuthFlowRegistry',
    'ConversationEngine', 'ChatView', 'ChatViewRegistry', 'resolve_key_action',
    'RouteGuard',
]
