"""Models module."""

from .result import Result, Failure, ErrorKind
from .session import Session, AppState
from .auth import AuthMode, LoginForm, RegisterForm, AuthToken, AuthViewState
from .chat import Role, Turn, KeyAction, SendMessageRequest, KeyPressRequest, ChatViewState

__all__ = [
    'Result', 'Failure', 'ErrorKind',
    'Session', 'AppState',
    'AuthMode', 'LoginForm', 'RegisterForm', 'AuthToken', 'AuthViewState',
    'Role', 'Turn', 'KeyAction', 'SendMessageRequest', 'KeyPressRequest', 'ChatViewState',
]
