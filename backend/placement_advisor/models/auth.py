"""
Auth Models - Credential forms and auth view state.
"""

from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

from .session import AppState


class AuthMode(str, Enum):
    """The two mutually exclusive auth forms."""
    LOGIN = "login"
    REGISTER = "register"


class LoginForm(BaseModel):
    """Login form. All fields required."""
    mode: Literal[AuthMode.LOGIN] = AuthMode.LOGIN
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterForm(BaseModel):
    """Registration form. All fields required."""
    mode: Literal[AuthMode.REGISTER] = AuthMode.REGISTER
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthToken(BaseModel):
    """Successful response body of the authentication API."""
    token: str = Field(..., min_length=1)


class AuthViewState(BaseModel):
    """What the auth view renders."""
    mode: AuthMode = AuthMode.LOGIN
    modes: list[AuthMode] = [AuthMode.LOGIN, AuthMode.REGISTER]
    state: AppState = AppState.UNAUTHENTICATED
    is_loading: bool = False
    error: Optional[str] = None
