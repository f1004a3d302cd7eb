"""
Chat Models - Defines conversation turns and chat view payloads.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Speaker of a turn."""
    USER = "user"
    MODEL = "model"


class Turn(BaseModel):
    """One message in the conversation. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class KeyAction(str, Enum):
    """What a key press in the message input does."""
    SUBMIT = "submit"
    NEWLINE = "newline"
    NONE = "none"


class SendMessageRequest(BaseModel):
    """Message submitted from the chat input."""
    text: str


class KeyPressRequest(BaseModel):
    """Key press in the chat input, with the current input text."""
    key: str
    shift_key: bool = False
    text: str = ""


class ChatViewState(BaseModel):
    """What the chat view renders."""
    view_id: str
    turns: list[Turn]
    is_loading: bool = False
    scroll_position: Optional[int] = None  # index of the turn scrolled into view
