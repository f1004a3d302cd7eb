"""
LLM Provider Base - Abstract base for all LLM API providers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


@dataclass
class LLMMessage:
    """
    Represents a message in a conversation.
    Roles follow the generative service's vocabulary: "system", "user" and
    "model" ("assistant" is accepted as an alias of "model").
    """
    role: str
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        """Create a text-only message."""
        return LLMMessage(role=role, content=text)


@dataclass
class GenerationConfig:
    """Sampling and output parameters for a completion request."""
    temperature: float = 1.0
    top_p: float = 0.95
    top_k: Optional[int] = 64
    max_output_tokens: int = 8192
    response_mime_type: str = "text/plain"


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 timeout: float = 120.0):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        config: Optional[GenerationConfig] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: Conversation history, ending with the new message
            config: Generation parameters (provider defaults if None)
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the generated content

        Raises:
            httpx.HTTPError: On transport or HTTP status errors
            ValueError: If the response carries no generated text
        """
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to the chat/completions message format."""
        return [
            {"role": "assistant" if m.role == "model" else m.role, "content": m.content}
            for m in messages
        ]
