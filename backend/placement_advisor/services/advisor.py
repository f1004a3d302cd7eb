"""
Placement advisor completion service.

Every request is built from the same seed: the persona instruction (sent as
a user turn), the canned greeting from the model, and the user's text,
followed by the user's text again as the new message. Earlier turns of the
conversation are not sent.
"""

import logging
from typing import List, Optional

from ..llm import LLMProvider, LLMMessage, GenerationConfig
from ..models import ErrorKind, Result

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_INSTRUCTION = (
    "System prompt: You are a highly experienced placement advisor for college "
    "students at Parul University. Provide advice on interview preparation, resume "
    "building, career paths, and how to excel in campus placements. You should only "
    "focus on topics related to placements and careers."
)
DEFAULT_GREETING = (
    "Namaste! As a placement advisor at Parul University, I'm here to guide you "
    "towards a successful career launch."
)
COMPLETION_FAILED_MESSAGE = "Failed to generate response"


class PlacementAdvisor:
    """Generates advisor replies through the configured LLM provider."""

    def __init__(
        self,
        llm_provider: Optional[LLMProvider],
        generation_config: Optional[GenerationConfig] = None,
        system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
        greeting: str = DEFAULT_GREETING,
    ):
        self.llm_provider = llm_provider
        self.generation_config = generation_config or GenerationConfig()
        self.system_instruction = system_instruction
        self.greeting = greeting

    def seed_history(self, prompt: str) -> List[LLMMessage]:
        """The fixed three-turn context sent ahead of every message."""
        return [
            LLMMessage.text("user", self.system_instruction),
            LLMMessage.text("model", self.greeting),
            LLMMessage.text("user", prompt),
        ]

    def build_messages(self, prompt: str) -> List[LLMMessage]:
        return self.seed_history(prompt) + [LLMMessage.text("user", prompt)]

    async def generate_response(self, prompt: str) -> Result[str]:
        """
        Ask the model for a reply to a single user message.

        Args:
            prompt: The user's message text

        Returns:
            Result holding the reply text, or a COMPLETION failure
        """
        if self.llm_provider is None:
            logger.error("Error generating response: no LLM provider configured")
            return Result.failure(ErrorKind.COMPLETION, COMPLETION_FAILED_MESSAGE)

        try:
            response = await self.llm_provider.chat_completion(
                self.build_messages(prompt), self.generation_config
            )
        except Exception as e:
            logger.error(f"Error generating response: {e}", exc_info=True)
            return Result.failure(ErrorKind.COMPLETION, COMPLETION_FAILED_MESSAGE)

        if not response.content.strip():
            logger.error("Error generating response: empty completion")
            return Result.failure(ErrorKind.COMPLETION, COMPLETION_FAILED_MESSAGE)

        return Result.success(response.content)
