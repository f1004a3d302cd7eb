"""
Unit tests for the placement advisor completion service.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from placement_advisor.core import ConversationEngine
from placement_advisor.core.conversation import FALLBACK_MESSAGE
from placement_advisor.llm import GenerationConfig, LLMProvider, LLMResponse
from placement_advisor.llm.gemini_provider import GeminiProvider
from placement_advisor.models import ErrorKind, Role, Turn
from placement_advisor.services import PlacementAdvisor
from placement_advisor.services.advisor import DEFAULT_GREETING, DEFAULT_SYSTEM_INSTRUCTION


@pytest.fixture
def provider():
    mock = MagicMock(spec=LLMProvider)
    mock.chat_completion = AsyncMock(return_value=LLMResponse(content="Focus on communication and DSA."))
    return mock


class TestPlacementAdvisor:

    def test_seed_history(self):
        advisor = PlacementAdvisor(None)
        history = advisor.seed_history("How do I prepare?")
        assert [(m.role, m.content) for m in history] == [
            ("user", DEFAULT_SYSTEM_INSTRUCTION),
            ("model", DEFAULT_GREETING),
            ("user", "How do I prepare?"),
        ]

    @pytest.mark.asyncio
    async def test_request_is_seed_plus_message(self, provider):
        config = GenerationConfig(temperature=0.5)
        advisor = PlacementAdvisor(provider, generation_config=config)

        result = await advisor.generate_response("What skills do I need for placements?")

        assert result.ok
        assert result.value == "Focus on communication and DSA."
        messages, sent_config = provider.chat_completion.call_args.args
        assert len(messages) == 4
        assert messages[0].content == DEFAULT_SYSTEM_INSTRUCTION
        assert messages[-1].role == "user"
        assert messages[-1].content == "What skills do I need for placements?"
        assert sent_config is config

    @pytest.mark.asyncio
    async def test_prior_turns_are_not_sent(self, provider):
        advisor = PlacementAdvisor(provider)
        await advisor.generate_response("first")
        await advisor.generate_response("second")

        messages = provider.chat_completion.call_args.args[0]
        assert all(m.content != "first" for m in messages)

    @pytest.mark.asyncio
    async def test_custom_persona(self, provider):
        advisor = PlacementAdvisor(provider, system_instruction="persona", greeting="hey")
        await advisor.generate_response("hi")
        messages = provider.chat_completion.call_args.args[0]
        assert messages[0].content == "persona"
        assert messages[1].content == "hey"

    @pytest.mark.asyncio
    async def test_provider_error_becomes_failure(self, provider):
        provider.chat_completion.side_effect = RuntimeError("quota exceeded")
        advisor = PlacementAdvisor(provider)

        result = await advisor.generate_response("hi")

        assert not result.ok
        assert result.error.kind == ErrorKind.COMPLETION
        assert result.error.message == "Failed to generate response"

    @pytest.mark.asyncio
    async def test_missing_provider_is_failure(self):
        result = await PlacementAdvisor(None).generate_response("hi")
        assert result.error.kind == ErrorKind.COMPLETION

    @pytest.mark.asyncio
    async def test_empty_completion_is_failure(self, provider):
        provider.chat_completion.return_value = LLMResponse(content="  ")
        advisor = PlacementAdvisor(provider)

        result = await advisor.generate_response("hi")

        assert not result.ok
        assert result.error.kind == ErrorKind.COMPLETION

    @pytest.mark.asyncio
    async def test_blocked_gemini_candidate_ends_with_fallback_turn(self):
        advisor = PlacementAdvisor(GeminiProvider(api_key="test-key"))
        engine = ConversationEngine(advisor.generate_response)

        with patch("httpx.AsyncClient") as mock_client:
            mock_response = MagicMock()
            mock_response.status_code = 200
            mock_response.json.return_value = {"candidates": [{"finishReason": "SAFETY"}]}
            mock_response.raise_for_status = MagicMock()
            mock_instance = AsyncMock()
            mock_instance.post.return_value = mock_response
            mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
            mock_instance.__aexit__ = AsyncMock(return_value=False)
            mock_client.return_value = mock_instance

            await engine.send("hi")

        assert engine.turns == (
            Turn(role=Role.USER, content="hi"),
            Turn(role=Role.MODEL, content=FALLBACK_MESSAGE),
        )
