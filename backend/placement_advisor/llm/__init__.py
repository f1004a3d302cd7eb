"""LLM module - provides unified interface for LLM API providers."""

from .base import LLMProvider, LLMMessage, LLMResponse, GenerationConfig
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'GenerationConfig',
    'GeminiProvider',
    'OpenAIProvider',
    'create_llm_provider',
]
