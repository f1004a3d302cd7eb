"""
OpenAI-compatible LLM Provider.
Works with any endpoint that speaks the chat/completions format.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse, GenerationConfig

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Provider for OpenAI and OpenAI-compatible chat/completions APIs.
    top_k and the response MIME type have no equivalent and are not sent.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
    ):
        super().__init__(api_key, model, base_url, timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        config: Optional[GenerationConfig] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the Chat Completions endpoint."""
        start_time = time.time()
        config = config or GenerationConfig()
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": self._format_messages(messages),
            "temperature": config.temperature,
            "top_p": config.top_p,
            "max_tokens": config.max_output_tokens,
        }

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: provider=openai, model={payload['model']}, "
                f"temperature={payload['temperature']}, {len(messages)} messages"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                logger.debug(f"LLM API response status: {resp.status_code}")
                resp.raise_for_status()
                data = resp.json()

            content = data["choices"][0]["message"]["content"]
            if content is None:
                raise ValueError("Completion returned no content")
            usage = data.get("usage", {})
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": "openai",
                    "model": data.get("model", self.model),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=content,
                model=data.get("model", self.model),
                usage=usage,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": "openai",
                    "model": payload.get("model"),
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
