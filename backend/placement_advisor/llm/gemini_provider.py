"""
Google Gemini LLM Provider.
Talks to the generateContent REST endpoint of the Generative Language API.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse, GenerationConfig

logger = logging.getLogger(__name__)

# Any other finishReason (SAFETY, RECITATION, ...) means the reply was withheld
COMPLETED_FINISH_REASONS = {"STOP", "MAX_TOKENS"}


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini models.
    System messages become the request's systemInstruction; "assistant"
    messages are sent with Gemini's "model" role.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
    ):
        super().__init__(api_key, model, base_url, timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        contents = []
        for m in messages:
            if m.role == "system":
                continue
            role = "model" if m.role in ("model", "assistant") else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})
        return contents

    def _build_payload(self, messages: List[LLMMessage], config: GenerationConfig) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "temperature": config.temperature,
            "topP": config.top_p,
            "maxOutputTokens": config.max_output_tokens,
            "responseMimeType": config.response_mime_type,
        }
        if config.top_k is not None:
            generation_config["topK"] = config.top_k

        payload: Dict[str, Any] = {
            "contents": self._format_messages(messages),
            "generationConfig": generation_config,
        }
        system_parts = [{"text": m.content} for m in messages if m.role == "system"]
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}
        return payload

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        config: Optional[GenerationConfig] = None,
        **kwargs
    ) -> LLMResponse:
        """Send request to the generateContent endpoint."""
        start_time = time.time()
        model = kwargs.get("model", self.model)
        url = f"{self.base_url}/models/{model}:generateContent"
        payload = self._build_payload(messages, config or GenerationConfig())

        if logger.isEnabledFor(logging.DEBUG):
            message_summary = f"{len(messages)} messages"
            if messages:
                message_summary += f", last: {messages[-1].content[:200]}"
            logger.debug(
                f"LLM API call starting: provider=gemini, model={model}, "
                f"temperature={payload['generationConfig']['temperature']}, {message_summary}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                logger.debug(f"LLM API response status: {resp.status_code}")
                resp.raise_for_status()
                data = resp.json()

            candidates = data.get("candidates") or []
            if not candidates:
                block_reason = data.get("promptFeedback", {}).get("blockReason")
                raise ValueError(f"No candidates in response (blockReason={block_reason})")
            candidate = candidates[0]
            finish_reason = candidate.get("finishReason")
            if finish_reason and finish_reason not in COMPLETED_FINISH_REASONS:
                raise ValueError(f"Candidate was not completed (finishReason={finish_reason})")
            parts = (candidate.get("content") or {}).get("parts") or []
            content = "".join(part.get("text", "") for part in parts)
            if not content:
                raise ValueError(f"Empty candidate in response (finishReason={finish_reason})")

            usage_meta = data.get("usageMetadata", {})
            usage = {
                "prompt_tokens": usage_meta.get("promptTokenCount", 0),
                "completion_tokens": usage_meta.get("candidatesTokenCount", 0),
                "total_tokens": usage_meta.get("totalTokenCount", 0),
            }
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": "gemini",
                    "model": data.get("modelVersion", model),
                    **usage,
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=content,
                model=data.get("modelVersion", model),
                usage=usage,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": "gemini",
                    "model": model,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
