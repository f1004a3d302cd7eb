"""
Authentication API client - login and registration against the remote auth service.
Every call returns a typed Result instead of raising.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..models import AuthToken, ErrorKind, Result

logger = logging.getLogger(__name__)


def _extract_error_message(response: httpx.Response) -> Optional[str]:
    """
    Pull a human-readable message out of a JSON error body.

    Non-JSON bodies (proxy or gateway error pages) yield None so the caller
    falls back to its generic message.
    """
    try:
        payload = response.json()
    except (json.JSONDecodeError, ValueError):
        return None

    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return None


class AuthAPIClient:
    """Client for the remote authentication API."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def login(self, email: str, password: str) -> Result[str]:
        """
        Log in with email and password.

        Returns:
            Result holding the bearer token on success
        """
        return await self._request_token("/auth/login", {"email": email, "password": password})

    async def register(self, name: str, email: str, password: str) -> Result[str]:
        """
        Create an account.

        Returns:
            Result holding the bearer token on success
        """
        return await self._request_token(
            "/auth/register", {"name": name, "email": email, "password": password}
        )

    async def _request_token(self, path: str, payload: Dict[str, Any]) -> Result[str]:
        start_time = time.time()
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                f"Auth API request failed: {path} - {e}",
                extra={"extra_fields": {"path": path, "error": str(e)}}
            )
            return Result.failure(ErrorKind.NETWORK, str(e) or None)

        duration_ms = (time.time() - start_time) * 1000

        if resp.status_code >= 400:
            message = _extract_error_message(resp)
            logger.warning(
                f"Auth API rejected request: {path} - {resp.status_code}",
                extra={"extra_fields": {
                    "path": path,
                    "status_code": resp.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "error_reason": message,
                }}
            )
            return Result.failure(ErrorKind.REJECTED, message)

        try:
            token = AuthToken.model_validate(resp.json()).token
        except (json.JSONDecodeError, ValueError, ValidationError) as e:
            logger.error(f"Auth API returned an unexpected body for {path}: {e}")
            return Result.failure(
                ErrorKind.INVALID_RESPONSE, "Authentication response did not include a token"
            )

        logger.info(
            f"Auth API request succeeded: {path}",
            extra={"extra_fields": {"path": path, "duration_ms": round(duration_ms, 2)}}
        )
        return Result.success(token)
