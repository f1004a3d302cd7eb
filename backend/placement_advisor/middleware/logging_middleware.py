"""
ASGI middleware that logs every HTTP request and its response.

Pure ASGI rather than BaseHTTPMiddleware so bodies can be observed without
being consumed. JSON and form-encoded bodies are logged with credentials,
tokens and cookies masked.
"""

import json
import logging
import time
from typing import Dict, List, Optional
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG_LENGTH = 5000


def _sanitize_body(body: bytes, content_type: Optional[str]) -> Optional[str]:
    """Render a request/response body for the log with sensitive fields masked."""
    if not body:
        return None
    text = body.decode("utf-8", errors="ignore")

    if content_type and content_type.startswith("application/x-www-form-urlencoded"):
        fields = dict(parse_qsl(text, keep_blank_values=True))
        return truncate_large_data(
            json.dumps(filter_sensitive_data(fields), ensure_ascii=False), MAX_BODY_LOG_LENGTH
        )
    if content_type and content_type.startswith("multipart/form-data"):
        return f"<multipart body, {len(body)} bytes>"

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, MAX_BODY_LOG_LENGTH)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False), MAX_BODY_LOG_LENGTH
    )


def _extract_error_reason(response_text: Optional[str]) -> Optional[str]:
    """Extract a concise error reason from a response body."""
    if not response_text:
        return None
    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError:
        return truncate_large_data(response_text, max_length=500)
    if isinstance(payload, dict):
        for key in ("detail", "error", "message"):
            value = payload.get(key)
            if value:
                return truncate_large_data(str(value), max_length=500)
    return truncate_large_data(response_text, max_length=500)


def _decode_headers(raw_headers: List) -> Dict[str, str]:
    return {
        k.decode("utf-8", errors="ignore"): v.decode("utf-8", errors="ignore")
        for k, v in raw_headers
    }


class RequestLoggingMiddleware:
    """Logs method, path, status, duration and sanitized bodies of HTTP requests."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths passed through without logging (e.g., ["/health"])
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        request_id = id(scope)
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        request_headers = _decode_headers(scope.get("headers", []))
        client = scope.get("client")

        request_chunks: List[bytes] = []
        response_chunks: List[bytes] = []
        status_code = 0
        response_headers: Dict[str, str] = {}

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, response_headers
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                response_headers = _decode_headers(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "client": client[0] if client else None,
                "user_agent": request_headers.get("user-agent"),
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _sanitize_body(b"".join(request_chunks), request_headers.get("content-type"))
        response_body = _sanitize_body(b"".join(response_chunks), response_headers.get("content-type"))
        error_reason = _extract_error_reason(response_body) if status_code >= 400 else None

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        message = (
            f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
            f" | request_body={request_body or '-'}"
            f" | response_body={response_body or '-'}"
        )
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "request_body": request_body,
                "response_body": response_body,
                "response_headers": filter_sensitive_data(response_headers),
                "error_reason": error_reason,
            }}
        )
