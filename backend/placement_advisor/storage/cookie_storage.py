"""
Cookie Storage Implementation.
Uses the client's cookie jar as durable storage: values are read from the
incoming request and changes are written back onto the outgoing response.
"""

from typing import Dict, Mapping, Optional

from starlette.responses import Response

from .interface import TokenStorage


class CookieStorage(TokenStorage):
    """
    Request-scoped token storage over HTTP cookies.
    Writes are buffered until apply() is called with the response.
    """

    def __init__(
        self,
        cookies: Mapping[str, str],
        max_age: Optional[int] = None,
        secure: bool = False,
    ):
        """
        Initialize cookie storage.

        Args:
            cookies: Cookies sent with the current request
            max_age: Cookie lifetime in seconds (browser session if None)
            secure: Restrict cookies to HTTPS
        """
        self._cookies = dict(cookies)
        self._pending: Dict[str, Optional[str]] = {}
        self.max_age = max_age
        self.secure = secure

    async def get_item(self, key: str) -> Optional[str]:
        if key in self._pending:
            return self._pending[key]
        return self._cookies.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._pending[key] = value

    async def remove_item(self, key: str) -> None:
        self._pending[key] = None

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    def apply(self, response: Response) -> Response:
        """
        Write buffered changes to the response as Set-Cookie headers.

        Args:
            response: Outgoing response

        Returns:
            The same response, for chaining
        """
        for key, value in self._pending.items():
            if value is None:
                response.delete_cookie(key, httponly=True, samesite="lax", secure=self.secure)
            else:
                response.set_cookie(
                    key,
                    value,
                    max_age=self.max_age,
                    httponly=True,
                    samesite="lax",
                    secure=self.secure,
                )
        return response
