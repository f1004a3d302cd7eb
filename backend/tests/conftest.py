"""
Shared test fixtures and configuration.
"""

import asyncio
import os

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("AUTH_API_BASE_URL", "http://auth.test/api")
os.environ.setdefault("LLM_API_KEY", "")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_API_REQUESTS", "true")

from placement_advisor.core import SessionStore  # noqa: E402
from placement_advisor.models import Result  # noqa: E402
from placement_advisor.storage import MemoryStorage  # noqa: E402


@pytest.fixture
def storage_data():
    """Backing mapping shared by every MemoryStorage built in a test."""
    return {}


@pytest.fixture
def session_store(storage_data):
    return SessionStore(MemoryStorage(storage_data))


class FakeAuthClient:
    """
    Records calls and answers with a preset Result.

    Set ``gate`` to an asyncio.Event to hold every call open until it is set;
    ``entered`` fires once a call is waiting on it.
    """

    def __init__(self, result=None):
        self.result = result or Result.success("abc")
        self.calls = []
        self.gate = None
        self.entered = asyncio.Event()

    async def _answer(self):
        if self.gate is not None:
            self.entered.set()
            await self.gate.wait()
        return self.result

    async def login(self, email, password):
        self.calls.append(("login", email, password))
        return await self._answer()

    async def register(self, name, email, password):
        self.calls.append(("register", name, email, password))
        return await self._answer()


@pytest.fixture
def fake_auth_client():
    return FakeAuthClient()
