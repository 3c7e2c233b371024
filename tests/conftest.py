"""Pytest configuration and fixtures"""

from datetime import datetime, timedelta

import pytest

from testimony_prep.db import MemoryStore
from testimony_prep.errors import LLMError
from testimony_prep.services.context import build_context
from testimony_prep.utils.config import Settings


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch):
    """Set up test environment with temporary storage and no real API key"""
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "prep.db"))
    monkeypatch.setenv("CASE_API_KEY", "test_key")
    monkeypatch.setenv("CASE_API_BASE", "http://127.0.0.1:9")
    monkeypatch.chdir(tmp_path)

    yield

    # Cleanup handled by tmp_path fixture


class FakeClock:
    """Manually advanced clock"""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeCompletionClient:
    """Stands in for the HTTP completion client.

    Replies are consumed in order; an exception instance is raised instead of
    returned. Once replies run out the last one is repeated.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def chat_completion(self, messages, model=None, temperature=None, max_tokens=None):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return {"choices": [{"message": {"role": "assistant", "content": reply}}]}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def failing_client():
    return FakeCompletionClient(LLMError("LLM API error (503): unavailable"))


@pytest.fixture
def make_context(settings):
    """Build a context on an in-memory store with a fake completion client"""

    def _make(client=None, **overrides):
        config = settings.model_copy(update=overrides) if overrides else settings
        return build_context(config, store=MemoryStore(), client=client or FakeCompletionClient("[]"))

    return _make
