"""Shared fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from backend.core.config import RelayConfig
from backend.main import create_app


class ScriptedLLM:
    """Stands in for LLMAdapter: replays queued replies and records each call.

    The last reply repeats once the queue is down to one item.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def is_healthy(self):
        return True

    def invoke(self, messages, model_name):
        self.calls.append((list(messages), model_name))
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def text_reply():
    def _make(text: str) -> AIMessage:
        return AIMessage(content=text)
    return _make


@pytest.fixture
def tool_reply():
    def _make(name: str = "lookup_assets", call_id: str = "call-1") -> AIMessage:
        return AIMessage(content="", tool_calls=[{"name": name, "args": {"q": "hero"}, "id": call_id}])
    return _make


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig(gemini_api_key="test-gemini-key", max_tool_round_trips=3)


@pytest.fixture
def make_client(config):
    """Build a TestClient around a scripted model (or any adapter-like object)."""
    def _make(*replies, cfg: RelayConfig | None = None, llm=None):
        llm = llm or ScriptedLLM(replies or [AIMessage(content="{}")])
        app = create_app(cfg or config, llm_adapter=llm)
        return TestClient(app), llm
    return _make
