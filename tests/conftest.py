"""Shared fixtures: a scripted LLM backend that records its calls."""

import pytest

from gh_helper.config import Config
from gh_helper.llm import LLMClient, LLMResponse


class FakeClient(LLMClient):
    """Answers from a list of canned replies. Exceptions in the list are raised."""

    DEFAULT_ANALYSIS_MODEL = "fast-model"
    DEFAULT_SYNTHESIS_MODEL = "quality-model"

    def __init__(self, replies=None, config=None):
        super().__init__(config)
        self.replies = list(replies or [])
        self.calls = []

    @property
    def name(self) -> str:
        return "Fake"

    def generate(self, prompt, system_prompt=None, model=None):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "model": model})
        reply = self.replies.pop(0) if self.replies else "SUMMARY: Change something\nIMPACT: minor"
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, model=model or "")


@pytest.fixture
def make_client():
    """Return a factory for FakeClient."""
    def _make(*replies, config=None):
        return FakeClient(replies, config=config)
    return _make


@pytest.fixture
def config():
    return Config()
