"""LLM Base Classes and Shared Code"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from gh_helper.config import Config


@dataclass
class LLMResponse:
    """Structured response from any LLM provider."""
    content: str
    model: str = ""
    tokens_used: int = 0


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class BackendUnavailable(LLMError):
    """Backend is not installed, not running, unreachable or timed out."""
    pass


class BackendAuthRequired(LLMError):
    """Backend is reachable but needs (re)authentication."""
    pass


class BackendError(LLMError):
    """Backend ran but reported an error."""
    pass


class BackendMalformedResponse(LLMError):
    """Backend answered with empty or unusable output."""
    pass


_FENCE_OPEN_RE = re.compile(r'\A```[\w+.-]*[ \t]*(\n|\Z)')
_FENCE_CLOSE_RE = re.compile(r'(\A|\n)[ \t]*```[ \t]*\Z')
_FENCE_LINE_RE = re.compile(r'^[ \t]*```[\w+.-]*[ \t]*(\n|\Z)', re.MULTILINE)


def sanitize_message(text: str) -> str:
    """Remove markdown code fences the model wrapped around its answer.

    Only whole-line fence markers are removed; inline `code` is left alone.
    """
    text = text.strip()
    text = _FENCE_OPEN_RE.sub('', text, count=1)
    text = _FENCE_CLOSE_RE.sub('', text, count=1)
    text = _FENCE_LINE_RE.sub('', text)
    return text.strip()


class LLMClient(ABC):
    """A text completion backend.

    Subclasses map their own failures onto BackendUnavailable,
    BackendAuthRequired, BackendError and BackendMalformedResponse.
    """

    DEFAULT_ANALYSIS_MODEL = ""
    DEFAULT_SYNTHESIS_MODEL = ""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self.timeout = self.config.timeout

    @property
    def analysis_model(self) -> str:
        return self.config.analysis_model or self.DEFAULT_ANALYSIS_MODEL

    @property
    def synthesis_model(self) -> str:
        return self.config.synthesis_model or self.DEFAULT_SYNTHESIS_MODEL

    @abstractmethod
    def generate(self, prompt: str, system_prompt: str | None = None, model: str | None = None) -> LLMResponse:
        """Complete prompt. model defaults to the synthesis model."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
