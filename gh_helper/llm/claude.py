"""Claude (Anthropic API) LLM Client"""

import os

import anthropic

from gh_helper.config import Config
from gh_helper.llm.base import (
    LLMClient, LLMResponse, BackendUnavailable, BackendAuthRequired, BackendError,
    BackendMalformedResponse,
)


class ClaudeClient(LLMClient):
    """Claude API client. Requires ANTHROPIC_API_KEY env var."""

    DEFAULT_ANALYSIS_MODEL = "claude-3-5-haiku-latest"
    DEFAULT_SYNTHESIS_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 1000
    TEMPERATURE = 0.4

    def __init__(self, config: Config | None = None, api_key: str | None = None):
        super().__init__(config)
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")

        if not self.api_key:
            raise BackendAuthRequired(
                "No API key found.\n"
                "Set it with: export ANTHROPIC_API_KEY='your-key-here'"
            )

        self._client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=1)

    @property
    def name(self) -> str:
        return f"Claude API ({self.synthesis_model})"

    def generate(self, prompt: str, system_prompt: str | None = None, model: str | None = None) -> LLMResponse:
        model = model or self.synthesis_model
        kwargs = {
            "model": model,
            "max_tokens": self.MAX_TOKENS,
            "temperature": self.TEMPERATURE,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.AuthenticationError:
            raise BackendAuthRequired("Invalid API key.\nCheck your ANTHROPIC_API_KEY.")
        except anthropic.APITimeoutError:
            raise BackendUnavailable(f"Claude API timed out after {self.timeout}s")
        except anthropic.APIConnectionError:
            raise BackendUnavailable("Cannot reach the Claude API.\nCheck your network connection.")
        except anthropic.NotFoundError:
            raise BackendError(f"Claude model '{model}' not found")
        except anthropic.APIError as e:
            raise BackendError(f"Claude API error: {e.message}")

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text.strip()
                break

        if not content:
            raise BackendMalformedResponse("Empty response from Claude API")

        return LLMResponse(
            content=content,
            model=model,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens
        )
