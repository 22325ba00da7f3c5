"""LLM Client Package"""

from gh_helper.config import Config
from gh_helper.llm.base import (
    LLMClient, LLMResponse, LLMError, BackendUnavailable, BackendAuthRequired, BackendError,
    BackendMalformedResponse, sanitize_message,
)
from gh_helper.llm.claude import ClaudeClient
from gh_helper.llm.claude_cli import ClaudeCodeClient
from gh_helper.llm.ollama import OllamaClient

PROVIDERS = {
    "ollama": OllamaClient,
    "claude-cli": ClaudeCodeClient,
    "claude": ClaudeClient,
}

AUTO_DETECT_ORDER = [OllamaClient, ClaudeCodeClient, ClaudeClient]


def get_client(provider: str = "auto", config: Config | None = None) -> LLMClient:
    """Get an LLM client. Provider can be 'ollama', 'claude-cli', 'claude' or 'auto'."""
    if provider in PROVIDERS:
        return PROVIDERS[provider](config=config)

    if provider == "auto":
        for client_class in AUTO_DETECT_ORDER:
            try:
                return client_class(config=config)
            except LLMError:
                continue

        raise BackendUnavailable(
            "No LLM backend available.\n"
            "Option 1 - Ollama (free, local):\n"
            "  1. Install: https://ollama.com\n"
            "  2. Start: ollama serve\n"
            "  3. Pull: ollama pull llama3:latest && ollama pull llama3.2:latest\n"
            "Option 2 - Claude Code CLI (subscription):\n"
            "  Install Claude Code, then run: claude login\n"
            "Option 3 - Claude API:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'"
        )

    raise LLMError(f"Unknown provider: {provider}. Use 'ollama', 'claude-cli', 'claude' or 'auto'.")


__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "BackendUnavailable",
    "BackendAuthRequired",
    "BackendError",
    "BackendMalformedResponse",
    "ClaudeClient",
    "ClaudeCodeClient",
    "OllamaClient",
    "get_client",
    "PROVIDERS",
    "sanitize_message",
]
