"""Claude Code CLI Client - uses a Claude subscription through `claude -p`."""

import shutil
import subprocess

from gh_helper.config import Config
from gh_helper.llm.base import (
    LLMClient, LLMResponse, BackendUnavailable, BackendAuthRequired, BackendError,
    BackendMalformedResponse,
)
from gh_helper.output import print_warning

NOT_FOUND_MESSAGE = (
    "Claude Code CLI not found.\n"
    "Please ensure Claude Code is installed and available in PATH."
)
AUTH_MESSAGE = "Claude authentication required.\nPlease run: claude login"
AUTH_MARKERS = ("authentication", "login", "unauthorized", "api key")


def _needs_auth(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in AUTH_MARKERS)


class ClaudeCodeClient(LLMClient):
    """Runs the claude CLI once per request. The prompt is sent on stdin."""

    DEFAULT_ANALYSIS_MODEL = "haiku"
    DEFAULT_SYNTHESIS_MODEL = "sonnet"
    EXECUTABLE = "claude"
    VERSION_TIMEOUT = 5

    def __init__(self, config: Config | None = None, executable: str | None = None):
        super().__init__(config)
        self.executable = executable or self.EXECUTABLE
        if shutil.which(self.executable) is None:
            raise BackendUnavailable(NOT_FOUND_MESSAGE)

    @property
    def name(self) -> str:
        return f"Claude Code ({self.synthesis_model})"

    def check_availability(self) -> tuple[bool, str]:
        """Returns (available, reason)."""
        try:
            result = subprocess.run(
                [self.executable, '--version'],
                capture_output=True,
                text=True,
                timeout=self.VERSION_TIMEOUT,
            )
        except FileNotFoundError:
            return False, "Claude Code CLI not found in PATH"
        except subprocess.TimeoutExpired:
            return False, "Claude version check timed out"
        except OSError as e:
            return False, f"Claude availability check failed: {e}"

        if result.returncode == 0 and 'Claude Code' in result.stdout:
            return True, ""
        return False, "Claude Code not properly installed"

    def generate(self, prompt: str, system_prompt: str | None = None, model: str | None = None) -> LLMResponse:
        model = model or self.synthesis_model
        # the CLI has no separate system channel in print mode
        full_prompt = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt

        try:
            result = subprocess.run(
                [self.executable, '-p', '--output-format', 'text', '--model', model],
                input=full_prompt,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise BackendUnavailable(NOT_FOUND_MESSAGE)
        except subprocess.TimeoutExpired:
            raise BackendUnavailable(f"Claude CLI timed out after {self.timeout}s")
        except OSError as e:
            raise BackendUnavailable(f"Could not run Claude CLI: {e}")

        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()

        if result.returncode != 0:
            if _needs_auth(stderr) or _needs_auth(stdout):
                raise BackendAuthRequired(AUTH_MESSAGE)
            raise BackendError(f"Claude CLI exited with code {result.returncode}. stderr: {stderr}")

        if stderr:
            print_warning(f"Claude CLI warning: {stderr}")

        content = stdout.strip()
        if not content:
            raise BackendMalformedResponse("No output from Claude CLI")

        return LLMResponse(content=content, model=model)
