"""Ollama LLM Client for Local Models"""

import json
import http.client
import socket
import urllib.request
import urllib.error

from gh_helper.config import Config
from gh_helper.llm.base import (
    LLMClient, LLMResponse, BackendUnavailable, BackendError, BackendMalformedResponse,
)


class OllamaClient(LLMClient):
    """Ollama client for local models. Requires: ollama serve"""

    DEFAULT_ANALYSIS_MODEL = "llama3.2:latest"
    DEFAULT_SYNTHESIS_MODEL = "llama3:latest"
    DEFAULT_HOST = "http://localhost:11434"
    TEMPERATURE = 0.7
    TOP_P = 0.9

    def __init__(self, config: Config | None = None, host: str | None = None, verify: bool = True):
        super().__init__(config)
        self.host = (host or self.config.ollama_host or self.DEFAULT_HOST).rstrip('/')
        if verify:
            self._verify_ready()

    @property
    def name(self) -> str:
        return f"Ollama ({self.synthesis_model})"

    def _unreachable(self) -> BackendUnavailable:
        return BackendUnavailable(
            f"Cannot connect to Ollama at {self.host}.\n"
            "Install: https://ollama.com\n"
            "Start:   ollama serve"
        )

    def _verify_ready(self) -> None:
        """Check that Ollama is running and both models are pulled."""
        available = self.list_models()
        for role, model in (("Synthesis", self.synthesis_model), ("Analysis", self.analysis_model)):
            if not self.has_model(model, available):
                raise BackendUnavailable(
                    f"{role} model {model} not found. Available models: {', '.join(available) or 'none'}\n"
                    f"Run: ollama pull {model}"
                )

    def list_models(self) -> list[str]:
        """Names of locally pulled models."""
        try:
            req = urllib.request.Request(f"{self.host}/api/tags")
            with urllib.request.urlopen(req, timeout=5) as response:
                data = json.loads(response.read().decode('utf-8'))
        except (urllib.error.URLError, OSError):
            raise self._unreachable()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise BackendMalformedResponse("Invalid response from Ollama model list.")

        models = data.get('models') if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise BackendMalformedResponse("Invalid response from Ollama model list.")
        return [m.get('name', '') for m in models if isinstance(m, dict)]

    def has_model(self, model: str, available: list[str] | None = None) -> bool:
        """Loose match on the model family, e.g. 'llama3' matches 'llama3:8b'."""
        available = self.list_models() if available is None else available
        family = model.split(':')[0]
        return any(family in name for name in available)

    def _call_api(self, prompt: str, system_prompt: str | None, model: str) -> dict:
        """Make a single API call to Ollama."""
        url = f"{self.host}/api/generate"
        payload = {
            "model": model,
            "prompt": prompt,
            "system": system_prompt or "",
            "stream": False,
            "options": {
                "temperature": self.TEMPERATURE,
                "top_p": self.TOP_P,
            }
        }

        data = json.dumps(payload).encode('utf-8')
        req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"})

        with urllib.request.urlopen(req, timeout=self.timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def generate(self, prompt: str, system_prompt: str | None = None, model: str | None = None) -> LLMResponse:
        model = model or self.synthesis_model
        timed_out = BackendUnavailable(
            f"Ollama request timed out after {self.timeout}s.\n"
            "Increase the timeout: export GH_HELPER_TIMEOUT=120"
        )

        try:
            result = self._call_api(prompt, system_prompt, model)
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise BackendUnavailable(f"Model '{model}' not found.\nRun: ollama pull {model}")
            raise BackendError(f"Ollama API error ({e.code}): {e.reason}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise timed_out
            raise self._unreachable()
        except (socket.timeout, TimeoutError):
            raise timed_out
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise BackendMalformedResponse("Invalid JSON response from Ollama.")
        except http.client.HTTPException as e:
            raise BackendMalformedResponse(f"Incomplete response from Ollama: {e}")
        except OSError as e:
            raise BackendUnavailable(f"Connection to Ollama lost: {e}\nCheck that 'ollama serve' is still running.")

        if not isinstance(result, dict):
            raise BackendMalformedResponse("Unexpected response from Ollama: expected a JSON object")
        if result.get("error"):
            raise BackendError(f"Ollama error: {result['error']}")

        content = result.get("response")
        if not isinstance(content, str) or not content.strip():
            raise BackendMalformedResponse("Empty response from Ollama")
        content = content.strip()

        return LLMResponse(content=content, model=model, tokens_used=result.get("eval_count", 0))
