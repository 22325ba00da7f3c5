"""Commit Message Synthesizer - One quality-model call over the whole analysis."""

from gh_helper.config import Config
from gh_helper.llm import (
    LLMClient, LLMError, BackendUnavailable, BackendAuthRequired, BackendMalformedResponse,
    sanitize_message,
)
from gh_helper.analysis.models import AnalysisResult
from gh_helper.analysis.aggregator import build_context
from gh_helper.analysis.prompts import COMMIT_SYSTEM_PROMPT, PromptBuilder, SynthesisConfig


class CommitSynthesizer:
    """Turns an AnalysisResult into the final commit message.

    There is no heuristic fallback here: a failed call raises, because
    committing a made-up message silently is worse than stopping.
    """

    def __init__(self, client: LLMClient, config: Config | None = None):
        self.client = client
        self.config = config or Config()
        self.model = self.config.synthesis_model or client.synthesis_model
        self.builder = PromptBuilder()

    def build_prompt(self, result: AnalysisResult) -> str:
        context = build_context(result, self.config.trivial_collapse_threshold)
        synthesis_config = SynthesisConfig(max_subject_length=self.config.max_subject_length)
        return self.builder.build(result, context, synthesis_config)

    def synthesize(self, result: AnalysisResult) -> str:
        prompt = self.build_prompt(result)

        try:
            response = self.client.generate(prompt, system_prompt=COMMIT_SYSTEM_PROMPT, model=self.model)
        except (BackendUnavailable, BackendAuthRequired):
            # already carry the install / login instructions
            raise
        except LLMError as e:
            raise type(e)(f"Failed to generate commit message: {e}") from e

        message = sanitize_message(response.content)
        if not message:
            raise BackendMalformedResponse("Failed to generate commit message: empty response")
        return message
