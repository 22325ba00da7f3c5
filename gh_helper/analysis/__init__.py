"""Change Analysis Pipeline

classify -> analyze each file -> aggregate -> synthesize.
"""

from typing import Callable, Sequence

from gh_helper.config import Config
from gh_helper.git import FileChange, FileCategory, classify
from gh_helper.git.classifier import CODE
from gh_helper.llm import LLMClient
from gh_helper.analysis.models import FileAnalysis, AnalysisResult
from gh_helper.analysis.analyzer import (
    FileAnalyzer, DiffFetcher, estimate_impact, fallback_summary, parse_analysis_response,
    truncate_diff,
)
from gh_helper.analysis.aggregator import (
    aggregate, build_context, determine_overall_scope, suggest_commit_type,
)
from gh_helper.analysis.synthesizer import CommitSynthesizer

ProgressCallback = Callable[[int, int, str], object]

WHOLE_DIFF_PATH = "(staged changes)"
WHOLE_DIFF_MAX_CHARS = 20000


class NoInputError(ValueError):
    """Raised when there is no diff to describe."""
    pass


def analyze_changes(
    files: Sequence[FileChange],
    diff_fetcher: DiffFetcher,
    client: LLMClient,
    config: Config | None = None,
    progress_callback: ProgressCallback | None = None,
) -> AnalysisResult:
    """Analyze files one at a time, in order, and aggregate the results."""
    analyzer = FileAnalyzer(client, config)
    analyses: list[FileAnalysis] = []

    total = len(files)
    for index, file in enumerate(files, 1):
        if progress_callback is not None:
            progress_callback(index, total, file.path)
        analyses.append(analyzer.analyze(file, classify(file.path), diff_fetcher))

    return aggregate(analyses)


def generate_commit_message(
    files: Sequence[FileChange],
    diff_fetcher: DiffFetcher,
    progress_callback: ProgressCallback | None = None,
    *,
    client: LLMClient,
    config: Config | None = None,
) -> str:
    """Produce a commit message for the given staged files."""
    if not files:
        raise NoInputError("No staged changes to describe")
    result = analyze_changes(files, diff_fetcher, client, config, progress_callback)
    return CommitSynthesizer(client, config).synthesize(result)


def analyze_whole_diff(diff: str) -> AnalysisResult:
    """The whole staged diff as a single synthetic code change."""
    if not diff or not diff.strip():
        raise NoInputError("No diff content provided")

    file = FileChange(path=WHOLE_DIFF_PATH, status="modified")
    category = FileCategory(type=CODE)
    summary = "full staged diff follows\n" + truncate_diff(diff.strip(), WHOLE_DIFF_MAX_CHARS)
    return aggregate([FileAnalysis(file, category, summary, estimate_impact(diff))])


def generate_from_diff(diff: str, client: LLMClient, config: Config | None = None) -> str:
    """Single-call variant: no per-file analysis, one synthetic entry for the whole diff."""
    result = analyze_whole_diff(diff)
    return CommitSynthesizer(client, config).synthesize(result)


__all__ = [
    "FileAnalysis",
    "AnalysisResult",
    "FileAnalyzer",
    "CommitSynthesizer",
    "NoInputError",
    "analyze_changes",
    "analyze_whole_diff",
    "generate_commit_message",
    "generate_from_diff",
    "aggregate",
    "build_context",
    "determine_overall_scope",
    "suggest_commit_type",
    "estimate_impact",
    "fallback_summary",
    "parse_analysis_response",
    "truncate_diff",
]
