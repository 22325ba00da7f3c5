"""Per-File Analyzer - Summarize one staged file with a fast model."""

import re
from typing import Callable

from gh_helper import IMPACT_LEVELS
from gh_helper.config import Config
from gh_helper.git import FileChange, FileCategory
from gh_helper.llm import LLMClient, LLMError
from gh_helper.output import print_warning
from gh_helper.analysis.models import FileAnalysis
from gh_helper.analysis.prompts import build_file_prompt

TRUNCATION_MARKER = "\n... (diff truncated)"

# (changed-line threshold, impact), checked top to bottom
IMPACT_THRESHOLDS = [
    (100, "major"),
    (10, "minor"),
]

STATUS_VERBS = {
    "added": "Add",
    "deleted": "Remove",
    "renamed": "Rename",
    "copied": "Copy",
}

# Called as fetch(path), or fetch(path, old_path) for renamed and copied files
DiffFetcher = Callable[..., str]


def truncate_diff(diff: str, max_chars: int) -> str:
    if len(diff) <= max_chars:
        return diff
    return diff[:max_chars] + TRUNCATION_MARKER


def estimate_impact(diff: str) -> str:
    """Impact from the number of added and removed lines."""
    changed = sum(
        1 for line in diff.split('\n')
        if line.startswith(('+', '-')) and not line.startswith(('+++', '---'))
    )
    for threshold, impact in IMPACT_THRESHOLDS:
        if changed > threshold:
            return impact
    return "trivial"


def fallback_summary(file: FileChange, category: FileCategory) -> str:
    verb = STATUS_VERBS.get(file.status, "Update")
    return f"{verb} {category.type} file {file.path}"


def parse_analysis_response(response: str) -> tuple[str, str]:
    """Parse the two-line reply into (summary, impact).

    Grammar: one line starting with SUMMARY: and one starting with IMPACT:,
    in any order, surrounded by anything. The first occurrence of each wins.
    Missing summary gives ''. Missing or unknown impact gives 'minor'.
    """
    summary = ""
    impact = None

    for raw_line in response.split('\n'):
        line = raw_line.strip().lstrip('*').strip()
        label, sep, value = line.partition(':')
        if not sep:
            continue
        label = label.strip('* ').upper()
        value = value.strip().strip('*').strip()
        if label == "SUMMARY" and not summary:
            summary = value
        elif label == "IMPACT" and impact is None:
            # first word only: "major - adds endpoint", "[minor]."
            word = re.match(r'\W*([a-z]+)', value.lower())
            impact = word.group(1) if word else ""

    if impact not in IMPACT_LEVELS:
        impact = "minor"
    return summary, impact


class FileAnalyzer:
    """Runs one file through the backend, falling back to heuristics on failure."""

    def __init__(self, client: LLMClient, config: Config | None = None):
        self.client = client
        self.config = config or Config()
        self.model = self.config.analysis_model or client.analysis_model

    def analyze(self, file: FileChange, category: FileCategory, diff_fetcher: DiffFetcher) -> FileAnalysis:
        if not category.needs_analysis:
            return FileAnalysis(file, category, category.summary or "Update generated files", "trivial")

        diff = diff_fetcher(file.path, file.old_path) if file.old_path else diff_fetcher(file.path)
        if not diff or not diff.strip():
            return FileAnalysis(file, category, f"{file.status} {file.path}", "trivial")

        truncated = truncate_diff(diff, self.config.max_diff_chars)
        prompt, system_prompt = build_file_prompt(file, category, truncated)

        try:
            response = self.client.generate(prompt, system_prompt=system_prompt, model=self.model)
        except LLMError as e:
            first_line = str(e).split('\n')[0]
            print_warning(f"Could not analyze {file.path}, using fallback: {first_line}")
            return self._fallback(file, category, diff)

        summary, impact = parse_analysis_response(response.content)
        if not summary:
            summary = fallback_summary(file, category)
        return FileAnalysis(file, category, summary, impact)

    def _fallback(self, file: FileChange, category: FileCategory, diff: str) -> FileAnalysis:
        return FileAnalysis(file, category, fallback_summary(file, category), estimate_impact(diff))
