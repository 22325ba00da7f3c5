"""Aggregator - Reduce per-file analyses to a scope, a commit type and a context block."""

from collections import Counter

from gh_helper.analysis.models import FileAnalysis, AnalysisResult

DEFAULT_TRIVIAL_COLLAPSE = 5


def _counts(analyses: list[FileAnalysis]) -> tuple[Counter, Counter]:
    categories = Counter(a.category.type for a in analyses)
    impacts = Counter(a.impact for a in analyses)
    return categories, impacts


def determine_overall_scope(analyses: list[FileAnalysis]) -> str:
    categories, impacts = _counts(analyses)
    code = categories["code"]

    if impacts["major"]:
        if code > 3:
            return "large feature implementation"
        if code >= 1:
            return "feature implementation"
        return "significant change"

    if code:
        return "implementation with tests" if categories["test"] else "code changes"

    # remaining categories in priority order
    for category_type, scope in (
        ("test", "test updates"),
        ("documentation", "documentation updates"),
        ("configuration", "configuration changes"),
        ("tooling", "tooling updates"),
    ):
        if categories[category_type]:
            return scope

    return "misc changes"


def suggest_commit_type(analyses: list[FileAnalysis]) -> str:
    categories, impacts = _counts(analyses)

    # new code files are most likely a new feature
    if any(a.file.status == "added" and a.category.type == "code" for a in analyses):
        return "feat"
    if impacts["major"]:
        return "feat"
    if categories["code"]:
        return "fix"
    if categories["test"]:
        return "test"
    if categories["documentation"]:
        return "docs"
    return "chore"


def aggregate(analyses: list[FileAnalysis]) -> AnalysisResult:
    return AnalysisResult(
        file_analyses=list(analyses),
        overall_scope=determine_overall_scope(analyses),
        suggested_commit_type=suggest_commit_type(analyses),
    )


def build_context(result: AnalysisResult, trivial_collapse: int = DEFAULT_TRIVIAL_COLLAPSE) -> str:
    """Plain-text summary of the analysis, grouped by impact."""
    lines = [
        "Analysis Summary:",
        f"- Overall scope: {result.overall_scope}",
        f"- Suggested type: {result.suggested_commit_type}",
        f"- Total files changed: {len(result.file_analyses)}",
        "",
        "File Changes:",
    ]

    for impact, title in (("major", "Major Changes"), ("minor", "Minor Changes")):
        group = result.by_impact(impact)
        if group:
            lines.append(f"\n{title}:")
            lines.extend(f"- {a.file.path} ({a.file.status}): {a.summary}" for a in group)

    trivial = result.by_impact("trivial")
    if len(trivial) > trivial_collapse:
        lines.append(f"\nTrivial Changes: {len(trivial)} files (tooling, generated files, etc.)")
    elif trivial:
        lines.append("\nTrivial Changes:")
        lines.extend(f"- {a.file.path} ({a.file.status}): {a.summary}" for a in trivial)

    return "\n".join(lines) + "\n"
