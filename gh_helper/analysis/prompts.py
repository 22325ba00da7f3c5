"""Prompt Builder - Construct per-file analysis and commit synthesis prompts."""

from dataclasses import dataclass

from gh_helper import COMMIT_TYPES
from gh_helper.git import FileChange, FileCategory
from gh_helper.analysis.models import AnalysisResult


COMMIT_SYSTEM_PROMPT = """You are a commit message generator. Generate clear, concise commit messages following conventional commit format.
Focus on WHAT changed and WHY, not implementation details.
Use present tense imperative mood (e.g., "Add", "Fix", "Update").
Keep the first line under 72 characters.
If needed, add a blank line and then more detailed explanation."""

CODE_ANALYSIS_PROMPT = """You are a code change analyzer. Analyze the provided diff and provide a concise summary focusing on:
- Business logic changes
- New features or functionality
- Bug fixes or improvements
- Architectural changes

Be specific about what functionality was added, modified, or removed."""

SYSTEM_PROMPTS = {
    "code": CODE_ANALYSIS_PROMPT,
    "test": """You are a test code analyzer. Analyze the provided test diff and summarize:
- What functionality is being tested
- New test coverage added
- Test improvements or fixes
- Testing approach changes

Focus on the testing intent and coverage rather than implementation details.""",
    "documentation": """You are a documentation analyzer. Analyze the provided documentation diff and summarize:
- What information was added, updated, or removed
- Documentation improvements
- Clarifications or corrections
- New sections or reorganization

Focus on the content and informational changes.""",
    "configuration": """You are a configuration file analyzer. Analyze the provided config diff and summarize:
- What settings or behaviors changed
- New configuration options added
- Environment or deployment changes
- Dependency or build configuration updates

Focus on the functional impact of configuration changes.""",
}

IMPACT_GUIDELINES = """Guidelines for IMPACT:
- major: New features, breaking changes, significant refactoring
- minor: Bug fixes, small enhancements, documentation updates
- trivial: Formatting, comments, minor config tweaks"""


def system_prompt_for(category: FileCategory) -> str:
    """Category-specific analysis prompt; code prompt for anything else."""
    return SYSTEM_PROMPTS.get(category.type, CODE_ANALYSIS_PROMPT)


def build_file_prompt(file: FileChange, category: FileCategory, diff: str) -> tuple[str, str]:
    """Returns (prompt, system_prompt) for one file. diff is already truncated."""
    header = [f"File: {file.path}", f"Status: {file.status}"]
    if file.old_path:
        header.append(f"Old path: {file.old_path}")

    prompt = f"""Analyze this {category.type} file change:

{chr(10).join(header)}

Diff:
{diff}

Respond with exactly these two lines and nothing else:
SUMMARY: [Brief description of what changed]
IMPACT: [major/minor/trivial - based on scope and importance]

{IMPACT_GUIDELINES}"""

    return prompt, system_prompt_for(category)


@dataclass
class SynthesisConfig:
    """Knobs that shape the final commit prompt."""
    max_subject_length: int = 72


class PromptBuilder:
    """Constructs the final commit message prompt from an analysis."""

    def build(self, result: AnalysisResult, context: str, config: SynthesisConfig | None = None) -> str:
        config = config or SynthesisConfig()
        sections = [
            "Based on the analysis of changed files, generate a clear, concise commit message.",
            context.rstrip(),
            self._build_format_section(result, config),
            self._build_type_instruction(result.suggested_commit_type),
            f"Consider the overall scope: {result.overall_scope}",
            "Return only the commit message, no other text. No markdown, no code fences.",
        ]
        return "\n\n".join(filter(None, sections))

    def _build_format_section(self, result: AnalysisResult, config: SynthesisConfig) -> str:
        commit_type = result.suggested_commit_type
        rules = [
            f"1. Uses conventional commit format: {commit_type}(scope): description",
            "2. Focuses on the primary change and business value",
            f"3. Keeps the first line under {config.max_subject_length} characters",
            "4. Uses present tense imperative mood",
        ]

        significant = result.by_impact("major") + result.by_impact("minor")
        if len(significant) > 1:
            rules.append(
                "5. Adds a blank line after the first line, then one bullet point per significant "
                "file change saying what changed and why. Base each bullet on the file summaries "
                "above; do not restate the subject line in generic terms"
            )
        else:
            rules.append("5. If there are multiple significant changes, add a blank line and bullet points for details")

        return "Generate a commit message that:\n" + "\n".join(rules)

    def _build_type_instruction(self, suggested: str) -> str:
        description = COMMIT_TYPES.get(suggested)
        meaning = f" ({description})" if description else ""
        return f"IMPORTANT: Use type '{suggested}'{meaning} for this commit."
