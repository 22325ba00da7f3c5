"""Analysis data model."""

from dataclasses import dataclass, field

from gh_helper.git import FileChange, FileCategory


@dataclass(frozen=True)
class FileAnalysis:
    """What one staged file contributes to the commit message."""
    file: FileChange
    category: FileCategory
    summary: str
    impact: str  # major | minor | trivial


@dataclass(frozen=True)
class AnalysisResult:
    """Per-file analyses plus the aggregate the synthesizer works from."""
    file_analyses: list[FileAnalysis] = field(default_factory=list)
    overall_scope: str = "misc changes"
    suggested_commit_type: str = "chore"

    def by_impact(self, impact: str) -> list[FileAnalysis]:
        return [a for a in self.file_analyses if a.impact == impact]

    def by_category(self, category_type: str) -> list[FileAnalysis]:
        return [a for a in self.file_analyses if a.category.type == category_type]
