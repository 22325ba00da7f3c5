"""
Unit tests for the pure pieces: classify, analysis helpers, aggregation,
sanitize_message, Config.

Run with:
    pytest tests/test_core.py -v
"""

import json

import pytest

from gh_helper.analysis import (
    AnalysisResult, FileAnalysis, aggregate, build_context, determine_overall_scope,
    estimate_impact, fallback_summary, parse_analysis_response, suggest_commit_type, truncate_diff,
)
from gh_helper.config import Config, ConfigManager
from gh_helper.git import FileChange, FileCategory, classify, CATEGORY_TYPES
from gh_helper.llm import sanitize_message


def _analysis(path, category_type, impact="minor", status="modified", summary="did a thing"):
    return FileAnalysis(
        file=FileChange(path=path, status=status),
        category=classify(path) if category_type is None else FileCategory(
            type=category_type,
            needs_analysis=category_type != "tooling",
            summary="Update generated files" if category_type == "tooling" else None,
        ),
        summary=summary,
        impact=impact,
    )


def _diff(changed_lines):
    header = "diff --git a/x.py b/x.py\n--- a/x.py\n+++ b/x.py\n@@ -1,1 +1,1 @@\n"
    body = "\n".join(("+" if i % 2 else "-") + f"line {i}" for i in range(changed_lines))
    return header + body + "\n context line"


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

class TestClassify:

    @pytest.mark.parametrize("path", [
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "frontend/pnpm-lock.yaml",
        "bun.lockb",
        "poetry.lock",
        "Pipfile.lock",
        "uv.lock",
        "Cargo.lock",
        "Gemfile.lock",
        "composer.lock",
        "go.sum",
    ])
    def test_lockfiles_are_tooling(self, path):
        category = classify(path)
        assert category.type == "tooling"
        assert category.needs_analysis is False
        assert category.summary

    def test_npm_lockfile_summary(self):
        assert classify("package-lock.json").summary == "Update package dependencies"

    @pytest.mark.parametrize("path", [
        "public/sitemap.xml",
        "public/manifest.json",
        "static/app.min.js",
        "static/site.min.css",
        "static/app.bundle.js",
        "static/app.js.map",
        "dist/index.js",
        "build/output.css",
    ])
    def test_generated_files_are_tooling(self, path):
        category = classify(path)
        assert category.type == "tooling"
        assert category.summary

    def test_build_prefix_uses_generic_summary(self):
        assert classify("dist/index.js").summary == "Update generated files"

    @pytest.mark.parametrize("path", [
        "config.json",
        "settings.yaml",
        "docker-compose.yml",
        "pyproject.toml",
        "setup.ini",
        "nginx.conf",
        "app.config",
        "Dockerfile",
        "Makefile",
        ".env",
        ".env.example",
    ])
    def test_configuration(self, path):
        category = classify(path)
        assert category.type == "configuration"
        assert category.needs_analysis is True
        assert category.summary is None

    @pytest.mark.parametrize("path", ["README.md", "docs/guide.rst", "notes.txt", "manual.adoc"])
    def test_documentation(self, path):
        assert classify(path).type == "documentation"

    @pytest.mark.parametrize("path", [
        "tests/helpers.py",
        "src/__tests__/App.jsx",
        "src/utils.test.ts",
        "src/utils.spec.ts",
        "test_main.py",
        "UserTest.java",
    ])
    def test_tests(self, path):
        assert classify(path).type == "test"

    @pytest.mark.parametrize("path", ["src/a.ts", "lib/utils.py", "index.js", "app/models/user.rb"])
    def test_code_is_default(self, path):
        category = classify(path)
        assert category.type == "code"
        assert category.needs_analysis is True

    @pytest.mark.parametrize("path, expected", [
        ("config.test.json", "configuration"),   # configuration beats test
        ("tests/fixtures/data.json", "configuration"),
        ("docs/testing.md", "documentation"),    # documentation beats test
        ("tests/package-lock.json", "tooling"),  # tooling beats everything
        ("spec/README.md", "documentation"),
    ])
    def test_precedence(self, path, expected):
        assert classify(path).type == expected

    @pytest.mark.parametrize("path", [
        "package-lock.json", "config.test.json", "README.md", "tests/x.py", "src/x.py",
        "dist/a.js", "Dockerfile", "weird", "",
    ])
    def test_needs_analysis_iff_not_tooling(self, path):
        category = classify(path)
        assert category.type in CATEGORY_TYPES
        assert (category.needs_analysis is False) == (category.type == "tooling")

    def test_windows_separators(self):
        assert classify("frontend\\dist\\app.js").type == "code"
        assert classify("dist\\app.js").type == "tooling"


# ---------------------------------------------------------------------------
# Per-file helpers
# ---------------------------------------------------------------------------

class TestEstimateImpact:

    @pytest.mark.parametrize("changed, expected", [
        (150, "major"),
        (101, "major"),
        (100, "minor"),
        (15, "minor"),
        (10, "trivial"),
        (3, "trivial"),
        (0, "trivial"),
    ])
    def test_thresholds(self, changed, expected):
        assert estimate_impact(_diff(changed)) == expected

    def test_ignores_file_headers(self):
        diff = "--- a/x\n+++ b/x\n" * 20 + "+one change"
        assert estimate_impact(diff) == "trivial"


class TestTruncateDiff:

    def test_short_diff_untouched(self):
        assert truncate_diff("abc", 10) == "abc"

    def test_long_diff_gets_marker(self):
        result = truncate_diff("x" * 50, 10)
        assert result.startswith("x" * 10)
        assert result.endswith("... (diff truncated)")
        assert "x" * 11 not in result


class TestParseAnalysisResponse:

    def test_two_lines(self):
        summary, impact = parse_analysis_response("SUMMARY: Add retry to fetch\nIMPACT: major")
        assert summary == "Add retry to fetch"
        assert impact == "major"

    def test_impact_case_insensitive(self):
        assert parse_analysis_response("SUMMARY: x\nIMPACT: TRIVIAL")[1] == "trivial"

    def test_bracketed_impact(self):
        assert parse_analysis_response("SUMMARY: x\nIMPACT: [major]")[1] == "major"

    @pytest.mark.parametrize("value, expected", [
        ("major - adds new endpoint", "major"),
        ("Trivial.", "trivial"),
        ("minor (small fix)", "minor"),
        ("**major**", "major"),
    ])
    def test_impact_first_word(self, value, expected):
        assert parse_analysis_response(f"SUMMARY: x\nIMPACT: {value}")[1] == expected

    def test_surrounding_chatter(self):
        response = "Sure, here you go.\n\n**SUMMARY:** Rename helper\n**IMPACT:** minor\nHope that helps"
        assert parse_analysis_response(response) == ("Rename helper", "minor")

    @pytest.mark.parametrize("response", [
        "SUMMARY: x",
        "SUMMARY: x\nIMPACT: huge",
        "SUMMARY: x\nIMPACT:",
    ])
    def test_missing_or_unknown_impact_is_minor(self, response):
        assert parse_analysis_response(response)[1] == "minor"

    def test_missing_summary_is_empty(self):
        assert parse_analysis_response("I could not tell.\nIMPACT: major") == ("", "major")


class TestFallbackSummary:

    @pytest.mark.parametrize("status, verb", [
        ("added", "Add"),
        ("deleted", "Remove"),
        ("renamed", "Rename"),
        ("copied", "Copy"),
        ("modified", "Update"),
    ])
    def test_verb_by_status(self, status, verb):
        file = FileChange(path="path/to/file.py", status=status)
        assert fallback_summary(file, FileCategory(type="code")) == f"{verb} code file path/to/file.py"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class TestOverallScope:

    def test_empty(self):
        assert determine_overall_scope([]) == "misc changes"

    @pytest.mark.parametrize("code_files, expected", [
        (5, "large feature implementation"),
        (4, "large feature implementation"),
        (3, "feature implementation"),
        (1, "feature implementation"),
    ])
    def test_major_with_code(self, code_files, expected):
        analyses = [_analysis(f"src/m{i}.py", "code", impact="major") for i in range(code_files)]
        assert determine_overall_scope(analyses) == expected

    def test_major_without_code(self):
        analyses = [_analysis("README.md", "documentation", impact="major")]
        assert determine_overall_scope(analyses) == "significant change"

    def test_code_with_tests(self):
        analyses = [_analysis("src/a.py", "code"), _analysis("tests/test_a.py", "test")]
        assert determine_overall_scope(analyses) == "implementation with tests"

    def test_code_only(self):
        assert determine_overall_scope([_analysis("src/a.py", "code")]) == "code changes"

    @pytest.mark.parametrize("category_type, expected", [
        ("test", "test updates"),
        ("documentation", "documentation updates"),
        ("configuration", "configuration changes"),
        ("tooling", "tooling updates"),
    ])
    def test_single_category(self, category_type, expected):
        analyses = [_analysis("x", category_type, impact="trivial")]
        assert determine_overall_scope(analyses) == expected

    def test_tests_beat_docs(self):
        analyses = [_analysis("README.md", "documentation"), _analysis("tests/t.py", "test")]
        assert determine_overall_scope(analyses) == "test updates"


class TestSuggestCommitType:

    def test_empty(self):
        assert suggest_commit_type([]) == "chore"

    def test_added_code_is_feat_regardless_of_impact(self):
        analyses = [
            _analysis("src/new.py", "code", impact="trivial", status="added"),
            _analysis("tests/t.py", "test", impact="trivial"),
            _analysis("README.md", "documentation", impact="trivial"),
        ]
        assert suggest_commit_type(analyses) == "feat"

    def test_added_test_is_not_feat(self):
        analyses = [_analysis("tests/t.py", "test", status="added")]
        assert suggest_commit_type(analyses) == "test"

    def test_major_is_feat(self):
        assert suggest_commit_type([_analysis("docs/a.md", "documentation", impact="major")]) == "feat"

    def test_modified_code_is_fix(self):
        analyses = [_analysis("src/a.py", "code"), _analysis("tests/t.py", "test")]
        assert suggest_commit_type(analyses) == "fix"

    def test_docs_only(self):
        assert suggest_commit_type([_analysis("README.md", "documentation")]) == "docs"

    @pytest.mark.parametrize("category_type", ["configuration", "tooling"])
    def test_chore(self, category_type):
        assert suggest_commit_type([_analysis("x", category_type, impact="trivial")]) == "chore"


class TestAggregate:

    def test_empty(self):
        result = aggregate([])
        assert result.file_analyses == []
        assert result.overall_scope == "misc changes"
        assert result.suggested_commit_type == "chore"

    def test_preserves_order(self):
        analyses = [_analysis(p, None) for p in ("b.py", "README.md", "a.py")]
        result = aggregate(analyses)
        assert [a.file.path for a in result.file_analyses] == ["b.py", "README.md", "a.py"]

    def test_deterministic(self):
        analyses = [_analysis("src/a.py", "code", impact="major"), _analysis("README.md", "documentation")]
        assert aggregate(analyses) == aggregate(list(analyses))


class TestBuildContext:

    def test_groups_by_impact(self):
        result = aggregate([
            _analysis("src/a.py", "code", impact="minor", summary="Handle empty input"),
            _analysis("src/b.py", "code", impact="major", summary="Add retry loop"),
            _analysis("yarn.lock", "tooling", impact="trivial", summary="Update package dependencies"),
        ])
        context = build_context(result)

        assert "- Overall scope: feature implementation" in context
        assert "- Suggested type: feat" in context
        assert "- Total files changed: 3" in context
        assert "- src/b.py (modified): Add retry loop" in context
        assert "- src/a.py (modified): Handle empty input" in context
        assert "- yarn.lock (modified): Update package dependencies" in context
        assert context.index("Major Changes:") < context.index("Minor Changes:") < context.index("Trivial Changes:")

    def test_omits_empty_groups(self):
        context = build_context(aggregate([_analysis("src/a.py", "code")]))
        assert "Major Changes" not in context
        assert "Trivial Changes" not in context

    def test_five_trivial_listed(self):
        analyses = [_analysis(f"dist/{i}.js", "tooling", impact="trivial") for i in range(5)]
        context = build_context(aggregate(analyses))
        assert "- dist/4.js" in context

    def test_many_trivial_collapsed(self):
        analyses = [_analysis(f"dist/{i}.js", "tooling", impact="trivial") for i in range(6)]
        context = build_context(aggregate(analyses))
        assert "Trivial Changes: 6 files" in context
        assert "dist/0.js" not in context

    def test_custom_collapse_threshold(self):
        analyses = [_analysis(f"dist/{i}.js", "tooling", impact="trivial") for i in range(3)]
        assert "Trivial Changes: 3 files" in build_context(aggregate(analyses), trivial_collapse=2)


# ---------------------------------------------------------------------------
# sanitize_message
# ---------------------------------------------------------------------------

class TestSanitizeMessage:

    @pytest.mark.parametrize("raw, expected", [
        pytest.param("```\nfeat: add feature\n```", "feat: add feature", id="bare-fence"),
        pytest.param("```text\nfix(api): handle timeout\n```", "fix(api): handle timeout", id="language-tag"),
        pytest.param("  \n```\nchore: bump\n```\n\n", "chore: bump", id="surrounding-whitespace"),
        pytest.param(
            "feat: add `console.log` debugging",
            "feat: add `console.log` debugging",
            id="inline-backticks",
        ),
        pytest.param(
            "feat(auth): add login\n\n- add /login endpoint\n- validate credentials",
            "feat(auth): add login\n\n- add /login endpoint\n- validate credentials",
            id="preserves-body",
        ),
    ])
    def test_sanitize(self, raw, expected):
        assert sanitize_message(raw) == expected

    def test_removes_fence_only_lines_inside(self):
        raw = "fix(cli): escape args\n```\n- quote paths\n```"
        assert sanitize_message(raw) == "fix(cli): escape args\n- quote paths"

    def test_keeps_inline_code_in_body(self):
        raw = "refactor: split parser\n\n- move `parse()` into `Parser`"
        assert sanitize_message(raw) == raw


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.provider == "auto"
        assert config.analysis_model is None
        assert config.synthesis_model is None
        assert config.timeout == 60
        assert config.max_diff_chars == 5000
        assert config.max_subject_length == 72
        assert config.trivial_collapse_threshold == 5

    def test_to_dict_excludes_none(self):
        d = Config().to_dict()
        assert "analysis_model" not in d
        assert "provider" in d

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"provider": "ollama", "unknown_key": "value"})
        assert config.provider == "ollama"
        assert not hasattr(config, "unknown_key")

    def test_validate_invalid_provider(self):
        config = Config(provider="gpt4")
        warnings = config.validate()
        assert len(warnings) == 1
        assert config.provider == "auto"

    @pytest.mark.parametrize("field", ["timeout", "max_diff_chars", "max_subject_length", "trivial_collapse_threshold"])
    def test_validate_non_positive_ints(self, field):
        config = Config(**{field: 0})
        warnings = config.validate()
        assert any(field in w for w in warnings)
        assert getattr(config, field) == getattr(Config(), field)

    def test_validate_bool_fields(self):
        config = Config(auto_stage="yes")
        assert config.validate()
        assert config.auto_stage is True

    def test_validate_valid_config_no_warnings(self):
        assert Config().validate() == []

    def test_from_dict_triggers_validation(self, capsys):
        Config.from_dict({"provider": "invalid"})
        assert "Config warning" in capsys.readouterr().err

    def test_env_overrides(self):
        config = Config().apply_env({
            "GH_HELPER_PROVIDER": "claude-cli",
            "GH_HELPER_ANALYSIS_MODEL": "haiku",
            "GH_HELPER_SYNTHESIS_MODEL": "opus",
            "GH_HELPER_TIMEOUT": "15",
            "OLLAMA_HOST": "http://gpu-box:11434",
        })
        assert config.provider == "claude-cli"
        assert config.analysis_model == "haiku"
        assert config.synthesis_model == "opus"
        assert config.timeout == 15
        assert config.ollama_host == "http://gpu-box:11434"

    def test_env_bad_timeout_ignored(self, capsys):
        config = Config().apply_env({"GH_HELPER_TIMEOUT": "soon"})
        assert config.timeout == 60
        assert "GH_HELPER_TIMEOUT" in capsys.readouterr().err


class TestConfigManager:

    def test_load_returns_defaults_when_no_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        config = ConfigManager().load()
        assert config == Config()

    def test_load_reads_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".ghhelperrc").write_text(json.dumps({"provider": "ollama", "timeout": 30}))

        manager = ConfigManager()
        config = manager.load()
        assert config.provider == "ollama"
        assert config.timeout == 30
        assert manager.get_config_path() == tmp_path / ".ghhelperrc"

    def test_save_and_load_roundtrip(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)

        ConfigManager().save(Config(provider="claude", synthesis_model="opus"), global_config=True)
        loaded = ConfigManager().load()
        assert loaded.provider == "claude"
        assert loaded.synthesis_model == "opus"

    @pytest.mark.parametrize("content", ["not valid json {{{", "[1, 2]"])
    def test_malformed_file_returns_defaults(self, tmp_path, monkeypatch, capsys, content):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".ghhelperrc").write_text(content)

        config = ConfigManager().load()
        assert config.provider == "auto"
        assert "Could not load" in capsys.readouterr().err


class TestAnalysisResult:

    def test_filters(self):
        result = AnalysisResult(file_analyses=[
            _analysis("src/a.py", "code", impact="major"),
            _analysis("README.md", "documentation", impact="minor"),
        ])
        assert [a.file.path for a in result.by_impact("major")] == ["src/a.py"]
        assert [a.file.path for a in result.by_category("documentation")] == ["README.md"]
