"""
Tests for reading staged changes: name-status parsing and the git wrapper.

Run with:
    pytest tests/test_git.py -v
"""

import subprocess

import pytest

from gh_helper.git import FileChange, GitAnalyzer, GitError, parse_name_status


class TestParseNameStatus:

    def test_basic_statuses(self):
        output = "A\tsrc/new.py\nM\tsrc/old.py\nD\tREADME.txt\n"
        assert parse_name_status(output) == [
            FileChange(path="src/new.py", status="added"),
            FileChange(path="src/old.py", status="modified"),
            FileChange(path="README.txt", status="deleted"),
        ]

    def test_rename_with_similarity(self):
        files = parse_name_status("R087\tsrc/a.py\tsrc/b.py")
        assert files == [FileChange(path="src/b.py", status="renamed", old_path="src/a.py")]

    def test_copy(self):
        files = parse_name_status("C100\tsrc/a.py\tsrc/a_copy.py")
        assert files[0].status == "copied"
        assert files[0].old_path == "src/a.py"

    def test_type_change_is_modified(self):
        assert parse_name_status("T\tlink")[0].status == "modified"

    def test_skips_unknown_and_blank_lines(self):
        output = "\nX\tweird\nU\tconflict.py\nM\tok.py\n\n"
        assert [f.path for f in parse_name_status(output)] == ["ok.py"]

    def test_paths_with_spaces(self):
        assert parse_name_status("M\tdocs/my notes.md")[0].path == "docs/my notes.md"

    def test_empty(self):
        assert parse_name_status("") == []

    def test_name_property(self):
        assert FileChange(path="a/b/c.py", status="modified").name == "c.py"


# ---------------------------------------------------------------------------
# GitAnalyzer with a scripted git
# ---------------------------------------------------------------------------

class FakeGit:
    """Stands in for subprocess.run. Maps argument tuples to stdout."""

    def __init__(self, outputs=None, failures=()):
        self.outputs = outputs or {}
        self.failures = set(failures)
        self.calls = []

    def __call__(self, cmd, **kwargs):
        args = tuple(cmd[1:])
        self.calls.append(args)
        if args in self.failures:
            raise subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: something broke")
        return subprocess.CompletedProcess(cmd, 0, self.outputs.get(args, ""), "")


@pytest.fixture
def fake_git(monkeypatch):
    def _install(outputs=None, failures=()):
        fake = FakeGit(outputs, failures)
        monkeypatch.setattr("subprocess.run", fake)
        return fake
    return _install


class TestGitAnalyzer:

    def test_not_a_repository(self, fake_git):
        fake_git(failures=[("rev-parse", "--git-dir")])
        with pytest.raises(GitError, match="Not a git repository"):
            GitAnalyzer()

    def test_git_missing(self, monkeypatch):
        def missing(cmd, **kwargs):
            raise FileNotFoundError("git")
        monkeypatch.setattr("subprocess.run", missing)
        with pytest.raises(GitError, match="not installed"):
            GitAnalyzer()

    def test_has_changes(self, fake_git):
        fake_git({("status", "--porcelain"): " M src/a.py\n"})
        assert GitAnalyzer().has_changes() is True

    def test_has_no_changes(self, fake_git):
        fake_git({("status", "--porcelain"): "\n"})
        assert GitAnalyzer().has_changes() is False

    def test_list_changed_files(self, fake_git):
        fake_git({("diff", "--cached", "--name-status", "-M"): "M\tsrc/a.py\nA\ttests/test_a.py\n"})
        files = GitAnalyzer().list_changed_files()
        assert [(f.path, f.status) for f in files] == [("src/a.py", "modified"), ("tests/test_a.py", "added")]

    def test_get_diff_for_one_path(self, fake_git):
        fake = fake_git({("diff", "--cached", "--", "src/a.py"): "+x\n"})
        assert GitAnalyzer().get_diff("src/a.py") == "+x\n"
        assert fake.calls[-1] == ("diff", "--cached", "--", "src/a.py")

    def test_get_diff_for_renamed_path(self, fake_git):
        args = ("diff", "--cached", "-M", "-C", "--find-copies-harder", "--", "old.py", "new.py")
        fake = fake_git({args: "similarity index 100%\nrename from old.py\nrename to new.py\n"})
        assert GitAnalyzer().get_diff("new.py", "old.py").startswith("similarity index 100%")
        assert fake.calls[-1] == args

    def test_get_full_diff(self, fake_git):
        fake_git({("diff", "--cached"): "+everything\n"})
        assert GitAnalyzer().get_diff() == "+everything\n"

    def test_diff_failure_raises(self, fake_git):
        fake_git(failures=[("diff", "--cached", "--", "gone.py")])
        with pytest.raises(GitError, match="something broke"):
            GitAnalyzer().get_diff("gone.py")

    def test_stage_commit_push(self, fake_git):
        fake = fake_git()
        git = GitAnalyzer()
        git.stage_all()
        git.commit("feat: add x\n\n- detail")
        git.push()
        assert fake.calls[-3:] == [
            ("add", "-A"),
            ("commit", "-m", "feat: add x\n\n- detail"),
            ("push",),
        ]
