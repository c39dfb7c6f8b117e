"""Tests for gate.git — subprocess-based git queries."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from tlc.gate.git import FALLBACK_BASE, GitError, GitRepo, read_changes


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestDefaultBase:
    def test_uses_upstream(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(stdout="origin/main\n")) as mock_run:
            assert GitRepo(tmp_path).default_base() == "origin/main"

        args = mock_run.call_args[0][0]
        assert "@{upstream}" in args
        assert mock_run.call_args.kwargs["cwd"] == tmp_path

    def test_falls_back_without_upstream(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(128, stderr="no upstream")):
            assert GitRepo(tmp_path).default_base() == FALLBACK_BASE


class TestChangedPaths:
    def test_parses_names(self, tmp_path: Path) -> None:
        stdout = "src/a.js\nsrc/b.ts\n\n"
        with patch("subprocess.run", return_value=_completed(stdout=stdout)) as mock_run:
            paths = GitRepo(tmp_path).changed_paths("origin/main")

        assert paths == ["src/a.js", "src/b.ts"]
        args = mock_run.call_args[0][0]
        assert args[:3] == ["git", "diff", "--name-only"]
        assert "--diff-filter=ACMR" in args
        assert "origin/main...HEAD" in args

    def test_raises_on_failure(self, tmp_path: Path) -> None:
        failed = _completed(128, stderr="fatal: bad revision 'nope...HEAD'")
        with (
            patch("subprocess.run", return_value=failed),
            pytest.raises(GitError, match="bad revision"),
        ):
            GitRepo(tmp_path).changed_paths("nope")

    def test_raises_when_git_missing(self, tmp_path: Path) -> None:
        with (
            patch("subprocess.run", side_effect=FileNotFoundError("git")),
            pytest.raises(GitError),
        ):
            GitRepo(tmp_path).changed_paths("main")


class TestStaged:
    def test_staged_paths_reads_index(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(stdout="src/a.js\n")) as mock_run:
            paths = GitRepo(tmp_path).staged_paths()

        assert paths == ["src/a.js"]
        assert mock_run.call_args[0][0] == [
            "git",
            "diff",
            "--cached",
            "--name-only",
            "--diff-filter=ACMR",
        ]

    def test_staged_diff(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(stdout="diff\n")) as mock_run:
            assert GitRepo(tmp_path).staged_diff() == "diff\n"
        assert mock_run.call_args[0][0] == ["git", "diff", "--cached"]

    def test_read_staged_uses_index_content(self, tmp_path: Path) -> None:
        (tmp_path / "a.js").write_text("worktree")
        with patch("subprocess.run", return_value=_completed(stdout="staged")) as mock_run:
            changes = GitRepo(tmp_path).read_staged(["a.js"])

        assert changes[0].path == "a.js"
        assert changes[0].content == "staged"
        assert mock_run.call_args[0][0] == ["git", "show", ":a.js"]


class TestDiff:
    def test_returns_diff_text(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(stdout="diff --git a b\n")):
            assert GitRepo(tmp_path).diff("main") == "diff --git a b\n"


class TestHooksDir:
    def test_relative_path_resolved_against_root(self, tmp_path: Path) -> None:
        with patch("subprocess.run", return_value=_completed(stdout=".git/hooks\n")):
            assert GitRepo(tmp_path).hooks_dir() == tmp_path / ".git" / "hooks"

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        hooks = tmp_path / "shared" / "hooks"
        with patch("subprocess.run", return_value=_completed(stdout=f"{hooks}\n")):
            assert GitRepo(tmp_path).hooks_dir() == hooks

    def test_not_a_repository(self, tmp_path: Path) -> None:
        failed = _completed(128, stderr="fatal: not a git repository")
        with patch("subprocess.run", return_value=failed), pytest.raises(GitError):
            GitRepo(tmp_path).hooks_dir()


class TestReadChanges:
    def test_reads_existing_files(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "a.js").write_text("const a = 1;\n")

        changes = read_changes(tmp_path, ["src/a.js"])

        assert len(changes) == 1
        assert changes[0].path == "src/a.js"
        assert changes[0].content == "const a = 1;\n"

    def test_skips_missing_and_directories(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        assert read_changes(tmp_path, ["gone.js", "src"]) == []

    def test_undecodable_bytes_replaced(self, tmp_path: Path) -> None:
        (tmp_path / "bin.dat").write_bytes(b"ok\xff\xfe")
        changes = read_changes(tmp_path, ["bin.dat"])
        assert changes[0].content.startswith("ok")
