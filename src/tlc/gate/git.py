"""Git access for the gate — changed files and diff text via subprocess."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from tlc.gate.models import FileChange

logger = logging.getLogger(__name__)

FALLBACK_BASE = "main"


class GitError(Exception):
    """Raised when a git command fails."""


class GitRepo:
    """Read-only git queries for a project."""

    def __init__(self, repo_root: Path) -> None:
        self._repo_root = repo_root

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        """Run a git command, raising GitError if git itself is unavailable."""
        try:
            return subprocess.run(
                cmd,
                cwd=self._repo_root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GitError(str(e)) from e

    def _output(self, cmd: list[str]) -> str:
        result = self._run(cmd)
        if result.returncode != 0:
            raise GitError(result.stderr.strip() or f"{' '.join(cmd)} failed")
        return result.stdout

    def default_base(self) -> str:
        """The upstream of the current branch, or `main` when none is set."""
        cmd = ["git", "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}"]
        result = self._run(cmd)
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
        logger.debug("No upstream branch; diffing against %s", FALLBACK_BASE)
        return FALLBACK_BASE

    def changed_paths(self, base: str) -> list[str]:
        """Paths added, copied, modified or renamed between base and HEAD.

        Raises:
            GitError: If the diff cannot be computed
        """
        cmd = ["git", "diff", "--name-only", "--diff-filter=ACMR", f"{base}...HEAD"]
        return [line for line in self._output(cmd).splitlines() if line.strip()]

    def staged_paths(self) -> list[str]:
        """Paths added, copied, modified or renamed in the index (what the next commit holds).

        Raises:
            GitError: If the index cannot be read
        """
        cmd = ["git", "diff", "--cached", "--name-only", "--diff-filter=ACMR"]
        return [line for line in self._output(cmd).splitlines() if line.strip()]

    def staged_diff(self) -> str:
        """Unified diff of the index against HEAD."""
        return self._output(["git", "diff", "--cached"])

    def read_staged(self, paths: list[str]) -> list[FileChange]:
        """Load the staged (index) content of each path, which may differ from the worktree.

        Raises:
            GitError: If a path is not in the index
        """
        return [
            FileChange(path=path, content=self._output(["git", "show", f":{path}"]))
            for path in paths
        ]

    def diff(self, base: str) -> str:
        """Unified diff between base and HEAD.

        Raises:
            GitError: If the diff cannot be computed
        """
        return self._output(["git", "diff", f"{base}...HEAD"])

    def hooks_dir(self) -> Path:
        """Absolute path of the repository's hooks directory.

        Raises:
            GitError: If the project is not a git repository
        """
        path = Path(self._output(["git", "rev-parse", "--git-path", "hooks"]).strip())
        return path if path.is_absolute() else self._repo_root / path


def read_changes(project_root: Path, paths: list[str]) -> list[FileChange]:
    """Load file contents for the given paths, skipping files that no longer exist."""
    changes: list[FileChange] = []
    for path in paths:
        full_path = project_root / path
        if not full_path.is_file():
            logger.debug("Skipping %s: not a file", path)
            continue
        content = full_path.read_text(encoding="utf-8", errors="replace")
        changes.append(FileChange(path=path, content=content))
    return changes
