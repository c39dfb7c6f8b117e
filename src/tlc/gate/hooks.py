"""Install git hooks that run the gate before commits and pushes."""

from __future__ import annotations

import stat
from pathlib import Path

from tlc.gate.config import GateConfig
from tlc.gate.git import GitRepo

HOOK_MARKER = "# tlc-gate"

HOOK_TEMPLATE = """#!/bin/sh
{marker}
# Installed by `tlc gate install-hooks`. Bypass with --no-verify.
exec tlc gate run {args}
"""


class HookError(Exception):
    """Raised when a hook cannot be installed."""


def hook_script(hook_name: str) -> str:
    """Shell script for a hook. pre-commit runs static checks on the staged files only."""
    args = "--staged --no-llm" if hook_name == "pre-commit" else ""
    return HOOK_TEMPLATE.format(marker=HOOK_MARKER, args=args).replace(" \n", "\n")


def wanted_hooks(config: GateConfig) -> list[str]:
    """Hook names enabled by the config."""
    hooks: list[str] = []
    if config.pre_commit:
        hooks.append("pre-commit")
    if config.pre_push:
        hooks.append("pre-push")
    return hooks


def install_hooks(project_root: Path, config: GateConfig, force: bool = False) -> list[Path]:
    """Write the gate hooks into the repository's hooks directory.

    An existing hook we did not write is left alone unless force is set.

    Args:
        project_root: Repository root
        config: Gate config deciding which hooks to install
        force: Overwrite foreign hooks

    Returns:
        Paths of the hooks written

    Raises:
        HookError: If a foreign hook exists and force is False
        GitError: If the project is not a git repository
    """
    hooks_dir = GitRepo(project_root).hooks_dir()
    hooks_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for name in wanted_hooks(config):
        path = hooks_dir / name
        if path.exists() and not force and HOOK_MARKER not in path.read_text(errors="replace"):
            raise HookError(f"{path} already exists; use --force to replace it")
        path.write_text(hook_script(name))
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        written.append(path)
    return written
