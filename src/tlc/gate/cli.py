"""CLI commands for the push gate."""

import asyncio
import json
import logging
from pathlib import Path

from rich.console import Console

from tlc.gate.config import GateConfig, load_gate_config
from tlc.gate.engine import StaticGateEngine
from tlc.gate.git import GitError, GitRepo, read_changes
from tlc.gate.hooks import HookError, install_hooks
from tlc.gate.llm import build_llm_review, build_review_fn
from tlc.gate.models import GateResult
from tlc.gate.push_gate import LlmReviewFn, PushGate
from tlc.gate.reporter import format_gate_report
from tlc.gate.rules import default_rules

logger = logging.getLogger(__name__)

console = Console()


def _error(message: str, format: str) -> int:
    if format == "human":
        console.print(f"[red]Error:[/red] {message}")
    else:
        print(json.dumps({"error": message}))
    return 1


def gate_command(
    project_root: Path,
    files: list[str] | None = None,
    base: str | None = None,
    staged: bool = False,
    models: list[str] | None = None,
    no_llm: bool = False,
    override: bool = False,
    format: str = "human",
) -> int:
    """Run the push gate on changed files.

    Args:
        project_root: Root directory of the project
        files: Explicit paths to check (changed files from git if None)
        base: Git ref to diff against (upstream branch, then main, if None)
        staged: Check the files staged for commit instead of base...HEAD
        models: Review models (config `models` if None)
        no_llm: Skip the LLM phase
        override: Pass even if the static phase blocks
        format: Output format: "human" or "json"

    Returns:
        Exit code (0 = passed, 1 = blocked or error, 130 = interrupted)
    """
    try:
        if not project_root.exists():
            return _error(f"Project root does not exist: {project_root}", format)

        config = load_gate_config(project_root)
        if not config.enabled:
            if format == "human":
                console.print("[dim]Gate disabled in .tlc.json; skipping[/dim]")
            else:
                print(json.dumps({"passed": True, "disabled": True}))
            return 0

        diff: str | None = None
        if files:
            changes = read_changes(project_root, files)
        elif staged:
            repo = GitRepo(project_root)
            changes = repo.read_staged(repo.staged_paths())
            diff = repo.staged_diff()
        else:
            repo = GitRepo(project_root)
            ref = base or repo.default_base()
            changes = read_changes(project_root, repo.changed_paths(ref))
            diff = repo.diff(ref)

        engine = StaticGateEngine(config=config, rules=default_rules())

        review_models = config.models if models is None else models
        llm_review: LlmReviewFn | None = None
        if review_models and not no_llm:
            llm_review = build_llm_review(
                review_models,
                build_review_fn(),
                diff=diff,
                per_model_timeout_ms=config.per_model_timeout,
            )

        gate = PushGate(
            static_gate=engine.run,
            llm_review=llm_review,
            llm_timeout_ms=config.llm_timeout,
        )
        result = asyncio.run(gate.run(changes, override=override))

        _output_result(result, format)
        return 0 if result.passed else 1

    except KeyboardInterrupt:
        if format == "human":
            console.print("\n[yellow]Gate cancelled by user[/yellow]")
        return 130
    except GitError as e:
        return _error(f"git: {e}", format)
    except Exception as e:
        logger.exception("Push gate crashed")
        return _error(str(e), format)


def _output_result(result: GateResult, format: str) -> None:
    """Output gate result in the requested format."""
    if format == "json":
        print(result.model_dump_json(indent=2))
        return

    style = "green" if result.passed else "red"
    console.print(format_gate_report(result), style=style, markup=False, highlight=False)


def config_command(project_root: Path, format: str = "human") -> int:
    """Show the resolved gate configuration.

    Args:
        project_root: Root directory of the project
        format: Output format: "human" or "json"

    Returns:
        Exit code (always 0; broken config files fall back to defaults)
    """
    config = load_gate_config(project_root)
    if format == "json":
        print(config.model_dump_json(by_alias=True, indent=2))
        return 0

    _print_config(config)
    return 0


def _print_config(config: GateConfig) -> None:
    console.print(f"[bold]enabled[/bold]      {config.enabled}")
    console.print(f"[bold]strictness[/bold]   {config.strictness}")
    console.print(f"[bold]preCommit[/bold]    {config.pre_commit}")
    console.print(f"[bold]prePush[/bold]      {config.pre_push}")
    console.print(f"[bold]models[/bold]       {', '.join(config.models) or '(none)'}")
    console.print(f"[bold]llmTimeout[/bold]   {config.llm_timeout}ms")
    if config.rules:
        console.print("[bold]rules[/bold]")
        for rule_id, setting in config.rules.items():
            value = "off" if setting is False else str(setting)
            console.print(f"  {rule_id}: {value}")
    console.print("[bold]ignore[/bold]")
    for pattern in config.ignore:
        console.print(f"  {pattern}", markup=False)


def install_hooks_command(project_root: Path, force: bool = False) -> int:
    """Install git hooks that run the gate.

    Args:
        project_root: Repository root
        force: Replace hooks not written by tlc

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    config = load_gate_config(project_root)
    try:
        written = install_hooks(project_root, config, force=force)
    except (HookError, GitError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if not written:
        console.print("[yellow]preCommit and prePush are both disabled; nothing installed[/yellow]")
        return 0
    for path in written:
        console.print(f"[green]✓[/green] Installed {path}")
    return 0
