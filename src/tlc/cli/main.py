"""TLC CLI application."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler

import tlc as tlc_pkg


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"


app = typer.Typer(
    name="tlc",
    help="Quality gate for code before it is pushed.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"tlc {tlc_pkg.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging."),
    ] = False,
) -> None:
    """TLC — static and multi-model review gate."""
    from dotenv import load_dotenv

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _root(project_root: str | None) -> Path:
    return Path(project_root) if project_root else Path.cwd()


# --- gate ---

gate_app = typer.Typer(help="Run the push gate.", no_args_is_help=True)
app.add_typer(gate_app, name="gate")


@gate_app.command("run")
def gate_run(
    files: Annotated[
        list[str] | None,
        typer.Argument(help="Files to check (changed files from git if omitted)"),
    ] = None,
    base: Annotated[
        str | None,
        typer.Option("--base", "-b", help="Git ref to diff against (default: upstream)"),
    ] = None,
    staged: Annotated[
        bool,
        typer.Option("--staged", help="Check files staged for commit (pre-commit hook)"),
    ] = False,
    model: Annotated[
        list[str] | None,
        typer.Option("--model", "-m", help="Review model, repeatable (default: config)"),
    ] = None,
    no_llm: Annotated[
        bool,
        typer.Option("--no-llm", help="Static checks only"),
    ] = False,
    override: Annotated[
        bool,
        typer.Option(
            "--override",
            envvar="TLC_GATE_OVERRIDE",
            help="Pass even if static checks block (human-authorized bypass)",
        ),
    ] = False,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
    project_root: Annotated[
        str | None,
        typer.Option("--project-root", "-p", help="Project root directory"),
    ] = None,
) -> None:
    """Run static checks, then LLM review, on the changes about to be pushed."""
    from tlc.gate.cli import gate_command

    exit_code = gate_command(
        project_root=_root(project_root),
        files=files or None,
        base=base,
        staged=staged,
        models=model or None,
        no_llm=no_llm,
        override=override,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@gate_app.command("config")
def gate_config(
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = OutputFormat.human,
    project_root: Annotated[
        str | None,
        typer.Option("--project-root", "-p", help="Project root directory"),
    ] = None,
) -> None:
    """Show the resolved gate configuration."""
    from tlc.gate.cli import config_command

    raise typer.Exit(config_command(project_root=_root(project_root), format=format.value))


@gate_app.command("install-hooks")
def gate_install_hooks(
    force: Annotated[
        bool,
        typer.Option("--force", help="Replace existing hooks not installed by tlc"),
    ] = False,
    project_root: Annotated[
        str | None,
        typer.Option("--project-root", "-p", help="Project root directory"),
    ] = None,
) -> None:
    """Install pre-commit / pre-push hooks that run the gate."""
    from tlc.gate.cli import install_hooks_command

    raise typer.Exit(install_hooks_command(project_root=_root(project_root), force=force))
