"""Command line entry point for interactive sessions.

The CLI is the harness that:
1. Applies per-run overrides on top of environment settings
2. Prints the startup banner
3. Runs one conversation over stdin/stdout
4. Logs the run summary and exits

Type a line to send a turn; ``exit``, ``/quit`` or end-of-input (Ctrl+D)
ends the conversation.

Usage:
    uv run parley chat
    uv run parley chat --model claude-sonnet-4-5 -t Read -t Grep -t "mcp__docs"
    echo "hello" | uv run parley chat --transcript ./hello.json
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console

from parley.agent.config import Settings, settings
from parley.agent.core import run_conversation
from parley.agent.models import RunSummary
from parley.version import __version__

logger = logging.getLogger(__name__)
console = Console(stderr=True, highlight=False)

app = typer.Typer(
    name="parley",
    help="Interactive multi-turn agent driver",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context) -> None:
    """Interactive multi-turn agent driver."""
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


def apply_overrides(base: Settings, **overrides: Any) -> Settings:
    """Return *base* with every non-None override applied, validated again.

    Raises:
        pydantic.ValidationError: If an override is not a valid setting.
    """
    fields = type(base).model_fields
    values = base.model_dump()
    values.update((k, v) for k, v in overrides.items() if v is not None)
    return type(base).model_validate(
        {fields[name].validation_alias or name: value for name, value in values.items()}
    )


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def banner(config: Settings) -> str:
    key = config.anthropic_api_key
    if key:
        return f'Thread started using API key ending in "{key[-5:]}".'
    return "Thread started without ANTHROPIC_API_KEY (using CLI login)."


def _log_summary(summary: RunSummary) -> None:
    logger.info(
        "Session %s finished: %d turn(s) sent, %d completed, %d error(s), cost $%.4f",
        summary.session_id or "(none)",
        summary.turns_sent,
        summary.turns_completed,
        summary.errors,
        summary.cost_usd or 0,
    )


@app.command()
def chat(
    model: Annotated[
        str | None, typer.Option("--model", "-m", help="Backend model variant")
    ] = None,
    max_turns: Annotated[
        int | None,
        typer.Option("--max-turns", min=1, help="Exchanges before the service stops"),
    ] = None,
    allowed_tools: Annotated[
        list[str] | None,
        typer.Option(
            "--allow-tool", "-t", help="Tool name or pattern the agent may use (repeatable)"
        ),
    ] = None,
    permission_mode: Annotated[
        str | None,
        typer.Option(
            "--permission-mode",
            help="default, acceptEdits, plan or bypassPermissions",
        ),
    ] = None,
    system_prompt: Annotated[
        Path | None,
        typer.Option("--system-prompt", help="File with system prompt text"),
    ] = None,
    preset: Annotated[
        str | None,
        typer.Option("--preset", help="System prompt preset to append the file to"),
    ] = None,
    mcp_config: Annotated[
        Path | None,
        typer.Option("--mcp-config", help="JSON file of auxiliary MCP servers"),
    ] = None,
    setting_sources: Annotated[
        list[str] | None,
        typer.Option(
            "--setting-source", help="user, project or local (repeatable)"
        ),
    ] = None,
    transcript: Annotated[
        Path | None,
        typer.Option("--transcript", help="Transcript file written at shutdown"),
    ] = None,
    seed: Annotated[
        str | None,
        typer.Option("--seed", help="Scripted first turn sent before reading input"),
    ] = None,
    partial: Annotated[
        bool,
        typer.Option("--partial/--no-partial", help="Stream text as it is generated"),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Chat with the agent over stdin/stdout."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    try:
        config = apply_overrides(
            settings,
            model=model,
            max_turns=max_turns,
            allowed_tools=allowed_tools or None,
            permission_mode=permission_mode,
            system_prompt_path=str(system_prompt) if system_prompt else None,
            system_prompt_preset=preset,
            mcp_config_path=str(mcp_config) if mcp_config else None,
            setting_sources=setting_sources or None,
            seed_prompt=seed,
            include_partial_messages=partial,
        )
    except ValidationError as e:
        raise typer.BadParameter(_describe(e)) from e

    console.print(banner(config))
    console.print()

    summary = asyncio.run(run_conversation(config=config, transcript_path=transcript))
    _log_summary(summary)
    raise typer.Exit()


@app.command()
def version() -> None:
    """Print the driver version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
