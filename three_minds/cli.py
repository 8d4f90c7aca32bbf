"""Click CLI: orchestrates config loading, invoker wiring, the loop and output."""

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.logging import RichHandler
from rich.markup import escape

from config.config_loader import ConfigError, CouncilConfig, get_default_config, load_config, load_credentials
from three_minds.council import LoopFatalError, ValidationError, run_council
from three_minds.invokers.base import AgentInvoker
from three_minds.invokers.router import build_default_invoker
from three_minds.models import STATUS_CONSENSUS, AgentTurn, Session
from three_minds.output import (
    console,
    print_header,
    print_round_result,
    print_round_start,
    print_summary,
    print_turn,
    save_session_json,
    save_transcript,
)
from three_minds.taskfile import parse_task_file

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _resolve_task(task: str | None, task_file: str | None) -> tuple[str, dict]:
    """Returns (task_text, frontmatter). --file wins over the positional TASK."""
    if task_file:
        return parse_task_file(Path(task_file))
    if task:
        return task, {}
    raise click.UsageError("Provide a TASK argument or --file.")


def _build_config(
    config_ref: str | None,
    project_dir: Path,
    max_rounds: int | None,
    timeout_sec: int | None,
    no_transcript: bool,
    meta: dict,
) -> CouncilConfig:
    """Load the roster and apply overrides. Precedence: CLI flag > frontmatter > config file."""
    ref = config_ref or meta.get("config")
    try:
        config = load_config(ref, project_dir=project_dir)
    except FileNotFoundError:
        if ref:
            raise
        logger.warning("Bundled settings.yaml missing, using the built-in team")
        config = get_default_config(project_dir)

    overrides: dict = {}
    for key, cli_value in (("max_rounds", max_rounds), ("timeout_sec", timeout_sec)):
        value = cli_value if cli_value is not None else meta.get(key)
        if value is None:
            continue
        try:
            overrides[key] = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"'{key}' must be an integer, got {value!r}") from exc
        if overrides[key] < 1:
            raise ConfigError(f"'{key}' must be >= 1, got {overrides[key]}")
    if no_transcript:
        overrides["save_transcript"] = False

    return dataclasses.replace(config, **overrides) if overrides else config


async def _run(task: str, config: CouncilConfig, invoker: AgentInvoker, quiet: bool) -> Session:
    """Run the loop, streaming each turn and round tally to the console."""
    if quiet:
        return await run_council(task, config, invoker)

    print_header(task.strip(), config)
    seen_rounds: set[int] = set()

    def on_turn_complete(turn: AgentTurn) -> None:
        if turn.round_number not in seen_rounds:
            seen_rounds.add(turn.round_number)
            print_round_start(turn.round_number)
        print_turn(turn, config)

    def on_round_complete(round_number: int, votes: list[bool]) -> None:
        print_round_result(round_number, votes, len(config.agents))

    return await run_council(
        task,
        config,
        invoker,
        on_turn_complete=on_turn_complete,
        on_round_complete=on_round_complete,
    )


def _write_outputs(session: Session, output_path: str | None, quiet: bool) -> None:
    if session.config.save_transcript:
        saved = save_transcript(session, session.config.project_dir)
        if not quiet:
            console.print(f"\n[dim]Transcript saved to: {saved}[/dim]")
    if output_path:
        saved_json = save_session_json(session, Path(output_path).resolve())
        if not quiet:
            console.print(f"[dim]Result saved to: {saved_json}[/dim]")


@click.command()
@click.argument("task", required=False)
@click.option("--file", "task_file", type=click.Path(exists=True, dir_okay=False),
              help="Read the task from a .md file (optional YAML frontmatter)")
@click.option("-c", "--config", "config_ref", default=None,
              help="Config file path or bundled preset name (default: config/settings.yaml)")
@click.option("-d", "--dir", "work_dir", default=None,
              help="Shared working directory (default: current directory)")
@click.option("-m", "--max-rounds", type=click.IntRange(min=1), default=None,
              help="Maximum rounds (default: from config)")
@click.option("--timeout", "timeout_sec", type=click.IntRange(min=1), default=None,
              help="Per-agent timeout in seconds (default: from config)")
@click.option("-q", "--quiet", is_flag=True, help="Only print errors")
@click.option("-o", "--output", "output_path", default=None, help="Save the session as JSON to this path")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None,
              help="Credentials file (default: ~/.three-minds/.env)")
@click.option("--no-transcript", is_flag=True, help="Do not write the markdown transcript")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    task: str | None,
    task_file: str | None,
    config_ref: str | None,
    work_dir: str | None,
    max_rounds: int | None,
    timeout_sec: int | None,
    quiet: bool,
    output_path: str | None,
    env_file: str | None,
    no_transcript: bool,
    verbose: bool,
) -> None:
    """Three Minds -- AI agents take turns on a shared project until they all agree.

    \b
    Examples:
      three-minds "Add input validation to utils.py" --dir ./myproject
      three-minds "Write a README" --config writers --max-rounds 3
      three-minds --file task.md --config mixed
      three-minds "Refactor the parser" -q -o result.json
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose, quiet)

    task_text, meta = _resolve_task(task, task_file)

    # YAML frontmatter may hand back a non-string (e.g. `dir: 2024`)
    project_dir = Path(str(work_dir or meta.get("dir") or ".")).resolve()
    if not project_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Working directory does not exist: {project_dir}")
        sys.exit(1)

    try:
        config = _build_config(config_ref, project_dir, max_rounds, timeout_sec, no_transcript, meta)
    except (FileNotFoundError, ConfigError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    credentials = load_credentials(Path(env_file) if env_file else None)
    invoker = build_default_invoker(credentials)

    try:
        session = asyncio.run(_run(task_text, config, invoker, quiet))
    except ValidationError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(1)
    except LoopFatalError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        _write_outputs(exc.session, output_path, quiet)
        sys.exit(1)

    if not quiet:
        print_summary(session)
    _write_outputs(session, output_path, quiet)

    sys.exit(0 if session.status == STATUS_CONSENSUS else 1)


if __name__ == "__main__":
    main()
