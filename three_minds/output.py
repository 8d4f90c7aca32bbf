"""Rich console output, markdown transcript and JSON dump for sessions."""

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.rule import Rule
from rich.text import Text

from config.config_loader import CouncilConfig
from three_minds.models import AgentTurn, Session
from three_minds.summary import emoji_for

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_TURN_PREVIEW_LINES = 3
_TURN_PREVIEW_CHARS = 150


def _turn_preview(turn: AgentTurn) -> str:
    """First few non-blank lines, joined and cut to a console-friendly length."""
    lines = [line.strip() for line in turn.content.splitlines() if line.strip()]
    return " ".join(lines[:_TURN_PREVIEW_LINES])[:_TURN_PREVIEW_CHARS]


def print_header(task: str, config: CouncilConfig) -> None:
    roster = escape(", ".join(f"{a.emoji} {a.name}" for a in config.agents))
    console.print(f"\n[bold cyan]Three Minds[/bold cyan] - {escape(config.name)}")
    console.print(f"Task: [italic]{escape(task[:80])}{'...' if len(task) > 80 else ''}[/italic]")
    console.print(f"Directory: {config.project_dir}")
    console.print(f"Agents: {roster}")
    console.print(f"Max rounds: {config.max_rounds}\n")


def print_round_start(round_number: int) -> None:
    console.print(Rule(f"[bold cyan]Round {round_number}[/bold cyan]"))


def print_turn(turn: AgentTurn, config: CouncilConfig) -> None:
    """One line per finished turn: agent, backend, vote, then a short preview."""
    label = escape(f"{emoji_for(config, turn.agent)} {turn.agent}")
    if turn.error:
        console.print(f"{label} [red]failed[/red] | vote: [red]NO[/red]")
        console.print(Text(f"  {turn.content[:_TURN_PREVIEW_CHARS]}", style="red"))
        return
    vote = "[green]YES[/green]" if turn.consensus else "[yellow]NO[/yellow]"
    console.print(f"{label} [dim]\\[{turn.backend}, {turn.latency_sec:.1f}s][/dim] | vote: {vote}")
    console.print(Text(f"  {_turn_preview(turn)}...", style="dim"))


def print_round_result(round_number: int, votes: list[bool], roster_size: int) -> None:
    yes = sum(votes)
    style = "green" if yes == roster_size and len(votes) == roster_size else "yellow"
    console.print(f"[{style}]Round {round_number} vote: {yes}/{roster_size} YES[/{style}]\n")


def print_summary(session: Session) -> None:
    """Print the final summary using Rich markdown."""
    console.print(Rule("[bold green]Collaboration Summary[/bold green]"))
    console.print(
        Text(
            f"Status: {session.status} | Rounds: {session.rounds_completed} | "
            f"Turns: {len(session.turns)}",
            style="dim",
        )
    )
    if session.summary:
        console.print(Markdown(session.summary))


def save_transcript(session: Session, directory: Path) -> Path:
    """Save the full chronological transcript as markdown in directory.

    Returns:
        Path to the saved file.
    """
    directory.mkdir(parents=True, exist_ok=True)
    # Session id suffix keeps sessions started in the same second apart
    timestamp = datetime.fromisoformat(session.start_time).strftime("%Y-%m-%dT%H-%M-%S")
    filepath = directory / f"three-minds-{timestamp}-{session.id[:8]}.md"

    lines: list[str] = [
        "# Three Minds Transcript",
        "",
        f"- **Started:** {session.start_time}",
        f"- **Task:** {session.task}",
        f"- **Status:** {session.status}",
        "",
        "---",
        "",
    ]

    current_round = 0
    for turn in session.turns:
        if turn.round_number != current_round:
            current_round = turn.round_number
            lines.append(f"## Round {current_round}")
            lines.append("")
        lines.append(f"### {emoji_for(session.config, turn.agent)} {turn.agent}")
        lines.append("")
        lines.append(turn.content)
        lines.append("")

    lines += ["---", "", session.summary or ""]

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Transcript saved to: %s", filepath)
    return filepath


def session_to_dict(session: Session) -> dict:
    """Plain-JSON view of a session (paths become strings)."""
    data = asdict(session)
    data["config"]["project_dir"] = str(session.config.project_dir)
    return data


def save_session_json(session: Session, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(session_to_dict(session), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Session saved to: %s", path)
    return path
