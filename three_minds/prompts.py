"""Prompt construction: history window, per-round agent prompt, system prompt."""

from collections.abc import Sequence

from config.config_loader import DEFAULT_HISTORY_PREVIEW_CHARS, AgentPersona
from three_minds.consensus import NO_MARKER, YES_MARKER, strip_vote_markers
from three_minds.models import AgentTurn


def truncate(text: str, limit: int) -> str:
    """Cut text to limit characters, appending '...' when anything was dropped."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_history(
    turns: Sequence[AgentTurn],
    preview_chars: int = DEFAULT_HISTORY_PREVIEW_CHARS,
) -> str:
    """Render prior turns grouped by round, in the order they were recorded.

    Returns "" when there is no history yet.
    """
    if not turns:
        return ""

    parts: list[str] = ["## Previous collaboration", ""]
    current_round = 0
    for turn in turns:
        if turn.round_number != current_round:
            current_round = turn.round_number
            parts.append(f"### Round {current_round}")
            parts.append("")
        vote = "voted YES" if turn.consensus else "voted NO"
        preview = truncate(strip_vote_markers(turn.content), preview_chars)
        parts.append(f"**{turn.agent}** ({vote}):\n{preview}")
        parts.append("")
    return "\n".join(parts)


def build_agent_prompt(
    agent: AgentPersona,
    task: str,
    round_number: int,
    previous_turns: Sequence[AgentTurn],
    roster: Sequence[AgentPersona],
    preview_chars: int = DEFAULT_HISTORY_PREVIEW_CHARS,
) -> str:
    """Build the user prompt for one agent's turn.

    Partners are listed by glyph and name only; their personas stay private
    to their own system prompts.
    """
    partners = "\n".join(f"- {a.emoji} {a.name}" for a in roster if a.name != agent.name)
    history = format_history(previous_turns, preview_chars)
    history_block = f"\n{history}\n" if history else "\n"

    return (
        f"# Round {round_number}\n"
        "\n"
        "## Task\n"
        f"{task}\n"
        "\n"
        "## Your partners\n"
        f"{partners or '- (none)'}\n"
        f"{history_block}"
        "## Your work\n"
        "\n"
        "Please:\n"
        "1. **Inspect the current state** - read the relevant files and understand where the code/project stands\n"
        "2. **Do the necessary work** - using your expertise, write code, modify files, run tests\n"
        "3. **Review your partners' work** - if a partner has produced something, review it and "
        "suggest changes or improve it directly\n"
        "4. **Report** - briefly describe what you did\n"
        "\n"
        "## Consensus vote\n"
        "\n"
        "At the **end** of your reply you must vote (pick exactly one):\n"
        "\n"
        f"- `{YES_MARKER}` - the task is done and the quality is good enough to stop\n"
        f"- `{NO_MARKER}` - there is still work to do or a problem to solve\n"
        "\n"
        f"The collaboration only ends when **all {len(roster)} members vote YES**.\n"
        "\n"
        "Get to work!"
    )


def build_system_prompt(agent: AgentPersona, roster: Sequence[AgentPersona]) -> str:
    """Build the persona/system prompt for one agent."""
    return (
        "# Your identity\n"
        "\n"
        f"You are {agent.emoji} **{agent.name}**.\n"
        "\n"
        f"{agent.persona}\n"
        "\n"
        "# Collaboration rules\n"
        "\n"
        f"- You are one member of a {len(roster)}-person collaboration team\n"
        "- You may freely read, create and modify files in the working directory\n"
        "- You may execute code and run tests\n"
        "- When reviewing a partner's work, you may edit their files directly to improve them\n"
        "- Stay concise and efficient, avoid lengthy explanations\n"
        f"- Every reply must end with a vote: {YES_MARKER} or {NO_MARKER}"
    )
