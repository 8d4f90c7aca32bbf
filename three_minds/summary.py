"""Final summary: each agent's closing vote and statement from the last round."""

import logging
from collections.abc import Sequence

from config.config_loader import DEFAULT_EMOJI, CouncilConfig
from three_minds.consensus import strip_vote_markers
from three_minds.models import STATUS_CONSENSUS, STATUS_MAX_ROUNDS, AgentTurn
from three_minds.prompts import truncate

logger = logging.getLogger(__name__)

SUMMARY_PREVIEW_CHARS = 400

_STATUS_LABELS = {
    STATUS_CONSENSUS: "✅ Consensus reached",
    STATUS_MAX_ROUNDS: "⚠️ Round limit reached",
}


def final_round(turns: Sequence[AgentTurn]) -> int:
    """Highest round number present in the log, 0 when empty."""
    return max((t.round_number for t in turns), default=0)


def emoji_for(config: CouncilConfig, agent_name: str) -> str:
    for agent in config.agents:
        if agent.name == agent_name:
            return agent.emoji
    return DEFAULT_EMOJI


def generate_summary(
    task: str,
    status: str,
    turns: Sequence[AgentTurn],
    config: CouncilConfig,
) -> str:
    """Render the markdown summary of a finished collaboration."""
    last_round = final_round(turns)
    lines: list[str] = [
        "# 📋 Collaboration Summary",
        "",
        f"- **Task**: {task}",
        f"- **Status**: {_STATUS_LABELS.get(status, '❌ Error')}",
        f"- **Rounds**: {last_round}",
        f"- **Working directory**: {config.project_dir}",
        "",
        "## Final state of each member",
        "",
    ]

    for turn in (t for t in turns if t.round_number == last_round):
        lines.append(f"### {emoji_for(config, turn.agent)} {turn.agent}")
        lines.append(f"- **Vote**: {'✅ YES' if turn.consensus else '❌ NO'}")
        preview = truncate(strip_vote_markers(turn.content), SUMMARY_PREVIEW_CHARS)
        lines.append(f"- **Last statement**:\n{preview}")
        lines.append("")

    logger.debug("Summary generated for %d final-round turns", sum(1 for t in turns if t.round_number == last_round))
    return "\n".join(lines)
