"""Collaboration orchestration: sequential agent turns, votes, termination."""

import logging
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from config.config_loader import DEFAULT_MIN_TASK_LENGTH, AgentPersona, CouncilConfig
from three_minds.consensus import parse_vote
from three_minds.invokers.base import AgentInvocationError, AgentInvoker
from three_minds.models import (
    STATUS_CONSENSUS,
    STATUS_ERROR,
    STATUS_MAX_ROUNDS,
    STATUS_RUNNING,
    AgentTurn,
    Session,
)
from three_minds.prompts import build_agent_prompt, build_system_prompt
from three_minds.summary import final_round, generate_summary

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when the task text is unusable. No session is created."""


class LoopFatalError(RuntimeError):
    """Raised when the loop fails outside a single agent call.

    ``session`` holds the turns recorded before the fault, with status "error".
    """

    def __init__(self, message: str, session: Session) -> None:
        self.session = session
        super().__init__(message)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def validate_task(task: object, min_length: int = DEFAULT_MIN_TASK_LENGTH) -> str:
    """Return the trimmed task text.

    Raises:
        ValidationError: If task is not a string, is blank, or is shorter
            than min_length after trimming.
    """
    if not isinstance(task, str) or not task.strip():
        raise ValidationError("Task must be a non-empty string")
    trimmed = task.strip()
    if len(trimmed) < min_length:
        raise ValidationError(f"Task description too short (min {min_length} chars)")
    return trimmed


async def _take_turn(
    agent: AgentPersona,
    round_number: int,
    prompt: str,
    system_prompt: str,
    config: CouncilConfig,
    invoker: AgentInvoker,
) -> AgentTurn:
    """Invoke one agent and record its reply.

    Never raises for a failed call. The failure becomes a NO vote whose
    content is the error description.
    """
    backend = invoker.backend_for(agent.model)
    start = time.monotonic()
    try:
        content = await invoker.invoke(
            prompt,
            system_prompt,
            config.project_dir,
            model=agent.model,
            timeout_sec=config.timeout_sec,
            base_url=agent.base_url,
        )
    except AgentInvocationError as exc:
        error_text = str(exc)
    except Exception as exc:
        error_text = f"Unexpected error: {exc}"
    else:
        vote = parse_vote(content)
        latency = time.monotonic() - start
        logger.info(
            "%s (%s) round %d: %.1fs, vote %s",
            agent.name, backend, round_number, latency, "YES" if vote else "NO",
        )
        return AgentTurn(
            agent=agent.name,
            round_number=round_number,
            content=content,
            consensus=vote,
            backend=backend,
            timestamp=_now(),
            latency_sec=latency,
        )

    logger.warning("Agent %s failed in round %d: %s", agent.name, round_number, error_text)
    return AgentTurn(
        agent=agent.name,
        round_number=round_number,
        content=f"Error: {error_text}",
        consensus=False,
        backend="",
        timestamp=_now(),
        error=True,
        latency_sec=time.monotonic() - start,
    )


async def run_council(
    task: str,
    config: CouncilConfig,
    invoker: AgentInvoker,
    on_turn_complete: Callable[[AgentTurn], None] | None = None,
    on_round_complete: Callable[[int, list[bool]], None] | None = None,
) -> Session:
    """Run rounds of sequential agent turns until consensus or the round limit.

    Agents act strictly one at a time in roster order, so each one sees the
    shared directory and transcript exactly as the previous agent left them.

    Args:
        task: The task description given to every agent.
        config: Roster, round limit, working directory and timeouts.
        invoker: Backend that turns prompts into agent replies.
        on_turn_complete: Optional callback invoked after each agent turn.
        on_round_complete: Optional callback invoked with (round, votes)
            after each round.

    Returns:
        The finished Session with status "consensus" or "max_rounds".

    Raises:
        ValidationError: If the task text is rejected; no agent is invoked.
        LoopFatalError: On any failure outside a single agent call. The
            partial session is attached as ``exc.session``.
    """
    trimmed_task = validate_task(task, config.min_task_length)

    session_id = uuid.uuid4().hex
    start_time = _now()
    turns: list[AgentTurn] = []
    status = STATUS_RUNNING
    round_number = 0

    logger.info(
        "Session %s: %d agents, max %d rounds, dir %s",
        session_id, len(config.agents), config.max_rounds, config.project_dir,
    )

    try:
        if not config.agents:
            raise RuntimeError("Roster is empty")

        for round_number in range(1, config.max_rounds + 1):
            logger.info("Starting round %d", round_number)
            votes: list[bool] = []

            for agent in config.agents:
                prompt = build_agent_prompt(
                    agent,
                    trimmed_task,
                    round_number,
                    turns,
                    config.agents,
                    config.history_preview_chars,
                )
                system_prompt = build_system_prompt(agent, config.agents)
                logger.debug("Prompt for %s, round %d:\n%s", agent.name, round_number, prompt)

                turn = await _take_turn(agent, round_number, prompt, system_prompt, config, invoker)
                turns.append(turn)
                votes.append(turn.consensus)

                if on_turn_complete:
                    on_turn_complete(turn)

            reached = len(votes) == len(config.agents) and all(votes)
            logger.info(
                "Round %d vote: %d/%d YES",
                round_number, sum(votes), len(config.agents),
            )

            if on_round_complete:
                on_round_complete(round_number, votes)

            if reached:
                status = STATUS_CONSENSUS
                logger.info("Consensus reached in round %d", round_number)
                break

        if status == STATUS_RUNNING:
            status = STATUS_MAX_ROUNDS
            logger.warning("Round limit (%d) reached without consensus", config.max_rounds)

        end_time = _now()
        summary = generate_summary(trimmed_task, status, turns, config)
    except Exception as exc:
        session = Session(
            id=session_id,
            task=trimmed_task,
            config=config,
            turns=tuple(turns),
            status=STATUS_ERROR,
            start_time=start_time,
            end_time=_now(),
            rounds_completed=final_round(turns),
        )
        logger.error("Session %s aborted in round %d: %s", session_id, round_number, exc)
        raise LoopFatalError(f"Collaboration aborted in round {round_number}: {exc}", session) from exc

    return Session(
        id=session_id,
        task=trimmed_task,
        config=config,
        turns=tuple(turns),
        status=status,
        start_time=start_time,
        end_time=end_time,
        rounds_completed=final_round(turns),
        summary=summary,
    )
