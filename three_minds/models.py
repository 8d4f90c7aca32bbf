"""Pure dataclasses for the Three Minds collaboration loop. No logic, no deps."""

from dataclasses import dataclass

from config.config_loader import CouncilConfig

STATUS_RUNNING = "running"          # internal to the loop, never returned
STATUS_CONSENSUS = "consensus"
STATUS_MAX_ROUNDS = "max_rounds"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class AgentTurn:
    agent: str
    round_number: int
    content: str           # raw reply, or "Error: ..." for a failed call
    consensus: bool        # the agent's vote
    backend: str           # "claude-code", "codex", ...; "" when the call failed
    timestamp: str         # ISO-8601 UTC
    error: bool = False
    latency_sec: float = 0.0


@dataclass(frozen=True)
class Session:
    id: str
    task: str
    config: CouncilConfig
    turns: tuple[AgentTurn, ...]
    status: str            # "consensus", "max_rounds" or "error"
    start_time: str
    end_time: str
    rounds_completed: int
    summary: str | None = None
