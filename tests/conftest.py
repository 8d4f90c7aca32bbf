"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from config.config_loader import AgentPersona, CouncilConfig
from three_minds.invokers.base import AgentInvoker
from three_minds.models import AgentTurn

YES_REPLY = "Reviewed the files, all good.\n[CONSENSUS: YES]"
NO_REPLY = "Found a bug in utils.py, fixed half of it.\n[CONSENSUS: NO]"


class MockInvoker(AgentInvoker):
    """Test double AgentInvoker.

    Replies are scripted per model id. Each entry is either a string reply or
    an exception instance to raise; the last entry repeats once the script
    runs out. Models without a script get ``default``.
    """

    def __init__(
        self,
        replies: dict[str, list[str | Exception]] | None = None,
        default: str = YES_REPLY,
        backend: str = "mock",
    ) -> None:
        self._replies = {k: list(v) for k, v in (replies or {}).items()}
        self._default = default
        self._backend = backend
        self.calls: list[dict] = []

    def name(self) -> str:
        return self._backend

    async def invoke(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None = None,
        timeout_sec: int = 300,
        base_url: str | None = None,
    ) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "work_dir": work_dir,
                "model": model,
                "timeout_sec": timeout_sec,
                "base_url": base_url,
            }
        )
        script = self._replies.get(model or "")
        if not script:
            return self._default
        reply = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def three_agents() -> tuple[AgentPersona, ...]:
    return (
        AgentPersona(name="Architect", emoji="🏗️", persona="Care about structure.", model="mock-architect"),
        AgentPersona(name="Engineer", emoji="⚙️", persona="Care about correctness.", model="mock-engineer"),
        AgentPersona(name="Reviewer", emoji="🔍", persona="Care about bugs.", model="mock-reviewer"),
    )


@pytest.fixture
def sample_config(tmp_path: Path, three_agents: tuple[AgentPersona, ...]) -> CouncilConfig:
    return CouncilConfig(
        name="Test Trio",
        agents=three_agents,
        max_rounds=2,
        project_dir=tmp_path,
        timeout_sec=5,
    )


@pytest.fixture
def sample_task() -> str:
    return "sample task text"


@pytest.fixture
def sample_turn() -> AgentTurn:
    return AgentTurn(
        agent="Architect",
        round_number=1,
        content="Split the module into two packages.\n[CONSENSUS: NO]",
        consensus=False,
        backend="claude-code",
        timestamp="2026-01-01T00:00:00+00:00",
        latency_sec=12.5,
    )


@pytest.fixture
def mock_invoker() -> MockInvoker:
    return MockInvoker()
