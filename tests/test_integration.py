"""Integration tests: real agent CLIs, no mocks. Requires THREE_MINDS_INTEGRATION=1 and `claude` on PATH."""

import os
import shutil
from pathlib import Path

import pytest
from dotenv import load_dotenv

load_dotenv()

pytestmark = pytest.mark.integration

if os.environ.get("THREE_MINDS_INTEGRATION") != "1" or shutil.which("claude") is None:
    pytestmark = pytest.mark.skip(reason="Set THREE_MINDS_INTEGRATION=1 with the claude CLI installed")


async def test_two_agent_collaboration(tmp_path: Path):
    """Run a real one-round collaboration on a scratch directory, verify no crash."""
    from config.config_loader import AgentPersona, CouncilConfig, load_credentials
    from three_minds.council import run_council
    from three_minds.invokers.router import build_default_invoker
    from three_minds.output import save_transcript

    config = CouncilConfig(
        name="Integration Pair",
        agents=(
            AgentPersona(name="Writer", emoji="✍️", persona="You write small Python files."),
            AgentPersona(name="Checker", emoji="🔍", persona="You check small Python files for bugs."),
        ),
        max_rounds=1,
        project_dir=tmp_path,
        timeout_sec=300,
    )
    invoker = build_default_invoker(load_credentials())

    session = await run_council(
        "Create hello.py that prints 'hello world', then vote.",
        config,
        invoker,
    )

    assert session.status in {"consensus", "max_rounds"}
    assert len(session.turns) == 2
    for turn in session.turns:
        assert turn.content, f"Empty content from {turn.agent}"
        if not turn.error:
            assert turn.backend == "claude-code"

    saved = save_transcript(session, tmp_path)
    assert saved.exists()
    assert "Three Minds Transcript" in saved.read_text(encoding="utf-8")
