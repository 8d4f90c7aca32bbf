"""Tests for three_minds/summary.py."""

from three_minds.models import AgentTurn
from three_minds.summary import SUMMARY_PREVIEW_CHARS, emoji_for, final_round, generate_summary


def _turn(agent: str, round_number: int, content: str, consensus: bool) -> AgentTurn:
    return AgentTurn(agent, round_number, content, consensus, "mock", "2026-01-01T00:00:00+00:00")


def test_final_round_empty():
    assert final_round([]) == 0


def test_final_round_max():
    turns = [_turn("Architect", 1, "a", True), _turn("Architect", 3, "b", True)]
    assert final_round(turns) == 3


def test_emoji_for_known_and_unknown(sample_config):
    assert emoji_for(sample_config, "Engineer") == "⚙️"
    assert emoji_for(sample_config, "Stranger") == "🤖"


def test_summary_only_lists_final_round(sample_config):
    turns = [
        _turn("Architect", 1, "first round text [CONSENSUS: NO]", False),
        _turn("Architect", 2, "second round text [CONSENSUS: YES]", True),
        _turn("Engineer", 2, "engineer final [CONSENSUS: YES]", True),
    ]
    summary = generate_summary("sample task text", "consensus", turns, sample_config)
    assert "**Task**: sample task text" in summary
    assert "Consensus reached" in summary
    assert "**Rounds**: 2" in summary
    assert str(sample_config.project_dir) in summary
    assert "### 🏗️ Architect" in summary
    assert "### ⚙️ Engineer" in summary
    assert "second round text" in summary
    assert "first round text" not in summary
    assert "[CONSENSUS" not in summary


def test_summary_status_labels(sample_config):
    turns = [_turn("Reviewer", 1, "nope", False)]
    assert "Round limit reached" in generate_summary("t" * 10, "max_rounds", turns, sample_config)
    assert "Error" in generate_summary("t" * 10, "error", turns, sample_config)


def test_summary_truncates_statements(sample_config):
    turns = [_turn("Reviewer", 1, "z" * 1000, False)]
    summary = generate_summary("sample task text", "max_rounds", turns, sample_config)
    assert "z" * SUMMARY_PREVIEW_CHARS + "..." in summary
    assert "z" * (SUMMARY_PREVIEW_CHARS + 1) not in summary
    assert "❌ NO" in summary


def test_summary_with_no_turns(sample_config):
    summary = generate_summary("sample task text", "max_rounds", [], sample_config)
    assert "**Rounds**: 0" in summary
    assert "###" not in summary
