"""Tests for three_minds/consensus.py."""

import pytest

from three_minds.consensus import parse_vote, strip_vote_markers


def test_parse_vote_yes_anywhere():
    assert parse_vote("Did the work.\n[CONSENSUS: YES]") is True
    assert parse_vote("[CONSENSUS: YES] and then more text") is True


@pytest.mark.parametrize("text", ["[consensus: no]", "[CONSENSUS: NO]", "[Consensus:No]"])
def test_parse_vote_no_case_insensitive(text):
    assert parse_vote(text) is False


def test_parse_vote_lowercase_yes():
    assert parse_vote("done [consensus: yes]") is True


def test_parse_vote_missing_marker_is_no():
    assert parse_vote("I refactored everything, looks great.") is False
    assert parse_vote("") is False


def test_parse_vote_malformed_marker_is_no():
    assert parse_vote("CONSENSUS: YES") is False
    assert parse_vote("[CONSENSUS: MAYBE]") is False


def test_parse_vote_first_marker_wins():
    text = "Engineer voted [CONSENSUS: NO] last round. Now it's fixed.\n[CONSENSUS: YES]"
    assert parse_vote(text) is False


def test_parse_vote_idempotent():
    text = "ok [CONSENSUS: YES]"
    assert parse_vote(text) == parse_vote(text)


def test_strip_vote_markers_removes_all():
    text = "Before [CONSENSUS: NO] middle\n[consensus: yes]  "
    assert strip_vote_markers(text) == "Before  middle"


def test_strip_vote_markers_no_marker():
    assert strip_vote_markers("  plain text  ") == "plain text"
