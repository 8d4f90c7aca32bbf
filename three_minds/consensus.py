"""Vote marker parsing for agent replies."""

import re

VOTE_PATTERN = re.compile(r"\[CONSENSUS:\s*(YES|NO)\]", re.IGNORECASE)

YES_MARKER = "[CONSENSUS: YES]"
NO_MARKER = "[CONSENSUS: NO]"


def parse_vote(text: str) -> bool:
    """Return the agent's vote: True for YES, False for NO.

    The first marker in the text decides. A reply without any marker counts
    as NO, so malformed output can never end the collaboration.
    """
    match = VOTE_PATTERN.search(text or "")
    if match is None:
        return False
    return match.group(1).upper() == "YES"


def strip_vote_markers(text: str) -> str:
    """Remove every vote marker and surrounding whitespace."""
    return VOTE_PATTERN.sub("", text or "").strip()
