"""
Control Tokens

The assistant (remote model or local responder) asks for a UI card by
embedding one of the literal tokens below anywhere in its reply.  This is
the only place that string-matches them.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

BOOKING_TOKEN = "SHOW_BOOKING_CARD"
LAB_BOOKING_TOKEN = "SHOW_LAB_BOOKING_CARD"
HOSPITAL_TOKEN = "SHOW_HOSPITAL_CARD"

# token -> intent, in precedence order
_TOKEN_INTENTS: list[tuple[str, str]] = [
    (BOOKING_TOKEN, "booking"),
    (LAB_BOOKING_TOKEN, "lab_booking"),
    (HOSPITAL_TOKEN, "hospitals"),
]

# A token plus the spaces/tabs around it; surrounding text is left alone
_TOKEN_RE = re.compile(
    r"[ \t]*(?:" + "|".join(re.escape(token) for token, _ in _TOKEN_INTENTS) + r")[ \t]*"
)


class ParsedReply(NamedTuple):
    text: str
    intent: Optional[str]


def _gap(match: re.Match) -> str:
    """One space when the token sat between words on the same line, else nothing."""
    before = match.string[match.start() - 1 : match.start()]
    after = match.string[match.end() : match.end() + 1]
    return " " if before not in ("", "\n") and after not in ("", "\n") else ""


def parse_control_tokens(reply: str) -> ParsedReply:
    """Split *reply* into display text and the requested card intent.

    Tokens are found by substring search and all of them are stripped.
    When several are present the first in precedence order wins:
    booking, then lab booking, then hospitals.  A reply without any
    token is returned unchanged.
    """
    intent = next((name for token, name in _TOKEN_INTENTS if token in reply), None)
    if intent is None:
        return ParsedReply(text=reply, intent=None)
    return ParsedReply(text=_TOKEN_RE.sub(_gap, reply).strip(), intent=intent)
