"""Cluster membership parsing: ``riak-admin member-status``."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

MEMBER_STATES = ("valid", "leaving", "exiting", "joining", "down")
TRANSITION_STATES = ("leaving", "exiting", "joining")

_MEMBER_ROW = re.compile(
    r"^\s*(valid|leaving|exiting|joining|down)\s+"
    r"(\S+)\s+(\S+)\s+'?([^'\s]+)'?\s*$",
    re.IGNORECASE,
)


@dataclass
class RingMember:
    status: str
    node: str
    ring_pct: float | None = None
    pending_pct: float | None = None


def _pct(text: str) -> float | None:
    text = text.rstrip("%")
    try:
        return float(text)
    except ValueError:
        return None


def parse_member_status(output: str) -> list[RingMember]:
    members: list[RingMember] = []
    for line in output.splitlines():
        m = _MEMBER_ROW.match(line)
        if m:
            members.append(RingMember(
                status=m.group(1).lower(),
                node=m.group(4),
                ring_pct=_pct(m.group(2)),
                pending_pct=_pct(m.group(3)),
            ))
    return members


def count_by_status(members: list[RingMember]) -> dict[str, int]:
    """Member count per state, including zero counts for every known state."""
    counts = Counter(m.status for m in members)
    return {state: counts.get(state, 0) for state in MEMBER_STATES}
