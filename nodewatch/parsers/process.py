"""Process table parsing: ``ps -eo pid=,rss=,args=``."""

from __future__ import annotations

import re
from dataclasses import dataclass

PS_ARGS = ["-eo", "pid=,rss=,args="]

_PS_LINE = re.compile(r"^\s*(\d+)\s+(\d+)\s+(.+?)\s*$")
_NODE_FLAG = re.compile(r"(?:^|\s)-s?name\s+(\S+)")


@dataclass
class ProcessEntry:
    pid: int
    rss_kb: int
    args: str

    @property
    def rss_mb(self) -> float:
        return self.rss_kb / 1024

    @property
    def node_name(self) -> str:
        """Erlang node name from ``-name``/``-sname``, or empty."""
        m = _NODE_FLAG.search(self.args)
        return m.group(1) if m else ""


def parse_ps(output: str) -> list[ProcessEntry]:
    entries: list[ProcessEntry] = []
    for line in output.splitlines():
        m = _PS_LINE.match(line)
        if m:
            entries.append(ProcessEntry(
                pid=int(m.group(1)), rss_kb=int(m.group(2)), args=m.group(3),
            ))
    return entries


def _node_matches(entry: ProcessEntry, node_name: str) -> bool:
    running = entry.node_name
    if not running:
        return False
    if running == node_name:
        return True
    # -sname nodes only carry the part before '@'
    return "@" not in running and running == node_name.split("@", 1)[0]


def match_processes(entries: list[ProcessEntry], pattern: str,
                    node_name: str | None = None) -> list[ProcessEntry]:
    """Entries whose command line contains *pattern* (and runs *node_name*)."""
    matched = [e for e in entries if pattern in e.args]
    if node_name:
        matched = [e for e in matched if _node_matches(e, node_name)]
    return matched
