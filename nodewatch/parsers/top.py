"""Parsing of ``riak-admin top`` (etop text mode) frames."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_NODE_LINE = re.compile(r"^\s*'([^']+)'\s+\d{1,2}:\d{2}:\d{2}\s*$")
_PROC_ROW = re.compile(
    r"^(<\d+\.\d+\.\d+>)\s+(\S+)\s+('-'|\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s+(\S*)\s*$"
)
_PROCS = re.compile(r"\bprocs\s+(\d+)")
_RUNQ = re.compile(r"\brunq\s+(\d+)")
_MEM_TOTAL = re.compile(r"Memory:\s+total\s+(\d+)")


@dataclass
class TopProcess:
    pid: str
    name: str
    reductions: int
    memory: int
    msg_q: int
    current_function: str = ""
    time: int | None = None


@dataclass
class TopFrame:
    node: str = ""
    procs: int | None = None
    runq: int | None = None
    memory_total: int | None = None
    processes: list[TopProcess] = field(default_factory=list)

    @property
    def max_msg_q(self) -> int:
        return max((p.msg_q for p in self.processes), default=0)

    @property
    def busiest(self) -> TopProcess | None:
        if not self.processes:
            return None
        return max(self.processes, key=lambda p: p.msg_q)


def _int(m: re.Match | None) -> int | None:
    return int(m.group(1)) if m else None


def parse_etop(output: str) -> list[TopFrame]:
    """Split etop output into frames. Frames start at the node/clock line."""
    frames: list[TopFrame] = []
    current: TopFrame | None = None
    for line in output.splitlines():
        node = _NODE_LINE.match(line)
        if node:
            current = TopFrame(node=node.group(1))
            frames.append(current)
            continue
        if current is None:
            continue
        row = _PROC_ROW.match(line.strip())
        if row:
            time_col = row.group(3)
            current.processes.append(TopProcess(
                pid=row.group(1),
                name=row.group(2),
                time=None if time_col == "'-'" else int(time_col),
                reductions=int(row.group(4)),
                memory=int(row.group(5)),
                msg_q=int(row.group(6)),
                current_function=row.group(7),
            ))
            continue
        if current.procs is None:
            current.procs = _int(_PROCS.search(line))
        if current.runq is None:
            current.runq = _int(_RUNQ.search(line))
        if current.memory_total is None:
            current.memory_total = _int(_MEM_TOTAL.search(line))
    return frames


def latest_frame(output: str) -> TopFrame | None:
    """Most recent frame that contains process rows."""
    for frame in reversed(parse_etop(output)):
        if frame.processes:
            return frame
    return None
