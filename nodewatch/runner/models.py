"""Runner data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CommandResult:
    command: str
    output: str
    stderr: str = ""
    returncode: int | None = 0
    success: bool = True
    error: str | None = None
    timed_out: bool = False
    duration_ms: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class HttpResult:
    url: str
    status_code: int | None = None
    text: str = ""
    latency_ms: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200
