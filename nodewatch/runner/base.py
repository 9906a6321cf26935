"""Abstract command runner interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from nodewatch.runner.models import CommandResult


class CommandRunner(ABC):
    """Base class for anything that executes external diagnostic tools."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    @abstractmethod
    async def run(self, argv: Sequence[str],
                  timeout: float | None = None) -> CommandResult:
        """Execute *argv* and return its captured output."""

    @property
    def runner_name(self) -> str:
        return self.__class__.__name__
