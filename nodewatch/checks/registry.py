"""Check registry — discovery and dispatch for health checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from nodewatch.checks.models import CheckContext, CheckResult, Status

logger = logging.getLogger(__name__)

# Type alias for check functions
CheckFunc = Callable[[CheckContext], Awaitable[CheckResult]]


@dataclass
class RegisteredCheck:
    name: str
    func: CheckFunc
    description: str = ""


class CheckRegistry:
    """Registry of named health checks, kept in registration order."""

    def __init__(self) -> None:
        self._checks: dict[str, RegisteredCheck] = {}

    def register(self, name: str, func: CheckFunc, description: str = "") -> None:
        if name in self._checks:
            raise ValueError(f"Check already registered: {name}")
        if not description and func.__doc__:
            description = func.__doc__.strip().splitlines()[0]
        self._checks[name] = RegisteredCheck(name=name, func=func, description=description)

    def get(self, name: str) -> RegisteredCheck | None:
        return self._checks.get(name)

    def names(self) -> list[str]:
        return list(self._checks.keys())

    def describe(self) -> list[tuple[str, str]]:
        return [(c.name, c.description) for c in self._checks.values()]

    async def run(self, name: str, ctx: CheckContext) -> CheckResult:
        """Run one check; unknown names and unexpected errors become UNKNOWN."""
        check = self._checks.get(name)
        if check is None:
            return CheckResult(
                name=name, status=Status.UNKNOWN,
                message=f"unknown check '{name}' (available: {', '.join(self.names())})",
            )
        logger.info("Running check %s", name)
        try:
            result = await check.func(ctx)
        except Exception as exc:
            logger.exception("Check %s failed", name)
            return CheckResult(
                name=name, status=Status.UNKNOWN,
                message=f"check failed: {type(exc).__name__}: {exc}",
            )
        logger.info("Check %s: %s", name, result.status.value)
        return result

    async def run_all(self, ctx: CheckContext) -> list[CheckResult]:
        """Run every check in order; one failing check never stops the rest."""
        results: list[CheckResult] = []
        for name in self.names():
            results.append(await self.run(name, ctx))
        return results


def build_default_registry() -> CheckRegistry:
    """Build a registry with all default health checks."""
    from nodewatch.checks.cluster import check_ring
    from nodewatch.checks.endpoints import check_ping, check_stats
    from nodewatch.checks.process import check_memory, check_process
    from nodewatch.checks.profiler import check_top
    from nodewatch.checks.service import check_service
    from nodewatch.checks.storage import check_compaction

    registry = CheckRegistry()

    registry.register("process", check_process)
    registry.register("service", check_service)
    registry.register("memory", check_memory)
    registry.register("ping", check_ping)
    registry.register("stats", check_stats)
    registry.register("ring", check_ring)
    registry.register("compaction", check_compaction)
    registry.register("top", check_top)

    return registry
