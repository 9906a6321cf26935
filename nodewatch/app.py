"""Application orchestrator — wires together all components."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from nodewatch.checks.models import CheckContext, CheckResult, Threshold, worst_status
from nodewatch.checks.registry import CheckRegistry, build_default_registry
from nodewatch.config.settings import Settings
from nodewatch.runner.base import CommandRunner
from nodewatch.runner.http import HttpProbe
from nodewatch.runner.local import LocalRunner
from nodewatch.ui.output import render_json, render_results

logger = logging.getLogger(__name__)


class Application:
    """Top-level application orchestrator."""

    def __init__(
        self,
        settings: Settings,
        *,
        registry: CheckRegistry | None = None,
        runner: CommandRunner | None = None,
        http: HttpProbe | None = None,
        console: Console | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or build_default_registry()
        self.runner = runner or LocalRunner(timeout=settings.timeout)
        self.http = http or HttpProbe(settings.base_url, timeout=settings.timeout)
        self.console = console or Console(highlight=False)

    def context(self, override: Threshold | None = None) -> CheckContext:
        return CheckContext(
            settings=self.settings, runner=self.runner,
            http=self.http, override=override,
        )

    async def run(self, check: str | None = None, *,
                  override: Threshold | None = None) -> list[CheckResult]:
        """Run one named check, or every check when *check* is None."""
        if check is None:
            if override is not None:
                logger.warning("Ignoring -W/-C thresholds when running all checks")
            return await self.registry.run_all(self.context())
        return [await self.registry.run(check, self.context(override))]

    def report(self, results: list[CheckResult], output_format: str = "text") -> int:
        """Render results and return the aggregated exit code."""
        if output_format == "json":
            render_json(self.console, results)
        else:
            render_results(self.console, results)
        return worst_status(r.status for r in results).exit_code


def setup_logging(level: str | int = logging.WARNING) -> None:
    """Route log records to stderr so stdout carries only check output."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=level, format="%(name)s: %(message)s",
        datefmt="[%X]", handlers=[handler], force=True,
    )

    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(level, logging.WARNING))
    logging.getLogger("asyncio").setLevel(max(level, logging.WARNING))
