"""Process checks — liveness and resident memory of the node's VM."""

from __future__ import annotations

from nodewatch.checks.models import CheckContext, CheckResult, Status, format_number
from nodewatch.parsers.process import PS_ARGS, ProcessEntry, match_processes, parse_ps


async def _find_node_processes(
    ctx: CheckContext, name: str,
) -> tuple[list[ProcessEntry] | None, CheckResult | None]:
    """Query the process table. Returns (matches, None) or (None, failure result)."""
    settings = ctx.settings
    result = await ctx.runner.run([settings.tools.ps, *PS_ARGS])
    if not result.success:
        return None, CheckResult(
            name=name, status=Status.UNKNOWN,
            message=f"process table query failed: {result.error}",
        )
    node_name = settings.node.name if settings.process.match_node else None
    matched = match_processes(parse_ps(result.output), settings.process.pattern, node_name)
    return matched, None


def _describe_target(ctx: CheckContext) -> str:
    settings = ctx.settings
    if settings.process.match_node:
        return f"{settings.process.pattern} for {settings.node.name}"
    return settings.process.pattern


async def check_process(ctx: CheckContext) -> CheckResult:
    """Check that the node's VM process is running."""
    matched, failure = await _find_node_processes(ctx, "process")
    if failure is not None:
        return failure
    if not matched:
        return CheckResult(
            name="process", status=Status.CRITICAL,
            message=f"no {_describe_target(ctx)} process running",
        )
    pids = ", ".join(str(p.pid) for p in matched)
    return CheckResult(
        name="process", status=Status.OK,
        message=f"{len(matched)} {_describe_target(ctx)} process(es) running (pid {pids})",
        details=[f"{p.pid}: {p.args}" for p in matched],
    )


async def check_memory(ctx: CheckContext) -> CheckResult:
    """Check resident set size of the node's VM against thresholds (MB)."""
    matched, failure = await _find_node_processes(ctx, "memory")
    if failure is not None:
        return failure
    if not matched:
        return CheckResult(
            name="memory", status=Status.CRITICAL,
            message=f"no {_describe_target(ctx)} process running",
        )

    rss_mb = round(sum(p.rss_mb for p in matched), 1)
    threshold = ctx.threshold(ctx.settings.thresholds.memory)
    status = threshold.evaluate(rss_mb)
    return CheckResult(
        name="memory", status=status,
        message=f"RSS {format_number(rss_mb)} MB across {len(matched)} process(es)",
        details=[f"{p.pid}: {format_number(round(p.rss_mb, 1))} MB" for p in matched],
        perfdata=[threshold.perfdata("rss", rss_mb, "MB")],
    )
