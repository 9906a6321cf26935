"""Cluster membership check."""

from __future__ import annotations

from nodewatch.checks.models import (
    CheckContext,
    CheckResult,
    PerfData,
    Status,
    worst_status,
)
from nodewatch.parsers.ring import TRANSITION_STATES, count_by_status, parse_member_status


async def check_ring(ctx: CheckContext) -> CheckResult:
    """Check ring membership via ``riak-admin member-status``.

    Down members or this node missing from the ring are critical; members in
    transition are a warning. Thresholds, when set, apply to the number of
    valid members (lower is worse).
    """
    settings = ctx.settings
    result = await ctx.runner.run([settings.tools.admin, "member-status"])
    if not result.success:
        return CheckResult(
            name="ring", status=Status.UNKNOWN,
            message=f"member-status failed: {result.error}",
        )

    members = parse_member_status(result.output)
    if not members:
        return CheckResult(
            name="ring", status=Status.UNKNOWN,
            message="no ring members found in member-status output",
        )

    counts = count_by_status(members)
    summary = " / ".join(f"{state.capitalize()}:{n}" for state, n in counts.items())
    problems: list[str] = []
    statuses = [Status.OK]

    down = [m.node for m in members if m.status == "down"]
    if down:
        statuses.append(Status.CRITICAL)
        problems.append(f"down: {', '.join(down)}")

    if settings.node.name and settings.node.name not in {m.node for m in members}:
        statuses.append(Status.CRITICAL)
        problems.append(f"{settings.node.name} is not a ring member")

    moving = [f"{m.node} ({m.status})" for m in members if m.status in TRANSITION_STATES]
    if moving:
        statuses.append(Status.WARNING)
        problems.append(f"in transition: {', '.join(moving)}")

    threshold = ctx.threshold(settings.thresholds.ring, invert=True)
    statuses.append(threshold.evaluate(counts["valid"]))

    message = summary
    if problems:
        message = f"{summary}; {'; '.join(problems)}"
    details = [f"{m.status:<8} {_pct(m.ring_pct):>6} {m.node}" for m in members]
    perfdata = [threshold.perfdata("valid", counts["valid"])]
    perfdata.extend(
        PerfData(label=state, value=n) for state, n in counts.items() if state != "valid"
    )
    return CheckResult(
        name="ring", status=worst_status(statuses), message=message,
        details=details, perfdata=perfdata,
    )


def _pct(value: float | None) -> str:
    return "--" if value is None else f"{value:.1f}%"
