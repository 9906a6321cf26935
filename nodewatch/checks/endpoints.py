"""HTTP endpoint checks for /ping and /stats."""

from __future__ import annotations

from nodewatch.checks.models import (
    CheckContext,
    CheckResult,
    PerfData,
    Status,
    format_number,
)
from nodewatch.parsers.stats import SUMMARY_STATS, get_metric, parse_stats, ring_members


async def check_ping(ctx: CheckContext) -> CheckResult:
    """Ping the node's HTTP interface; latency thresholds are in ms."""
    resp = await ctx.http.get("/ping")
    if resp.error is not None:
        return CheckResult(
            name="ping", status=Status.CRITICAL,
            message=f"{resp.url}: {resp.error}",
        )
    body = resp.text.strip()
    if resp.status_code != 200 or body != "OK":
        return CheckResult(
            name="ping", status=Status.CRITICAL,
            message=f"{resp.url}: expected 200 OK, got {resp.status_code} {body[:60]!r}",
        )

    threshold = ctx.threshold(ctx.settings.thresholds.ping)
    return CheckResult(
        name="ping", status=threshold.evaluate(resp.latency_ms),
        message=f"node responded OK in {format_number(resp.latency_ms)} ms",
        perfdata=[threshold.perfdata("time", resp.latency_ms, "ms")],
    )


async def check_stats(ctx: CheckContext) -> CheckResult:
    """Fetch /stats and compare the configured metric against thresholds."""
    metric = ctx.settings.stats.metric
    unit = ctx.settings.stats.unit
    resp = await ctx.http.get("/stats")
    if resp.error is not None:
        return CheckResult(
            name="stats", status=Status.CRITICAL,
            message=f"{resp.url}: {resp.error}",
        )
    if resp.status_code != 200:
        return CheckResult(
            name="stats", status=Status.CRITICAL,
            message=f"{resp.url}: HTTP {resp.status_code}",
        )

    try:
        stats = parse_stats(resp.text)
    except ValueError as exc:
        return CheckResult(name="stats", status=Status.UNKNOWN, message=str(exc))

    value = get_metric(stats, metric)
    if value is None:
        return CheckResult(
            name="stats", status=Status.UNKNOWN,
            message=f"metric {metric} not found in stats",
        )

    threshold = ctx.threshold(ctx.settings.thresholds.stats)
    perfdata = [threshold.perfdata(metric, value, unit)]
    for key in SUMMARY_STATS:
        if key == metric:
            continue
        extra = get_metric(stats, key)
        if extra is not None:
            perfdata.append(PerfData(label=key, value=extra))

    details = []
    members = ring_members(stats)
    if members:
        details.append(f"ring members: {', '.join(members)}")
    if "nodename" in stats:
        details.append(f"node: {stats['nodename']}")

    return CheckResult(
        name="stats", status=threshold.evaluate(value),
        message=f"{metric} = {format_number(value)}{unit}",
        details=details, perfdata=perfdata,
    )
