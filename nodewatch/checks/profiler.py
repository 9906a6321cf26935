"""Runtime profiler snapshot via ``riak-admin top``."""

from __future__ import annotations

from nodewatch.checks.models import CheckContext, CheckResult, PerfData, Status, format_number
from nodewatch.parsers.top import latest_frame


def top_command(ctx: CheckContext) -> list[str]:
    profiler = ctx.settings.profiler
    return [
        ctx.settings.tools.admin, "top",
        "-interval", str(profiler.interval),
        "-sort", profiler.sort,
        "-lines", str(profiler.lines),
    ]


async def check_top(ctx: CheckContext) -> CheckResult:
    """Sample the busiest Erlang processes and check the largest message queue.

    ``riak-admin top`` refreshes until stopped, so it is cut off after the
    configured duration and the last complete frame is used.
    """
    profiler = ctx.settings.profiler
    result = await ctx.runner.run(top_command(ctx), timeout=profiler.duration)
    if not result.success and not result.timed_out:
        return CheckResult(
            name="top", status=Status.UNKNOWN,
            message=f"riak-admin top failed: {result.error}",
        )

    frame = latest_frame(result.output)
    if frame is None:
        return CheckResult(
            name="top", status=Status.UNKNOWN,
            message=f"no profiler output within {format_number(profiler.duration)}s",
        )

    threshold = ctx.threshold(ctx.settings.thresholds.top)
    busiest = frame.busiest
    message = f"max message queue {frame.max_msg_q}"
    if busiest is not None and busiest.msg_q > 0:
        message += f" ({busiest.name} {busiest.pid})"

    details = [
        f"{p.pid:<15} {p.name:<24} reds={p.reductions} mem={p.memory} "
        f"msgq={p.msg_q} {p.current_function}"
        for p in frame.processes
    ]
    perfdata = [threshold.perfdata("max_msg_q", frame.max_msg_q)]
    if frame.procs is not None:
        perfdata.append(PerfData(label="procs", value=frame.procs))
    if frame.runq is not None:
        perfdata.append(PerfData(label="runq", value=frame.runq))

    return CheckResult(
        name="top", status=threshold.evaluate(frame.max_msg_q),
        message=message, details=details, perfdata=perfdata,
    )
