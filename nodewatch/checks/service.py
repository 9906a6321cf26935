"""Service manager check."""

from __future__ import annotations

import logging

from nodewatch.checks.models import CheckContext, CheckResult, Status

logger = logging.getLogger(__name__)

_TRANSITIONAL = {"activating", "reloading", "deactivating"}

# LSB init script status exit codes
_SYSV_STATES = {
    0: ("running", Status.OK),
    1: ("dead, pid file exists", Status.CRITICAL),
    2: ("dead, lock file exists", Status.CRITICAL),
    3: ("not running", Status.CRITICAL),
}


def classify_systemd_state(state: str) -> Status:
    if state == "active":
        return Status.OK
    if state in _TRANSITIONAL:
        return Status.WARNING
    return Status.CRITICAL


async def _check_systemd(ctx: CheckContext, unit: str) -> CheckResult:
    result = await ctx.runner.run([ctx.settings.tools.systemctl, "is-active", unit])
    # is-active exits non-zero for inactive units but still prints the state
    state = result.output.strip().splitlines()[0] if result.output.strip() else ""
    if result.returncode is None or result.timed_out or not state:
        return CheckResult(
            name="service", status=Status.UNKNOWN,
            message=f"cannot query systemd for {unit}: {result.error}",
        )
    return CheckResult(
        name="service", status=classify_systemd_state(state),
        message=f"{unit} is {state}",
    )


async def _check_sysv(ctx: CheckContext, unit: str) -> CheckResult:
    result = await ctx.runner.run([ctx.settings.tools.service, unit, "status"])
    if result.returncode is None or result.timed_out:
        return CheckResult(
            name="service", status=Status.UNKNOWN,
            message=f"cannot query service status for {unit}: {result.error}",
        )
    state, status = _SYSV_STATES.get(
        result.returncode, (f"status unknown (exit {result.returncode})", Status.UNKNOWN),
    )
    details = [line for line in result.output.strip().splitlines() if line]
    return CheckResult(
        name="service", status=status, message=f"{unit} is {state}",
        details=details[:5],
    )


async def check_service(ctx: CheckContext) -> CheckResult:
    """Ask the service manager whether the node's unit is running."""
    unit = ctx.settings.node.service
    manager = ctx.settings.tools.service_manager
    if manager == "systemd":
        return await _check_systemd(ctx, unit)
    if manager == "sysv":
        return await _check_sysv(ctx, unit)
    logger.error("Unsupported service manager: %s", manager)
    return CheckResult(
        name="service", status=Status.UNKNOWN,
        message=f"unsupported service manager: {manager}",
    )
