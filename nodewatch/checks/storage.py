"""On-disk storage check: LevelDB compaction errors and their repair."""

from __future__ import annotations

import logging

from nodewatch.checks.models import CheckContext, CheckResult, Status
from nodewatch.config.settings import ToolsConfig
from nodewatch.parsers.leveldb import CompactionError, count_partitions, scan_leveldb

logger = logging.getLogger(__name__)


def remediation_commands(errors: list[CompactionError], tools: ToolsConfig) -> list[str]:
    """Commands that repair every affected partition with the node stopped."""
    if not errors:
        return []
    commands = [f"{tools.riak} stop"]
    for err in errors:
        commands.append(
            f"{tools.erl} -pa {tools.eleveldb_ebin} -noshell "
            f"-eval 'eleveldb:repair(\"{err.path}\", []), init:stop().'"
        )
    commands.append(f"{tools.riak} start")
    return commands


async def check_compaction(ctx: CheckContext) -> CheckResult:
    """Scan LevelDB LOG files for compaction errors.

    Thresholds apply to the number of affected partitions.
    """
    settings = ctx.settings
    root = settings.data_path / "leveldb"
    try:
        errors = scan_leveldb(root)
        total = count_partitions(root)
    except OSError as exc:
        return CheckResult(name="compaction", status=Status.UNKNOWN, message=str(exc))

    threshold = ctx.threshold(settings.thresholds.compaction)
    perfdata = [threshold.perfdata("partitions", len(errors))]
    if not errors:
        return CheckResult(
            name="compaction", status=threshold.evaluate(0),
            message=f"no compaction errors in {total} partition(s)",
            perfdata=perfdata,
        )

    logger.info("Compaction errors in %d of %d partitions under %s",
                len(errors), total, root)
    details = [
        f"{err.partition}: {err.count} error(s), last: {err.last_line}"
        for err in errors
    ]
    details.append("remediation:")
    details.extend(f"  {cmd}" for cmd in remediation_commands(errors, settings.tools))
    return CheckResult(
        name="compaction", status=threshold.evaluate(len(errors)),
        message=f"{len(errors)} of {total} partition(s) report compaction errors",
        details=details, perfdata=perfdata,
    )
