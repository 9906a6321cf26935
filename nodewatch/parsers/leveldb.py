"""LevelDB ``LOG`` scanning for compaction errors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

COMPACTION_MARKER = "Compaction error"
LOG_NAMES = ("LOG", "LOG.old")


@dataclass
class CompactionError:
    partition: str
    path: Path
    count: int
    last_line: str


def scan_log(log_file: Path) -> tuple[int, str]:
    """Count marker lines in one log file; return (count, last matching line)."""
    count = 0
    last = ""
    with open(log_file, errors="replace") as f:
        for line in f:
            if COMPACTION_MARKER in line:
                count += 1
                last = line.strip()
    return count, last


def scan_partition(partition_dir: Path) -> CompactionError | None:
    total = 0
    last = ""
    for name in LOG_NAMES:
        log_file = partition_dir / name
        if not log_file.is_file():
            continue
        try:
            count, line = scan_log(log_file)
        except OSError as exc:
            logger.warning("Cannot read %s: %s", log_file, exc)
            continue
        total += count
        # LOG is newer than LOG.old; keep its last line if it has one
        if line and not last:
            last = line
    if total == 0:
        return None
    return CompactionError(
        partition=partition_dir.name, path=partition_dir,
        count=total, last_line=last,
    )


def scan_leveldb(root: Path) -> list[CompactionError]:
    """Scan every partition directory under *root*, in name order.

    Raises FileNotFoundError if *root* does not exist.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"LevelDB directory not found: {root}")
    errors: list[CompactionError] = []
    for partition_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        found = scan_partition(partition_dir)
        if found is not None:
            errors.append(found)
    return errors


def count_partitions(root: Path) -> int:
    return sum(1 for p in root.iterdir() if p.is_dir())
