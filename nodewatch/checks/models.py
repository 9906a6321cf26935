"""Check result models, status mapping and threshold evaluation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nodewatch.config.settings import Settings, ThresholdConfig
    from nodewatch.runner.base import CommandRunner
    from nodewatch.runner.http import HttpProbe

logger = logging.getLogger(__name__)


class Status(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]


_EXIT_CODES = {
    Status.OK: 0,
    Status.WARNING: 1,
    Status.CRITICAL: 2,
    Status.UNKNOWN: 3,
}

# Aggregation order: critical > warning > unknown > ok
_SEVERITY = {
    Status.OK: 0,
    Status.UNKNOWN: 1,
    Status.WARNING: 2,
    Status.CRITICAL: 3,
}


def worst_status(statuses: Iterable[Status]) -> Status:
    """Return the most severe status, or UNKNOWN when there is nothing to rank."""
    statuses = list(statuses)
    if not statuses:
        return Status.UNKNOWN
    return max(statuses, key=_SEVERITY.__getitem__)


def format_number(value: float) -> str:
    """Plain decimal text: integers without a fraction, never exponent form."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def _fmt(value: float | None) -> str:
    if value is None:
        return ""
    return format_number(value)


@dataclass
class PerfData:
    """Monitoring-plugin performance data: ``label=value[unit];[warn];[crit]``."""
    label: str
    value: float
    unit: str = ""
    warning: float | None = None
    critical: float | None = None

    def __str__(self) -> str:
        text = f"{self.label}={_fmt(self.value)}{self.unit}"
        if self.warning is not None or self.critical is not None:
            text += f";{_fmt(self.warning)};{_fmt(self.critical)}"
        return text


@dataclass
class Threshold:
    warning: float | None = None
    critical: float | None = None
    invert: bool = False   # lower values are worse

    @classmethod
    def from_config(cls, config: ThresholdConfig, invert: bool = False) -> Threshold:
        return cls(warning=config.warning, critical=config.critical, invert=invert)

    def _breached(self, value: float, bound: float | None) -> bool:
        if bound is None:
            return False
        return value <= bound if self.invert else value >= bound

    def evaluate(self, value: float) -> Status:
        if self._breached(value, self.critical):
            return Status.CRITICAL
        if self._breached(value, self.warning):
            return Status.WARNING
        return Status.OK

    def inverted_bounds(self) -> bool:
        """True when the warning bound lies beyond the critical one."""
        if self.warning is None or self.critical is None:
            return False
        if self.invert:
            return self.warning < self.critical
        return self.warning > self.critical

    def perfdata(self, label: str, value: float, unit: str = "") -> PerfData:
        return PerfData(label=label, value=value, unit=unit,
                        warning=self.warning, critical=self.critical)


@dataclass
class CheckResult:
    """Outcome of a single check run."""

    name: str
    status: Status
    message: str
    details: list[str] = field(default_factory=list)
    perfdata: list[PerfData] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "message": self.message,
            "details": list(self.details),
            "perfdata": [str(p) for p in self.perfdata],
            "timestamp": self.timestamp,
        }


@dataclass
class CheckContext:
    """Everything a check needs to talk to the node."""

    settings: Settings
    runner: CommandRunner
    http: HttpProbe
    override: Threshold | None = None

    def threshold(self, config: ThresholdConfig, invert: bool = False) -> Threshold:
        """Configured threshold for a check, with command-line bounds layered on top.

        A configured bound left on the wrong side of an overriding one is dropped,
        so ``-W`` above the configured critical does not report critical first.
        """
        threshold = Threshold.from_config(config, invert=invert)
        override = self.override
        if override is None:
            return threshold
        if override.warning is not None:
            threshold.warning = override.warning
        if override.critical is not None:
            threshold.critical = override.critical
        if not threshold.inverted_bounds():
            return threshold

        if override.critical is None:
            logger.warning("Dropping configured critical %s: outside warning %s",
                           format_number(threshold.critical),
                           format_number(threshold.warning))
            threshold.critical = None
        elif override.warning is None:
            logger.warning("Dropping configured warning %s: outside critical %s",
                           format_number(threshold.warning),
                           format_number(threshold.critical))
            threshold.warning = None
        else:
            logger.warning("Warning %s is beyond critical %s; critical takes precedence",
                           format_number(threshold.warning),
                           format_number(threshold.critical))
        return threshold
