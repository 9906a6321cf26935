"""Parsing of the node's ``/stats`` JSON document."""

from __future__ import annotations

import json
from typing import Any

# Reported as perfdata whenever present
SUMMARY_STATS = (
    "node_gets",
    "node_puts",
    "vnode_gets",
    "vnode_puts",
    "node_get_fsm_time_95",
    "node_put_fsm_time_95",
    "read_repairs",
    "sys_process_count",
    "memory_total",
    "pbc_active",
)


def parse_stats(text: str) -> dict[str, Any]:
    """Decode the stats body, raising ValueError if it is not a JSON object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid stats JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Stats document is not a JSON object")
    return data


def get_metric(stats: dict[str, Any], key: str) -> float | None:
    """Numeric value of *key*, or None when absent or not a number."""
    value = stats.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def ring_members(stats: dict[str, Any]) -> list[str]:
    members = stats.get("ring_members")
    if isinstance(members, list):
        return [str(m) for m in members]
    return []
