"""Tests for check registry."""

import pytest

from nodewatch.checks.models import CheckResult, Status
from nodewatch.checks.registry import CheckRegistry, build_default_registry


def test_registry_register_and_get():
    registry = CheckRegistry()

    async def dummy_check(ctx):
        """Dummy check."""
        return CheckResult(name="dummy", status=Status.OK, message="fine")

    registry.register("dummy", dummy_check)
    check = registry.get("dummy")
    assert check is not None
    assert check.func is dummy_check
    assert check.description == "Dummy check."
    assert registry.get("missing") is None


def test_registry_rejects_duplicates():
    registry = CheckRegistry()

    async def check(ctx):
        return CheckResult(name="a", status=Status.OK, message="")

    registry.register("a", check)
    with pytest.raises(ValueError):
        registry.register("a", check)


def test_default_registry_has_all_checks():
    registry = build_default_registry()
    assert registry.names() == [
        "process", "service", "memory", "ping", "stats", "ring", "compaction", "top",
    ]
    assert all(description for _, description in registry.describe())


@pytest.mark.asyncio
async def test_run_unknown_check(make_context):
    registry = CheckRegistry()
    result = await registry.run("nope", make_context())
    assert result.status == Status.UNKNOWN
    assert "unknown check 'nope'" in result.message


@pytest.mark.asyncio
async def test_run_converts_exceptions(make_context):
    registry = CheckRegistry()

    async def broken(ctx):
        raise RuntimeError("boom")

    registry.register("broken", broken)
    result = await registry.run("broken", make_context())
    assert result.status == Status.UNKNOWN
    assert result.message == "check failed: RuntimeError: boom"


@pytest.mark.asyncio
async def test_run_all_continues_after_failure(make_context):
    registry = CheckRegistry()
    calls = []

    async def broken(ctx):
        calls.append("broken")
        raise RuntimeError("boom")

    async def healthy(ctx):
        calls.append("healthy")
        return CheckResult(name="healthy", status=Status.OK, message="fine")

    registry.register("broken", broken)
    registry.register("healthy", healthy)
    results = await registry.run_all(make_context())
    assert calls == ["broken", "healthy"]
    assert [r.status for r in results] == [Status.UNKNOWN, Status.OK]
