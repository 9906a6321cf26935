"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from nodewatch.checks.models import CheckContext, Threshold
from nodewatch.config.settings import NodeConfig, Settings
from nodewatch.runner.base import CommandRunner
from nodewatch.runner.http import HttpProbe
from nodewatch.runner.models import CommandResult, HttpResult


def scripted_runner(outputs: dict[str, CommandResult]) -> AsyncMock:
    """Runner mock that answers by the command's first two words."""
    runner = AsyncMock(spec=CommandRunner)

    async def run(argv: Sequence[str], timeout: float | None = None) -> CommandResult:
        key = " ".join(argv[:2])
        if key in outputs:
            return outputs[key]
        return CommandResult(
            command=" ".join(argv), output="", returncode=None, success=False,
            error=f"Command not found: {argv[0]}",
        )

    runner.run.side_effect = run
    return runner


def http_probe(responses: dict[str, HttpResult]) -> AsyncMock:
    probe = AsyncMock(spec=HttpProbe)

    async def get(path: str) -> HttpResult:
        return responses.get(path, HttpResult(
            url=f"http://127.0.0.1:8098{path}", error="Connection error: refused",
        ))

    probe.get.side_effect = get
    return probe


@pytest.fixture
def sample_settings(tmp_path: Path) -> Settings:
    return Settings(
        node=NodeConfig(
            name="riak@10.0.0.1", host="10.0.0.1", http_port=8098,
            data_dir=str(tmp_path), service="riak",
        ),
    )


@pytest.fixture
def make_context(sample_settings: Settings):
    def _make(
        commands: dict[str, CommandResult] | None = None,
        responses: dict[str, HttpResult] | None = None,
        override: Threshold | None = None,
    ) -> CheckContext:
        return CheckContext(
            settings=sample_settings,
            runner=scripted_runner(commands or {}),
            http=http_probe(responses or {}),
            override=override,
        )
    return _make
