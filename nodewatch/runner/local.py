"""Local subprocess runner for the node's diagnostic tools."""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import signal
import time
from collections.abc import Sequence

from nodewatch.runner.base import CommandRunner
from nodewatch.runner.models import CommandResult

logger = logging.getLogger(__name__)

# Grace period for pipes to drain after the process group is killed
_DRAIN_GRACE = 2.0


async def _drain(stream: asyncio.StreamReader | None, chunks: list[bytes]) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(4096)
        if not chunk:
            break
        chunks.append(chunk)


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode(errors="replace")


class LocalRunner(CommandRunner):
    """Runs commands on the local host, one at a time.

    Each command gets its own process group so that wrapper scripts
    (``riak-admin`` execs an Erlang VM) are stopped as a whole on timeout.
    Output captured before the timeout is kept.
    """

    async def run(self, argv: Sequence[str],
                  timeout: float | None = None) -> CommandResult:
        command = shlex.join(argv)
        timeout = self.timeout if timeout is None else timeout
        logger.debug("Running: %s (timeout %.1fs)", command, timeout)

        t0 = time.perf_counter()
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError:
            return CommandResult(
                command=command, output="", returncode=None, success=False,
                error=f"Command not found: {argv[0]}",
            )
        except PermissionError:
            return CommandResult(
                command=command, output="", returncode=None, success=False,
                error=f"Permission denied: {argv[0]}",
            )

        out_chunks: list[bytes] = []
        err_chunks: list[bytes] = []
        readers = asyncio.gather(
            _drain(proc.stdout, out_chunks),
            _drain(proc.stderr, err_chunks),
        )

        timed_out = False
        try:
            await asyncio.wait_for(proc.wait(), timeout)
        except asyncio.TimeoutError:
            timed_out = True
            logger.info("Command timed out after %.1fs: %s", timeout, command)
            self._kill_group(proc)
            await proc.wait()

        try:
            await asyncio.wait_for(readers, _DRAIN_GRACE)
        except asyncio.TimeoutError:
            logger.debug("Output pipes still open after exit: %s", command)

        duration = (time.perf_counter() - t0) * 1000
        output = _decode(out_chunks)
        stderr = _decode(err_chunks)

        if timed_out:
            return CommandResult(
                command=command, output=output, stderr=stderr,
                returncode=proc.returncode, success=False,
                error=f"Timed out after {timeout:g}s",
                timed_out=True, duration_ms=round(duration, 1),
            )

        success = proc.returncode == 0
        error = None
        if not success:
            error = stderr.strip() or f"Exited with status {proc.returncode}"
        return CommandResult(
            command=command, output=output, stderr=stderr,
            returncode=proc.returncode, success=success, error=error,
            duration_ms=round(duration, 1),
        )

    @staticmethod
    def _kill_group(proc: asyncio.subprocess.Process) -> None:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except PermissionError:
            proc.kill()
