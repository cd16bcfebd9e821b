"""Checker adapter that runs the configured command as a child process.

The block source is fed to the child's stdin, which is then closed, while
stdout is read to completion. Empty stdout means the block is clean. The
exit code is not inspected, and stderr goes to the operator console.
"""

from __future__ import annotations

import asyncio
import logging
from asyncio import StreamReader, StreamWriter
from asyncio.subprocess import PIPE, Process

from core.checker import CheckerError
from core.config import CheckerConfig
from core.models import CheckResult, CodeBlock

LOGGER = logging.getLogger(__name__)


async def _kill(process: Process) -> None:
    """Kill the child and reap it, draining stdout so the exit is observed."""

    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    if process.stdin is not None:
        process.stdin.close()
    if process.stdout is not None:
        await process.stdout.read()
    await process.wait()


class SubprocessChecker:
    """Run one checker process per code block."""

    def __init__(self, config: CheckerConfig) -> None:
        self._config = config

    async def check(self, block: CodeBlock) -> CheckResult:
        """Pipe the block through the checker and capture its stdout."""

        command = self._config.command
        try:
            process = await asyncio.create_subprocess_exec(*command, stdin=PIPE, stdout=PIPE)
        except (OSError, ValueError) as exc:
            raise CheckerError("spawning checker", exc) from exc

        LOGGER.debug("Checking code block %s with pid %s", block.ordinal + 1, process.pid)
        source = block.source.encode("utf-8")
        try:
            if self._config.timeout_seconds is None:
                output = await self._exchange(process, source)
            else:
                output = await asyncio.wait_for(
                    self._exchange(process, source),
                    self._config.timeout_seconds,
                )
        except asyncio.TimeoutError as exc:
            await _kill(process)
            raise CheckerError("waiting for checker", exc) from exc
        except BaseException:
            # Never leave a half-fed checker running after a failure or cancel.
            await _kill(process)
            raise

        return CheckResult(
            ordinal=block.ordinal,
            output=output.decode("utf-8", errors="replace"),
        )

    async def _exchange(self, process: Process, source: bytes) -> bytes:
        """Write stdin and read stdout at the same time, then await the exit.

        Both directions run concurrently so a checker that prints while it
        reads, or never reads at all, cannot wedge the write.
        """

        if process.stdin is None:
            raise CheckerError("opening checker input", RuntimeError("stdin is not piped"))
        if process.stdout is None:
            raise CheckerError("reading output", RuntimeError("stdout is not piped"))

        writer = asyncio.ensure_future(self._write_input(process.stdin, source))
        reader = asyncio.ensure_future(self._read_output(process, process.stdout))
        try:
            await asyncio.gather(writer, reader)
        except BaseException:
            writer.cancel()
            reader.cancel()
            await asyncio.gather(writer, reader, return_exceptions=True)
            raise
        return reader.result()

    async def _write_input(self, stdin: StreamWriter, source: bytes) -> None:
        try:
            stdin.write(source)
            await stdin.drain()
            stdin.close()
        except OSError as exc:
            raise CheckerError("writing input", exc) from exc

    async def _read_output(self, process: Process, stdout: StreamReader) -> bytes:
        try:
            data = await stdout.read()
            await process.wait()
        except OSError as exc:
            raise CheckerError("reading output", exc) from exc
        return data
