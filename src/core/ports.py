"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the checker and reply adapters so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from core.models import CheckResult, CodeBlock, IncomingMessage


class CheckerPort(Protocol):
    """Runs the style checker against one code block."""

    async def check(self, block: CodeBlock) -> CheckResult:
        ...


class ReplierPort(Protocol):
    """Sends the check results as a threaded reply to the original message."""

    async def reply(self, message: IncomingMessage, results: Sequence[CheckResult]) -> None:
        ...
