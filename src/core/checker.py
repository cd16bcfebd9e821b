"""Checker sequencing (core domain).

Checks run strictly one after another by default. A higher concurrency limit
overlaps checks, but results are always returned in ordinal order and the
first failure discards everything else.
"""

from __future__ import annotations

import asyncio
from typing import List, Sequence

from core.models import CheckResult, CodeBlock
from core.ports import CheckerPort


class CheckerError(Exception):
    """A checker step failed; ``step`` names which one."""

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"{step}: {cause!r}")
        self.step = step
        self.cause = cause


async def _check_serially(blocks: Sequence[CodeBlock], checker: CheckerPort) -> List[CheckResult]:
    results: List[CheckResult] = []
    for block in blocks:
        results.append(await checker.check(block))
    return results


async def check_blocks(
    blocks: Sequence[CodeBlock],
    checker: CheckerPort,
    max_concurrency: int = 1,
) -> List[CheckResult]:
    """Check every block and return one result per block, in ordinal order."""

    if max_concurrency <= 1 or len(blocks) <= 1:
        return await _check_serially(blocks, checker)

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(block: CodeBlock) -> CheckResult:
        async with semaphore:
            return await checker.check(block)

    tasks = [asyncio.ensure_future(_bounded(block)) for block in blocks]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return sorted(results, key=lambda result: result.ordinal)
