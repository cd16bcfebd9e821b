from __future__ import annotations

import asyncio
import sys

import pytest

from adapters.subprocess_checker import SubprocessChecker
from core.checker import CheckerError
from core.config import CheckerConfig
from core.models import CodeBlock


def _python(script: str, **kwargs) -> SubprocessChecker:
    return SubprocessChecker(CheckerConfig(command=(sys.executable, "-c", script), **kwargs))


def test_empty_output_is_clean() -> None:
    checker = _python("import sys; sys.stdin.read()")
    result = asyncio.run(checker.check(CodeBlock(ordinal=0, source="x = 1\n")))
    assert result.is_clean
    assert result.ordinal == 0


def test_output_is_returned_verbatim() -> None:
    checker = _python(
        "import sys; src = sys.stdin.read(); "
        "sys.stdout.write('block:1:2: E225 ' + repr(src))"
    )
    result = asyncio.run(checker.check(CodeBlock(ordinal=2, source="x=1\n")))
    assert not result.is_clean
    assert result.output == "block:1:2: E225 'x=1\\n'"
    assert result.ordinal == 2


def test_invalid_utf8_is_replaced() -> None:
    checker = _python("import sys; sys.stdin.read(); sys.stdout.buffer.write(b'bad \\xff byte')")
    result = asyncio.run(checker.check(CodeBlock(ordinal=0, source="")))
    assert result.output == "bad \ufffd byte"


def test_exit_code_is_ignored() -> None:
    checker = _python("import sys; sys.stdin.read(); print('E1'); sys.exit(1)")
    result = asyncio.run(checker.check(CodeBlock(ordinal=0, source="y\n")))
    assert result.output.strip() == "E1"


def test_missing_executable_fails_at_spawn() -> None:
    checker = SubprocessChecker(CheckerConfig(command=("pepscope-no-such-checker", "-")))
    with pytest.raises(CheckerError) as info:
        asyncio.run(checker.check(CodeBlock(ordinal=0, source="x\n")))
    assert info.value.step == "spawning checker"
    assert isinstance(info.value.cause, FileNotFoundError)


def test_timeout_kills_slow_checker() -> None:
    checker = _python("import sys, time; sys.stdin.read(); time.sleep(30)", timeout_seconds=0.5)
    with pytest.raises(CheckerError) as info:
        asyncio.run(checker.check(CodeBlock(ordinal=0, source="x\n")))
    assert info.value.step == "waiting for checker"


def test_large_input_is_echoed_without_blocking() -> None:
    source = "x=1\n" * 150000
    checker = _python(
        "import sys\nfor line in sys.stdin:\n    sys.stdout.write(line)",
        timeout_seconds=20,
    )
    result = asyncio.run(asyncio.wait_for(checker.check(CodeBlock(ordinal=0, source=source)), 30))
    assert result.output == source


def test_timeout_covers_a_checker_that_never_reads_input() -> None:
    checker = _python("import time; time.sleep(30)", timeout_seconds=0.5)
    block = CodeBlock(ordinal=0, source="x=1\n" * 100000)
    with pytest.raises(CheckerError) as info:
        asyncio.run(asyncio.wait_for(checker.check(block), 10))
    assert info.value.step == "waiting for checker"


def test_cancelled_check_kills_checker_and_returns() -> None:
    checker = _python("import time; time.sleep(30)")
    block = CodeBlock(ordinal=0, source="x=1\n" * 100000)

    async def _cancel_soon() -> None:
        task = asyncio.ensure_future(checker.check(block))
        await asyncio.sleep(0.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, 10)

    asyncio.run(_cancel_soon())
