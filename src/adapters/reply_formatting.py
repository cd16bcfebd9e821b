"""Reply formatting for check results.

Replies use Telegram's HTML parse mode. Every free-form value (author name,
checker output) goes through html.escape so it cannot break the markup.
Checker output is trimmed so the visible text stays under Telegram's message
length limit.
"""

from __future__ import annotations

import html
from typing import Dict, List, Sequence

from core.models import CheckResult

# Telegram allows 4096 characters of visible text; leave room for UTF-16 slack.
MAX_REPLY_CHARS = 4000
TRUNCATED_MARKER = "\n… (truncated)"


def _header(name: str, block_count: int) -> str:
    noun = "block" if block_count == 1 else "blocks"
    return (
        f"Hi, {name}! "
        f"You posted a message with {block_count} Python code {noun}. "
        "Let's check your code for PEP8 style issues!"
    )


def _clean_label(number: int) -> str:
    return f"Codeblock {number}: No style issues here!"


def _issues_label(number: int) -> str:
    return f"Codeblock {number}:"


def _truncate(output: str, limit: int) -> str:
    if len(output) <= limit:
        return output
    kept = output[: max(limit - len(TRUNCATED_MARKER), 0)]
    # Cut on a line boundary when one is available.
    newline = kept.rfind("\n")
    if newline > 0:
        kept = kept[:newline]
    return kept + TRUNCATED_MARKER


def _output_budgets(author_name: str, results: Sequence[CheckResult]) -> Dict[int, int]:
    """Share the characters left after the fixed text among issue outputs.

    Shorter outputs are served first so they are never cut to make room for
    a long one.
    """

    fixed = len(_header(author_name, len(results)))
    issues: List[CheckResult] = []
    for result in results:
        number = result.ordinal + 1
        if result.is_clean:
            fixed += 1 + len(_clean_label(number))
        else:
            fixed += 2 + len(_issues_label(number))
            issues.append(result)

    remaining = max(MAX_REPLY_CHARS - fixed, 0)
    budgets: Dict[int, int] = {}
    issues.sort(key=lambda result: len(result.output))
    for index, result in enumerate(issues):
        share = remaining // (len(issues) - index)
        budgets[result.ordinal] = min(len(result.output), share)
        remaining -= budgets[result.ordinal]
    return budgets


def _format_section(result: CheckResult, budget: int) -> str:
    number = result.ordinal + 1
    if result.is_clean:
        return f"<b>{_clean_label(number)}</b>"
    output = html.escape(_truncate(result.output, budget))
    return f"<b>{_issues_label(number)}</b>\n<pre>{output}</pre>"


def format_reply(author_name: str, results: Sequence[CheckResult]) -> str:
    """Return the full reply: a header, then one section per block in order."""

    ordered = sorted(results, key=lambda result: result.ordinal)
    budgets = _output_budgets(author_name, ordered)
    parts = [_header(f"<b>{html.escape(author_name)}</b>", len(ordered))]
    parts.extend(_format_section(result, budgets.get(result.ordinal, 0)) for result in ordered)
    return "\n".join(parts)
