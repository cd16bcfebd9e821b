"""Fenced code-block extraction (core domain)."""

from __future__ import annotations

from typing import AbstractSet, List

from core.config import PYTHON_TAGS
from core.models import CodeBlock

FENCE = "```"


def _lines(text: str) -> List[str]:
    # Split on "\n" only; other separators such as form feeds are content.
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def extract_code_blocks(text: str, tags: AbstractSet[str] = PYTHON_TAGS) -> List[CodeBlock]:
    """Return every closed fenced block whose language tag is in ``tags``.

    A line starting with three backticks toggles fence state; the rest of an
    opening fence line is the language tag, compared lower-cased. Fence lines
    are never part of a block, and a fence still open at the end of the text
    yields nothing.
    """

    blocks: List[CodeBlock] = []
    lines: List[str] = []
    in_fence = False
    in_target = False

    for line in _lines(text):
        if line.startswith(FENCE):
            if not in_fence:
                in_fence = True
                in_target = line[len(FENCE):].lower() in tags
                continue
            in_fence = False
            if in_target:
                blocks.append(CodeBlock(ordinal=len(blocks), source="".join(lines)))
                lines = []
                in_target = False
            continue
        if in_target:
            lines.append(line + "\n")

    return blocks
