"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncomingMessage:
    """Minimal message context used by the core processing pipeline."""

    chat_id: int
    message_id: int
    sender_id: Optional[int]
    author_name: str
    text: str


@dataclass(frozen=True)
class CodeBlock:
    """Source of one fenced Python block, in order of appearance."""

    ordinal: int
    source: str


@dataclass(frozen=True)
class CheckResult:
    """Raw checker output for one code block."""

    ordinal: int
    output: str

    @property
    def is_clean(self) -> bool:
        return self.output == ""
