"""Core configuration dataclasses.

We keep config file parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# flake8 reads from stdin with "-" and labels diagnostics as "block".
DEFAULT_CHECKER_COMMAND: Tuple[str, ...] = ("flake8", "--stdin-display-name", "block", "-")

PYTHON_TAGS = frozenset({"py", "python"})


@dataclass(frozen=True)
class CheckerConfig:
    """Checker command and execution limits."""

    command: Tuple[str, ...] = DEFAULT_CHECKER_COMMAND
    timeout_seconds: Optional[float] = None
    max_concurrency: int = 1

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("checker command must contain at least the executable")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("checker timeout_seconds must be positive")
        if self.max_concurrency < 1:
            raise ValueError("checker max_concurrency must be at least 1")


def checker_config_from_dict(raw: Optional[dict]) -> CheckerConfig:
    """Build a CheckerConfig from the "checker" section of config.json."""

    raw = raw or {}
    command = raw.get("command")
    if command is None:
        command = DEFAULT_CHECKER_COMMAND
    if not isinstance(command, (list, tuple)) or not all(isinstance(part, str) for part in command):
        raise ValueError("checker.command must be a list of strings")

    timeout = raw.get("timeout_seconds")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
        raise ValueError("checker.timeout_seconds must be a number or null")

    max_concurrency = raw.get("max_concurrency", 1)
    if isinstance(max_concurrency, bool) or not isinstance(max_concurrency, int):
        raise ValueError("checker.max_concurrency must be an integer")

    return CheckerConfig(
        command=tuple(command),
        timeout_seconds=float(timeout) if timeout is not None else None,
        max_concurrency=max_concurrency,
    )
