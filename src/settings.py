"""Static configuration for pepscope.

All user-editable settings (checker command, limits, logging) live in a
single JSON file for quick edits without touching Python. Secrets such as
the bot token stay in the environment.
"""

import json
import os

from core.config import checker_config_from_dict

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.getenv("PEPSCOPE_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Checker command plus optional timeout and concurrency limits.
# A missing "checker" section falls back to flake8 reading stdin.
CHECKER = checker_config_from_dict(_CONFIG.get("checker"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
