"""Application entry point for the pepscope bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.reply_formatting import format_reply
from adapters.subprocess_checker import SubprocessChecker
from adapters.telegram_mapper import build_message
from adapters.telegram_replier import TelegramReplier
from client import authorize, build_client
from core.checker import CheckerError, check_blocks
from core.extractor import extract_code_blocks
from core.identity import BotIdentity
from core.processor import MessageProcessor

NAME = "PEPSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        # stderr; `check` prints its reply on stdout.
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/pepscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


async def _connect(client, identity: BotIdentity) -> None:
    """Connect, log in, and remember which account we are."""

    await client.connect()
    await authorize(client)
    me = await client.get_me()
    identity.set(me.id)
    name = getattr(me, "username", None) or getattr(me, "first_name", None) or me.id
    logging.getLogger(__name__).info("%s is connected!", name)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting pepscope")
    checker_config = settings.CHECKER
    logger.info("Checker command: %s", " ".join(checker_config.command))

    client = build_client()
    identity = BotIdentity()
    client.loop.run_until_complete(_connect(client, identity))

    processor = MessageProcessor(
        checker=SubprocessChecker(checker_config),
        replier=TelegramReplier(client),
        identity=identity,
        max_concurrency=checker_config.max_concurrency,
    )

    # Single handler keeps Telethon integration minimal and defers all filtering
    # to our core processor for consistency and testability.
    @client.on(events.NewMessage())
    async def handler(event) -> None:
        try:
            message = await build_message(event.message)
            await processor.handle(message)
        except Exception:
            logger.exception("Error while processing message")

    logger.info("Client connected. Listening for incoming messages...")
    client.run_until_disconnected()


async def _check_text(text: str) -> Optional[str]:
    blocks = extract_code_blocks(text)
    if not blocks:
        return None
    checker_config = settings.CHECKER
    results = await check_blocks(
        blocks,
        SubprocessChecker(checker_config),
        checker_config.max_concurrency,
    )
    return format_reply(os.getenv("USER") or "there", results)


def _check(path: Optional[str]) -> int:
    _configure_logging()
    if path is None or path == "-":
        text = sys.stdin.read()
    else:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()

    try:
        reply = asyncio.run(_check_text(text))
    except CheckerError as exc:
        logging.getLogger(__name__).error("Error %s: %r", exc.step, exc.cause)
        return 1
    if reply is not None:
        print(reply)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="pepscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    check_parser = subparsers.add_parser(
        "check",
        help="Check the Python code blocks of a message read from a file or stdin.",
    )
    check_parser.add_argument("path", nargs="?", help="Message text file; '-' or omitted reads stdin")

    args = parser.parse_args(argv)
    if args.command == "check":
        raise SystemExit(_check(args.path))
    _run()


if __name__ == "__main__":
    main()
