"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for checking
and replying, enabling other chat frontends without changes here.

The pipeline enforces a strict order:
1) Ignore the bot's own messages
2) Extract Python code blocks, fast-exit when there are none
3) Check every block
4) Send one reply, threaded to the original message, covering every block

Any checker failure aborts the whole message: nothing is sent and the error
is logged once.
"""

from __future__ import annotations

import logging

from core.checker import CheckerError, check_blocks
from core.extractor import extract_code_blocks
from core.identity import BotIdentity
from core.models import IncomingMessage
from core.ports import CheckerPort, ReplierPort

LOGGER = logging.getLogger(__name__)


class MessageProcessor:
    """Orchestrates extraction, checking, and the reply."""

    def __init__(
        self,
        checker: CheckerPort,
        replier: ReplierPort,
        identity: BotIdentity,
        max_concurrency: int = 1,
    ) -> None:
        self._checker = checker
        self._replier = replier
        self._identity = identity
        self._max_concurrency = max_concurrency

    async def handle(self, message: IncomingMessage) -> None:
        """Process one incoming message through the core pipeline."""

        if self._identity.is_self(message.sender_id):
            return

        blocks = extract_code_blocks(message.text)
        if not blocks:
            return

        try:
            results = await check_blocks(blocks, self._checker, self._max_concurrency)
        except CheckerError as exc:
            LOGGER.error("Error %s: %r", exc.step, exc.cause)
            return

        try:
            await self._replier.reply(message, results)
        except Exception:
            LOGGER.exception("Error sending reply")
            return

        LOGGER.info(
            "Replied to message %s in chat %s with %s checked block(s)",
            message.message_id,
            message.chat_id,
            len(results),
        )
