"""Telegram reply adapter.

Formats the check results as HTML and sends them as a reply to the message
that contained the code blocks.
"""

from __future__ import annotations

from typing import Sequence

from adapters.reply_formatting import format_reply
from core.models import CheckResult, IncomingMessage


class TelegramReplier:
    """Replier adapter that answers in the chat the message came from."""

    def __init__(self, client) -> None:
        self._client = client

    async def reply(self, message: IncomingMessage, results: Sequence[CheckResult]) -> None:
        """Send the formatted results threaded to the original message."""

        text = format_reply(message.author_name, results)
        await self._client.send_message(
            message.chat_id,
            text,
            reply_to=message.message_id,
            parse_mode="html",
            link_preview=False,
        )
