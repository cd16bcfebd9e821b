"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from telethon import helpers
from telethon.tl.custom import Message
from telethon.tl.types import MessageEntityPre

from core.extractor import FENCE
from core.models import IncomingMessage

FALLBACK_AUTHOR_NAME = "there"


def author_name_from_sender(sender: Any) -> str:
    """Prefer the display name, then the username, then a neutral fallback."""

    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    # Channels and groups post under a title instead of a personal name.
    title = getattr(sender, "title", None)
    if title:
        return str(title)
    username = getattr(sender, "username", None)
    if username:
        return str(username)
    return FALLBACK_AUTHOR_NAME


def render_code_fences(text: str, entities: Optional[Sequence[Any]]) -> str:
    """Turn pre entities back into ```lang fences on their own lines.

    Telegram clients parse fences typed by the user into MessageEntityPre and
    strip the backticks from the message body. Entity offsets count UTF-16
    code units, hence the surrogate round-trip.
    """

    pres = [entity for entity in entities or [] if isinstance(entity, MessageEntityPre)]
    if not text or not pres:
        return text or ""

    text = helpers.add_surrogate(text)
    for entity in sorted(pres, key=lambda item: item.offset, reverse=True):
        start = entity.offset
        end = entity.offset + entity.length
        body = text[start:end]
        if not body.endswith("\n"):
            body += "\n"
        before = text[:start]
        if before and not before.endswith("\n"):
            before += "\n"
        after = text[end:]
        if after and not after.startswith("\n"):
            after = "\n" + after
        text = f"{before}{FENCE}{entity.language or ''}\n{body}{FENCE}{after}"
    return helpers.del_surrogate(text)


async def build_message(message: Message) -> IncomingMessage:
    """Build a core IncomingMessage from a Telethon Message."""

    sender: Optional[Any] = await message.get_sender()
    text = render_code_fences(message.message or "", message.entities)

    return IncomingMessage(
        chat_id=message.chat_id,
        message_id=message.id,
        sender_id=message.sender_id,
        author_name=author_name_from_sender(sender),
        text=text,
    )
