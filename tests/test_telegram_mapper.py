from __future__ import annotations

import asyncio

from telethon.tl.types import MessageEntityBold, MessageEntityPre

from adapters.telegram_mapper import author_name_from_sender, build_message, render_code_fences
from core.extractor import extract_code_blocks


class DummySender:
    def __init__(
        self,
        first_name: "str | None" = None,
        last_name: "str | None" = None,
        username: "str | None" = None,
    ) -> None:
        self.first_name = first_name
        self.last_name = last_name
        self.username = username


class DummyMessage:
    def __init__(self, *, text: str, entities=None, sender=None) -> None:
        self.chat_id = -100123
        self.id = 10
        self.sender_id = 42
        self.message = text
        self.entities = entities
        self._sender = sender

    async def get_sender(self):
        return self._sender


def test_author_name_prefers_display_name() -> None:
    assert author_name_from_sender(DummySender("Ada", "Lovelace", "ada")) == "Ada Lovelace"
    assert author_name_from_sender(DummySender("Ada", None, "ada")) == "Ada"


def test_author_name_falls_back_to_username_then_default() -> None:
    assert author_name_from_sender(DummySender(username="ada")) == "ada"
    assert author_name_from_sender(DummySender()) == "there"
    assert author_name_from_sender(None) == "there"


def test_pre_entities_become_fences() -> None:
    text = "look:\nx=1\nthanks"
    entities = [MessageEntityPre(offset=6, length=3, language="py")]
    rendered = render_code_fences(text, entities)
    assert rendered == "look:\n```py\nx=1\n```\nthanks"
    assert [block.source for block in extract_code_blocks(rendered)] == ["x=1\n"]


def test_offsets_count_utf16_units() -> None:
    text = "😀\nprint('hi')"
    entities = [MessageEntityPre(offset=3, length=11, language="python")]
    rendered = render_code_fences(text, entities)
    assert rendered == "😀\n```python\nprint('hi')\n```"


def test_text_without_pre_entities_is_unchanged() -> None:
    text = "```py\nx=1\n```"
    assert render_code_fences(text, None) == text
    assert render_code_fences(text, [MessageEntityBold(offset=0, length=3)]) == text


def test_build_message_maps_fields() -> None:
    message = DummyMessage(
        text="x=1",
        entities=[MessageEntityPre(offset=0, length=3, language="py")],
        sender=DummySender("Ada"),
    )
    incoming = asyncio.run(build_message(message))
    assert incoming.chat_id == -100123
    assert incoming.message_id == 10
    assert incoming.sender_id == 42
    assert incoming.author_name == "Ada"
    assert incoming.text == "```py\nx=1\n```"
