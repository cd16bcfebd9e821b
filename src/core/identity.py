"""Holder for the bot's own account id."""

from __future__ import annotations

from typing import Optional


class BotIdentity:
    """Account id of the running bot, set once after connecting."""

    def __init__(self) -> None:
        self._user_id: Optional[int] = None

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    def set(self, user_id: int) -> None:
        if self._user_id is not None and self._user_id != user_id:
            raise RuntimeError("Bot identity is already set to a different account")
        self._user_id = user_id

    def is_self(self, sender_id: Optional[int]) -> bool:
        return self._user_id is not None and sender_id == self._user_id
