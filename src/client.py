"""Telegram client factory and bot login for pepscope.

We explicitly manage the client's lifecycle (connect/run_until_disconnected)
so it is obvious when the session is created and when it ends.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient

DEVICE_MODEL = "pepscope"
APP_VERSION = "0.1.0"


def build_client() -> TelegramClient:
    """Create a Telethon client from environment variables.

    API_ID/API_HASH come from the environment or .env. The session name
    defaults to "pepscope", which creates a local pepscope.session file.
    Short flood waits on replies are slept through by Telethon; longer ones
    surface as errors and are logged by the processor.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    session_name = os.getenv("SESSION_NAME", "pepscope")
    flood_sleep = int(os.getenv("FLOOD_SLEEP_THRESHOLD", "60"))

    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    logging.getLogger(__name__).info("Initializing Telegram client (session=%s)", session_name)

    return TelegramClient(
        session_name,
        int(api_id),
        api_hash,
        device_model=DEVICE_MODEL,
        app_version=APP_VERSION,
        flood_sleep_threshold=flood_sleep,
    )


async def authorize(client: TelegramClient) -> None:
    """Sign the connected client in as the bot named by BOT_TOKEN.

    A session file that already belongs to a user account is refused, so the
    bot never answers code in a person's private chats.
    """

    if await client.is_user_authorized():
        if not await client.is_bot():
            raise RuntimeError(
                "Session is logged in as a user account; delete it and set BOT_TOKEN"
            )
        return

    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("Missing BOT_TOKEN in environment")

    logging.getLogger(__name__).info("Signing in with bot token")
    await client.sign_in(bot_token=bot_token)
