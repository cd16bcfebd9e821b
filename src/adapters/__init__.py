"""Adapters connecting the core to Telegram and the checker subprocess."""
