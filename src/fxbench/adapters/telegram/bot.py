# src/fxbench/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

Builds the python-telegram-bot Application and registers the command
handlers.
"""

from __future__ import annotations

from telegram.ext import Application

from fxbench.adapters.telegram.handlers import build_handlers


def build_application(bot_token: str) -> Application:
    """
    Build Telegram bot application with all command handlers registered.

    Args:
        bot_token: Telegram bot token

    Returns:
        Configured Application instance
    """
    app = Application.builder().token(bot_token).build()
    for handler in build_handlers():
        app.add_handler(handler)
    return app
