# src/fxbench/app.py
"""
Application Entry Point - Bot Initialization and Startup

This module serves as the composition root for the optional Telegram
surface. It configures logging, warms up the default conversion engine
(so a bad rate table file fails at startup rather than on first use) and
starts polling.

Files that USE this module:
- python -m fxbench / the fxbench console script

Files that this module USES:
- fxbench.shared.logging_conf (setup_logging for logging configuration)
- fxbench.config (settings for configuration management)
- fxbench.application.conversion_service (get_default_engine)
- fxbench.adapters.telegram.bot (build_application)
"""

from __future__ import annotations

import logging

from telegram.error import Conflict, NetworkError, TimedOut

from fxbench.adapters.telegram.bot import build_application
from fxbench.application.conversion_service import get_default_engine
from fxbench.config import settings
from fxbench.shared.logging_conf import setup_logging


def main() -> None:
    """
    Initialize and start the Telegram bot application.

    This function:
    1. Sets up logging from settings
    2. Builds the default conversion engine
    3. Creates the Telegram application with all command handlers
    4. Starts the polling loop
    """
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)

    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN missing")

    engine = get_default_engine()
    logger.info(
        "Engine configured: %r, delay=%s-%sms, fault probability=%s, call timeout=%s",
        engine.rate_table,
        settings.delay_min_ms,
        settings.delay_max_ms,
        settings.fault_probability,
        settings.call_timeout,
    )

    app = build_application(settings.bot_token)
    logger.info("Starting bot polling… stress cap=%dms", settings.stress_max_duration_ms)

    try:
        app.run_polling(drop_pending_updates=True)
    except Conflict:
        logger.error(
            "Another bot instance is already polling with this token. "
            "Stop it before starting a new one.",
            exc_info=True,
        )
        raise
    except (TimedOut, NetworkError) as e:
        logger.error("Network error talking to the Telegram API: %s (type: %s)",
                     e, type(e).__name__, exc_info=True)
        raise
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
        raise


if __name__ == "__main__":
    main()
