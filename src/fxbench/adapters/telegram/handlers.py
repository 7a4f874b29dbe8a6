# src/fxbench/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing and User Interaction

This module contains the bot commands that drive the engine's entry points:
/start (help), /convert and /validate for everyone, /stress and /health for
the admin. Every command is rate limited per user and every failure is
logged and answered with a short message.

Files that USE this module:
- fxbench.app (build_handlers function creates handler instances)
- tests.test_handlers (unit tests)

Files that this module USES:
- fxbench.application.conversion_service (get_default_engine)
- fxbench.application.load_test (LoadTestHarness)
- fxbench.application.health (health_checker)
- fxbench.adapters.formatting.formatter (reply formatting)
- fxbench.shared.rate_limiter (rate limiting functionality)
- fxbench.config (settings for admin username and stress limits)
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from fxbench.adapters.formatting.formatter import (
    format_conversion,
    format_health_report,
    format_load_test,
    format_validation,
)
from fxbench.application.conversion_service import get_default_engine
from fxbench.application.health import health_checker
from fxbench.application.load_test import LoadTestHarness
from fxbench.config import settings
from fxbench.domain.errors import InvalidLoadTestParameters
from fxbench.shared.rate_limiter import RATE_LIMITS, ThrottleDecision, rate_limiter

logger = logging.getLogger(__name__)

DEFAULT_STRESS_ARGS = (5000, 5, 10.0)  # duration_ms, concurrency, requests per second

USAGE = (
    "Currency engine commands:\n"
    "/convert <amount> <FROM> <TO> - convert an amount, e.g. /convert 100 USD EUR\n"
    "/validate <amount> <FROM> <TO> - check input without converting\n"
    "/stress [duration_ms] [concurrency] [rate] - run a load test (admin)\n"
    "/health - component health and metrics (admin)"
)

ADMIN_ONLY = "⚠️ This command is only available to the admin."
RATE_LIMITED = "⏰ Rate limit exceeded. Please try again in {seconds}s."


def _parse_conversion_args(args: Sequence[str]) -> Optional[Tuple[str, str, str]]:
    """Return (amount, from, to) as typed by the user, or None if the arity is wrong."""
    if len(args) != 3:
        return None
    amount, source, target = args
    return amount, source, target


def _display_amount(raw: str) -> Optional[float]:
    try:
        return float(raw)
    except ValueError:
        return None


def _parse_stress_args(args: Sequence[str]) -> Tuple[int, int, float]:
    """
    Parse /stress arguments, filling missing ones with defaults.

    Raises:
        ValueError: If more than three arguments are given or one is not a number
    """
    if len(args) > 3:
        raise ValueError("Too many arguments")
    values = list(DEFAULT_STRESS_ARGS)
    if len(args) > 0:
        values[0] = int(args[0])
    if len(args) > 1:
        values[1] = int(args[1])
    if len(args) > 2:
        values[2] = float(args[2])
    return values[0], values[1], values[2]


def _throttle(update: Update, limit_type: str) -> Optional[ThrottleDecision]:
    """
    Record a command against its throttle.

    Buckets are namespaced by limit type so a burst of conversions does not
    consume the stress-test allowance. Health checks are throttled per chat.

    Returns:
        The refusal if the command must be rejected, None if it may run
    """
    config = RATE_LIMITS.get(limit_type)
    if not config:
        return None

    if limit_type == "health_check" and update.effective_chat:
        identifier = f"health:chat:{update.effective_chat.id}"
    else:
        identifier = f"{limit_type}:user:{update.effective_user.id}"

    decision = rate_limiter.acquire(identifier, config)
    if decision.allowed:
        return None
    logger.warning(
        "Rate limit exceeded for %s (retry in %.0fs, reset_time=%s)",
        identifier,
        decision.retry_after,
        rate_limiter.get_reset_time(identifier, config),
    )
    return decision


def _is_admin(update: Update) -> bool:
    """True if the sender's username matches ADMIN_USERNAME (nobody when unset)."""
    admin = (settings.admin_username or "").lstrip("@").lower()
    if not admin:
        return False
    uname = (update.effective_user.username or "").lstrip("@").lower()
    return uname == admin


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start - show usage."""
    await update.message.reply_text(USAGE)


async def convert_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /convert <amount> <FROM> <TO>."""
    refusal = _throttle(update, "convert_command")
    if refusal:
        await update.message.reply_text(RATE_LIMITED.format(seconds=math.ceil(refusal.retry_after)))
        return

    parsed = _parse_conversion_args(context.args or [])
    if parsed is None:
        await update.message.reply_text("Usage: /convert <amount> <FROM> <TO>")
        return

    amount, source, target = parsed
    try:
        outcome = await get_default_engine().convert(amount, source, target)
        await update.message.reply_text(format_conversion(outcome, _display_amount(amount)))
    except Exception as e:
        logger.exception("Conversion command failed")
        await update.message.reply_text(f"❌ Conversion failed: {e}")


async def validate_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /validate <amount> <FROM> <TO>."""
    refusal = _throttle(update, "convert_command")
    if refusal:
        await update.message.reply_text(RATE_LIMITED.format(seconds=math.ceil(refusal.retry_after)))
        return

    parsed = _parse_conversion_args(context.args or [])
    if parsed is None:
        await update.message.reply_text("Usage: /validate <amount> <FROM> <TO>")
        return

    outcome = get_default_engine().validate(*parsed)
    await update.message.reply_text(format_validation(outcome))


async def stress_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stress [duration_ms] [concurrency] [rate] (admin only)."""
    if not _is_admin(update):
        await update.message.reply_text(ADMIN_ONLY)
        return

    refusal = _throttle(update, "stress_command")
    if refusal:
        await update.message.reply_text(RATE_LIMITED.format(seconds=math.ceil(refusal.retry_after)))
        return

    try:
        duration_ms, concurrency, rate = _parse_stress_args(context.args or [])
    except ValueError:
        await update.message.reply_text("Usage: /stress [duration_ms] [concurrency] [rate]")
        return

    await update.message.reply_text(
        f"⏳ Running load test: {duration_ms}ms, concurrency {concurrency}, {rate:g} req/s…"
    )
    try:
        result = await LoadTestHarness.from_settings().run(duration_ms, concurrency, rate)
        await update.message.reply_text(format_load_test(result))
    except InvalidLoadTestParameters as e:
        await update.message.reply_text(f"⚠️ {e}")
    except Exception as e:
        logger.exception("Load test failed")
        await update.message.reply_text(f"❌ Load test failed: {e}")


async def health_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /health (admin only)."""
    if not _is_admin(update):
        await update.message.reply_text(ADMIN_ONLY)
        return

    refusal = _throttle(update, "health_check")
    if refusal:
        await update.message.reply_text(RATE_LIMITED.format(seconds=math.ceil(refusal.retry_after)))
        return

    try:
        report = await health_checker.get_overall_health()
        await update.message.reply_text(format_health_report(report))
    except Exception as e:
        logger.exception("Health check failed")
        await update.message.reply_text(f"Health check failed: {e}")


def build_handlers() -> List[CommandHandler]:
    """
    Build and return list of Telegram bot handlers.

    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler(["start", "help"], start),
        CommandHandler("convert", convert_cmd),
        CommandHandler("validate", validate_cmd),
        CommandHandler("stress", stress_cmd),  # Admin only
        CommandHandler("health", health_cmd),  # Admin only
    ]
