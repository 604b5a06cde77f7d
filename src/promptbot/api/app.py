"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from promptbot.api.routes import bot as bot_routes
from promptbot.api.routes import health
from promptbot.bot import Bot
from promptbot.core.config import AppSettings
from promptbot.core.exceptions import PromptBotError
from promptbot.core.logging import setup_logging

logger = logging.getLogger(__name__)


async def _autostart(bot: Bot) -> None:
    try:
        await bot.init()
        await bot.open()
    except PromptBotError:
        logger.exception("Bot autostart failed")
        await bot.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Construct the bot at startup and tear it down at shutdown."""
    settings: AppSettings = getattr(app.state, "settings", None) or AppSettings()
    setup_logging(settings.log_level)
    app.state.settings = settings

    bot: Bot = getattr(app.state, "bot", None) or Bot.from_settings(settings)
    app.state.bot = bot
    if settings.autostart:
        await _autostart(bot)
    try:
        yield
    finally:
        await bot.close()


def create_app(settings: AppSettings | None = None, bot: Bot | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PromptBot",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.bot = bot
    app.include_router(health.router)
    app.include_router(bot_routes.router, prefix="/bot")
    return app
