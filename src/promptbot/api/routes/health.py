"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from promptbot.api.routes.bot import get_bot
from promptbot.bot import Bot
from promptbot.models.bot import BotState

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(bot: Bot = Depends(get_bot)) -> dict[str, str]:
    return {"status": "ready" if bot.state == BotState.OPEN else "not_ready"}
