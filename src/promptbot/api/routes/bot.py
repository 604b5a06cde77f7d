"""Bot lifecycle and prompt endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from promptbot.bot import Bot
from promptbot.core.exceptions import NotRunningError, PromptBotError
from promptbot.models.bot import BotStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bot"])


class PromptRequest(BaseModel):
    prompt: str = ""


class MessageResponse(BaseModel):
    message: str


def get_bot(request: Request) -> Bot:
    """Return the bot constructed by the application lifespan."""
    return request.app.state.bot


@router.get("")
async def get_status(bot: Bot = Depends(get_bot)) -> BotStatus:
    return bot.status()


@router.post("/open")
async def open_bot(bot: Bot = Depends(get_bot)) -> MessageResponse:
    try:
        await bot.init()
        await bot.open()
    except PromptBotError as exc:
        logger.error("Opening bot failed: %s", exc)
        raise HTTPException(status_code=500, detail="Error opening bot.") from exc
    return MessageResponse(message="Bot initialized and opened.")


@router.post("/close")
async def close_bot(bot: Bot = Depends(get_bot)) -> MessageResponse:
    try:
        await bot.close()
    except PromptBotError as exc:
        logger.error("Closing bot failed: %s", exc)
        raise HTTPException(status_code=500, detail="Error closing bot.") from exc
    return MessageResponse(message="Bot closed successfully.")


@router.post("/prompt")
async def prompt_bot(body: PromptRequest, bot: Bot = Depends(get_bot)) -> MessageResponse:
    if not body.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required.")
    try:
        response = await bot.prompt(body.prompt)
    except NotRunningError as exc:
        raise HTTPException(status_code=409, detail="Bot is not running.") from exc
    except PromptBotError as exc:
        logger.error("Prompting bot failed: %s", exc)
        raise HTTPException(status_code=500, detail="Error prompting bot.") from exc
    return MessageResponse(message=response)
