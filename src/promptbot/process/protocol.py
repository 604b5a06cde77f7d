"""Sentinel-delimited prompt/response exchange over the child's stdio.

The model binary prints ``>`` once it has loaded and again after every answer.
There is no length prefix, so a chunk containing ``>`` ends the response. A
model that emits ``>`` inside an answer will have that answer cut short; this
is a limitation of the binary's output format.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from typing import Optional

from promptbot.core.exceptions import (
    BotTimeoutError,
    NotRunningError,
    ProcessExitedError,
    StreamError,
)
from promptbot.core.protocols import IProcessHandle, IProcessInput, IProcessOutput

logger = logging.getLogger(__name__)

SENTINEL = ">"
SENTINEL_BYTE = SENTINEL.encode("ascii")


def frame_prompt(prompt: str) -> bytes:
    return (prompt.strip() + "\n").encode("utf-8")


def finalize_response(text: str) -> str:
    """Drop one trailing sentinel and the whitespace around the answer.

    Trailing whitespace goes first, so the binary's closing ``"\n> "`` counts
    as a trailing sentinel; then one ``>`` is removed and the rest is stripped.
    """
    text = text.rstrip()
    if text.endswith(SENTINEL):
        text = text[: -len(SENTINEL)]
    return text.strip()


def _streams(process: Optional[IProcessHandle]) -> tuple[IProcessInput, IProcessOutput]:
    if process is None or process.returncode is not None:
        raise NotRunningError()
    stdin, stdout = process.stdin, process.stdout
    if stdin is None or stdout is None or stdin.is_closing() or stdout.at_eof():
        raise NotRunningError("Bot streams are closed.")
    return stdin, stdout


class PendingExchange:
    """Accumulates one response from the output stream until the sentinel arrives."""

    def __init__(self, stream: IProcessOutput, chunk_size: int = 4096) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._parts: list[str] = []

    @property
    def buffer(self) -> str:
        return "".join(self._parts)

    async def collect(self) -> str:
        while True:
            try:
                chunk = await self._stream.read(self._chunk_size)
            except Exception as exc:
                raise StreamError(f"Model output stream failed: {exc}") from exc
            if not chunk:
                raise ProcessExitedError(
                    f"Model process closed its output mid-response ({len(self.buffer)} chars received)"
                )
            text = self._decoder.decode(chunk)
            logger.debug("Received text: %r", text)
            self._parts.append(text)
            if SENTINEL in text:
                return finalize_response(self.buffer)


class PromptEngine:
    """IPromptEngine serializing exchanges so only one reader is attached at a time."""

    def __init__(self, *, timeout: Optional[float] = None, chunk_size: int = 4096) -> None:
        self._timeout = timeout
        self._chunk_size = chunk_size
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def send(self, process: Optional[IProcessHandle], prompt: str) -> str:
        _streams(process)
        async with self._lock:
            stdin, stdout = _streams(process)
            try:
                stdin.write(frame_prompt(prompt))
                await stdin.drain()
            except Exception as exc:
                raise StreamError(f"Writing prompt to model process failed: {exc}") from exc

            exchange = PendingExchange(stdout, self._chunk_size)
            if self._timeout is None:
                return await exchange.collect()
            try:
                return await asyncio.wait_for(exchange.collect(), self._timeout)
            except asyncio.TimeoutError as exc:
                raise BotTimeoutError("prompt", self._timeout) from exc
