"""Lifecycle of the single model child process."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Optional

from promptbot.core.exceptions import BotTimeoutError, ProcessStartError
from promptbot.core.protocols import IProcessHandle
from promptbot.core.types import Argv, DecoderConfig
from promptbot.models.bot import ModelSpec
from promptbot.process.protocol import SENTINEL_BYTE

logger = logging.getLogger(__name__)

Spawner = Callable[..., Awaitable[Any]]


def _flag_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_argv(spec: ModelSpec, decoder_options: DecoderConfig) -> Argv:
    """``<executable> --model <path> [--<key> <value>]*``"""
    argv = [str(spec.executable_path), "--model", str(spec.model_path)]
    for key, value in decoder_options.items():
        argv += [f"--{key}", _flag_value(value)]
    return argv


class ProcessSupervisor:
    """IProcessSupervisor that owns at most one live model process.

    ``open()`` restarts when a process already exists; ``close()`` is a no-op
    when nothing is running. Both are serialized by a lifecycle lock.
    """

    def __init__(
        self,
        spec: ModelSpec,
        decoder_options: Optional[DecoderConfig] = None,
        *,
        open_timeout: Optional[float] = None,
        read_chunk_size: int = 4096,
        spawn: Spawner = asyncio.create_subprocess_exec,
    ) -> None:
        self._spec = spec
        self._decoder_options = dict(decoder_options or {})
        self._open_timeout = open_timeout
        self._read_chunk_size = read_chunk_size
        self._spawn = spawn
        self._proc: Optional[IProcessHandle] = None
        self._lock = asyncio.Lock()

    @property
    def process(self) -> Optional[IProcessHandle]:
        return self._proc

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    @property
    def pid(self) -> Optional[int]:
        return self._proc.pid if self._proc is not None else None

    def build_argv(self) -> Argv:
        return build_argv(self._spec, self._decoder_options)

    async def open(self) -> None:
        async with self._lock:
            await self._close_locked()

            argv = self.build_argv()
            logger.info("Spawning model process: %s", argv)
            try:
                proc = await self._spawn(
                    *argv,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.DEVNULL,
                )
            except OSError as exc:
                raise ProcessStartError(f"Cannot start {argv[0]}: {exc}") from exc
            self._proc = proc

            try:
                await self._await_ready(proc)
            except BaseException:
                await self._close_locked()
                raise
            logger.info("Model process %s ready", proc.pid)

    async def close(self) -> None:
        async with self._lock:
            await self._close_locked()

    async def _close_locked(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None:
            return
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
        await proc.wait()
        logger.info("Model process %s closed", proc.pid)

    async def _await_ready(self, proc: IProcessHandle) -> None:
        if self._open_timeout is None:
            await self._read_until_ready(proc)
            return
        try:
            await asyncio.wait_for(self._read_until_ready(proc), self._open_timeout)
        except asyncio.TimeoutError as exc:
            raise BotTimeoutError("open", self._open_timeout) from exc

    async def _read_until_ready(self, proc: IProcessHandle) -> None:
        """Consume startup output until the first chunk carrying the prompt marker."""
        if proc.stdout is None:
            raise ProcessStartError("Model process has no stdout pipe")
        while True:
            try:
                chunk = await proc.stdout.read(self._read_chunk_size)
            except Exception as exc:
                raise ProcessStartError(f"Reading startup output failed: {exc}") from exc
            if not chunk:
                raise ProcessStartError("Model process exited before becoming ready")
            if SENTINEL_BYTE in chunk:
                return
