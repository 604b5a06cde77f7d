"""Shared test doubles: in-memory model process and provisioner."""

from __future__ import annotations

import asyncio
import itertools
from pathlib import Path
from typing import Callable, Optional

from promptbot.models.bot import ModelSpec

Responder = Callable[[str], list[str]]

FAKE_MODEL_SCRIPT = Path(__file__).with_name("fake_model.py")

_pids = itertools.count(4000)


def echo_responder(prompt: str) -> list[str]:
    """Answer ``prompt`` in two chunks, the second carrying the sentinel."""
    return [f"you said: {prompt}", "\n> "]


class FakeStdin:
    """Records writes and hands each complete line to the owning process."""

    def __init__(self, process: FakeProcess) -> None:
        self._process = process
        self.written: list[bytes] = []
        self.closing = False
        self.drain_error: Optional[BaseException] = None

    def write(self, data: bytes) -> None:
        self.written.append(data)
        self._process._on_input(data)

    async def drain(self) -> None:
        if self.drain_error is not None:
            raise self.drain_error

    def is_closing(self) -> bool:
        return self.closing


class FakeProcess:
    """asyncio.subprocess.Process look-alike backed by a real StreamReader.

    Must be constructed inside a running event loop.
    """

    def __init__(
        self,
        responder: Optional[Responder] = None,
        *,
        banner: Optional[str] = "loading...\n> ",
        chunk_delay: float = 0.0,
    ) -> None:
        self.pid = next(_pids)
        self.returncode: Optional[int] = None
        self.stdout = asyncio.StreamReader()
        self.stdin = FakeStdin(self)
        self.killed = False
        self._responder = responder
        self._chunk_delay = chunk_delay
        self._exited = asyncio.Event()
        self._pending = b""
        if banner:
            self.emit(banner)

    @property
    def prompts(self) -> list[str]:
        return [line for data in self.stdin.written for line in data.decode().splitlines()]

    def emit(self, *chunks: str) -> None:
        for chunk in chunks:
            self.stdout.feed_data(chunk.encode("utf-8"))

    def _on_input(self, data: bytes) -> None:
        self._pending += data
        *lines, self._pending = self._pending.split(b"\n")
        if self._responder is None:
            return
        loop = asyncio.get_running_loop()
        for line in lines:
            for i, chunk in enumerate(self._responder(line.decode("utf-8"))):
                loop.call_later(self._chunk_delay * (i + 1), self._feed, chunk.encode("utf-8"))

    def _feed(self, data: bytes) -> None:
        if self.returncode is None:
            self.stdout.feed_data(data)

    def exit(self, returncode: int = 0) -> None:
        if self.returncode is not None:
            return
        self.returncode = returncode
        self.stdin.closing = True
        self.stdout.feed_eof()
        self._exited.set()

    def kill(self) -> None:
        self.killed = True
        self.exit(-9)

    async def wait(self) -> int:
        await self._exited.wait()
        assert self.returncode is not None
        return self.returncode


class FakeSpawner:
    """Stands in for ``asyncio.create_subprocess_exec``; records every spawn."""

    def __init__(self, responder: Optional[Responder] = echo_responder, **process_kwargs) -> None:
        self._responder = responder
        self._process_kwargs = process_kwargs
        self.calls: list[tuple[tuple[str, ...], dict]] = []
        self.processes: list[FakeProcess] = []

    async def __call__(self, *argv: str, **kwargs) -> FakeProcess:
        self.calls.append((argv, kwargs))
        process = FakeProcess(self._responder, **self._process_kwargs)
        self.processes.append(process)
        return process


class MemoryProvisioner:
    """IAssetProvisioner that only counts calls."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.calls: list[ModelSpec] = []
        self._error = error

    async def ensure_assets(self, spec: ModelSpec) -> None:
        self.calls.append(spec)
        if self._error is not None:
            raise self._error


__all__ = [
    "FAKE_MODEL_SCRIPT",
    "FakeProcess",
    "FakeSpawner",
    "FakeStdin",
    "MemoryProvisioner",
    "echo_responder",
]
