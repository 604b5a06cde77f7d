"""Protocol interfaces for PromptBot abstractions.

Components talk to each other through these Protocols: structural typing,
no inheritance required, easy to swap for fakes in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from promptbot.models.bot import ModelSpec


# ---------------------------------------------------------------------------
# Child process streams and handle
# ---------------------------------------------------------------------------

@runtime_checkable
class IProcessInput(Protocol):
    """Writable side of the child's stdin pipe."""

    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def is_closing(self) -> bool: ...


@runtime_checkable
class IProcessOutput(Protocol):
    """Readable side of the child's stdout pipe."""

    async def read(self, n: int = -1) -> bytes: ...

    def at_eof(self) -> bool: ...


@runtime_checkable
class IProcessHandle(Protocol):
    """Live child process, shaped like ``asyncio.subprocess.Process``."""

    pid: int
    returncode: Optional[int]
    stdin: Optional[IProcessInput]
    stdout: Optional[IProcessOutput]

    def kill(self) -> None: ...

    async def wait(self) -> int: ...


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

@runtime_checkable
class IAssetProvisioner(Protocol):
    """Makes the executable and model weights for a spec available locally."""

    async def ensure_assets(self, spec: ModelSpec) -> None: ...


@runtime_checkable
class IProcessSupervisor(Protocol):
    """Owns the single model child process."""

    @property
    def process(self) -> Optional[IProcessHandle]: ...

    @property
    def is_running(self) -> bool: ...

    async def open(self) -> None: ...

    async def close(self) -> None: ...


@runtime_checkable
class IPromptEngine(Protocol):
    """Runs one prompt/response exchange against a process."""

    async def send(self, process: Optional[IProcessHandle], prompt: str) -> str: ...
