"""Bot facade: provisioning, process lifecycle and prompting behind one object."""

from __future__ import annotations

import logging
from typing import Optional

from promptbot.core.config import AppSettings
from promptbot.core.exceptions import BotTimeoutError, NotRunningError, ProcessExitedError
from promptbot.core.protocols import IAssetProvisioner, IProcessSupervisor, IPromptEngine
from promptbot.core.types import DecoderConfig
from promptbot.models.bot import BotState, BotStatus, ModelSpec
from promptbot.process.protocol import PromptEngine
from promptbot.process.supervisor import ProcessSupervisor
from promptbot.provisioning import AssetProvisioner

logger = logging.getLogger(__name__)


class Bot:
    """Drives the ``init -> open -> prompt* -> close`` lifecycle of one local model.

    Components are injected at construction time; ``from_settings`` wires the
    production ones. Any Bot method is safe to call concurrently: prompts are
    serialized by the engine and open/close by the supervisor.
    """

    def __init__(
        self,
        spec: ModelSpec,
        decoder_options: Optional[DecoderConfig] = None,
        *,
        provisioner: Optional[IAssetProvisioner] = None,
        supervisor: Optional[IProcessSupervisor] = None,
        engine: Optional[IPromptEngine] = None,
    ) -> None:
        self._spec = spec
        self._decoder_options = dict(decoder_options or {})
        self._provisioner = provisioner or AssetProvisioner()
        self._supervisor = supervisor or ProcessSupervisor(spec, self._decoder_options)
        self._engine = engine or PromptEngine()
        self._state = BotState.UNINITIALIZED
        self._provisioned = False

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> Bot:
        if settings is None:
            settings = AppSettings()
        spec = ModelSpec.resolve(
            settings.model.name,
            executables_dir=settings.model.executables_dir,
            models_dir=settings.model.models_dir,
            model_base_url=settings.model.model_base_url,
        )
        process = settings.process
        return cls(
            spec,
            process.decoder_options,
            provisioner=AssetProvisioner(settings.download),
            supervisor=ProcessSupervisor(
                spec,
                process.decoder_options,
                open_timeout=process.open_timeout,
                read_chunk_size=process.read_chunk_size,
            ),
            engine=PromptEngine(
                timeout=process.prompt_timeout,
                chunk_size=process.read_chunk_size,
            ),
        )

    @property
    def spec(self) -> ModelSpec:
        return self._spec

    @property
    def state(self) -> BotState:
        """Lifecycle state; a process that died on its own reports CLOSED."""
        if self._state == BotState.OPEN and not self._supervisor.is_running:
            return BotState.CLOSED
        return self._state

    async def init(self) -> None:
        await self._provisioner.ensure_assets(self._spec)
        self._provisioned = True
        if self._state != BotState.OPEN:
            self._state = BotState.PROVISIONED
        logger.info("Bot initialized.")

    async def open(self) -> None:
        if not self._provisioned:
            await self.init()
        try:
            await self._supervisor.open()
        except BaseException:
            self._state = BotState.PROVISIONED
            raise
        self._state = BotState.OPEN
        logger.info("Bot open.")

    async def prompt(self, text: str) -> str:
        if self.state != BotState.OPEN:
            if self._state == BotState.OPEN:
                logger.warning("Model process exited; closing bot")
                await self.close()
            raise NotRunningError()
        try:
            return await self._engine.send(self._supervisor.process, text)
        except BotTimeoutError:
            logger.warning("Prompt timed out; closing model process")
            await self.close()
            raise
        except ProcessExitedError:
            logger.warning("Model process closed its output; closing bot")
            await self.close()
            raise
        except NotRunningError:
            if not self._supervisor.is_running:
                logger.warning("Model process exited; closing bot")
                await self.close()
            raise

    async def close(self) -> None:
        await self._supervisor.close()
        self._state = BotState.CLOSED
        logger.info("Bot closed.")

    def status(self) -> BotStatus:
        process = self._supervisor.process
        return BotStatus(
            model=self._spec.name,
            state=self.state,
            pid=process.pid if process is not None and self._supervisor.is_running else None,
            executable_path=self._spec.executable_path,
            model_path=self._spec.model_path,
            decoder_options=self._decoder_options,
        )

    async def __aenter__(self) -> Bot:
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
