"""Ensures the model executable and weights exist on local disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import httpx

from promptbot.core.config import DownloadConfig
from promptbot.core.types import ProgressCallback
from promptbot.models.bot import ModelSpec
from promptbot.provisioning.downloader import AssetDownloader
from promptbot.provisioning.platforms import executable_url

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


class AssetProvisioner:
    """IAssetProvisioner that fetches missing assets over HTTP."""

    def __init__(
        self,
        download: Optional[DownloadConfig] = None,
        *,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
        url_resolver: Callable[[], str] = executable_url,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._config = download or DownloadConfig()
        self._client_factory = client_factory or self._default_client
        self._url_resolver = url_resolver
        self._on_progress = on_progress

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.connect_timeout, read=None),
            follow_redirects=True,
        )

    async def ensure_assets(self, spec: ModelSpec) -> None:
        need_executable = not spec.executable_path.exists()
        need_model = not spec.model_path.exists()
        if not (need_executable or need_model):
            logger.debug("Assets for %s already present", spec.name)
            return

        # Resolve before opening a client so unsupported hosts fail without I/O.
        exe_url = self._url_resolver() if need_executable else None

        async with self._client_factory() as client:
            downloader = AssetDownloader(
                client,
                chunk_size=self._config.chunk_size,
                show_progress=self._config.show_progress,
                on_progress=self._on_progress,
            )
            jobs: list[Awaitable[None]] = []
            if exe_url is not None:
                jobs.append(self._fetch_executable(downloader, exe_url, spec.executable_path))
            if need_model:
                jobs.append(self._fetch_model(downloader, spec))
            await _gather_or_cancel(jobs)

    async def _fetch_executable(self, downloader: AssetDownloader, url: str, path: Path) -> None:
        await downloader.download(url, path, mode=EXECUTABLE_MODE)
        logger.info("Executable ready at %s", path)

    async def _fetch_model(self, downloader: AssetDownloader, spec: ModelSpec) -> None:
        await downloader.download(spec.model_url, spec.model_path)
        logger.info("Model weights ready at %s", spec.model_path)


async def _gather_or_cancel(jobs: list[Awaitable[None]]) -> None:
    """Run jobs concurrently; the first failure cancels the rest and is re-raised."""
    tasks = [asyncio.ensure_future(job) for job in jobs]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
