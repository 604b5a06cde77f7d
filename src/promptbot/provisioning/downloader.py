"""Streaming HTTP download of a single asset with progress reporting."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
from typing import Optional

import httpx
from tqdm import tqdm

from promptbot.core.exceptions import DownloadError, ProvisionError
from promptbot.core.types import ProgressCallback
from promptbot.models.bot import DownloadTask

logger = logging.getLogger(__name__)


def _content_length(headers: httpx.Headers) -> Optional[int]:
    try:
        total = int(headers.get("content-length", ""))
    except ValueError:
        return None
    return total if total > 0 else None


class AssetDownloader:
    """Writes an HTTP response body to disk chunk by chunk.

    The body goes to ``<destination>.part`` and is renamed into place only once
    complete, so an interrupted transfer never looks like a finished asset.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        chunk_size: int = 1024 * 1024,
        show_progress: bool = True,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._client = client
        self._chunk_size = chunk_size
        self._show_progress = show_progress
        self._on_progress = on_progress

    async def download(
        self, url: str, destination: Path, *, mode: Optional[int] = None
    ) -> DownloadTask:
        """Fetch ``url`` into ``destination``, applying ``mode`` before it is moved into place."""
        task = DownloadTask(url=url, destination=destination)
        partial = destination.with_name(destination.name + ".part")

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProvisionError(f"Cannot create directory {destination.parent}: {exc}") from exc

        logger.info("Downloading %s -> %s", url, destination)
        completed = False
        try:
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                task.total = _content_length(response.headers)
                with partial.open("wb") as fh, tqdm(
                    total=task.total,
                    unit="B",
                    unit_scale=True,
                    desc=destination.name,
                    disable=not self._show_progress,
                ) as bar:
                    async for chunk in response.aiter_bytes(self._chunk_size):
                        await asyncio.to_thread(fh.write, chunk)
                        task.received += len(chunk)
                        bar.update(len(chunk))
                        if self._on_progress is not None:
                            self._on_progress(task)
            if mode is not None:
                try:
                    os.chmod(partial, mode)
                except OSError as exc:
                    raise ProvisionError(f"Cannot make {destination} executable: {exc}") from exc
            partial.replace(destination)
            completed = True
        except httpx.HTTPStatusError as exc:
            raise DownloadError(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DownloadError(url, str(exc) or type(exc).__name__) from exc
        except OSError as exc:
            raise ProvisionError(f"Writing {destination} failed: {exc}") from exc
        finally:
            if not completed:
                with contextlib.suppress(OSError):
                    partial.unlink(missing_ok=True)

        logger.info("Downloaded %d bytes to %s", task.received, destination)
        return task
