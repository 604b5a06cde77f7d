"""Model selection, bot lifecycle, and download state models."""

from __future__ import annotations

import sys
from enum import StrEnum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from promptbot.core.exceptions import UnsupportedModelError

EXECUTABLE_NAME = "builtBot"


class ModelName(StrEnum):
    GPT4ALL_LORA_QUANTIZED = "gpt4all-lora-quantized"
    GPT4ALL_LORA_UNFILTERED_QUANTIZED = "gpt4all-lora-unfiltered-quantized"


class BotState(StrEnum):
    UNINITIALIZED = "UNINITIALIZED"
    PROVISIONED = "PROVISIONED"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ModelSpec(BaseModel):
    """A supported model variant resolved to its on-disk asset paths."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    name: ModelName
    executable_path: Path
    model_path: Path
    model_url: str

    @classmethod
    def resolve(
        cls,
        name: str,
        executables_dir: Path,
        models_dir: Path,
        model_base_url: str,
    ) -> ModelSpec:
        """Build a spec for ``name``; unknown names raise UnsupportedModelError."""
        try:
            model = ModelName(name)
        except ValueError as exc:
            raise UnsupportedModelError(name, [m.value for m in ModelName]) from exc

        executable = EXECUTABLE_NAME + (".exe" if sys.platform == "win32" else "")
        return cls(
            name=model,
            executable_path=Path(executables_dir) / executable,
            model_path=Path(models_dir) / f"{model.value}.bin",
            model_url=f"{model_base_url.rstrip('/')}/{model.value}.bin",
        )


class DownloadTask(BaseModel):
    """Progress of one file retrieval. ``total`` is None when the size is unknown."""

    url: str
    destination: Path
    total: Optional[int] = None
    received: int = 0

    @property
    def fraction(self) -> Optional[float]:
        if not self.total:
            return None
        return min(self.received / self.total, 1.0)


class BotStatus(BaseModel):
    """Snapshot of a bot for status reporting."""

    model_config = ConfigDict(protected_namespaces=())

    model: ModelName
    state: BotState
    pid: Optional[int] = None
    executable_path: Path
    model_path: Path
    decoder_options: dict[str, Any] = {}
