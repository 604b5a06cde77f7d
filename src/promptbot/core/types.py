"""Type aliases used across PromptBot."""

from __future__ import annotations

from typing import Callable, Mapping

from promptbot.core.config import DecoderValue
from promptbot.models.bot import DownloadTask

DecoderConfig = Mapping[str, DecoderValue]
ProgressCallback = Callable[[DownloadTask], None]
Argv = list[str]
