"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic_settings import BaseSettings

DecoderValue = Union[bool, int, float, str]


class ModelConfig(BaseSettings):
    """Model selection and on-disk asset locations."""

    model_config = {"env_prefix": "PROMPTBOT_MODEL_", "protected_namespaces": ()}

    name: str = "gpt4all-lora-quantized"
    executables_dir: Path = Path("./executables")
    models_dir: Path = Path("./models")
    model_base_url: str = "https://the-eye.eu/public/AI/models/nomic-ai/gpt4all"


class ProcessConfig(BaseSettings):
    """Child process options. Timeouts of None wait indefinitely."""

    model_config = {"env_prefix": "PROMPTBOT_PROCESS_"}

    decoder_options: dict[str, DecoderValue] = {}
    open_timeout: Optional[float] = None
    prompt_timeout: Optional[float] = None
    read_chunk_size: int = 4096


class DownloadConfig(BaseSettings):
    """Asset download behaviour."""

    model_config = {"env_prefix": "PROMPTBOT_DOWNLOAD_"}

    chunk_size: int = 1024 * 1024
    connect_timeout: float = 30.0
    show_progress: bool = True


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "PROMPTBOT_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    autostart: bool = True

    model: ModelConfig = ModelConfig()
    process: ProcessConfig = ProcessConfig()
    download: DownloadConfig = DownloadConfig()
