"""Asset provisioning: executable and model weights on local disk."""

from __future__ import annotations

from typing import Optional

from promptbot.core.config import AppSettings
from promptbot.core.types import ProgressCallback
from promptbot.provisioning.provisioner import AssetProvisioner


def create_provisioner(
    settings: AppSettings | None = None,
    on_progress: Optional[ProgressCallback] = None,
) -> AssetProvisioner:
    """Create an AssetProvisioner wired from application settings."""
    if settings is None:
        settings = AppSettings()
    return AssetProvisioner(settings.download, on_progress=on_progress)


__all__ = ["AssetProvisioner", "create_provisioner"]
