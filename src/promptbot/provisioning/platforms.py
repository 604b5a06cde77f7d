"""Host platform to prebuilt executable URL mapping."""

from __future__ import annotations

import platform
import sys
from typing import Optional

from promptbot.core.exceptions import UnsupportedPlatformError

EXECUTABLE_BASE_URL = "https://github.com/nomic-ai/gpt4all/blob/main/chat"

# macOS ships separate ARM and Intel binaries; the other platforms have one each.
_DARWIN_ARM = "gpt4all-lora-quantized-OSX-m1"
_DARWIN_INTEL = "gpt4all-lora-quantized-OSX-intel"
_BINARIES = {
    "linux": "gpt4all-lora-quantized-linux-x86",
    "win32": "gpt4all-lora-quantized-win64.exe",
}


def executable_name(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    """Return the upstream binary name for a platform (defaults to the host)."""
    system = system or sys.platform
    if system == "darwin":
        machine = machine or platform.machine()
        return _DARWIN_ARM if machine == "arm64" else _DARWIN_INTEL
    for prefix, name in _BINARIES.items():
        if system.startswith(prefix):
            return name
    raise UnsupportedPlatformError(system, machine or "")


def executable_url(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    return f"{EXECUTABLE_BASE_URL}/{executable_name(system, machine)}?raw=true"
