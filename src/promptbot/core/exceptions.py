"""PromptBot exception hierarchy."""

from __future__ import annotations


class PromptBotError(Exception):
    """Base exception for all PromptBot errors."""


class UnsupportedModelError(PromptBotError):
    """Requested model is not one of the supported variants."""

    def __init__(self, model: str, supported: list[str]) -> None:
        self.model = model
        self.supported = supported
        super().__init__(
            f"Model {model} is not supported. Supported models: {', '.join(supported)}"
        )


class ProvisionError(PromptBotError):
    """Executable or model weights could not be made available on disk."""


class UnsupportedPlatformError(ProvisionError):
    """No prebuilt executable exists for the host platform."""

    def __init__(self, platform: str, machine: str = "") -> None:
        self.platform = platform
        self.machine = machine
        super().__init__(
            f"Platform not supported: {platform} {machine}".rstrip()
            + ". Binaries exist for macOS (ARM and Intel), Linux and Windows."
        )


class DownloadError(ProvisionError):
    """HTTP retrieval of an asset failed."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"Download of {url} failed: {message}")


class ProcessError(PromptBotError):
    """Error in the model process lifecycle."""


class ProcessStartError(ProcessError):
    """Model process could not be spawned or exited before becoming ready."""


class NotRunningError(ProcessError):
    """Prompt attempted without an open model process."""

    def __init__(self, message: str = "Bot is not running.") -> None:
        super().__init__(message)


class StreamError(PromptBotError):
    """Model process stream failed during an exchange."""


class ProcessExitedError(StreamError):
    """Model process closed its output before the exchange completed."""


class BotTimeoutError(PromptBotError):
    """A configured wait bound was exceeded; the process must be reopened."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout:g}s")
