"""Download the model executable and weights ahead of first start.

Usage:
    python scripts/download_models.py --model gpt4all-lora-quantized --models-dir ./models/
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from promptbot.core.config import AppSettings
from promptbot.core.exceptions import PromptBotError
from promptbot.core.logging import setup_logging
from promptbot.models.bot import ModelName, ModelSpec
from promptbot.provisioning import create_provisioner


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch PromptBot model assets")
    parser.add_argument(
        "--model",
        default=settings.model.name,
        choices=[m.value for m in ModelName],
    )
    parser.add_argument("--executables-dir", type=Path, default=settings.model.executables_dir)
    parser.add_argument("--models-dir", type=Path, default=settings.model.models_dir)
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = AppSettings()
    args = build_parser(settings).parse_args(argv)
    setup_logging(settings.log_level)

    if args.no_progress:
        settings.download.show_progress = False
    spec = ModelSpec.resolve(
        args.model,
        executables_dir=args.executables_dir,
        models_dir=args.models_dir,
        model_base_url=settings.model.model_base_url,
    )
    try:
        asyncio.run(create_provisioner(settings).ensure_assets(spec))
    except PromptBotError as exc:
        print(f"Provisioning failed: {exc}", file=sys.stderr)
        return 1

    print(f"  Executable: {spec.executable_path}")
    print(f"  Model:      {spec.model_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
