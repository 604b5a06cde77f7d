"""Integration test fixtures: a real child process standing in for the model binary."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from promptbot.models.bot import ModelSpec
from tests.fakes import FAKE_MODEL_SCRIPT


@pytest.fixture
def model_spec(tmp_path: Path) -> ModelSpec:
    """A spec whose executable is the fake model script and whose weights exist."""
    spec = ModelSpec.resolve(
        "gpt4all-lora-quantized",
        executables_dir=tmp_path / "executables",
        models_dir=tmp_path / "models",
        model_base_url="https://weights.invalid",
    )
    spec.executable_path.parent.mkdir(parents=True)
    spec.model_path.parent.mkdir(parents=True)
    spec.executable_path.write_text(
        f"#!{sys.executable}\n" + FAKE_MODEL_SCRIPT.read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    os.chmod(spec.executable_path, 0o755)
    spec.model_path.write_bytes(b"fake weights")
    return spec
