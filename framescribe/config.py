"""Runtime configuration: defaults plus environment overrides."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

SOURCE_MODELS_DIR = Path(__file__).resolve().parent.parent / "resources" / "models"
USER_MODELS_DIR = Path.home() / ".cache" / "framescribe" / "models"


def default_models_dir(source_dir: Path = SOURCE_MODELS_DIR) -> Path:
    """`resources/models` in a source checkout, else a per-user cache dir.

    A regular install puts the package in site-packages, where no
    `resources` directory is shipped.
    """
    if source_dir.parent.is_dir():
        return source_dir
    return USER_MODELS_DIR


DEFAULT_MODELS_DIR = default_models_dir()

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class FrameConfig:
    """Configuration for frame sampling and WebP conversion."""

    max_dimension: int = 1568
    quality: int = 80
    default_fps: float = 1.0


@dataclass
class TranscribeConfig:
    """Configuration for audio extraction and Whisper decoding."""

    language: str = "en"
    temperature: float = 0.0
    use_gpu: bool = False
    variant: str = "default"
    sample_rate: int = 16000


@dataclass
class Settings:
    """Top-level settings shared by the commands."""

    models_dir: Path = DEFAULT_MODELS_DIR
    frames: FrameConfig = field(default_factory=FrameConfig)
    transcribe: TranscribeConfig = field(default_factory=TranscribeConfig)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings, honoring FRAMESCRIBE_MODELS_DIR and FRAMESCRIBE_USE_GPU."""
    env = os.environ if environ is None else environ

    models_dir = Path(env["FRAMESCRIBE_MODELS_DIR"]) if env.get("FRAMESCRIBE_MODELS_DIR") else DEFAULT_MODELS_DIR
    use_gpu = env.get("FRAMESCRIBE_USE_GPU", "").strip().lower() in _TRUTHY

    return Settings(
        models_dir=models_dir,
        transcribe=TranscribeConfig(use_gpu=use_gpu),
    )
