"""Speech-to-text capability backed by OpenAI Whisper checkpoints."""

import logging
from pathlib import Path
from typing import Callable, Protocol

import whisper

from framescribe.models import TranscriptSegment

logger = logging.getLogger(__name__)

VARIANTS = ("default", "cuda")


class Recognizer(Protocol):
    def transcribe(
        self, audio_path: Path, language: str, temperature: float
    ) -> list[TranscriptSegment]: ...

    def release(self) -> None: ...


RecognizerFactory = Callable[[Path, bool, str], Recognizer]


class WhisperRecognizer:
    """Whisper model loaded from a local checkpoint file."""

    def __init__(self, model_path: Path, use_gpu: bool = False, variant: str = "default") -> None:
        if variant not in VARIANTS:
            raise ValueError(f"Unknown backend variant {variant!r}; expected one of {VARIANTS}")

        self.device = "cuda" if use_gpu or variant == "cuda" else "cpu"
        logger.info("Loading Whisper model %s on %s", model_path, self.device)
        self.model = whisper.load_model(str(model_path), device=self.device)

    def transcribe(
        self, audio_path: Path, language: str = "en", temperature: float = 0.0
    ) -> list[TranscriptSegment]:
        if self.model is None:
            raise RuntimeError("Recognizer has been released")

        result = self.model.transcribe(
            str(audio_path),
            language=language,
            temperature=temperature,
            fp16=self.device == "cuda",
        )

        return [
            TranscriptSegment(
                start_ms=round(seg["start"] * 1000),
                end_ms=round(seg["end"] * 1000),
                text=seg["text"],
            )
            for seg in result["segments"]
        ]

    def release(self) -> None:
        self.model = None


def load_whisper(model_path: Path, use_gpu: bool = False, variant: str = "default") -> Recognizer:
    return WhisperRecognizer(model_path, use_gpu=use_gpu, variant=variant)
