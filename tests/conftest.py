"""Shared test fixtures."""

from pathlib import Path

import pytest

from framescribe.models import TranscriptSegment


class FakeRecognizer:
    """Stands in for Whisper; records calls and returns canned segments."""

    def __init__(self, segments: list[TranscriptSegment], error: Exception | None = None):
        self.segments = segments
        self.error = error
        self.calls: list[dict] = []
        self.released = False

    def transcribe(self, audio_path, language, temperature):
        self.calls.append(
            {"audio_path": Path(audio_path), "language": language, "temperature": temperature}
        )
        if self.error:
            raise self.error
        return self.segments

    def release(self) -> None:
        self.released = True


@pytest.fixture
def models_dir(tmp_path: Path) -> Path:
    d = tmp_path / "models"
    d.mkdir()
    return d


@pytest.fixture
def base_model(models_dir: Path) -> Path:
    path = models_dir / "base.en.pt"
    path.write_bytes(b"checkpoint")
    return path


@pytest.fixture
def make_recognizer():
    return FakeRecognizer
