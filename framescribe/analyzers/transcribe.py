"""Transcribe a clip of a video with a Whisper model from the local models dir."""

import logging
import tempfile
from pathlib import Path

from framescribe import ffutil
from framescribe.config import TranscribeConfig
from framescribe.models import TimeRange, TranscriptSegment
from framescribe.recognizer import RecognizerFactory
from framescribe.timecode import format_clock

logger = logging.getLogger(__name__)

# Curated order: first match wins.
MODEL_PREFERENCE = ["base.en", "base", "tiny.en", "tiny", "small.en"]
MODEL_SUFFIX = ".pt"

NO_SPEECH = "No speech detected in this segment."


class ModelNotFoundError(FileNotFoundError):
    pass


def find_model(models_dir: Path) -> Path:
    """Return the first available model file in preference order."""
    for name in MODEL_PREFERENCE:
        candidate = models_dir / f"{name}{MODEL_SUFFIX}"
        if candidate.is_file():
            return candidate

    raise ModelNotFoundError(
        "No Whisper model found. Please download a model first:\n"
        "  framescribe download-model base.en\n\n"
        f"Expected model location: {models_dir}/<model-name>{MODEL_SUFFIX}"
    )


def format_segments(segments: list[TranscriptSegment], offset: float) -> list[str]:
    """Render segments as "[start → end] text" in absolute video time."""
    lines: list[str] = []
    for seg in segments:
        text = seg.text.strip()
        if not text:
            continue
        start = format_clock(seg.start_ms / 1000 + offset)
        end = format_clock(seg.end_ms / 1000 + offset)
        lines.append(f"[{start} → {end}] {text}")
    return lines or [NO_SPEECH]


class ClipTranscriber:
    """Runs extract-audio → locate model → recognize → format, in order.

    The recognizer factory is supplied by the caller so the model binding is
    chosen at construction time.
    """

    def __init__(
        self,
        load_recognizer: RecognizerFactory,
        models_dir: Path,
        config: TranscribeConfig | None = None,
    ) -> None:
        self.load_recognizer = load_recognizer
        self.models_dir = models_dir
        self.config = config or TranscribeConfig()

    def run(self, input_path: Path, time_range: TimeRange) -> list[str]:
        """Return formatted transcript lines for *time_range* of *input_path*.

        Raises NoAudioStreamError if the source has no audio track.
        """
        with tempfile.TemporaryDirectory(prefix="video-audio-") as tmpdir:
            wav_path = Path(tmpdir) / "segment.wav"
            logger.info("Extracting audio %.1fs-%.1fs", time_range.start, time_range.end)
            ffutil.extract_audio_segment(
                input_path, time_range, wav_path, sample_rate=self.config.sample_rate
            )

            model_path = find_model(self.models_dir)
            recognizer = self.load_recognizer(
                model_path, self.config.use_gpu, self.config.variant
            )
            try:
                segments = recognizer.transcribe(
                    wav_path,
                    language=self.config.language,
                    temperature=self.config.temperature,
                )
            finally:
                recognizer.release()

        logger.info("Recognized %d segments", len(segments))
        return format_segments(segments, time_range.start)
