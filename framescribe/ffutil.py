"""FFmpeg/ffprobe subprocess helpers."""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path

from framescribe.models import TimeRange

logger = logging.getLogger(__name__)

# Diagnostics ffmpeg prints when the input has nothing to map to an audio output.
NO_AUDIO_MARKERS = ("Stream map", "does not contain any stream")


class FFmpegNotFoundError(RuntimeError):
    pass


class FFmpegError(RuntimeError):
    """Raised when ffmpeg/ffprobe exits non-zero or produces unusable output."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stderr.strip():
            return f"{msg}\n{self.stderr.strip()}"
        return msg


class NoAudioStreamError(ValueError):
    """Raised when the input file has no audio stream."""
    pass


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def seconds_arg(value: float) -> str:
    """Fixed-point seconds for ffmpeg time options (never e-notation)."""
    text = format(value, "f").rstrip("0").rstrip(".")
    return text or "0"


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    logger.debug("Running: %s", shlex.join(cmd))
    return subprocess.run(cmd, capture_output=True, text=True)


def probe_duration(input_path: Path) -> float:
    """Return the container duration of *input_path* in seconds."""
    cmd = [
        "ffprobe",
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(input_path),
    ]
    result = _run(cmd)
    if result.returncode != 0:
        raise FFmpegError(
            f"ffprobe failed (rc={result.returncode}) for {input_path}",
            stderr=result.stderr,
        )

    try:
        return float(result.stdout.strip())
    except ValueError:
        raise FFmpegError(
            f"ffprobe returned no usable duration for {input_path}: {result.stdout.strip()!r}",
            stderr=result.stderr,
        ) from None


def extract_frames(
    input_path: Path, time_range: TimeRange, output_dir: Path, fps: float
) -> list[Path]:
    """Sample *time_range* at *fps* into numbered PNGs in *output_dir*."""
    cmd = [
        "ffmpeg",
        "-ss", seconds_arg(time_range.start),
        "-i", str(input_path),
        "-t", seconds_arg(time_range.duration),
        "-vf", f"fps={fps}",
        str(output_dir / "frame-%03d.png"),
    ]
    result = _run(cmd)
    if result.returncode != 0:
        raise FFmpegError(
            f"ffmpeg frame extraction failed (rc={result.returncode})",
            stderr=result.stderr,
        )

    return sorted(output_dir.glob("frame-*.png"))


def extract_audio_segment(
    input_path: Path,
    time_range: TimeRange,
    output_path: Path,
    sample_rate: int = 16000,
) -> Path:
    """Extract *time_range* as mono 16-bit PCM WAV (for Whisper).

    Raises NoAudioStreamError when ffmpeg reports the input has no audio.
    """
    cmd = [
        "ffmpeg",
        "-ss", seconds_arg(time_range.start),
        "-i", str(input_path),
        "-t", seconds_arg(time_range.duration),
        "-vn",
        "-f", "wav",
        "-acodec", "pcm_s16le",
        "-ar", str(sample_rate),
        "-ac", "1",
        str(output_path),
        "-y",
    ]
    result = _run(cmd)
    if result.returncode != 0:
        if any(marker in result.stderr for marker in NO_AUDIO_MARKERS):
            raise NoAudioStreamError(f"No audio stream found in {input_path}")
        raise FFmpegError(
            f"ffmpeg audio extraction failed (rc={result.returncode})",
            stderr=result.stderr,
        )

    if not output_path.exists() or output_path.stat().st_size == 0:
        raise FFmpegError("Audio file was created but is empty")
    return output_path
