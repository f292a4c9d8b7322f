"""Frame extractor: samples a time range and stores compact WebP stills."""

import logging
import tempfile
from pathlib import Path

from PIL import Image

from framescribe import ffutil
from framescribe.config import FrameConfig
from framescribe.models import Frame, TimeRange
from framescribe.timecode import format_seconds

logger = logging.getLogger(__name__)


class FrameExtractionError(RuntimeError):
    pass


def sampling_rate(
    time_range: TimeRange, count: int | None, default_fps: float = 1.0
) -> float:
    """Frames per second that yields roughly *count* frames over the range."""
    if count:
        return count / time_range.duration
    return default_fps


def frame_timestamp(index: int, time_range: TimeRange, count: int | None) -> float:
    """Timestamp reported for the *index*-th (0-based) retained frame.

    With a count the frames are spread so the last one lands on the range end.
    """
    if count:
        return time_range.start + index * time_range.duration / ((count - 1) or 1)
    return time_range.start + index


def convert_frame(
    src: Path, dest: Path, max_dimension: int = 1568, quality: int = 80
) -> Path:
    """Shrink *src* to fit within max_dimension (never enlarge) and save as WebP."""
    with Image.open(src) as img:
        if img.mode not in ("RGB", "RGBA"):
            img = img.convert("RGB")
        img.thumbnail((max_dimension, max_dimension))
        img.save(dest, format="WEBP", quality=quality)
    return dest


def extract(
    input_path: Path,
    time_range: TimeRange,
    count: int | None = None,
    work_dir: Path | None = None,
    config: FrameConfig | None = None,
) -> list[Frame]:
    """Extract, trim and convert frames; return them in chronological order.

    The working directory holds the results and is not removed, including
    when extraction fails, so it can be inspected.
    """
    config = config or FrameConfig()
    if work_dir is None:
        work_dir = Path(tempfile.mkdtemp(prefix="video-frames-"))

    fps = sampling_rate(time_range, count, config.default_fps)
    logger.info("Extracting frames at fps=%s into %s", fps, work_dir)
    pngs = ffutil.extract_frames(input_path, time_range, work_dir, fps)

    # fps rounding can overshoot the requested count
    if count and len(pngs) > count:
        for extra in pngs[count:]:
            extra.unlink()
        logger.debug("Dropped %d surplus frames", len(pngs) - count)
        pngs = pngs[:count]

    if not pngs:
        raise FrameExtractionError("No frames extracted. Check video path and time range.")

    frames: list[Frame] = []
    for i, png in enumerate(pngs):
        webp = work_dir / f"frame-{i + 1:03d}.webp"
        convert_frame(png, webp, config.max_dimension, config.quality)
        png.unlink()
        frames.append(
            Frame(index=i + 1, timestamp=frame_timestamp(i, time_range, count), path=webp)
        )
    return frames


def format_report(frames: list[Frame], time_range: TimeRange) -> list[str]:
    """Human-readable listing of extracted frames."""
    lines = [
        "=== EXTRACTED FRAMES ===",
        "",
        f"Extracted {len(frames)} frames from "
        f"{format_seconds(time_range.start)}s to {format_seconds(time_range.end)}s:",
        "",
    ]
    for frame in frames:
        lines.append(f"Frame {frame.index} ({frame.timestamp:.1f}s): {frame.path}")
    lines.append("")
    lines.append("========================")
    return lines
