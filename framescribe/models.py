"""Shared data types used across framescribe."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class TimeRange:
    """A start/end time pair in seconds."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class Frame:
    """A converted frame on disk, with its timestamp in the source video."""

    index: int
    timestamp: float
    path: Path


@dataclass
class TranscriptSegment:
    """Recognized text with offsets in milliseconds relative to the clip."""

    start_ms: int
    end_ms: int
    text: str


@dataclass(frozen=True)
class ModelDescriptor:
    """A downloadable Whisper checkpoint."""

    name: str
    url: str
    filename: str
    size: str
    description: str
