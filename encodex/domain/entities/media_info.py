# encodex/domain/entities/media_info.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VideoSize:
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class VideoStreamInfo:
    decoder: str
    size: Optional[VideoSize] = None
    frame_rate: Optional[float] = None
    bit_rate: Optional[int] = None  # kb/s


@dataclass(frozen=True)
class AudioStreamInfo:
    decoder: str
    sampling_rate: Optional[int] = None  # Hz
    channels: Optional[int] = None
    bit_rate: Optional[int] = None  # kb/s


@dataclass(frozen=True)
class MediaInfo:
    """
    What ffmpeg's input banner says about a source file.
    Built by the banner parser; the container format is always set, the
    duration is 0 when ffmpeg did not print one.
    """
    format: str
    duration_ms: int = 0
    video: Optional[VideoStreamInfo] = None
    audio: Optional[AudioStreamInfo] = None
