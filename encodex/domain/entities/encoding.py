# encodex/domain/entities/encoding.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from encodex.domain.entities.media_info import VideoSize

# Codec value that makes ffmpeg copy the stream instead of re-encoding it.
DIRECT_STREAM_COPY = "copy"


@dataclass(frozen=True)
class VideoAttributes:
    """
    Video options for an encode. Anything left as None is up to ffmpeg
    (a missing codec means ffmpeg picks the container default).
    """
    codec: Optional[str] = None
    tag: Optional[str] = None           # forced fourcc
    bit_rate: Optional[int] = None
    frame_rate: Optional[int] = None
    size: Optional[VideoSize] = None
    pix_format: Optional[str] = None
    gop_size: Optional[str] = None
    keyint_min: Optional[str] = None
    sc_threshold: Optional[str] = None


@dataclass(frozen=True)
class AudioAttributes:
    codec: Optional[str] = None
    bit_rate: Optional[int] = None
    channels: Optional[int] = None
    sampling_rate: Optional[int] = None
    volume: Optional[int] = None


@dataclass(frozen=True)
class EncodingAttributes:
    format: Optional[str] = None
    offset: Optional[float] = None      # seconds to seek into the source
    duration: Optional[float] = None    # seconds to encode
    video: Optional[VideoAttributes] = None
    audio: Optional[AudioAttributes] = None
    qscale: Optional[str] = None
    strict: Optional[str] = None

    def target_duration_ms(self, source_duration_ms: int) -> int:
        """
        How long the encoded output should be, in ms.
        Not clamped: an offset past the end of the source gives a value <= 0.
        """
        if self.duration is not None:
            return int(round(self.duration * 1000))
        target = source_duration_ms
        if self.offset is not None:
            target -= int(round(self.offset * 1000))
        return target
