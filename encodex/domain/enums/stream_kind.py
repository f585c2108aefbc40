from __future__ import annotations
from enum import StrEnum


class StreamKind(StrEnum):
    audio = "audio"
    video = "video"
    data = "data"
    subtitle = "subtitle"

    @classmethod
    def from_flag(cls, flag: str) -> "StreamKind | None":
        """Map the one-letter kind column of `ffmpeg -codecs` (A/V/S/D)."""
        return _FLAGS.get(flag.upper())


_FLAGS = {
    "A": StreamKind.audio,
    "V": StreamKind.video,
    "S": StreamKind.subtitle,
    "D": StreamKind.data,
}
