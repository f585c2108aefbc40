from __future__ import annotations
from typing import Protocol
from encodex.domain.entities.media_info import MediaInfo


class EncoderProgressListener(Protocol):
    def source_info(self, info: MediaInfo) -> None: ...   # once, before any progress

    def message(self, message: str) -> None: ...          # warnings/diagnostics from ffmpeg

    def progress(self, permille: int) -> None: ...        # 0..1000
