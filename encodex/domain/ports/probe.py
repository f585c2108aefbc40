from __future__ import annotations
from pathlib import Path
from typing import Protocol
from encodex.domain.entities.media_info import MediaInfo

class MediaProbePort(Protocol):
    def probe(self, path: Path) -> MediaInfo: ...
