from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from encodex.domain.entities.media_info import MediaInfo


@dataclass
class EncodeReport:
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    source: Optional[MediaInfo] = None
    messages: List[str] = field(default_factory=list)
    progress_updates: int = 0
    last_permille: int = 0

    def start(self): self.started_at = datetime.now()
    def stop(self): self.finished_at = datetime.now()


class CollectingListener:
    """EncoderProgressListener that records everything into an EncodeReport."""

    def __init__(self, report: Optional[EncodeReport] = None) -> None:
        self.report = report or EncodeReport()

    def source_info(self, info: MediaInfo) -> None:
        self.report.source = info

    def message(self, message: str) -> None:
        self.report.messages.append(message)

    def progress(self, permille: int) -> None:
        self.report.progress_updates += 1
        self.report.last_permille = permille
