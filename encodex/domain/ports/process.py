from __future__ import annotations
from typing import BinaryIO, Protocol, Sequence


class ProcessHandle(Protocol):
    """A launched ffmpeg: its primary output and its diagnostic (stderr) stream."""
    stdout: BinaryIO
    stderr: BinaryIO


class ProcessPort(Protocol):
    def execute(self, args: Sequence[str]) -> ProcessHandle: ...

    def destroy(self, handle: ProcessHandle) -> None: ...
