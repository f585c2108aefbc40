# encodex/common/io/line_reader.py
from __future__ import annotations

import io
from typing import BinaryIO, Iterator, Optional

from encodex.domain.errors import EncoderIOError


class PushbackLineReader:
    """
    Text line reader over a binary stream with room for exactly one pushed-back line.

    ffmpeg redraws its progress line with a bare carriage return, so universal
    newlines are used: "\\r", "\\n" and "\\r\\n" all end a line. Terminators are
    stripped from the returned value.
    """

    def __init__(self, stream: BinaryIO, encoding: str = "utf-8") -> None:
        self._text = io.TextIOWrapper(stream, encoding=encoding, errors="replace", newline=None)
        self._held: Optional[str] = None

    def read_line(self) -> Optional[str]:
        """Next line, or None at end of stream."""
        if self._held is not None:
            line, self._held = self._held, None
            return line
        try:
            raw = self._text.readline()
        except (OSError, ValueError) as e:
            raise EncoderIOError(f"Failed reading ffmpeg output: {e}") from e
        if raw == "":
            return None
        return raw.rstrip("\n")

    def push_back(self, line: str) -> None:
        if self._held is not None:
            raise RuntimeError("PushbackLineReader already holds a pushed-back line")
        self._held = line

    def close(self) -> None:
        try:
            self._text.close()
        except OSError:
            pass

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def __enter__(self) -> "PushbackLineReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
