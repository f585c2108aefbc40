# encodex/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class EncoderError(RuntimeError):
    """
    Base error for anything that goes wrong while driving ffmpeg.
    `line` holds the raw ffmpeg output line that triggered it, when there is one.
    """
    message: str
    line: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class InputFormatError(EncoderError):
    """The source container/codec cannot be decoded by ffmpeg."""


@dataclass(eq=False)
class EncoderIOError(EncoderError):
    """Launching ffmpeg or reading one of its streams failed at the OS level."""


@dataclass(eq=False)
class EncoderProtocolError(EncoderError):
    """ffmpeg printed something the output grammar does not allow at that point."""


class InvalidAttributesError(ValueError):
    """Encoding attributes rejected before any process is launched."""
