# encodex/services/parsing/media_info_parser.py
from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Sequence

from encodex.common.io.line_reader import PushbackLineReader
from encodex.common.logging import get_logger
from encodex.common.strings.splitters import split_top_level
from encodex.domain.entities.media_info import AudioStreamInfo, MediaInfo, VideoStreamInfo
from encodex.domain.errors import InputFormatError
from encodex.services.parsing import patterns as p

logger = get_logger(__name__)


class BannerState(IntEnum):
    AWAITING_BANNER = 0
    AWAITING_DURATION = 1
    AWAITING_STREAMS = 2
    DONE = 3


# Sub-rules tried on every token after the decoder name; first match wins.
VIDEO_TOKEN_RULES: Sequence[tuple[str, p.Rule[Any]]] = (
    ("size", p.SIZE),
    ("frame_rate", p.FRAME_RATE),
    ("bit_rate", p.BIT_RATE),
)
AUDIO_TOKEN_RULES: Sequence[tuple[str, p.Rule[Any]]] = (
    ("sampling_rate", p.SAMPLING_RATE),
    ("channels", p.CHANNELS),
    ("bit_rate", p.BIT_RATE),
)


def _read_tokens(specs: str, rules: Sequence[tuple[str, p.Rule[Any]]]) -> Dict[str, Any]:
    tokens = split_top_level(specs)
    fields: Dict[str, Any] = {"decoder": tokens[0] if tokens else ""}
    for token in tokens[1:]:
        for field_name, rule in rules:
            value = rule.match(token)
            if value is not None:
                fields[field_name] = value
                break
        # anything else (pixel format, tbn/tbc, sample format, vendor noise) is ignored
    return fields


def parse_video_specs(specs: str) -> VideoStreamInfo:
    return VideoStreamInfo(**_read_tokens(specs, VIDEO_TOKEN_RULES))


def parse_audio_specs(specs: str) -> AudioStreamInfo:
    return AudioStreamInfo(**_read_tokens(specs, AUDIO_TOKEN_RULES))


class MediaInfoParser:
    """
    Reads ffmpeg's input banner ("Input #0, ..." / "Duration: ..." / "Stream #...")
    off the diagnostic stream and builds a MediaInfo.

    The first line that does not belong to the banner is pushed back onto the
    reader so whoever reads next (the encode tracker) sees it.
    """

    def __init__(self, source_path: str, *, modern_output: bool = False) -> None:
        self.source_path = source_path
        self.modern_output = modern_output
        self._stream_rule = p.STREAM_SPEC_ANY if modern_output else p.STREAM_SPEC

    def parse(self, reader: PushbackLineReader) -> MediaInfo:
        state = BannerState.AWAITING_BANNER
        fmt: Optional[str] = None
        duration_ms = 0
        video: Optional[VideoStreamInfo] = None
        audio: Optional[AudioStreamInfo] = None

        while state is not BannerState.DONE:
            line = reader.read_line()
            if line is None:
                break
            logger.debug("ffmpeg: %s", line)

            if state is BannerState.AWAITING_BANNER:
                reason = p.input_error_message(line, self.source_path)
                if reason is not None:
                    logger.warning("ffmpeg cannot read %s: %s", self.source_path, reason)
                    raise InputFormatError(reason, line=line)
                fmt = p.CONTAINER_BANNER.match(line)
                if fmt is not None:
                    state = BannerState.AWAITING_DURATION

            elif state is BannerState.AWAITING_DURATION:
                value = p.DURATION.match(line)
                if value is not None:
                    duration_ms = value
                    state = BannerState.AWAITING_STREAMS
                elif not self._skippable(line):
                    state = BannerState.DONE

            elif state is BannerState.AWAITING_STREAMS:
                spec = self._stream_rule.match(line)
                if spec is None:
                    if not self._skippable(line):
                        state = BannerState.DONE
                elif spec.kind.lower() == "video":
                    video = parse_video_specs(spec.specs)
                elif spec.kind.lower() == "audio":
                    audio = parse_audio_specs(spec.specs)

            if state is BannerState.DONE:
                reader.push_back(line)

        if fmt is None:
            raise InputFormatError(f"Input format not recognized: {self.source_path}")
        return MediaInfo(format=fmt, duration_ms=duration_ms, video=video, audio=audio)

    def _skippable(self, line: str) -> bool:
        return self.modern_output and p.BANNER_BLOCK_LINE.matches(line)
