# encodex/services/parsing/patterns.py
"""
Line-matching rules for ffmpeg's human-readable output.

Every rule is a compiled, case-insensitive regex plus an extractor that turns
the match into a value. Rules are stateless module constants; `RULES` indexes
them by name, read-only. Line rules must match the whole line, token rules only
need to be found somewhere inside the token.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from encodex.domain.entities.media_info import VideoSize
from encodex.domain.enums.stream_kind import StreamKind

T = TypeVar("T")


@dataclass(frozen=True)
class Rule(Generic[T]):
    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], T]
    whole_line: bool = True

    def match(self, text: str) -> Optional[T]:
        m = self.pattern.fullmatch(text) if self.whole_line else self.pattern.search(text)
        if m is None:
            return None
        return self.extract(m)

    def matches(self, text: str) -> bool:
        return self.match(text) is not None


def _compile(rx: str) -> re.Pattern:
    return re.compile(rx, re.IGNORECASE)


# ---- extracted values ---------------------------------------------------------

@dataclass(frozen=True)
class FormatEntry:
    decode: bool
    encode: bool
    names: List[str]


@dataclass(frozen=True)
class CodecEntry:
    decode: bool
    encode: bool
    kind: Optional[StreamKind]
    name: str


@dataclass(frozen=True)
class StreamSpec:
    kind: str          # "Video" | "Audio" | "Data" | "Subtitle" | "Attachment", as printed
    specs: str         # everything after "<Kind>: "


# ---- extractors ---------------------------------------------------------------

def _format_entry(m: re.Match) -> FormatEntry:
    names = [n.strip() for n in m.group(3).split(",") if n.strip()]
    return FormatEntry(decode=m.group(1).upper() == "D", encode=m.group(2).upper() == "E", names=names)


def _codec_entry(m: re.Match) -> CodecEntry:
    return CodecEntry(
        decode=m.group(1).upper() == "D",
        encode=m.group(2).upper() == "E",
        kind=StreamKind.from_flag(m.group(3)),
        name=m.group(4),
    )


def _duration_ms(m: re.Match) -> int:
    hours, minutes, seconds, tenths = (int(g) for g in m.groups())
    return tenths * 100 + seconds * 1000 + minutes * 60_000 + hours * 3_600_000


def _clock_ms(m: re.Match) -> int:
    hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3))
    millis = int(m.group(4)[:3].ljust(3, "0"))
    return millis + seconds * 1000 + minutes * 60_000 + hours * 3_600_000


def _seconds_ms(m: re.Match) -> int:
    return int(m.group(1)) * 1000 + int(m.group(2)) * 100


def _size(m: re.Match) -> VideoSize:
    return VideoSize(width=int(m.group(1)), height=int(m.group(2)))


_LAYOUT_CHANNELS = {"mono": 1, "stereo": 2, "quad": 4, "5.0": 5, "5.1": 6, "7.1": 8}


def _channels(m: re.Match) -> int:
    if m.group(2):
        return int(m.group(2))
    return _LAYOUT_CHANNELS[m.group(1).lower()]


def _frame_rate(m: re.Match) -> Optional[float]:
    try:
        return float(m.group(1))
    except ValueError:
        return None


# ---- line rules ---------------------------------------------------------------

# " DE mov,mp4,m4a  QuickTime / MOV"
FORMAT_LINE: Rule[FormatEntry] = Rule(
    "format_line", _compile(r"\s*([D ])([E ])\s+([\w,]+)\s+.+"), _format_entry,
)

# " DEA    aac  Advanced Audio Coding", " D V D  4xm  4X Movie" (classic),
# " DEA.L. aac  AAC" (newer) or " D   A  aac  AAC" (kind set apart from the flags):
# decode flag, encode flag, kind letter, up to three more flag columns, name.
CODEC_LINE: Rule[CodecEntry] = Rule(
    "codec_line",
    _compile(r"\s*([D. ])([E. ])\s*([AVSDT])(?:[ SDTIL.]{3}|\S{0,3})\s+(\S+)(?:\s+.*)?"),
    _codec_entry,
)

# " D..... = Decoding supported" / " -------" printed between a listing header and its entries
LISTING_LEGEND: Rule[bool] = Rule(
    "listing_legend", _compile(r"\s*(?:[A-Z.]+\s+=\s+.*|-+)\s*"), lambda m: True,
)

# "Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'clip.mp4':"
CONTAINER_BANNER: Rule[str] = Rule(
    "container_banner", _compile(r"\s*Input #0, ([\w,]+).+\s*"), lambda m: m.group(1).strip(","),
)

# "  Duration: 00:06:14.84, start: 0.000000, bitrate: 481 kb/s"
DURATION: Rule[int] = Rule(
    "duration", _compile(r"\s*Duration: (\d\d):(\d\d):(\d\d)\.(\d).*"), _duration_ms,
)

# "    Stream #0:0: Video: wmv2 (WMV2 / 0x32564D57), yuv420p, 320x240, 11.92 fps"
STREAM_SPEC: Rule[StreamSpec] = Rule(
    "stream_spec",
    _compile(r"\s*Stream #\S+: ((?:Audio)|(?:Video)|(?:Data)): (.*?)\s*"),
    lambda m: StreamSpec(kind=m.group(1), specs=m.group(2)),
)

STREAM_SPEC_ANY: Rule[StreamSpec] = Rule(
    "stream_spec_any",
    _compile(r"\s*Stream #\S+: ((?:Audio)|(?:Video)|(?:Data)|(?:Subtitle)|(?:Attachment)): (.*?)\s*"),
    lambda m: StreamSpec(kind=m.group(1), specs=m.group(2)),
)

# "  Metadata:", "  Chapters:", "      handler_name    : VideoHandler"
BANNER_BLOCK_LINE: Rule[bool] = Rule(
    "banner_block_line",
    _compile(r"\s*(?:Metadata|Chapters|Side data):\s*|\s{4,}\S.*"),
    lambda m: True,
)

# "video:21518kB audio:5336kB subtitle:0kB other streams:0kB global headers:0kB muxing overhead: 0.72%"
SUCCESS_SUMMARY: Rule[bool] = Rule(
    "success_summary",
    _compile(r"\s*video:\S+\s+audio:\S+.*\s+global headers:\S+.*"),
    lambda m: True,
)

# same, prefixed by the muxer tag: "[out#0/mp4 @ 0x55d0c8] video:100kB audio:20kB ..."
SUCCESS_SUMMARY_TAGGED: Rule[bool] = Rule(
    "success_summary_tagged",
    _compile(r"\s*(?:\[[^\]]+\]\s*)?video:\S+\s+audio:\S+.*\s+global headers:\S+.*"),
    lambda m: True,
)

# "[libx264 @ 0x7fa24380b200] profile High, level 2.2", "[vost#0:0/libx264 @ 0x5581] ..."
TAGGED_LOG_LINE: Rule[str] = Rule(
    "tagged_log_line", _compile(r"\[([^\]@]+?) @ [^\]]+\].*"), lambda m: m.group(1).strip(),
)

# value of "time=" in a progress line: "374.8" (classic) or "00:06:14.84" (newer)
SECONDS_TIME: Rule[int] = Rule("seconds_time", _compile(r"(\d+)\.(\d)"), _seconds_ms)
CLOCK_TIME: Rule[int] = Rule("clock_time", _compile(r"(\d+):(\d\d):(\d\d)\.(\d+)"), _clock_ms)

# ---- token rules (searched inside one comma-separated stream token) ----------

SIZE: Rule[VideoSize] = Rule("size", _compile(r"(\d+)x(\d+)"), _size, whole_line=False)
FRAME_RATE: Rule[Optional[float]] = Rule(
    "frame_rate", _compile(r"([\d.]+)\s+(?:fps|tb\(r\))"), _frame_rate, whole_line=False,
)
BIT_RATE: Rule[int] = Rule("bit_rate", _compile(r"(\d+)\s+kb/s"), lambda m: int(m.group(1)), whole_line=False)
SAMPLING_RATE: Rule[int] = Rule(
    "sampling_rate", _compile(r"(\d+)\s+Hz"), lambda m: int(m.group(1)), whole_line=False,
)
CHANNELS: Rule[int] = Rule(
    "channels",
    _compile(r"\b(mono|stereo|quad|(\d+) channels|5\.0|5\.1|7\.1)"),
    _channels,
    whole_line=False,
)

# ---- progress -----------------------------------------------------------------

_PROGRESS_PAIR = _compile(r"\s*(\w+)\s*=\s*(\S+)\s*")


def parse_progress_pairs(line: str) -> Optional[Dict[str, str]]:
    """
    "frame=  65 fps=0.0 q=26.0 size=  107kB time=5.34 bitrate= 164.7kbits/s"
    -> {"frame": "65", "fps": "0.0", ...}. None when the line holds no pair at all.
    """
    table: Dict[str, str] = {}
    for m in _PROGRESS_PAIR.finditer(line):
        table[m.group(1)] = m.group(2)
    return table or None


# ---- per-call rules -----------------------------------------------------------

def input_error_message(line: str, source_path: str) -> Optional[str]:
    """ffmpeg echoes "<path>: <reason>" when it cannot open or decode the input."""
    token = f"{source_path}: "
    if line.startswith(token):
        return line[len(token):]
    return None


def is_diagnostic(line: str, tags: Sequence[str]) -> bool:
    return any(line.startswith(t) for t in tags)


RULES: Mapping[str, Rule[Any]] = MappingProxyType({
    r.name: r
    for r in (
        FORMAT_LINE, CODEC_LINE, LISTING_LEGEND, CONTAINER_BANNER, DURATION,
        STREAM_SPEC, STREAM_SPEC_ANY, BANNER_BLOCK_LINE, SUCCESS_SUMMARY,
        SUCCESS_SUMMARY_TAGGED, TAGGED_LOG_LINE, SECONDS_TIME, CLOCK_TIME, SIZE, FRAME_RATE,
        BIT_RATE, SAMPLING_RATE, CHANNELS,
    )
})
