# encodex/services/parsing/capabilities.py
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

from encodex.domain.enums.capability import CapabilityKind
from encodex.domain.enums.stream_kind import StreamKind
from encodex.services.parsing.patterns import (
    CODEC_LINE,
    FORMAT_LINE,
    LISTING_LEGEND,
    CodecEntry,
    FormatEntry,
    Rule,
)

T = TypeVar("T")

CODECS_HEADER = "Codecs:"
FORMATS_HEADER = "File formats:"


def scan_section(lines: Iterable[str], header: str, rule: Rule[T]) -> List[T]:
    """
    Collect the entries of one `ffmpeg -codecs` / `ffmpeg -formats` section.

    Blank lines are skipped everywhere. Nothing is classified until the literal
    header line shows up; the legend printed right after the header by newer
    builds is skipped; then every line must match `rule` and the first one that
    does not ends the section.
    """
    out: List[T] = []
    inside = False
    started = False
    for line in lines:
        if not line.strip():
            continue
        if not inside:
            inside = line.strip() == header
            continue
        if not started and LISTING_LEGEND.matches(line):
            continue
        entry = rule.match(line)
        if entry is None:
            break
        started = True
        out.append(entry)
    return out


def _codec_names(entries: Iterable[CodecEntry], kind: StreamKind, pick: Callable[[CodecEntry], bool]) -> List[str]:
    return [e.name for e in entries if e.kind == kind and pick(e)]


def _format_names(entries: Iterable[FormatEntry], pick: Callable[[FormatEntry], bool]) -> List[str]:
    res: List[str] = []
    for e in entries:
        if not pick(e):
            continue
        for name in e.names:
            if name not in res:
                res.append(name)
    return res


def is_codec_listing(kind: CapabilityKind) -> bool:
    return kind not in (CapabilityKind.encoding_formats, CapabilityKind.decoding_formats)


def collect(kind: CapabilityKind, lines: Iterable[str]) -> List[str]:
    """Names of one capability set, in first-seen order."""
    if kind is CapabilityKind.encoding_formats:
        return _format_names(scan_section(lines, FORMATS_HEADER, FORMAT_LINE), lambda e: e.encode)
    if kind is CapabilityKind.decoding_formats:
        return _format_names(scan_section(lines, FORMATS_HEADER, FORMAT_LINE), lambda e: e.decode)

    entries = scan_section(lines, CODECS_HEADER, CODEC_LINE)
    stream: Optional[StreamKind] = None
    if kind in (CapabilityKind.audio_decoders, CapabilityKind.audio_encoders):
        stream = StreamKind.audio
    elif kind in (CapabilityKind.video_decoders, CapabilityKind.video_encoders):
        stream = StreamKind.video
    if stream is None:
        raise ValueError(f"Unknown capability kind: {kind!r}")
    if kind in (CapabilityKind.audio_decoders, CapabilityKind.video_decoders):
        return _codec_names(entries, stream, lambda e: e.decode)
    return _codec_names(entries, stream, lambda e: e.encode)
