from __future__ import annotations
from enum import StrEnum


class CapabilityKind(StrEnum):
    """Which list the `-codecs` / `-formats` listing is filtered into."""
    audio_decoders = "audio_decoders"
    audio_encoders = "audio_encoders"
    video_decoders = "video_decoders"
    video_encoders = "video_encoders"
    encoding_formats = "encoding_formats"
    decoding_formats = "decoding_formats"
