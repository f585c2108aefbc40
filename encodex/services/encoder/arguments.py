# encodex/services/encoder/arguments.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from encodex.domain.entities.encoding import AudioAttributes, EncodingAttributes, VideoAttributes
from encodex.domain.errors import InvalidAttributesError


def _num(value: float) -> str:
    """Seconds as ffmpeg reads them; whole numbers keep one decimal ("5.0")."""
    return repr(float(value))


def validate_attributes(attributes: EncodingAttributes) -> None:
    if attributes.video is None and attributes.audio is None:
        raise InvalidAttributesError("Both audio and video attributes are null")
    if not attributes.format:
        raise InvalidAttributesError("Output format is required")


def video_args(video: Optional[VideoAttributes]) -> List[str]:
    if video is None:
        return ["-vn"]
    args: List[str] = []
    if video.codec is not None:
        args += ["-vcodec", video.codec]
    if video.tag is not None:
        args += ["-vtag", video.tag]
    if video.bit_rate is not None:
        args += ["-b", str(int(video.bit_rate))]
    if video.frame_rate is not None:
        args += ["-r", str(int(video.frame_rate))]
    if video.size is not None:
        args += ["-s", f"{video.size.width}x{video.size.height}"]
    if video.pix_format is not None:
        args += ["-pix_fmt", video.pix_format]
    if video.gop_size is not None:
        args += ["-g", video.gop_size]
    if video.keyint_min is not None:
        args += ["-keyint_min", video.keyint_min]
    if video.sc_threshold is not None:
        args += ["-sc_threshold", video.sc_threshold]
    return args


def audio_args(audio: Optional[AudioAttributes]) -> List[str]:
    if audio is None:
        return ["-an"]
    args: List[str] = []
    if audio.codec is not None:
        args += ["-acodec", audio.codec]
    if audio.bit_rate is not None:
        args += ["-ab", str(int(audio.bit_rate))]
    if audio.channels is not None:
        args += ["-ac", str(int(audio.channels))]
    if audio.sampling_rate is not None:
        args += ["-ar", str(int(audio.sampling_rate))]
    if audio.volume is not None:
        args += ["-vol", str(int(audio.volume))]
    return args


def build_encode_args(source: Path, target: Path, attributes: EncodingAttributes) -> List[str]:
    """
    ffmpeg argv (without the binary) for one encode. Order is fixed:
    seek, input, duration limit, video, audio, qscale/strict, format, overwrite, output.
    """
    validate_attributes(attributes)
    args: List[str] = []
    if attributes.offset is not None:
        args += ["-ss", _num(attributes.offset)]
    args += ["-i", str(source)]
    if attributes.duration is not None:
        args += ["-t", _num(attributes.duration)]
    args += video_args(attributes.video)
    args += audio_args(attributes.audio)
    if attributes.qscale is not None:
        args += ["-qscale", attributes.qscale]
    if attributes.strict is not None:
        args += ["-strict", attributes.strict]
    args += ["-f", str(attributes.format), "-y", str(target)]
    return args


def build_frame_args(source: Path, target: Path, offset: float) -> List[str]:
    """Single image at `offset` seconds (truncated to whole seconds)."""
    return ["-i", str(source), "-y", "-f", "image2", "-ss", str(int(offset)), "-t", "0.001", str(target)]


def build_probe_args(source: Path) -> List[str]:
    return ["-i", str(source)]
