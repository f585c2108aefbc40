# encodex/services/encoder/encoder.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from encodex.common.io.line_reader import PushbackLineReader
from encodex.common.logging import get_logger
from encodex.common.settings import Settings, get_settings
from encodex.domain.entities.encoding import EncodingAttributes
from encodex.domain.entities.media_info import MediaInfo
from encodex.domain.enums.capability import CapabilityKind
from encodex.domain.ports.listener import EncoderProgressListener
from encodex.domain.ports.process import ProcessPort
from encodex.domain.ports.probe import MediaProbePort
from encodex.services.encoder.arguments import (
    build_encode_args,
    build_frame_args,
    build_probe_args,
    validate_attributes,
)
from encodex.services.parsing import capabilities
from encodex.services.parsing.media_info_parser import MediaInfoParser
from encodex.services.parsing.progress_tracker import EncodeProgressTracker
from encodex.services.process.ffmpeg_executor import FFmpegExecutor, running

logger = get_logger(__name__)


class Encoder(MediaProbePort):
    """
    Public entry point: asks ffmpeg what it supports, probes files, encodes and
    grabs single frames. Every call launches its own ffmpeg through the process
    port and releases it before returning, on success or error.
    """

    def __init__(self, process: Optional[ProcessPort] = None, *, settings: Optional[Settings] = None) -> None:
        self.cfg = settings or get_settings()
        self._process = process

    @property
    def process(self) -> ProcessPort:
        # created on first use so that a missing binary only fails calls that need it
        if self._process is None:
            self._process = FFmpegExecutor()
        return self._process

    def _reader(self, stream) -> PushbackLineReader:
        return PushbackLineReader(stream, encoding=self.cfg.ffmpeg.stream_encoding)

    # ---- capabilities ---------------------------------------------------------

    def list_capabilities(self, kind: CapabilityKind) -> List[str]:
        args = ["-codecs"] if capabilities.is_codec_listing(kind) else ["-formats"]
        with running(self.process, args) as handle:
            return capabilities.collect(kind, self._reader(handle.stdout))

    def list_audio_decoders(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.audio_decoders)

    def list_audio_encoders(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.audio_encoders)

    def list_video_decoders(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.video_decoders)

    def list_video_encoders(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.video_encoders)

    def list_supported_encoding_formats(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.encoding_formats)

    def list_supported_decoding_formats(self) -> List[str]:
        return self.list_capabilities(CapabilityKind.decoding_formats)

    # ---- probe ----------------------------------------------------------------

    def probe(self, path: Path | str) -> MediaInfo:
        source = Path(path).absolute()
        with running(self.process, build_probe_args(source)) as handle:
            parser = MediaInfoParser(str(source), modern_output=self.cfg.ffmpeg.modern_output)
            return parser.parse(self._reader(handle.stderr))

    # ---- encode ---------------------------------------------------------------

    def encode(
        self,
        source: Path | str,
        target: Path | str,
        attributes: EncodingAttributes,
        listener: Optional[EncoderProgressListener] = None,
    ) -> None:
        validate_attributes(attributes)
        source = Path(source).absolute()
        target = Path(target).absolute()
        target.parent.mkdir(parents=True, exist_ok=True)

        ff = self.cfg.ffmpeg
        with running(self.process, build_encode_args(source, target, attributes)) as handle:
            reader = self._reader(handle.stderr)
            info = MediaInfoParser(str(source), modern_output=ff.modern_output).parse(reader)
            target_ms = attributes.target_duration_ms(info.duration_ms)
            if target_ms <= 0:
                logger.warning("Target duration %d ms for %s; no progress will be reported", target_ms, source)
            if listener is not None:
                listener.source_info(info)
            tracker = EncodeProgressTracker(
                target_ms,
                listener,
                diagnostic_tags=ff.diagnostic_tag_list,
                modern_output=ff.modern_output,
            )
            tracker.run(reader)
        logger.info("Encoded %s -> %s", source, target)

    # ---- single frame ---------------------------------------------------------

    def extract_frame(self, source: Path | str, target: Path | str, offset: float) -> None:
        source = Path(source).absolute()
        if not source.exists():
            raise FileNotFoundError(str(source))
        target = Path(target).absolute()
        target.parent.mkdir(parents=True, exist_ok=True)

        with running(self.process, build_frame_args(source, target, offset)) as handle:
            for line in self._reader(handle.stderr):
                logger.debug("ffmpeg: %s", line)
