from pathlib import Path

import pytest

from encodex.domain.entities.encoding import AudioAttributes, EncodingAttributes, VideoAttributes
from encodex.domain.enums import CapabilityKind
from encodex.domain.errors import EncoderProtocolError, InputFormatError, InvalidAttributesError
from encodex.services.encoder.encoder import Encoder


class _RecordingListener:
    def __init__(self):
        self.calls = []

    def source_info(self, info):
        self.calls.append(("source_info", info))

    def message(self, message):
        self.calls.append(("message", message))

    def progress(self, permille):
        self.calls.append(("progress", permille))


def test_list_capabilities_reads_stdout(fake_port):
    fake_port.stdout = "Codecs:\n DEA    aac             Advanced Audio Coding\n  EV    libx264         libx264\n"
    enc = Encoder(fake_port)

    assert enc.list_audio_encoders() == ["aac"]
    assert enc.list_video_encoders() == ["libx264"]
    assert enc.list_video_decoders() == []
    assert fake_port.calls == [["-codecs"], ["-codecs"], ["-codecs"]]
    assert len(fake_port.destroyed) == 3


def test_list_formats_uses_formats_flag(fake_port):
    fake_port.stdout = "File formats:\n DE avi             AVI format\n  E mp3             MPEG audio layer 3\n"
    enc = Encoder(fake_port)

    assert enc.list_supported_encoding_formats() == ["avi", "mp3"]
    assert enc.list_supported_decoding_formats() == ["avi"]
    assert enc.list_capabilities(CapabilityKind.decoding_formats) == ["avi"]
    assert fake_port.calls[0] == ["-formats"]


def test_probe(fake_port, probe_transcript, tmp_path):
    src = tmp_path / "clip.mp4"
    fake_port.stderr = probe_transcript(str(src))
    info = Encoder(fake_port).probe(src)

    assert fake_port.calls == [["-i", str(src)]]
    assert info.duration_ms == 90_500
    assert info.audio.channels == 2
    assert len(fake_port.destroyed) == 1


def test_probe_failure_still_destroys(fake_port, tmp_path):
    src = tmp_path / "broken.avi"
    fake_port.stderr = f"ffmpeg version 0.6.1\n{src}: Invalid data found when processing input\n"
    with pytest.raises(InputFormatError):
        Encoder(fake_port).probe(src)
    assert len(fake_port.destroyed) == 1


def test_encode_reports_to_listener_in_order(fake_port, encode_transcript, tmp_path):
    src = tmp_path / "in.wmv"
    dst = tmp_path / "out" / "out.flv"
    fake_port.stderr = encode_transcript(str(src), str(dst))
    listener = _RecordingListener()
    attrs = EncodingAttributes(format="flv", video=VideoAttributes(codec="flv"), audio=AudioAttributes(codec="libmp3lame"))

    Encoder(fake_port).encode(src, dst, attrs, listener)

    assert dst.parent.is_dir()
    assert fake_port.calls[0][-3:] == ["flv", "-y", str(dst)]
    kinds = [c[0] for c in listener.calls]
    assert kinds[0] == "source_info"
    assert kinds.count("source_info") == 1
    assert listener.calls[0][1].duration_ms == 374_800
    assert [c[1] for c in listener.calls if c[0] == "progress"] == [250, 500, 1000]
    assert len(fake_port.destroyed) == 1


def test_encode_offset_shortens_target(fake_port, encode_transcript, tmp_path):
    src = tmp_path / "in.wmv"
    fake_port.stderr = encode_transcript(str(src), str(tmp_path / "o.flv"))
    listener = _RecordingListener()
    attrs = EncodingAttributes(format="flv", offset=187.4, audio=AudioAttributes())

    Encoder(fake_port).encode(src, tmp_path / "o.flv", attrs, listener)

    # 187400 ms left after the offset; 374.8 s of output clamps at 1000
    assert [c[1] for c in listener.calls if c[0] == "progress"] == [500, 1000, 1000]


def test_encode_invalid_attributes_never_launches(fake_port, tmp_path):
    with pytest.raises(InvalidAttributesError):
        Encoder(fake_port).encode(tmp_path / "a.avi", tmp_path / "b.flv", EncodingAttributes(format="flv"))
    assert fake_port.calls == []
    assert fake_port.destroyed == []


def test_encode_failure_destroys_process(fake_port, tmp_path):
    src = tmp_path / "in.avi"
    fake_port.stderr = (
        f"Input #0, avi, from '{src}':\n"
        "  Duration: 00:00:10.0, start: 0.000000, bitrate: 900 kb/s\n"
        "    Stream #0.0: Video: mpeg4, yuv420p, 640x480, 25 tbr\n"
        "Unknown encoder 'libfoo'\n"
    )
    attrs = EncodingAttributes(format="mp4", video=VideoAttributes(codec="libfoo"))
    with pytest.raises(EncoderProtocolError) as ei:
        Encoder(fake_port).encode(src, tmp_path / "out.mp4", attrs)
    assert ei.value.line == "Unknown encoder 'libfoo'"
    assert len(fake_port.destroyed) == 1


def test_encode_killed_mid_progress_fails(fake_port, tmp_path):
    src = tmp_path / "in.avi"
    fake_port.stderr = (
        f"Input #0, avi, from '{src}':\n"
        "  Duration: 00:00:10.0, start: 0.000000\n"
        "Output #0, mp4, to 'out.mp4':\n"
        "Stream mapping:\n"
        "  Stream #0.0 -> #0.0\n"
        "frame=1 time=4.0\n"
    )
    attrs = EncodingAttributes(format="mp4", video=VideoAttributes(codec="mpeg4"))
    with pytest.raises(EncoderProtocolError):
        Encoder(fake_port).encode(src, tmp_path / "out.mp4", attrs)
    assert len(fake_port.destroyed) == 1


def test_extract_frame(fake_port, tmp_path):
    src = tmp_path / "in.mp4"
    src.write_bytes(b"\x00")
    dst = tmp_path / "thumbs" / "x.jpg"

    Encoder(fake_port).extract_frame(src, dst, 3.7)

    assert fake_port.calls == [["-i", str(src), "-y", "-f", "image2", "-ss", "3", "-t", "0.001", str(dst)]]
    assert dst.parent.is_dir()
    assert len(fake_port.destroyed) == 1


def test_extract_frame_missing_source(fake_port, tmp_path):
    with pytest.raises(FileNotFoundError):
        Encoder(fake_port).extract_frame(tmp_path / "nope.mp4", tmp_path / "x.jpg", 0)
    assert fake_port.calls == []


def test_encoder_settings_flow_into_tracker(fake_port, tmp_path, monkeypatch):
    monkeypatch.setenv("FFMPEG__DIAGNOSTIC_TAGS", "[libvpx")
    src = tmp_path / "in.avi"
    fake_port.stderr = (
        f"Input #0, avi, from '{src}':\n"
        "  Duration: 00:00:10.0, start: 0.000000\n"
        "[libvpx @ 0x1] v1.13.0\n"
        "Output #0, webm, to 'x.webm':\n"
        "Stream mapping:\n"
        "  Stream #0.0 -> #0.0\n"
        "frame=1 time=10.0\n"
        "video:100kB audio:0kB global headers:0kB muxing overhead 1.2%\n"
    )
    listener = _RecordingListener()
    attrs = EncodingAttributes(format="webm", video=VideoAttributes(codec="libvpx"))
    Encoder(fake_port).encode(src, tmp_path / "x.webm", attrs, listener)
    assert ("message", "[libvpx @ 0x1] v1.13.0") in listener.calls
    assert ("progress", 1000) in listener.calls
