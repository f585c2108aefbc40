# tests/conftest.py
from __future__ import annotations
import io
from dataclasses import dataclass, field
from typing import List, Sequence

import pytest

from encodex.common.settings import get_settings


@dataclass
class FakeHandle:
    stdout: io.BytesIO
    stderr: io.BytesIO


@dataclass
class FakeProcessPort:
    """
    ProcessPort double: every execute() hands back the canned stdout/stderr
    and records the argv; destroy() records the handle it was given.
    """
    stdout: str = ""
    stderr: str = ""
    calls: List[List[str]] = field(default_factory=list)
    destroyed: List[FakeHandle] = field(default_factory=list)

    def execute(self, args: Sequence[str]) -> FakeHandle:
        self.calls.append(list(args))
        return FakeHandle(
            stdout=io.BytesIO(self.stdout.encode("utf-8")),
            stderr=io.BytesIO(self.stderr.encode("utf-8")),
        )

    def destroy(self, handle: FakeHandle) -> None:
        self.destroyed.append(handle)


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_port():
    return FakeProcessPort()


# ---------------------------- canned transcripts ------------------------------

PROBE_BANNER_MP4 = """\
ffmpeg version 0.6.1, Copyright (c) 2000-2010 the FFmpeg developers
  built on Dec 15 2010 15:49:16 with gcc 4.4.5
Input #0, mov,mp4,m4a,3gp,3g2,mj2, from '{src}':
  Duration: 00:01:30.50, start: 0.000000, bitrate: 1320 kb/s
    Stream #0.0(und): Video: h264, yuv420p, 1280x720, 1185 kb/s, 29.97 fps, 29.97 tbr, 30k tbn, 59.94 tbc
    Stream #0.1(und): Audio: aac, 44100 Hz, stereo, s16, 128 kb/s
At least one output file must be specified
"""

ENCODE_WMV_TO_FLV = """\
FFmpeg version SVN-r20438, Copyright (c) 2000-2009 Fabrice Bellard, et al.
  built on Oct 30 2009 16:31:13 with gcc 4.3.2
Input #0, asf, from '{src}':
  Duration: 00:06:14.84, start: 3.000000, bitrate: 481 kb/s
    Stream #0.0: Audio: wmav2, 44100 Hz, stereo, s16, 64 kb/s
    Stream #0.1: Video: wmv2, yuv420p, 320x240, 11.92 tbr, 1k tbn, 1k tbc
Output #0, flv, to '{dst}':
    Stream #0.0: Video: flv, yuv420p, 320x240, q=2-31, 200 kb/s, 90k tbn, 15 tbc
    Stream #0.1: Audio: libmp3lame, 44100 Hz, stereo, s16, 64 kb/s
Stream mapping:
  Stream #0.1 -> #0.0
  Stream #0.0 -> #0.1
Press [q] to stop encoding
frame=   50 fps=  0 q=2.0 size=     205kB time=93.7 bitrate= 179.3kbits/s\r\
frame=  100 fps=  0 q=2.0 size=     410kB time=187.4 bitrate= 179.3kbits/s\r\
frame=  200 fps=  0 q=2.0 size=     820kB time=374.8 bitrate= 179.3kbits/s
video:8209kB audio:2929kB global headers:0kB muxing overhead 0.985052%
"""


@pytest.fixture()
def probe_transcript():
    """Classic `ffmpeg -i clip.mp4` banner (mov/h264/aac, 90.5 s)."""
    def _make(src: str = "/media/in.mp4") -> str:
        return PROBE_BANNER_MP4.format(src=src)
    return _make


@pytest.fixture()
def encode_transcript():
    """Classic wmv -> flv encode, 374.8 s source, ending with the success summary."""
    def _make(src: str = "/media/in.wmv", dst: str = "/media/out.flv") -> str:
        return ENCODE_WMV_TO_FLV.format(src=src, dst=dst)
    return _make
