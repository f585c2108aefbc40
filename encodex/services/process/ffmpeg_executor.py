# encodex/services/process/ffmpeg_executor.py
from __future__ import annotations

import shlex
import shutil
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

from encodex.common.logging import get_logger
from encodex.common.settings import get_settings
from encodex.domain.errors import EncoderIOError
from encodex.domain.ports.process import ProcessHandle, ProcessPort

logger = get_logger(__name__)


class FFmpegExecutor(ProcessPort):
    """
    Infrastructure adapter implementing ProcessPort with a local `ffmpeg` binary.
    One Popen per execute(); nothing is shared between calls.
    """

    def __init__(self, ffmpeg_bin: Optional[str] = None, destroy_timeout_sec: Optional[float] = None):
        cfg = get_settings()
        candidate = ffmpeg_bin or cfg.ffmpeg.bin
        if not Path(candidate).is_absolute():
            # resolve absolute path for nicer errors
            resolved = shutil.which(candidate)
            if not resolved:
                raise EncoderIOError(f"{candidate} not found on PATH; set FFMPEG__BIN or install ffmpeg.")
            candidate = resolved

        self.ffmpeg_bin = candidate
        self.destroy_timeout_sec = float(destroy_timeout_sec or cfg.ffmpeg.destroy_timeout_sec)

    # ---- Port API -------------------------------------------------------------
    def execute(self, args: Sequence[str]) -> ProcessHandle:
        cmd = [self.ffmpeg_bin, *args]
        logger.info("ffmpeg cmd: %s", " ".join(shlex.quote(a) for a in cmd))
        try:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise EncoderIOError(f"Failed to execute ffmpeg (OS error): {e}") from e

    def destroy(self, handle: ProcessHandle) -> None:
        proc = handle
        if not isinstance(proc, subprocess.Popen):
            raise TypeError(f"FFmpegExecutor cannot destroy {type(handle)!r}")
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=self.destroy_timeout_sec)
            except subprocess.TimeoutExpired:
                logger.warning("ffmpeg pid %s ignored terminate(); killing", proc.pid)
                proc.kill()
                proc.wait()
        for stream in (proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()


@contextmanager
def running(port: ProcessPort, args: Sequence[str]) -> Iterator[ProcessHandle]:
    """Launch through `port` and always destroy the handle, whatever happens inside."""
    handle = port.execute(args)
    try:
        yield handle
    finally:
        port.destroy(handle)
