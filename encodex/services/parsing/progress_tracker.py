# encodex/services/parsing/progress_tracker.py
from __future__ import annotations

import math
from enum import IntEnum
from typing import Callable, Dict, Optional, Sequence

from encodex.common.io.line_reader import PushbackLineReader
from encodex.common.logging import get_logger
from encodex.domain.errors import EncoderProtocolError
from encodex.domain.ports.listener import EncoderProgressListener
from encodex.services.parsing import patterns as p

logger = get_logger(__name__)

WARNING_PREFIXES = ("WARNING:", "Please")
OUTPUT_BANNER = "Output #0"
STREAM_MAPPING = "Stream mapping:"
PRESS_KEY_HINT = "Press [q]"
INDENT = "  "
# Besides warnings, what ffmpeg may print between the input banner and "Output #0".
PRE_OUTPUT_ACCEPTED = ("  Metadata:", "  Duration:", "    ")


class EncodeState(IntEnum):
    PRE_OUTPUT = 0
    OUTPUT_METADATA = 1
    MAPPING_HEADER = 2
    MAPPING_BODY = 3
    PROGRESS = 4
    FINISHED = 5


def compute_permille(elapsed_ms: int, target_ms: int) -> int:
    """round(elapsed * 1000 / target), half-up, capped at 1000. `target_ms` must be > 0."""
    perm = int(math.floor(elapsed_ms * 1000.0 / target_ms + 0.5))
    return min(perm, 1000)


class EncodeProgressTracker:
    """
    Follows an encode through what ffmpeg prints after the input banner:

        warnings / output banner -> output metadata -> "Stream mapping:" ->
        mapping body -> "frame=... time=..." progress lines -> summary line

    Each state is a single-line step that returns True when it consumed the
    line; a step returning False has moved the state forward and the same line
    is handed to the next state in the same iteration. States never go back.
    """

    def __init__(
        self,
        target_duration_ms: int,
        listener: Optional[EncoderProgressListener] = None,
        *,
        diagnostic_tags: Sequence[str] = ("[libx264",),
        modern_output: bool = False,
    ) -> None:
        self.target_duration_ms = target_duration_ms
        self.listener = listener
        self.diagnostic_tags = tuple(diagnostic_tags)
        self.modern_output = modern_output
        self.state = EncodeState.PRE_OUTPUT
        self.last_message: Optional[str] = None
        self.last_permille: Optional[int] = None
        self._mapping_seen = False

        self._success_rule = p.SUCCESS_SUMMARY_TAGGED if modern_output else p.SUCCESS_SUMMARY
        self._steps: Dict[EncodeState, Callable[[str], bool]] = {
            EncodeState.PRE_OUTPUT: self._pre_output,
            EncodeState.OUTPUT_METADATA: self._output_metadata,
            EncodeState.MAPPING_HEADER: self._mapping_header,
            EncodeState.MAPPING_BODY: self._mapping_body,
            EncodeState.PROGRESS: self._progress,
            EncodeState.FINISHED: self._finished,
        }

    @property
    def finished(self) -> bool:
        return self.state is EncodeState.FINISHED

    # ---- driving --------------------------------------------------------------

    def run(self, reader: PushbackLineReader) -> None:
        """Consume the reader to EOF, then decide success or raise."""
        while True:
            line = reader.read_line()
            if line is None:
                break
            self.feed(line)
        self.close()

    def feed(self, line: str) -> None:
        if self.state is not EncodeState.FINISHED:
            logger.debug("ffmpeg: %s", line)
        while not self._steps[self.state](line):
            pass

    def close(self) -> None:
        """
        End of stream. Success needs the summary line, or an encoder diagnostic
        as the last thing ffmpeg said; a run cut off mid-progress is a failure.
        """
        if self.state is EncodeState.FINISHED:
            return
        last = self.last_message
        if self.state is EncodeState.PROGRESS and last is not None:
            if self._success_rule.matches(last) or p.is_diagnostic(last, self.diagnostic_tags):
                return
            logger.warning("ffmpeg failed: %s", last)
            raise EncoderProtocolError(last, line=last)
        logger.warning("ffmpeg output ended in state %s", self.state.name)
        raise EncoderProtocolError(f"Unexpected end of ffmpeg output ({self.state.name.lower()})", line=last)

    # ---- steps ----------------------------------------------------------------

    def _pre_output(self, line: str) -> bool:
        if line.startswith(WARNING_PREFIXES) or p.is_diagnostic(line, self.diagnostic_tags):
            self._message(line)
        elif line.startswith(OUTPUT_BANNER):
            self.state = EncodeState.OUTPUT_METADATA
        elif line.startswith(PRE_OUTPUT_ACCEPTED):
            pass
        elif self.modern_output and self._early_mapping(line):
            pass
        else:
            raise EncoderProtocolError(line, line=line)
        return True

    def _early_mapping(self, line: str) -> bool:
        # newer ffmpeg prints "Stream mapping:" and "Press [q]..." before "Output #0"
        if line.startswith(STREAM_MAPPING):
            self._mapping_seen = True
            return True
        if self._mapping_seen and line.startswith(INDENT):
            return True
        if line.startswith(PRESS_KEY_HINT) or p.TAGGED_LOG_LINE.matches(line):
            self._message(line)
            return True
        return False

    def _output_metadata(self, line: str) -> bool:
        if line.startswith(INDENT):
            return True
        self.state = EncodeState.PROGRESS if self._mapping_seen else EncodeState.MAPPING_HEADER
        return False

    def _mapping_header(self, line: str) -> bool:
        if not line.startswith(STREAM_MAPPING):
            raise EncoderProtocolError(line, line=line)
        self.state = EncodeState.MAPPING_BODY
        return True

    def _mapping_body(self, line: str) -> bool:
        if line.startswith(INDENT):
            return True
        self.state = EncodeState.PROGRESS
        return False

    def _progress(self, line: str) -> bool:
        line = line.strip()
        if not line:
            return True
        table = p.parse_progress_pairs(line)
        if table is None:
            self._message(line)
            self.last_message = line
            if self._success_rule.matches(line):
                # what follows is the encoders' own statistics dump
                self.state = EncodeState.FINISHED
            return True
        self._report_time(table.get("time"))
        self.last_message = None
        return True

    def _finished(self, line: str) -> bool:
        logger.debug("ffmpeg (trailer): %s", line)
        return True

    # ---- helpers --------------------------------------------------------------

    def elapsed_ms(self, time_value: Optional[str]) -> Optional[int]:
        if not time_value:
            return None
        elapsed = p.SECONDS_TIME.match(time_value)
        if elapsed is None and self.modern_output:
            elapsed = p.CLOCK_TIME.match(time_value)
        return elapsed

    def _report_time(self, time_value: Optional[str]) -> None:
        elapsed = self.elapsed_ms(time_value)
        if elapsed is None or self.target_duration_ms <= 0:
            return
        perm = compute_permille(elapsed, self.target_duration_ms)
        self.last_permille = perm
        if self.listener is not None:
            self.listener.progress(perm)

    def _message(self, line: str) -> None:
        if self.listener is not None:
            self.listener.message(line)
