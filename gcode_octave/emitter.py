from typing import Iterable, Optional, TextIO
import logging

import numpy as np

from .models import Segment

logger = logging.getLogger(__name__)

PLOT_STATEMENT = "plot3( x{0},y{0},z{0}, 'LineWidth', 2); grid on; hold on;"


def format_values(values: np.ndarray, integer: bool = False) -> str:
    """Fixed-point columns (%8.3f, or %8d for integer buffers); NaN/Inf as NaN."""
    out = []
    for v in values:
        if not np.isfinite(v):
            out.append(f"{'NaN':>8}")
        elif integer:
            out.append(f"{int(v):8d}")
        else:
            out.append(f"{v:8.3f}")
    return " ".join(out)


class OctaveEmitter:
    """Writes segments and comments as GNU Octave / MATLAB statements."""

    def __init__(self, stream: TextIO, lnum: bool = False):
        self.stream = stream
        self.lnum = lnum

    def _write(self, text: str):
        self.stream.write(text + "\n")

    def emit_segment(self, segment: Segment):
        label = segment.label
        for tag, values in segment.arrays().items():
            # feed rate 는 정수로 출력
            self._write(f"{tag}{label}=[{format_values(values, integer=(tag == 'f'))}];")
        self._write(PLOT_STATEMENT.format(label))
        logger.debug(f"[Emitter] Segment {label}: {len(segment)} points")

    def emit_comment(self, raw: str, line_number: Optional[int] = None):
        if self.lnum and line_number is not None:
            self._write(f"%{line_number:5d}: {raw}")
        else:
            self._write(f"%{raw}")

    def emit_diagnostic(self, message: str):
        self._write(f"% syntax error: {message}")

    def emit_header(self, lines: Iterable[str]):
        for line in lines:
            self._write(f"% {line}" if line else "%")
