"""
postprocessor.py

Turns recognition output into what the user sees:
- segment formatting of the walked block spans
- the page confidence as a percentage
"""

import logging
import math
from typing import Iterable

from . import config
from .schemas import BlockSpan, PageResult

logger = logging.getLogger(__name__)


def segment_header(index: int) -> str:
    return f"{config.SEGMENT_RULE} {config.SEGMENT_LABEL} {index} {config.SEGMENT_RULE}"


def format_segments(spans: Iterable[BlockSpan]) -> str:
    """
    Render spans as numbered segments.

    Each span becomes its header line, its text and a blank line::

        ═══ Segment 1 ═══
        <text>

    An empty input gives an empty string.
    """
    parts = []
    for span in spans:
        parts.append(f"{segment_header(span.index)}\n{span.text}\n\n")
    return "".join(parts)


def score_confidence(page: PageResult) -> float:
    """
    Page mean confidence as a percentage.

    Tesseract reports confidence on a 0..1 scale here, so the value is
    multiplied by 100. Anything the engine reports outside that range is
    clamped and logged.
    """
    mean = page.mean_confidence
    if math.isnan(mean):
        logger.warning("Engine reported a NaN mean confidence; using 0")
        return 0.0
    if not 0.0 <= mean <= 1.0:
        logger.warning("Engine reported mean confidence %.4f outside [0, 1]; clamping", mean)
        mean = min(max(mean, 0.0), 1.0)
    return mean * 100
