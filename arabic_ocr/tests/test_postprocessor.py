"""
Tests for segment formatting and confidence scoring.
"""

import re

import pytest

from arabic_ocr.postprocessor import format_segments, score_confidence, segment_header
from arabic_ocr.schemas import BlockSpan, PageResult


class TestFormatSegments:
    def test_two_segments(self):
        spans = [BlockSpan(index=1, text="A"), BlockSpan(index=2, text="B")]
        assert format_segments(spans) == (
            "═══ Segment 1 ═══\nA\n\n═══ Segment 2 ═══\nB\n\n"
        )

    def test_empty_input(self):
        assert format_segments([]) == ""

    def test_accepts_generator(self):
        spans = (BlockSpan(index=i, text=f"نص {i}") for i in range(1, 4))
        assert format_segments(spans).count("Segment") == 3

    def test_headers_are_contiguous(self):
        spans = [BlockSpan(index=i, text=t) for i, t in enumerate(["أ", "ب", "ج", "د"], start=1)]
        numbers = re.findall(r"^═══ Segment (\d+) ═══$", format_segments(spans), flags=re.M)
        assert numbers == ["1", "2", "3", "4"]

    def test_multiline_text_kept(self):
        spans = [BlockSpan(index=1, text="سطر\nسطر")]
        assert format_segments(spans) == "═══ Segment 1 ═══\nسطر\nسطر\n\n"

    def test_header(self):
        assert segment_header(7) == "═══ Segment 7 ═══"


class TestScoreConfidence:
    @pytest.mark.parametrize("mean", [0.0, 0.25, 0.873, 1.0])
    def test_scales_to_percent(self, mean):
        page = PageResult(mean_confidence=mean)
        assert score_confidence(page) == mean * 100

    def test_clamps_above_one(self):
        assert score_confidence(PageResult(mean_confidence=1.7)) == 100.0

    def test_clamps_negative(self):
        assert score_confidence(PageResult(mean_confidence=-0.2)) == 0.0

    def test_nan_is_zero(self):
        assert score_confidence(PageResult(mean_confidence=float("nan"))) == 0.0
