"""
schemas.py

Pydantic models shared by the engine, the layout walker and the pipeline.
All models are frozen: a page result is produced once per recognition
session and only read afterwards.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from . import config

# Tesseract layout levels as reported in image_to_data output
LEVEL_PAGE = 1
LEVEL_BLOCK = 2
LEVEL_PARAGRAPH = 3
LEVEL_LINE = 4
LEVEL_WORD = 5


class LayoutElement(BaseModel):
    """One row of the engine's hierarchical layout output."""

    model_config = ConfigDict(frozen=True)

    level: int
    block_num: int = 0
    par_num: int = 0
    line_num: int = 0
    word_num: int = 0
    bbox: Tuple[int, int, int, int] = (0, 0, 0, 0)  # left, top, width, height
    confidence: float = -1.0  # 0..100, -1 for non-word rows
    text: str = ""


class PageResult(BaseModel):
    """
    Engine output for one processed raster.

    ``layout`` is None when the engine produced no traversable layout.
    """

    model_config = ConfigDict(frozen=True)

    full_text: str = ""
    mean_confidence: float = 0.0
    layout: Optional[Tuple[LayoutElement, ...]] = ()


class BlockSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1)
    text: str = Field(min_length=1)


class ExtractionResult(BaseModel):
    """
    Terminal value handed back to the caller.

    ``display_text`` is always renderable. Failures are flagged by
    ``error``; the "Error: " prefix in ``display_text`` is for display only.
    """

    model_config = ConfigDict(frozen=True)

    display_text: str
    confidence_percent: float = Field(default=0.0, ge=0.0, le=100.0)
    segment_count: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "ExtractionResult":
        return cls(
            display_text=f"{config.ERROR_PREFIX}{message}",
            confidence_percent=0.0,
            error=message,
        )

