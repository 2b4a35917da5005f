"""
Arabic OCR extractor

Extracts Arabic text from a scanned document image with Tesseract,
splits it into the engine's layout blocks ("segments") and reports
the page's mean recognition confidence.

Public API:
    extract           - Extract one image; never raises
    DocumentSession   - Load/extract/clear state for interactive callers
    ExtractionResult  - Result model (display text, confidence, error)
    PageResult        - Raw engine output for one page
    BlockSpan         - One numbered, non-empty block
"""

from .ocr_pipeline import DocumentSession, SessionStateError, extract, status_message
from .schemas import BlockSpan, ExtractionResult, LayoutElement, PageResult

__all__ = [
    "extract",
    "status_message",
    "DocumentSession",
    "SessionStateError",
    "ExtractionResult",
    "PageResult",
    "LayoutElement",
    "BlockSpan",
]
