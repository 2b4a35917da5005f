"""
engine.py

Tesseract recognition wrapper scoped to a single extraction.

A RecognitionSession is bound to one language and one tessdata
directory, processes exactly one raster, and releases everything it
acquired (decoded raster, preprocessed copy) when the ``with`` block
exits, whether recognition succeeded or not. Nothing is cached across
calls: Tesseract runs as a fresh process for every page.
"""

import logging
import os
from contextlib import ExitStack
from typing import Any, Dict, List, Optional, Tuple

import pytesseract
from PIL import Image

from . import config
from .layout import assemble_text
from .preprocessor import preprocess_image
from .schemas import LEVEL_WORD, LayoutElement, PageResult
from .utils import (
    DecodeFailure,
    OCRFileError,
    OCRSecurityError,
    ResourceInitFailure,
    load_image,
)

logger = logging.getLogger(__name__)

# Fragments of Tesseract's stderr that mean the language data is unusable
_RESOURCE_ERROR_MARKERS = (
    "Failed loading language",
    "Error opening data file",
    "Could not initialize tesseract",
)


class RecognitionSession:
    """
    One Tesseract recognition pass for one raster.

    Usage::

        with RecognitionSession(tessdata_dir) as session:
            page = session.process_file("scan.png")
    """

    def __init__(
        self,
        tessdata_dir: str,
        language: str = config.OCR_LANGUAGE,
        extra_config: Optional[str] = None,
        preprocess: Optional[bool] = None,
    ):
        self.tessdata_dir = tessdata_dir
        self.language = language
        self.extra_config = (
            config.TESSERACT_EXTRA_CONFIG if extra_config is None else extra_config
        )
        self.preprocess = (
            config.ENABLE_PREPROCESSING if preprocess is None else preprocess
        )
        self._resources: Optional[ExitStack] = None
        self._used = False

    def __enter__(self) -> "RecognitionSession":
        self._check_language_data()
        if config.TESSERACT_CMD:
            pytesseract.pytesseract.tesseract_cmd = config.TESSERACT_CMD
        self._resources = ExitStack()
        logger.debug("Recognition session opened (lang=%s)", self.language)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._resources is not None:
            self._resources.close()
            self._resources = None
        logger.debug("Recognition session closed")

    def _check_language_data(self) -> None:
        if not os.path.isdir(self.tessdata_dir):
            raise ResourceInitFailure(
                f"Language data directory not found: {self.tessdata_dir}"
            )
        traineddata = os.path.join(self.tessdata_dir, f"{self.language}.traineddata")
        if not os.path.isfile(traineddata):
            raise ResourceInitFailure(
                f"Language data for '{self.language}' not found in {self.tessdata_dir}"
            )

    def _own(self, image: Image.Image) -> Image.Image:
        """Register an image to be closed when the session ends."""
        if self._resources is None:
            raise RuntimeError("RecognitionSession used outside of a with block")
        self._resources.callback(image.close)
        return image

    def engine_config(self) -> str:
        parts = [f'--tessdata-dir "{self.tessdata_dir}"']
        if self.extra_config:
            parts.append(self.extra_config)
        return " ".join(parts)

    def process_file(self, image_path: str) -> PageResult:
        """Decode ``image_path`` and recognise it. The raster is owned by the session."""
        if self._resources is None:
            raise RuntimeError("RecognitionSession used outside of a with block")
        try:
            raster = load_image(image_path)
        except (OCRFileError, OCRSecurityError) as e:
            raise DecodeFailure(str(e)) from e
        return self.process(self._own(raster))

    def process(self, raster: Image.Image) -> PageResult:
        """
        Run Tesseract over a decoded raster.

        The raster is borrowed read-only; a preprocessed copy, if any,
        belongs to the session.

        Raises:
            ResourceInitFailure: Tesseract or its language data is unusable.
            DecodeFailure: Tesseract could not process the raster.
        """
        if self._resources is None:
            raise RuntimeError("RecognitionSession used outside of a with block")
        if self._used:
            raise RuntimeError("RecognitionSession already processed a raster")
        self._used = True

        image = raster
        if self.preprocess:
            image = self._own(preprocess_image(raster))
            logger.info("Preprocessing applied")

        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=self.engine_config(),
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractNotFoundError as e:
            raise ResourceInitFailure(
                "Tesseract is not installed or it's not in your PATH"
            ) from e
        except pytesseract.TesseractError as e:
            message = str(getattr(e, "message", "") or e)
            if any(marker in message for marker in _RESOURCE_ERROR_MARKERS):
                raise ResourceInitFailure(message) from e
            raise DecodeFailure(f"Tesseract could not process the image: {message}") from e
        except (OSError, ValueError) as e:
            raise DecodeFailure(f"Could not process the image: {e}") from e

        layout = _parse_layout(data)
        page = PageResult(
            full_text=assemble_text(row for row in layout if row.level == LEVEL_WORD),
            mean_confidence=_compute_mean_confidence(layout),
            layout=layout,
        )

        logger.info(
            "Recognised %d layout rows, mean confidence %.2f",
            len(layout),
            page.mean_confidence,
        )
        return page


def process(
    raster: Image.Image,
    language: str = config.OCR_LANGUAGE,
    tessdata_dir: Optional[str] = None,
) -> PageResult:
    """Recognise one raster in a session of its own."""
    if tessdata_dir is None:
        tessdata_dir = config.TESSDATA_DIR
    with RecognitionSession(tessdata_dir, language=language) as session:
        return session.process(raster)


def _parse_layout(data: Dict[str, List[Any]]) -> Tuple[LayoutElement, ...]:
    """Convert pytesseract's column dict into LayoutElement rows, keeping order."""
    rows = []
    for i in range(len(data.get("level", []))):
        rows.append(
            LayoutElement(
                level=int(data["level"][i]),
                block_num=int(data["block_num"][i]),
                par_num=int(data["par_num"][i]),
                line_num=int(data["line_num"][i]),
                word_num=int(data["word_num"][i]),
                bbox=(
                    int(data["left"][i]),
                    int(data["top"][i]),
                    int(data["width"][i]),
                    int(data["height"][i]),
                ),
                confidence=_parse_confidence(data["conf"][i]),
                text=str(data["text"][i] or ""),
            )
        )
    return tuple(rows)


def _parse_confidence(value: Any) -> float:
    # Tesseract emits ints, floats or strings depending on version; -1 marks non-words
    try:
        return float(value)
    except (TypeError, ValueError):
        return -1.0


def _compute_mean_confidence(layout: Tuple[LayoutElement, ...]) -> float:
    """
    Mean word confidence on a 0..1 scale.

    Only recognised words count (confidence >= 0 and non-blank text);
    a page without any yields 0.0.
    """
    confidences = [
        row.confidence
        for row in layout
        if row.level == LEVEL_WORD and row.confidence >= 0 and row.text.strip()
    ]
    if not confidences:
        return 0.0
    return sum(confidences) / len(confidences) / 100.0
