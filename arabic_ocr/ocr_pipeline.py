"""
ocr_pipeline.py

Main orchestrator for the Arabic OCR extractor.

Coordinates the full pipeline for one image:
recognition -> block walk -> segment formatting -> confidence scoring,
under a single failure boundary. ``extract`` never raises; every failure
comes back as an ExtractionResult carrying the error.

DocumentSession wraps ``extract`` for interactive callers: one loaded
document, at most one extraction in flight, run on a worker thread.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from . import config
from .engine import RecognitionSession
from .layout import walk_blocks
from .postprocessor import format_segments, score_confidence
from .schemas import ExtractionResult
from .utils import sanitize_path, validate_file

logger = logging.getLogger(__name__)


def extract(
    image_path: Union[str, Path],
    tessdata_dir: Optional[str] = None,
    preprocess: Optional[bool] = None,
) -> ExtractionResult:
    """
    Extract segmented Arabic text from a single image.

    Args:
        image_path: Path to a PNG/JPEG/BMP/TIFF image.
        tessdata_dir: Directory holding ``ara.traineddata``.
            Defaults to config.TESSDATA_DIR.
        preprocess: Override config.ENABLE_PREPROCESSING.

    Returns:
        ExtractionResult. On failure ``error`` is set, ``display_text``
        starts with "Error: " and ``confidence_percent`` is 0.
    """
    if tessdata_dir is None:
        tessdata_dir = config.TESSDATA_DIR

    logger.info("Extracting text from %s", image_path)

    try:
        with RecognitionSession(tessdata_dir, preprocess=preprocess) as session:
            page = session.process_file(str(image_path))
            spans = list(walk_blocks(page))
            display_text = format_segments(spans) or page.full_text
            confidence = score_confidence(page)
    except Exception as e:
        message = str(e) or e.__class__.__name__
        logger.error("Extraction failed for %s: %s", image_path, message)
        return ExtractionResult.failure(message)

    logger.info(
        "Extraction done: %d segment(s), confidence=%.1f%%", len(spans), confidence
    )
    return ExtractionResult(
        display_text=display_text,
        confidence_percent=confidence,
        segment_count=len(spans),
    )


def status_message(result: ExtractionResult) -> str:
    """Status line shown once an extraction has finished."""
    if not result.succeeded:
        return f"Extraction failed: {result.error}"
    if not result.display_text.strip():
        return "No text detected."

    count = result.segment_count
    if count == 0:
        count = len([line for line in result.display_text.split("\n") if line.strip()])
    return f"Done — {count} segments extracted."


class SessionStateError(RuntimeError):
    """Raised when a DocumentSession action is not valid in its current state."""

    pass


class DocumentSession:
    """
    Interactive state for one loaded document.

    States: idle --load--> loaded --extract--> extracting --> loaded.
    ``extract`` returns a Future; the session is back in ``loaded`` with
    ``result`` set by the time that Future resolves.
    """

    IDLE = "idle"
    LOADED = "loaded"
    EXTRACTING = "extracting"

    def __init__(
        self,
        tessdata_dir: Optional[str] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        preprocess: Optional[bool] = None,
    ):
        self.tessdata_dir = tessdata_dir
        self.preprocess = preprocess
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="arabic-ocr"
        )
        self._lock = threading.Lock()

        self.state = self.IDLE
        self.file_path: Optional[Path] = None
        self.result: Optional[ExtractionResult] = None
        self.status = ""

    def __enter__(self) -> "DocumentSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def load(self, file_path: Union[str, Path]) -> None:
        """
        Load a document, replacing any previous one and its result.

        Raises:
            UnsupportedInputError: For PDF input.
            OCRFileError / OCRSecurityError: If the path fails validation.
            SessionStateError: While an extraction is in flight.
        """
        with self._lock:
            if self.state == self.EXTRACTING:
                raise SessionStateError("Cannot load a document while extracting")

            path = sanitize_path(file_path)
            validate_file(path)

            self.file_path = path
            self.result = None
            self.state = self.LOADED
            self.status = f"Loaded: {path.name}"

        logger.info("Loaded document %s", path)

    def extract(self) -> "Future[ExtractionResult]":
        """
        Start extracting the loaded document on the worker thread.

        Raises:
            SessionStateError: If nothing is loaded or an extraction is
                already in flight.
            RuntimeError: If the executor no longer accepts work; the
                session is left as it was before the call.
        """
        with self._lock:
            if self.state == self.IDLE:
                raise SessionStateError("No document loaded")
            if self.state == self.EXTRACTING:
                raise SessionStateError("An extraction is already in progress")

            previous = (self.result, self.status)
            self.state = self.EXTRACTING
            self.result = None
            self.status = "Extracting text..."
            file_path = self.file_path

        try:
            return self._executor.submit(self._run, file_path)
        except RuntimeError:
            with self._lock:
                self.result, self.status = previous
                self.state = self.LOADED
            raise

    def _run(self, file_path: Path) -> ExtractionResult:
        result = extract(file_path, tessdata_dir=self.tessdata_dir, preprocess=self.preprocess)
        with self._lock:
            self.result = result
            self.state = self.LOADED
            self.status = status_message(result)
        return result

    def clear(self) -> None:
        with self._lock:
            if self.state == self.EXTRACTING:
                raise SessionStateError("Cannot clear while extracting")
            self.state = self.IDLE
            self.file_path = None
            self.result = None
            self.status = ""

    @property
    def can_copy(self) -> bool:
        return self.result is not None and bool(self.result.display_text.strip())

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
