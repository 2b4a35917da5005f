"""
utils.py

File I/O, validation and security checks for the Arabic OCR extractor.

Handles:
- File path sanitization against path traversal
- Extension and file size enforcement
- Decoding a single image file into an in-memory PIL raster
"""

import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from . import config

logger = logging.getLogger(__name__)


class OCRFileError(Exception):
    """Raised when an input file cannot be validated or decoded."""

    pass


class OCRSecurityError(Exception):
    """Raised when a security check fails (e.g., path traversal)."""

    pass


class UnsupportedInputError(OCRFileError):
    """Raised for inputs the extractor recognises but does not handle (PDF)."""

    pass


class EngineFailure(Exception):
    """Base class for failures inside one recognition session."""

    pass


class ResourceInitFailure(EngineFailure):
    """The engine or its language data could not be located or loaded."""

    pass


class DecodeFailure(EngineFailure):
    """The raster could not be decoded or processed by the engine."""

    pass


class TraversalFailure(EngineFailure):
    """The page layout could not be walked after recognition."""

    pass


def sanitize_path(file_path: Union[str, Path]) -> Path:
    """
    Validate and sanitize a file path.

    Args:
        file_path: Raw file path string or Path object.

    Returns:
        Resolved, sanitized Path object.

    Raises:
        OCRSecurityError: If path traversal or a symlink is detected.
        OCRFileError: If file does not exist or is not a regular file.
    """
    raw = str(file_path)
    if ".." in Path(raw).parts:
        raise OCRSecurityError(f"Path traversal detected in: {raw}")

    unresolved = Path(file_path)
    if unresolved.is_symlink():
        raise OCRSecurityError(f"Symlinks are not allowed: {unresolved}")

    path = unresolved.resolve()

    if not path.exists():
        raise OCRFileError(f"File not found: {path}")

    if not path.is_file():
        raise OCRFileError(f"Not a regular file: {path}")

    return path


def validate_file(file_path: Path) -> None:
    """
    Validate file extension and size.

    Raises:
        UnsupportedInputError: For PDF input.
        OCRFileError: If validation fails.
    """
    ext = file_path.suffix.lower()
    if ext == ".pdf":
        raise UnsupportedInputError(config.PDF_NOTICE)

    if ext not in config.ALLOWED_EXTENSIONS:
        raise OCRFileError(
            f"Unsupported file extension '{ext}'. "
            f"Allowed: {config.ALLOWED_EXTENSIONS}"
        )

    size = file_path.stat().st_size
    if size == 0:
        raise OCRFileError(f"File is empty: {file_path.name}")

    size_mb = size / (1024 * 1024)
    if size_mb > config.MAX_FILE_SIZE_MB:
        raise OCRFileError(
            f"File too large: {size_mb:.1f}MB exceeds "
            f"limit of {config.MAX_FILE_SIZE_MB}MB"
        )


def load_image(file_path: Union[str, Path]) -> Image.Image:
    """
    Decode an image file into a PIL raster.

    The file is read fully and its handle closed before returning, so the
    raster does not keep the file open. The caller owns the returned image
    and should close it when done.

    Raises:
        OCRFileError: If validation or decoding fails.
        OCRSecurityError: If path validation fails.
    """
    path = sanitize_path(file_path)
    validate_file(path)

    try:
        with Image.open(path) as img:
            img.load()
            raster = img.convert("RGB") if img.mode not in ("RGB", "L") else img.copy()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise OCRFileError(f"Failed to decode image {path.name}: {e}") from e

    logger.info("Loaded image: %s (%dx%d)", path.name, raster.width, raster.height)
    return raster
