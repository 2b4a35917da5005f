"""
preprocessor.py

Optional OpenCV-based cleanup applied to a decoded raster before
recognition. Disabled by default (config.ENABLE_PREPROCESSING) so that
Tesseract sees the image exactly as decoded; enable it for faded or
skewed scans.
"""

import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from . import config

logger = logging.getLogger(__name__)


def preprocess_image(
    image: Image.Image,
    enable_denoise: Optional[bool] = None,
    enable_deskew: Optional[bool] = None,
    binarization_method: Optional[str] = None,
) -> Image.Image:
    """
    Run grayscale -> denoise -> binarize -> deskew on a PIL image.

    Args:
        image: Decoded raster (RGB or L).
        enable_denoise: Override config ENABLE_DENOISE.
        enable_deskew: Override config ENABLE_DESKEW.
        binarization_method: Override config BINARIZATION_METHOD.

    Returns:
        A new single-channel PIL image; the input is not modified.
    """
    if enable_denoise is None:
        enable_denoise = config.ENABLE_DENOISE
    if enable_deskew is None:
        enable_deskew = config.ENABLE_DESKEW
    if binarization_method is None:
        binarization_method = config.BINARIZATION_METHOD

    result = to_grayscale(np.array(image))

    if enable_denoise:
        result = cv2.fastNlMeansDenoising(result, h=10, templateWindowSize=7, searchWindowSize=21)
        logger.debug("Denoising done")

    result = binarize(result, method=binarization_method)
    logger.debug("Binarization done (method: %s)", binarization_method)

    if enable_deskew:
        result = deskew(result)

    return Image.fromarray(result)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an RGB array to grayscale. Grayscale input is returned as-is."""
    if image.ndim == 2:
        return image
    if image.shape[2] == 1:
        return image[:, :, 0]
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def binarize(image: np.ndarray, method: str = "otsu") -> np.ndarray:
    """
    Threshold a grayscale image to black text on white.

    Args:
        image: Grayscale image.
        method: 'otsu' or 'adaptive'. Unknown methods fall back to otsu.
    """
    if method == "adaptive":
        return cv2.adaptiveThreshold(
            image, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 25, 8
        )
    if method != "otsu":
        logger.warning("Unknown binarization method '%s', falling back to otsu", method)
    _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary


def deskew(image: np.ndarray) -> np.ndarray:
    """
    Correct small scan rotations (under 15 degrees) using minAreaRect
    over the dark pixels.
    """
    coords = np.column_stack(np.where(image < 128)).astype(np.float32)

    if len(coords) < 50:
        return image

    angle = cv2.minAreaRect(coords)[-1]

    # minAreaRect reports [-90, 0) on older OpenCV and (0, 90] on newer
    if angle < -45:
        angle = -(90 + angle)
    elif angle > 45:
        angle = 90 - angle
    else:
        angle = -angle

    if abs(angle) > 15 or abs(angle) < 0.1:
        return image

    h, w = image.shape[:2]
    rotation_matrix = cv2.getRotationMatrix2D((w // 2, h // 2), angle, 1.0)
    rotated = cv2.warpAffine(
        image, rotation_matrix, (w, h),
        flags=cv2.INTER_CUBIC,
        borderMode=cv2.BORDER_REPLICATE,
    )

    logger.info("Deskewed by %.2f degrees", angle)
    return rotated
