"""
Tests for the optional preprocessing step.
"""

import cv2
import numpy as np
import pytest
from PIL import Image

from arabic_ocr.preprocessor import binarize, deskew, preprocess_image, to_grayscale


def _make_grayscale_image(h=500, w=400):
    """Create a synthetic grayscale image with text-like bars."""
    img = np.ones((h, w), dtype=np.uint8) * 255
    img[100:120, 50:350] = 0
    img[140:160, 50:300] = 0
    img[180:200, 100:350] = 0
    return img


def _dark_row_span(img):
    """Number of rows between the first and last row holding dark pixels."""
    rows = np.where((img < 128).any(axis=1))[0]
    return int(rows[-1] - rows[0] + 1)


class TestToGrayscale:
    def test_converts_rgb(self):
        img = np.ones((50, 40, 3), dtype=np.uint8) * 200
        assert to_grayscale(img).shape == (50, 40)

    def test_already_grayscale_returns_same(self):
        img = _make_grayscale_image()
        assert to_grayscale(img) is img

    def test_single_channel_3d(self):
        img = np.ones((100, 100, 1), dtype=np.uint8) * 128
        assert to_grayscale(img).shape == (100, 100)


class TestBinarize:
    def test_otsu(self):
        result = binarize(_make_grayscale_image(), method="otsu")
        assert set(np.unique(result)) <= {0, 255}

    def test_adaptive(self):
        img = _make_grayscale_image()
        assert binarize(img, method="adaptive").shape == img.shape

    def test_unknown_method_falls_back_to_otsu(self):
        img = _make_grayscale_image()
        assert np.array_equal(binarize(img, method="sauvola"), binarize(img, method="otsu"))


class TestDeskew:
    def test_straight_image_unchanged(self):
        img = _make_grayscale_image()
        assert deskew(img).shape == img.shape

    @pytest.mark.parametrize("angle", [5.0, -5.0])
    def test_reduces_skew(self, angle):
        img = np.ones((400, 400), dtype=np.uint8) * 255
        img[190:210, 50:350] = 0
        matrix = cv2.getRotationMatrix2D((200, 200), angle, 1.0)
        skewed = cv2.warpAffine(img, matrix, (400, 400), borderValue=255)

        result = deskew(skewed)

        assert _dark_row_span(result) < _dark_row_span(skewed)
        assert _dark_row_span(result) <= 30

    def test_blank_image_unchanged(self):
        img = np.ones((100, 100), dtype=np.uint8) * 255
        assert deskew(img) is img


class TestPreprocessImage:
    def test_returns_grayscale_pil(self):
        img = Image.fromarray(np.stack([_make_grayscale_image()] * 3, axis=-1))
        result = preprocess_image(img)
        assert isinstance(result, Image.Image)
        assert result.mode == "L"
        assert result.size == img.size

    def test_input_not_modified(self):
        source = np.stack([_make_grayscale_image()] * 3, axis=-1)
        img = Image.fromarray(source.copy())
        preprocess_image(img, enable_denoise=True, enable_deskew=False, binarization_method="adaptive")
        assert np.array_equal(np.array(img), source)

    def test_preserves_content(self):
        result = preprocess_image(Image.fromarray(_make_grayscale_image()), enable_deskew=False)
        assert np.any(np.array(result) < 255)
