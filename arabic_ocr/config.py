"""
config.py

Configuration module for the Arabic OCR extractor.

Purpose:
--------
Contains all constants and settings used across the module,
including the engine language, the location of the Tesseract
language data, preprocessing toggles, and input limits.

Design Principle:
-----------------
Configuration is isolated from business logic.
Pointing the extractor at another tessdata directory or toggling
preprocessing should not require editing core OCR code.
"""

import os

# -----------------------------
# Paths
# -----------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TESSDATA_DIR = os.environ.get("ARABIC_OCR_TESSDATA", os.path.join(BASE_DIR, "tessdata"))

# -----------------------------
# Engine
# -----------------------------
OCR_LANGUAGE = "ara"
TESSERACT_CMD = os.environ.get("TESSERACT_CMD")  # None -> tesseract on PATH
TESSERACT_EXTRA_CONFIG = ""  # appended after --tessdata-dir, e.g. "--psm 3"

# -----------------------------
# Preprocessing
# -----------------------------
ENABLE_PREPROCESSING = False
ENABLE_DENOISE = False
ENABLE_DESKEW = True
BINARIZATION_METHOD = "otsu"  # otsu | adaptive

# -----------------------------
# Output
# -----------------------------
SEGMENT_LABEL = "Segment"
SEGMENT_RULE = "═══"
ERROR_PREFIX = "Error: "

# -----------------------------
# Security
# -----------------------------
MAX_FILE_SIZE_MB = 50
ALLOWED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff"]

PDF_NOTICE = (
    "PDF loading requires an additional library.\n\n"
    "For now, please convert your PDF pages to images first,\n"
    "then load them as images."
)
