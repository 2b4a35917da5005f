"""
Extract Arabic text segments from an image file and print them.

Usage:
    python run_ocr.py path/to/image.png [path/to/tessdata]
"""

import os
import sys

from arabic_ocr import extract, status_message


def main():
    if len(sys.argv) < 2:
        print("Usage: python run_ocr.py <image_path> [tessdata_dir]")
        print("Example: python run_ocr.py document.png ./tessdata")
        sys.exit(1)

    image_path = sys.argv[1]
    tessdata_dir = sys.argv[2] if len(sys.argv) > 2 else None

    if not os.path.exists(image_path):
        print(f"Error: File not found: {image_path}")
        sys.exit(1)

    print(f"Processing: {image_path}")

    result = extract(image_path, tessdata_dir=tessdata_dir)

    print(f"\n{status_message(result)}")
    print(f"Confidence: {result.confidence_percent:.1f}%")
    print("=" * 50)
    print(result.display_text)
    print("=" * 50)

    sys.exit(0 if result.succeeded else 1)


if __name__ == "__main__":
    main()
