"""
run_ocr.py

CLI to extract segmented Arabic text from an image.

Usage:
    python -m arabic_ocr.run_ocr <image_path>
    python -m arabic_ocr.run_ocr <image_path> --tessdata /usr/share/tessdata
    python -m arabic_ocr.run_ocr <image_path> --json
"""

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .ocr_pipeline import extract, status_message


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract Arabic text segments from a document image using Tesseract"
    )
    parser.add_argument(
        "image_path",
        help="Path to the image file to process (PNG, JPEG, BMP, TIFF)",
    )
    parser.add_argument(
        "--tessdata",
        default=config.TESSDATA_DIR,
        help="Directory containing ara.traineddata (default: %(default)s)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the full result as JSON",
    )
    parser.add_argument(
        "--preprocess",
        action="store_true",
        help="Binarize and deskew the image before recognition",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log pipeline progress",
    )
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if Path(args.image_path).suffix.lower() == ".pdf":
        print(config.PDF_NOTICE, file=sys.stderr)
        return 1

    result = extract(
        args.image_path,
        tessdata_dir=args.tessdata,
        preprocess=True if args.preprocess else None,
    )

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(status_message(result))
        print(f"Confidence: {result.confidence_percent:.1f}%")
        print("---")
        print(result.display_text)

    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
