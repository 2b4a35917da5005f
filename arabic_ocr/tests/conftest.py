"""
Shared fixtures for the Arabic OCR tests.

Tesseract itself is never run: tests patch ``pytesseract.image_to_data``
with dicts shaped like its Output.DICT result.
"""

import pytest
from PIL import Image

COLUMNS = (
    "level", "page_num", "block_num", "par_num", "line_num", "word_num",
    "left", "top", "width", "height", "conf", "text",
)


def build_tesseract_data(blocks, conf=90):
    """
    Build an image_to_data dict.

    ``blocks`` is a list of blocks, each a list of lines, each a list of
    words. ``conf`` is either one value for every word or a dict mapping
    word text to its confidence.
    """
    data = {key: [] for key in COLUMNS}

    def add(level, block=0, par=0, line=0, word=0, word_conf=-1, text=""):
        row = (level, 1, block, par, line, word, 10, 10 * line, 100, 20, word_conf, text)
        for key, value in zip(COLUMNS, row):
            data[key].append(value)

    add(1)
    for b, lines in enumerate(blocks, start=1):
        add(2, b)
        add(3, b, 1)
        for l, words in enumerate(lines, start=1):
            add(4, b, 1, l)
            for w, text in enumerate(words, start=1):
                word_conf = conf.get(text, 90) if isinstance(conf, dict) else conf
                add(5, b, 1, l, w, word_conf, text)
    return data


@pytest.fixture
def tesseract_data():
    return build_tesseract_data


@pytest.fixture
def tessdata_dir(tmp_path):
    """A tessdata directory containing a placeholder ara.traineddata."""
    directory = tmp_path / "tessdata"
    directory.mkdir()
    (directory / "ara.traineddata").write_bytes(b"placeholder")
    return str(directory)


@pytest.fixture
def image_path(tmp_path):
    """A small white PNG on disk."""
    path = tmp_path / "page.png"
    Image.new("RGB", (120, 80), "white").save(path)
    return str(path)
