"""
layout.py

Block-level traversal of Tesseract's hierarchical layout output.

Tesseract reports its segmentation as a flat, ordered list of rows
(page -> block -> paragraph -> line -> word). The walker moves a cursor
over those rows, cuts them at block boundaries and yields one BlockSpan
per block that carries text. Reading order is whatever order the engine
reported; nothing is re-sorted here.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .schemas import LEVEL_BLOCK, LEVEL_WORD, BlockSpan, LayoutElement, PageResult
from .utils import TraversalFailure

logger = logging.getLogger(__name__)


def walk_blocks(page: PageResult) -> Iterator[BlockSpan]:
    """
    Yield the page's non-empty blocks as BlockSpans in reading order.

    Indices start at 1 and only advance for emitted spans; blocks whose
    trimmed text is empty (rules, table borders, noise) are skipped.
    The returned generator is single-use.

    Raises:
        TraversalFailure: If the page has no traversable layout or the
            layout rows are inconsistent.
    """
    if page.layout is None:
        raise TraversalFailure("Page layout is not available for traversal")

    index = 1
    for block_num, words in _iter_blocks(page.layout):
        text = assemble_text(words).strip()
        if not text:
            logger.debug("Skipping empty block %d", block_num)
            continue

        yield BlockSpan(index=index, text=text)
        index += 1


def _iter_blocks(
    layout: Iterable[LayoutElement],
) -> Iterator[Tuple[int, List[LayoutElement]]]:
    """Cut the flat row list into (block_num, word rows) groups."""
    current: Optional[int] = None
    words: List[LayoutElement] = []

    for row in layout:
        if row.level == LEVEL_BLOCK:
            if current is not None:
                yield current, words
            current = row.block_num
            words = []
        elif row.level == LEVEL_WORD:
            if current is None or row.block_num != current:
                raise TraversalFailure(
                    f"Word row outside its block (block_num={row.block_num})"
                )
            words.append(row)

    if current is not None:
        yield current, words


def assemble_text(words: Iterable[LayoutElement]) -> str:
    """
    Join word rows back into text.

    Words on the same line are joined by a space, lines by a newline,
    and a new paragraph or block starts after a blank line.
    Words with blank text are ignored.
    """
    parts: List[str] = []
    previous = None

    for word in words:
        text = word.text.strip()
        if not text:
            continue

        if previous is not None:
            if (word.block_num, word.par_num) != previous[:2]:
                parts.append("\n\n")
            elif word.line_num != previous[2]:
                parts.append("\n")
            else:
                parts.append(" ")

        parts.append(text)
        previous = (word.block_num, word.par_num, word.line_num)

    return "".join(parts)
