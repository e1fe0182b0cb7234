from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from PIL import Image

from imgii.errors import WidthMismatchError
from imgii.font import GlyphFont
from imgii.glyph import render_blank, render_glyph
from imgii.options import ImgiiOptions
from imgii.parser import AnsiParser, ColorToken, split_lines

logger = logging.getLogger(__name__)


@dataclass
class CharacterGrid:
    """Row-major cells of one rendered frame."""

    cells: list[Image.Image]
    width: int
    height: int

    def cell(self, column: int, row: int) -> Image.Image:
        return self.cells[row * self.width + column]


class GlyphCache:
    """Memoizes rendered cells by token.

    Repeated tokens get the same image object back, never a copy. Lookups and inserts are
    guarded by a lock so one cache can be shared by several worker threads; rasterization
    itself happens outside the lock.
    """

    def __init__(self, font: GlyphFont, options: ImgiiOptions):
        self.font = font
        self.options = options
        self.blank = render_blank(options)
        self._cells: dict[ColorToken, Image.Image] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cells)

    def get(self, token: ColorToken) -> Image.Image:
        if token.is_blank:
            return self.blank
        with self._lock:
            cell = self._cells.get(token)
            if cell is not None:
                self.hits += 1
                return cell
        rendered = render_glyph(token, self.font, self.options)
        with self._lock:
            self.misses += 1
            # another thread may have rendered the same token meanwhile; keep the first one
            return self._cells.setdefault(token, rendered)


def tokenize(ascii_text: str, parser: AnsiParser) -> tuple[list[list[ColorToken]], int]:
    """Parse every line and check that all rows are as wide as the first.

    Returns the token rows and the row width.
    """
    rows = []
    width = 0
    for i, line in enumerate(split_lines(ascii_text)):
        tokens = parser.parse_line(line)
        if i == 0:
            width = len(tokens)
        elif len(tokens) != width:
            raise WidthMismatchError(i, width, len(tokens))
        rows.append(tokens)
    return rows, width


def render_grid(
    ascii_text: str,
    font: GlyphFont,
    options: ImgiiOptions,
    cache: GlyphCache | None = None,
    parser: AnsiParser | None = None,
    workers: int | None = 1,
) -> CharacterGrid:
    """Render colourized ASCII text into a grid of cell images.

    Fails on the first malformed token or row; nothing is rendered until the whole text has
    parsed. Rows are rasterized on ``workers`` threads (``None`` lets the executor decide) and
    written back in their original order.
    """
    if cache is None:
        cache = GlyphCache(font, options)
    if parser is None:
        parser = AnsiParser()

    rows, width = tokenize(ascii_text, parser)

    def render_row(tokens: list[ColorToken]) -> list[Image.Image]:
        return [cache.get(token) for token in tokens]

    if workers == 1 or len(rows) < 2:
        rendered = [render_row(tokens) for tokens in rows]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            rendered = list(executor.map(render_row, rows))

    cells = [cell for row in rendered for cell in row]
    logger.debug(
        "rendered %dx%d grid, %d cached glyphs (%d hits, %d misses)",
        width,
        len(rows),
        len(cache),
        cache.hits,
        cache.misses,
    )
    return CharacterGrid(cells=cells, width=width, height=len(rows))
