"""Lay out extracted text onto fixed-size PDF pages with PyMuPDF."""

import textwrap
from typing import Iterable, Optional

import fitz  # PyMuPDF

# A4 in points
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 50
FONT_NAME = "helv"
FONT_SIZE = 10
HEADING_FONT_SIZE = 14
LINE_SPACING = 1.4


class TextPdfBuilder:
    """Accumulates lines of text and flows them onto PDF pages.

    Lines longer than the printable width are wrapped; a page break is
    inserted whenever the next line would cross the bottom margin.
    """

    def __init__(
        self,
        page_width: float = PAGE_WIDTH,
        page_height: float = PAGE_HEIGHT,
        margin: float = MARGIN,
        font_size: float = FONT_SIZE,
    ):
        self._doc = fitz.open()
        self._page_width = page_width
        self._page_height = page_height
        self._margin = margin
        self._font_size = font_size
        self._page: Optional[fitz.Page] = None
        self._cursor_y = 0.0

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def _wrap_width(self, font_size: float) -> int:
        # Helvetica averages roughly half an em per glyph
        usable = self._page_width - 2 * self._margin
        return max(int(usable / (font_size * 0.5)), 1)

    def new_page(self) -> None:
        """Start a fresh page; the next line is written at its top."""
        self._page = self._doc.new_page(width=self._page_width, height=self._page_height)
        self._cursor_y = self._margin

    def _write(self, text: str, font_size: float) -> None:
        line_height = font_size * LINE_SPACING
        wrapped = textwrap.wrap(text, width=self._wrap_width(font_size)) or [""]
        for line in wrapped:
            if self._page is None or self._cursor_y + line_height > self._page_height - self._margin:
                self.new_page()
            self._cursor_y += line_height
            if line:
                self._page.insert_text(
                    (self._margin, self._cursor_y),
                    line,
                    fontname=FONT_NAME,
                    fontsize=font_size,
                )

    def add_heading(self, text: str) -> None:
        self._write(text, HEADING_FONT_SIZE)

    def add_line(self, text: str) -> None:
        self._write(text, self._font_size)

    def add_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.add_line(line)

    def build(self) -> fitz.Document:
        """Return the laid-out document, guaranteeing at least one page."""
        if self._doc.page_count == 0:
            self.new_page()
        return self._doc
