"""Split a paginated PDF into one single-page document per page."""

import logging
from typing import Iterator

import fitz  # PyMuPDF

from src.corpus.models.documents import Page, PaginatedDocument

logger = logging.getLogger(__name__)


class PageSplitError(Exception):
    """Raised when a page cannot be copied into its own document."""

    pass


class PageSequence:
    """Lazy, restartable sequence of single-page documents.

    Each iteration walks pages 0..N-1 in document order and builds every
    single-page document on demand.
    """

    def __init__(self, document: PaginatedDocument):
        self._document = document

    def __len__(self) -> int:
        return self._document.page_count

    def __iter__(self) -> Iterator[Page]:
        for index in range(self._document.page_count):
            yield Page(index=index, pdf=_extract_page(self._document.pdf, index))


def _extract_page(source: fitz.Document, index: int) -> fitz.Document:
    single = fitz.open()
    try:
        single.insert_pdf(source, from_page=index, to_page=index)
    except (RuntimeError, ValueError) as e:
        single.close()
        raise PageSplitError(f"Failed to extract page {index}: {e}") from e
    return single


def split_pages(document: PaginatedDocument) -> PageSequence:
    """Split a paginated document into its pages, in order."""
    logger.debug(f"Splitting document with {document.page_count} pages")
    return PageSequence(document)
