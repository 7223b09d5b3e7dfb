"""Paginated document models shared by renderers, splitter and uploader."""

from dataclasses import dataclass

import fitz  # PyMuPDF


@dataclass(frozen=True)
class PaginatedDocument:
    """A rendered PDF document whose pages can be addressed by index.

    Produced by a renderer and owned by the dispatcher for the duration of
    one file's processing.
    """

    pdf: fitz.Document

    @property
    def page_count(self) -> int:
        return self.pdf.page_count

    def close(self) -> None:
        """Release the underlying PyMuPDF document."""
        self.pdf.close()

    def __enter__(self) -> "PaginatedDocument":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


@dataclass(frozen=True)
class Page:
    """One single-page PDF document and its zero-based index in the source."""

    index: int
    pdf: fitz.Document

    def save(self, path: str) -> None:
        """Write the page as a standalone PDF file."""
        self.pdf.save(path)

    def to_bytes(self) -> bytes:
        return self.pdf.tobytes()
