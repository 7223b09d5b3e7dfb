"""Tests for splitting paginated PDFs into single pages."""

import fitz  # PyMuPDF

from src.corpus.ingestion.page_splitter import PageSequence, split_pages
from src.corpus.ingestion.renderers import PdfRenderer
from tests.conftest import make_pdf_bytes


class TestSplitPages:
    """Test page splitting order, completeness and restartability."""

    def test_one_page_per_index_in_order(self):
        """Test that N pages yield indices 0..N-1, each a single-page PDF."""
        document = PdfRenderer().render(make_pdf_bytes(3))

        pages = list(split_pages(document))

        assert [page.index for page in pages] == [0, 1, 2]
        for page in pages:
            assert page.pdf.page_count == 1

    def test_page_content_matches_source_page(self):
        """Test that each single-page document carries its own page's text."""
        document = PdfRenderer().render(make_pdf_bytes(2, label="Section"))

        pages = list(split_pages(document))
        reopened = fitz.open(stream=pages[1].to_bytes(), filetype="pdf")

        assert "Section 1" in reopened[0].get_text()

    def test_sequence_is_restartable(self):
        """Test that iterating twice yields the same pages again."""
        document = PdfRenderer().render(make_pdf_bytes(2))
        sequence = split_pages(document)

        first = [page.index for page in sequence]
        second = [page.index for page in sequence]

        assert isinstance(sequence, PageSequence)
        assert len(sequence) == 2
        assert first == second == [0, 1]

    def test_sequence_is_lazy(self):
        """Test that no page is extracted before iteration starts."""
        document = PdfRenderer().render(make_pdf_bytes(4))
        iterator = iter(split_pages(document))

        first = next(iterator)

        assert first.index == 0
