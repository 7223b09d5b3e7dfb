"""Tests for deterministic blob naming and idempotent page upload."""

import asyncio
import os

import pytest
from azure.core.exceptions import ResourceExistsError

from src.corpus.ingestion.page_splitter import split_pages
from src.corpus.ingestion.page_uploader import (
    PDF_CONTENT_TYPE,
    IdempotentPageUploader,
    PageUploadError,
    blob_name_from_file_page,
)
from src.corpus.ingestion.renderers import PdfRenderer
from tests.conftest import InMemoryContentStore, make_pdf_bytes


def _pages(page_count: int):
    return split_pages(PdfRenderer().render(make_pdf_bytes(page_count)))


class TestBlobNameFromFilePage:
    """Test blob name derivation."""

    def test_pdf_name_gets_page_suffix(self):
        assert blob_name_from_file_page("report.pdf", 0) == "report-0.pdf"
        assert blob_name_from_file_page("report.pdf", 12) == "report-12.pdf"

    def test_extension_match_is_case_insensitive(self):
        assert blob_name_from_file_page("Scan.PDF", 1) == "Scan-1.pdf"

    def test_non_pdf_name_is_returned_unmodified(self):
        assert blob_name_from_file_page("data.csv", 3) == "data.csv"

    def test_directory_part_is_dropped(self):
        assert blob_name_from_file_page("uploads/notes.txt") == "notes.txt"

    def test_naming_is_deterministic(self):
        """Test that identical inputs always give identical names."""
        names = {blob_name_from_file_page("a.b.pdf", 2) for _ in range(10)}
        assert names == {"a.b-2.pdf"}


class TestIdempotentPageUploader:
    """Test upload, skip-existing and failure behaviour."""

    @pytest.mark.asyncio
    async def test_uploads_every_absent_page(self, tmp_path):
        """Test that N pages give N uploads with the PDF content type."""
        store = InMemoryContentStore()
        uploader = IdempotentPageUploader(store, scratch_dir=str(tmp_path))

        uploaded = await uploader.upload("report.pdf", _pages(3))

        assert uploaded == ["report-0.pdf", "report-1.pdf", "report-2.pdf"]
        assert set(store.blobs) == set(uploaded)
        assert all(ct == PDF_CONTENT_TYPE for ct in store.content_types.values())
        assert all(data.startswith(b"%PDF") for data in store.blobs.values())

    @pytest.mark.asyncio
    async def test_existing_pages_are_skipped(self, tmp_path):
        """Test that pages already stored are neither rewritten nor reported."""
        store = InMemoryContentStore(existing={"report-1.pdf": b"old"})
        uploader = IdempotentPageUploader(store, scratch_dir=str(tmp_path))

        uploaded = await uploader.upload("report.pdf", _pages(3))

        assert uploaded == ["report-0.pdf", "report-2.pdf"]
        assert store.blobs["report-1.pdf"] == b"old"
        assert "report-1.pdf" not in store.put_calls

    @pytest.mark.asyncio
    async def test_second_upload_writes_nothing(self, tmp_path):
        """Test idempotency: repeating an upload adds no blobs."""
        store = InMemoryContentStore()
        uploader = IdempotentPageUploader(store, scratch_dir=str(tmp_path))

        first = await uploader.upload("report.pdf", _pages(2))
        snapshot = dict(store.blobs)
        second = await uploader.upload("report.pdf", _pages(2))

        assert len(first) == 2
        assert second == []
        assert store.blobs == snapshot

    @pytest.mark.asyncio
    async def test_failure_aborts_remaining_pages(self, tmp_path):
        """Test that a store failure stops the file at the failing page."""
        store = InMemoryContentStore(fail_on="report-1.pdf")
        uploader = IdempotentPageUploader(store, scratch_dir=str(tmp_path))

        with pytest.raises(PageUploadError):
            await uploader.upload("report.pdf", _pages(3))

        assert "report-0.pdf" in store.blobs
        assert "report-2.pdf" not in store.exists_calls

    @pytest.mark.asyncio
    async def test_scratch_files_removed_on_success_and_failure(self, tmp_path):
        """Test that no temporary page file survives either exit path."""
        ok_store = InMemoryContentStore()
        await IdempotentPageUploader(ok_store, scratch_dir=str(tmp_path)).upload(
            "ok.pdf", _pages(2)
        )
        assert os.listdir(tmp_path) == []

        failing_store = InMemoryContentStore(fail_on="bad-0.pdf")
        with pytest.raises(PageUploadError):
            await IdempotentPageUploader(failing_store, scratch_dir=str(tmp_path)).upload(
                "bad.pdf", _pages(2)
            )
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_concurrent_writer_is_not_an_error(self, tmp_path):
        """Test that losing a write race skips the page without failing."""

        class RacingStore(InMemoryContentStore):
            async def put(self, blob_name, data, content_type):
                raise ResourceExistsError(message="BlobAlreadyExists")

        uploaded = await IdempotentPageUploader(RacingStore(), scratch_dir=str(tmp_path)).upload(
            "report.pdf", _pages(2)
        )

        assert uploaded == []

    @pytest.mark.asyncio
    async def test_cancellation_stops_before_next_network_call(self, tmp_path):
        """Test that a set cancellation event prevents any store call."""
        store = InMemoryContentStore()
        cancellation = asyncio.Event()
        cancellation.set()

        with pytest.raises(asyncio.CancelledError):
            await IdempotentPageUploader(store, scratch_dir=str(tmp_path)).upload(
                "report.pdf", _pages(2), cancellation=cancellation
            )

        assert store.exists_calls == []
        assert store.blobs == {}
