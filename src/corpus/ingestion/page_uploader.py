"""Idempotent upload of single PDF pages to the content store.

Every page gets a deterministic blob name derived from the file name and
page index. Pages whose blob already exists are skipped, which makes a
whole batch safe to retry.
"""

import asyncio
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import PurePath
from typing import Iterable, Iterator, List, Optional

from azure.core.exceptions import AzureError, ResourceExistsError

from src.corpus.cancellation import raise_if_cancelled
from src.corpus.clients.blob_storage_client import ContentStore
from src.corpus.models.documents import Page

logger = logging.getLogger(__name__)

PDF_EXTENSION = ".pdf"
PDF_CONTENT_TYPE = "application/pdf"


class PageUploadError(Exception):
    """Raised when the content store rejects a page upload."""

    pass


def blob_name_from_file_page(file_name: str, page: int = 0) -> str:
    """Deterministic blob name for one page of a file.

    PDF files map to ``{stem}-{page}.pdf``; any other file keeps its bare
    name, which only happens for files that never went through splitting.
    """
    path = PurePath(file_name)
    if path.suffix.lower() == PDF_EXTENSION:
        return f"{path.stem}-{page}{PDF_EXTENSION}"
    return path.name


@contextmanager
def _scratch_pdf(page: Page, scratch_dir: Optional[str] = None) -> Iterator[str]:
    """Save a page to a temporary file that is removed on exit."""
    fd, path = tempfile.mkstemp(suffix=PDF_EXTENSION, dir=scratch_dir)
    os.close(fd)
    try:
        page.save(path)
        yield path
    finally:
        if os.path.exists(path):
            os.remove(path)


class IdempotentPageUploader:
    """Uploads pages whose blob is not stored yet."""

    def __init__(self, store: ContentStore, scratch_dir: Optional[str] = None):
        """Initialize the uploader.

        Args:
            store: Content store with exists/put operations.
            scratch_dir: Directory for temporary page files (system default if None).
        """
        self._store = store
        self._scratch_dir = scratch_dir

    async def upload(
        self,
        file_name: str,
        pages: Iterable[Page],
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[str]:
        """
        Upload every page of one file that is not already stored.

        Args:
            file_name: PDF file name the blob names are derived from.
            pages: Single-page documents in page order.
            cancellation: Optional event; when set, remaining pages are skipped.

        Returns:
            Blob names written by this call, in page order.

        Raises:
            PageUploadError: If the content store fails; remaining pages are not attempted.
        """
        uploaded: List[str] = []

        for page in pages:
            blob_name = blob_name_from_file_page(file_name, page.index)

            try:
                raise_if_cancelled(cancellation)
                if await self._store.exists(blob_name):
                    logger.debug(f"Skipping existing blob: {blob_name}")
                    continue

                with _scratch_pdf(page, self._scratch_dir) as scratch_path:
                    raise_if_cancelled(cancellation)
                    with open(scratch_path, "rb") as stream:
                        await self._store.put(blob_name, stream, PDF_CONTENT_TYPE)
            except ResourceExistsError:
                # Lost a race with another writer of the same deterministic key
                logger.info(f"Blob written concurrently, skipping: {blob_name}")
                continue
            except AzureError as e:
                raise PageUploadError(f"Failed to upload {blob_name}: {e}") from e
            finally:
                page.pdf.close()

            uploaded.append(blob_name)
            logger.debug(f"Uploaded blob: {blob_name}")

        return uploaded
