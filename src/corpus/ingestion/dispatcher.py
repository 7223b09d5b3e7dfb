"""Batch ingestion: classify, render to PDF, split and upload each file.

Files are routed by extension to a renderer; every rendered document then
goes through the same splitter and uploader. Failures are isolated per
file and reported once for the whole batch.
"""

import asyncio
import json
import logging
import sys
from enum import Enum
from pathlib import Path, PurePath
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from src.corpus.cancellation import raise_if_cancelled
from src.corpus.clients.blob_storage_client import ContentStore
from src.corpus.ingestion.page_splitter import split_pages
from src.corpus.ingestion.page_uploader import PDF_EXTENSION, IdempotentPageUploader
from src.corpus.ingestion.renderers import Renderer, default_renderers
from src.corpus.models.upload import NO_FILES_UPLOADED_MESSAGE, UploadDocumentsResponse

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Source format families recognized by extension."""

    WORD = "word"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    PDF = "pdf"


DOCUMENT_KINDS: Dict[str, DocumentKind] = {
    ".doc": DocumentKind.WORD,
    ".docx": DocumentKind.WORD,
    ".dotx": DocumentKind.WORD,
    ".xls": DocumentKind.SPREADSHEET,
    ".xlsx": DocumentKind.SPREADSHEET,
    ".xlsm": DocumentKind.SPREADSHEET,
    ".xlsb": DocumentKind.SPREADSHEET,
    ".csv": DocumentKind.SPREADSHEET,
    ".ppt": DocumentKind.PRESENTATION,
    ".pptx": DocumentKind.PRESENTATION,
    ".pdf": DocumentKind.PDF,
}


def classify(file_name: str) -> Optional[DocumentKind]:
    """Document kind for a file name, or None if the format is unsupported."""
    return DOCUMENT_KINDS.get(PurePath(file_name).suffix.lower())


def upload_name_for(file_name: str, kind: DocumentKind) -> str:
    """Name the rendered PDF is uploaded under."""
    path = PurePath(file_name)
    if kind is DocumentKind.PDF:
        return path.name
    return f"{path.stem}{PDF_EXTENSION}"


class IngestionDispatcher:
    """Routes each file of a batch through render, split and upload."""

    def __init__(
        self,
        store: ContentStore,
        renderers: Optional[Mapping[str, Renderer]] = None,
        scratch_dir: Optional[str] = None,
    ):
        """Initialize the dispatcher.

        Args:
            store: Content store pages are uploaded to.
            renderers: Renderer per lowercase extension (defaults to default_renderers()).
            scratch_dir: Directory for temporary page files.
        """
        self._renderers = dict(renderers) if renderers is not None else default_renderers()
        self._uploader = IdempotentPageUploader(store, scratch_dir=scratch_dir)

    async def ingest_file(
        self,
        file_name: str,
        data: bytes,
        cancellation: Optional[asyncio.Event] = None,
    ) -> List[str]:
        """
        Render, split and upload a single file.

        Returns:
            Blob names written for this file; empty for unsupported formats.

        Raises:
            ConversionError: If the renderer cannot read the file.
            PageSplitError: If a page cannot be extracted.
            PageUploadError: If the content store fails.
        """
        kind = classify(file_name)
        renderer = self._renderers.get(PurePath(file_name).suffix.lower())
        if kind is None or renderer is None:
            logger.info(f"Ignoring unsupported file: {file_name}")
            return []

        raise_if_cancelled(cancellation)
        document = await asyncio.to_thread(renderer.render, data)
        with document:
            upload_name = upload_name_for(file_name, kind)
            logger.info(
                f"Rendered {file_name} ({kind.value}) as {upload_name} "
                f"with {document.page_count} pages"
            )
            return await self._uploader.upload(
                upload_name, split_pages(document), cancellation=cancellation
            )

    async def ingest(
        self,
        files: Iterable[Tuple[str, bytes]],
        cancellation: Optional[asyncio.Event] = None,
    ) -> UploadDocumentsResponse:
        """
        Ingest a batch of (file name, content) pairs.

        Never raises for ordinary failures: a failing file does not stop its
        siblings, and all failures are reported in one error response.
        Cancellation propagates as asyncio.CancelledError.

        Returns:
            UploadDocumentsResponse with the written blob names, or an error.
        """
        try:
            uploaded: Dict[str, None] = {}
            failures: List[str] = []

            for file_name, data in files:
                try:
                    for blob_name in await self.ingest_file(file_name, data, cancellation):
                        uploaded[blob_name] = None
                except Exception as e:
                    logger.error(f"Failed to ingest {file_name}: {e}")
                    failures.append(f"{file_name}: {e}")

            if failures:
                return UploadDocumentsResponse.from_error(
                    "Failed to ingest "
                    f"{len(failures)} file(s):\n" + "\n".join(failures)
                )

            if not uploaded:
                return UploadDocumentsResponse.from_error(NO_FILES_UPLOADED_MESSAGE)

            logger.info(f"Uploaded {len(uploaded)} pages")
            return UploadDocumentsResponse.from_uploaded(list(uploaded))

        except Exception as e:
            logger.exception(f"Batch ingestion failed: {e}")
            return UploadDocumentsResponse.from_error(repr(e))


async def _ingest_paths(paths: List[str]) -> UploadDocumentsResponse:
    from src.corpus.clients.blob_storage_client import create_blob_storage_client
    from src.corpus.config.configuration import get_config

    config = get_config()
    files = [(Path(path).name, Path(path).read_bytes()) for path in paths]

    async with create_blob_storage_client() as store:
        dispatcher = IngestionDispatcher(
            store,
            renderers=default_renderers(
                config.ingestion.libreoffice_path,
                config.ingestion.conversion_timeout_seconds,
            ),
            scratch_dir=config.ingestion.scratch_dir,
        )
        return await dispatcher.ingest(files)


# --- Entry Point ---

if __name__ == "__main__":
    from src.corpus.config.configuration import configure_logging

    if len(sys.argv) < 2:
        print("usage: python -m src.corpus.ingestion.dispatcher FILE [FILE ...]")
        sys.exit(2)

    configure_logging()
    response = asyncio.run(_ingest_paths(sys.argv[1:]))
    print(json.dumps(response.model_dump(), indent=2))
    sys.exit(0 if response.is_successful else 1)
