"""Document ingestion: render to PDF, split into pages, upload."""

from src.corpus.ingestion.dispatcher import (
    DOCUMENT_KINDS,
    DocumentKind,
    IngestionDispatcher,
    classify,
    upload_name_for,
)
from src.corpus.ingestion.page_splitter import PageSequence, PageSplitError, split_pages
from src.corpus.ingestion.page_uploader import (
    PDF_CONTENT_TYPE,
    IdempotentPageUploader,
    PageUploadError,
    blob_name_from_file_page,
)
from src.corpus.ingestion.renderers import (
    ConversionError,
    CsvRenderer,
    LibreOfficeRenderer,
    PdfRenderer,
    PresentationRenderer,
    Renderer,
    SpreadsheetRenderer,
    WordRenderer,
    default_renderers,
)

__all__ = [
    # Dispatch
    "DOCUMENT_KINDS",
    "DocumentKind",
    "IngestionDispatcher",
    "classify",
    "upload_name_for",
    # Splitting and upload
    "PageSequence",
    "PageSplitError",
    "split_pages",
    "PDF_CONTENT_TYPE",
    "IdempotentPageUploader",
    "PageUploadError",
    "blob_name_from_file_page",
    # Renderers
    "ConversionError",
    "CsvRenderer",
    "LibreOfficeRenderer",
    "PdfRenderer",
    "PresentationRenderer",
    "Renderer",
    "SpreadsheetRenderer",
    "WordRenderer",
    "default_renderers",
]
