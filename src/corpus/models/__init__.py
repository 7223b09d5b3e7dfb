"""Data models module."""

from src.corpus.models.documents import Page, PaginatedDocument
from src.corpus.models.retrieval import (
    RetrievalMode,
    RetrievalOptions,
    SearchRequest,
    SupportingContentRecord,
    VectorClause,
)
from src.corpus.models.upload import UploadDocumentsResponse

__all__ = [
    "Page",
    "PaginatedDocument",
    "RetrievalMode",
    "RetrievalOptions",
    "SearchRequest",
    "SupportingContentRecord",
    "UploadDocumentsResponse",
    "VectorClause",
]
