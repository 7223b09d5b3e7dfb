"""Hybrid search retrieval module."""

from src.corpus.retrieval.query_builder import (
    SEMANTIC_RERANK_K,
    build_filter,
    build_search_request,
)
from src.corpus.retrieval.result_assembler import (
    assemble_supporting_content,
    flatten_whitespace,
)
from src.corpus.retrieval.search_service import (
    AzureSearchError,
    InvalidSearchResponseError,
    query_documents,
)

__all__ = [
    "SEMANTIC_RERANK_K",
    "build_filter",
    "build_search_request",
    "assemble_supporting_content",
    "flatten_whitespace",
    "AzureSearchError",
    "InvalidSearchResponseError",
    "query_documents",
]
