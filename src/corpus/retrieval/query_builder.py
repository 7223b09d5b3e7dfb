"""Build hybrid (text + vector + semantic) search requests."""

import logging
from typing import Optional, Sequence

from azure.search.documents.models import QueryCaptionType, QueryType

from src.corpus.models.retrieval import (
    RetrievalMode,
    RetrievalOptions,
    SearchRequest,
    VectorClause,
)

logger = logging.getLogger(__name__)

# Index schema constants
SOURCE_FILE_FIELD = "sourcefile"
VECTOR_FIELD_NAME = "embedding"
SEMANTIC_CONFIGURATION_NAME = "default"

# Candidate pool the semantic ranker reorders, independent of `top`
SEMANTIC_RERANK_K = 50


def build_filter(source_file: Optional[str]) -> str:
    """Exact-match filter on the source file, or an empty string."""
    if source_file is None:
        return ""
    return f"{SOURCE_FILE_FIELD} eq '{source_file}'"


def build_search_request(
    query: Optional[str] = None,
    embedding: Optional[Sequence[float]] = None,
    options: Optional[RetrievalOptions] = None,
) -> SearchRequest:
    """
    Assemble a search request from query text, embedding and options.

    A vector clause is added only when an embedding is supplied and the
    retrieval mode is not Text. With the semantic ranker on, the vector
    clause asks for SEMANTIC_RERANK_K neighbours instead of `top`.

    Args:
        query: Free-text query, may be None for vector-only search.
        embedding: Query embedding vector.
        options: Retrieval options; defaults apply when None.

    Returns:
        SearchRequest ready to be sent.
    """
    options = options or RetrievalOptions()
    top = options.top

    semantic_kwargs = {}
    if options.semantic_ranker:
        semantic_kwargs = {
            "query_type": QueryType.SEMANTIC,
            "semantic_configuration_name": SEMANTIC_CONFIGURATION_NAME,
            "query_caption": (
                QueryCaptionType.EXTRACTIVE
                if options.semantic_captions
                else QueryCaptionType.NONE
            ),
        }

    vector_queries = ()
    if embedding is not None and options.retrieval_mode != RetrievalMode.TEXT:
        k = SEMANTIC_RERANK_K if options.semantic_ranker else top
        vector_queries = (
            VectorClause(
                vector=tuple(embedding),
                k_nearest_neighbors=k,
                fields=VECTOR_FIELD_NAME,
            ),
        )

    request = SearchRequest(
        search_text=query,
        filter=build_filter(options.source_file),
        top=top,
        vector_queries=vector_queries,
        **semantic_kwargs,
    )
    logger.debug(
        f"Built search request: top={top}, semantic={options.semantic_ranker}, "
        f"vector={bool(vector_queries)}, filter='{request.filter}'"
    )
    return request
