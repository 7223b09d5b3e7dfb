"""Query entry point: build the request, search, assemble records."""

import asyncio
import logging
from typing import List, Optional, Sequence

from azure.core.exceptions import AzureError
from azure.search.documents.aio import SearchClient as AsyncSearchClient

from src.corpus.cancellation import raise_if_cancelled
from src.corpus.models.retrieval import RetrievalOptions, SupportingContentRecord
from src.corpus.retrieval.query_builder import build_search_request
from src.corpus.retrieval.result_assembler import assemble_supporting_content

logger = logging.getLogger(__name__)


class AzureSearchError(Exception):
    """Custom exception for Azure Search operations."""
    pass


class InvalidSearchResponseError(AzureSearchError):
    """Raised when the search service returns no response object at all."""
    pass


async def query_documents(
    search_client: AsyncSearchClient,
    query: Optional[str] = None,
    embedding: Optional[Sequence[float]] = None,
    options: Optional[RetrievalOptions] = None,
    cancellation: Optional[asyncio.Event] = None,
) -> List[SupportingContentRecord]:
    """
    Search the document index and return supporting content records.

    Args:
        search_client: Async Azure AI Search client.
        query: Free-text query.
        embedding: Optional query embedding for vector retrieval.
        options: Retrieval options; defaults apply when None.
        cancellation: Optional event checked before the search call.

    Returns:
        Records in relevance order; empty when nothing matched.

    Raises:
        InvalidSearchResponseError: If the service returned no response.
        AzureSearchError: If the search operation fails.
    """
    options = options or RetrievalOptions()
    request = build_search_request(query, embedding, options)

    raise_if_cancelled(cancellation)
    try:
        results = await search_client.search(**request.to_search_kwargs())
        if results is None:
            raise InvalidSearchResponseError("fail to get search result")
        hits = [hit async for hit in results]
    except AzureError as e:
        raise AzureSearchError(f"Azure Search operation failed: {e}") from e

    records = assemble_supporting_content(hits, options.use_semantic_captions)
    logger.info(f"Search returned {len(hits)} hits, {len(records)} usable records")
    return records
