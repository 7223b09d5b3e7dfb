"""Document upload and search endpoints."""

import logging
from typing import AsyncIterator, Callable, Dict, List, Optional

from azure.search.documents.aio import SearchClient as AsyncSearchClient
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from src.corpus.clients.blob_storage_client import BlobStorageClient, create_blob_storage_client
from src.corpus.clients.search_client import create_search_client
from src.corpus.config.configuration import get_config
from src.corpus.ingestion.dispatcher import IngestionDispatcher
from src.corpus.ingestion.renderers import default_renderers
from src.corpus.models.retrieval import (
    DEFAULT_TOP,
    RetrievalMode,
    RetrievalOptions,
    records_to_dicts,
)
from src.corpus.models.upload import UploadDocumentsResponse
from src.corpus.retrieval.search_service import AzureSearchError, query_documents

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


class RequestOverrides(BaseModel):
    """Caller-supplied retrieval settings."""

    top: Optional[int] = None
    source_file: Optional[str] = None
    semantic_ranker: bool = False
    semantic_captions: bool = False
    retrieval_mode: Optional[RetrievalMode] = None

    def to_options(self) -> RetrievalOptions:
        return RetrievalOptions(
            top=self.top if self.top is not None else DEFAULT_TOP,
            source_file=self.source_file,
            semantic_ranker=self.semantic_ranker,
            semantic_captions=self.semantic_captions,
            retrieval_mode=self.retrieval_mode,
        )


class SearchDocumentsRequest(BaseModel):
    """Incoming search request."""

    query: Optional[str] = None
    embedding: Optional[List[float]] = None
    overrides: Optional[RequestOverrides] = None


# Module-level content store (lazy initialization)
_content_store: Optional[BlobStorageClient] = None


def _get_content_store() -> BlobStorageClient:
    """Get or create the singleton content store."""
    global _content_store
    if _content_store is None:
        _content_store = create_blob_storage_client()
    return _content_store


async def close_content_store() -> None:
    """Close the singleton content store if one was created."""
    global _content_store
    if _content_store is not None:
        await _content_store.close()
        _content_store = None


def create_ingestion_dispatcher() -> IngestionDispatcher:
    """Build a dispatcher over the shared content store.

    Raises:
        ConfigurationError: If required settings are missing.
        ValueError: If the storage connection string is malformed.
    """
    config = get_config()
    return IngestionDispatcher(
        _get_content_store(),
        renderers=default_renderers(
            config.ingestion.libreoffice_path,
            config.ingestion.conversion_timeout_seconds,
        ),
        scratch_dir=config.ingestion.scratch_dir,
    )


def get_ingestion_dispatcher_factory() -> Callable[[], IngestionDispatcher]:
    return create_ingestion_dispatcher


async def get_search_client() -> AsyncIterator[AsyncSearchClient]:
    search_client = create_search_client()
    async with search_client:
        yield search_client


@router.post("", response_model=UploadDocumentsResponse)
async def upload_documents(
    files: List[UploadFile] = File(...),
    dispatcher_factory: Callable[[], IngestionDispatcher] = Depends(
        get_ingestion_dispatcher_factory
    ),
) -> UploadDocumentsResponse:
    """Upload a batch of documents, one blob per PDF page."""
    batch = [(upload.filename or "", await upload.read()) for upload in files]
    logger.info(f"Received {len(batch)} files for upload")
    try:
        dispatcher = dispatcher_factory()
    except Exception as e:
        logger.exception(f"Ingestion setup failed: {e}")
        return UploadDocumentsResponse.from_error(repr(e))
    return await dispatcher.ingest(batch)


@router.post("/search")
async def search_documents(
    request: SearchDocumentsRequest,
    search_client: AsyncSearchClient = Depends(get_search_client),
) -> List[Dict[str, str]]:
    """Return supporting content records for a query."""
    overrides = request.overrides or RequestOverrides()
    try:
        records = await query_documents(
            search_client,
            query=request.query,
            embedding=request.embedding,
            options=overrides.to_options(),
        )
    except AzureSearchError as e:
        logger.exception(f"Search failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    return records_to_dicts(records)
