"""Client modules for external services."""

from src.corpus.clients.blob_storage_client import (
    BlobStorageClient,
    ContentStore,
    create_blob_storage_client,
)
from src.corpus.clients.search_client import create_search_client

__all__ = [
    "BlobStorageClient",
    "ContentStore",
    "create_blob_storage_client",
    "create_search_client",
]
