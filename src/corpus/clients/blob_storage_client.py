"""Azure Blob Storage client used as the page content store."""

import logging
from typing import BinaryIO, Optional, Protocol, Union

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import ContainerClient

from src.corpus.config.configuration import get_config

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    """Minimal content store contract the page uploader depends on."""

    async def exists(self, blob_name: str) -> bool:
        ...

    async def put(
        self,
        blob_name: str,
        data: Union[bytes, BinaryIO],
        content_type: str,
    ) -> None:
        ...


class BlobStorageClient:
    """Async Blob Storage client with connection management.

    Supports async context manager pattern for proper resource cleanup.
    """

    def __init__(self, container_client: ContainerClient):
        """Initialize the client.

        Args:
            container_client: Async container client for the upload container.
        """
        self._container = container_client
        self._container_ready = False

    @property
    def container_name(self) -> str:
        return self._container.container_name

    async def create_container_if_missing(self) -> None:
        """Create the upload container once per client.

        Raises:
            AzureError: If the account is unreachable or rejects the request.
        """
        if self._container_ready:
            return
        try:
            await self._container.create_container()
            logger.info(f"Created blob container: {self.container_name}")
        except ResourceExistsError:
            pass
        self._container_ready = True

    async def exists(self, blob_name: str) -> bool:
        """Check whether a blob with this name is already stored."""
        await self.create_container_if_missing()
        blob_client = self._container.get_blob_client(blob_name)
        return await blob_client.exists()

    async def put(
        self,
        blob_name: str,
        data: Union[bytes, BinaryIO],
        content_type: str,
    ) -> None:
        """Upload a blob without overwriting an existing one.

        Raises:
            ResourceExistsError: If another writer stored the blob first.
        """
        await self.create_container_if_missing()
        blob_client = self._container.get_blob_client(blob_name)
        await blob_client.upload_blob(
            data,
            overwrite=False,
            content_settings=ContentSettings(content_type=content_type),
        )

    async def close(self) -> None:
        """Close the underlying container client."""
        await self._container.close()

    async def __aenter__(self) -> "BlobStorageClient":
        """Async context manager entry."""
        await self._container.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Async context manager exit with cleanup."""
        await self.close()
        return False


def create_blob_storage_client(container_name: Optional[str] = None) -> BlobStorageClient:
    """Create a Blob Storage client for the configured upload container."""
    config = get_config()
    container_client = ContainerClient.from_connection_string(
        conn_str=config.blob_storage.connection_string,
        container_name=container_name or config.blob_storage.container_name,
    )
    return BlobStorageClient(container_client)
