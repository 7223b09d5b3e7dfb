"""Azure AI Search client factory."""

from azure.core.credentials import AzureKeyCredential
from azure.search.documents.aio import SearchClient as AsyncSearchClient

from src.corpus.config.configuration import get_config


def create_search_client() -> AsyncSearchClient:
    """Create Azure AI Search async client for the document index."""
    config = get_config()
    return AsyncSearchClient(
        endpoint=config.azure_ai_search.endpoint,
        index_name=config.azure_ai_search.index_name,
        credential=AzureKeyCredential(config.azure_ai_search.api_key),
    )
