"""Shared fixtures and in-memory fakes for the test suite."""

from typing import Any, Dict, List, Optional

import fitz  # PyMuPDF
import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError


def make_pdf_bytes(page_count: int, label: str = "Page") -> bytes:
    """Build a real PDF with one line of text per page."""
    doc = fitz.open()
    for i in range(page_count):
        page = doc.new_page()
        page.insert_text((72, 72), f"{label} {i}")
    data = doc.tobytes()
    doc.close()
    return data


class InMemoryContentStore:
    """Content store fake recording every call."""

    def __init__(self, existing: Optional[Dict[str, bytes]] = None, fail_on: Optional[str] = None):
        self.blobs: Dict[str, bytes] = dict(existing or {})
        self.content_types: Dict[str, str] = {}
        self.exists_calls: List[str] = []
        self.put_calls: List[str] = []
        self._fail_on = fail_on

    async def exists(self, blob_name: str) -> bool:
        self.exists_calls.append(blob_name)
        return blob_name in self.blobs

    async def put(self, blob_name: str, data: Any, content_type: str) -> None:
        self.put_calls.append(blob_name)
        if blob_name == self._fail_on:
            raise HttpResponseError(message=f"Simulated failure writing {blob_name}")
        self.blobs[blob_name] = data if isinstance(data, bytes) else data.read()
        self.content_types[blob_name] = content_type


class FakeBlobClient:
    def __init__(self, container: "FakeContainerClient", name: str):
        self._container = container
        self._name = name

    async def exists(self) -> bool:
        return self._name in self._container.blobs

    async def upload_blob(self, data: Any, overwrite: bool = False, content_settings: Any = None) -> None:
        if not overwrite and self._name in self._container.blobs:
            raise ResourceExistsError(message=f"{self._name} already exists")
        self._container.blobs[self._name] = data if isinstance(data, bytes) else data.read()


class FakeContainerClient:
    """Stand-in for the async azure.storage.blob ContainerClient."""

    def __init__(self, container_name: str = "content", already_created: bool = False,
                 create_error: Optional[Exception] = None):
        self.container_name = container_name
        self.blobs: Dict[str, bytes] = {}
        self.create_calls = 0
        self.closed = False
        self._created = already_created
        self._create_error = create_error

    async def create_container(self) -> None:
        self.create_calls += 1
        if self._create_error is not None:
            raise self._create_error
        if self._created:
            raise ResourceExistsError(message="The specified container already exists.")
        self._created = True

    def get_blob_client(self, blob_name: str) -> FakeBlobClient:
        return FakeBlobClient(self, blob_name)

    async def close(self) -> None:
        self.closed = True

    async def __aenter__(self) -> "FakeContainerClient":
        return self


class FakeSearchResults:
    """Async iterator over canned hits, like AsyncSearchItemPaged."""

    def __init__(self, hits: List[Dict[str, Any]]):
        self._hits = list(hits)

    def __aiter__(self):
        self._iter = iter(self._hits)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeSearchClient:
    """Search client fake capturing the keyword arguments it was called with."""

    def __init__(self, hits: Optional[List[Dict[str, Any]]] = None, return_none: bool = False,
                 error: Optional[Exception] = None):
        self._hits = hits or []
        self._return_none = return_none
        self._error = error
        self.calls: List[Dict[str, Any]] = []

    async def search(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        if self._return_none:
            return None
        return FakeSearchResults(self._hits)


@pytest.fixture
def content_store():
    return InMemoryContentStore()


@pytest.fixture
def two_page_pdf() -> bytes:
    return make_pdf_bytes(2)
