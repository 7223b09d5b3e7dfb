"""Retrieval models for hybrid search queries and their results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from azure.search.documents.models import (
    QueryCaptionType,
    QueryType,
    VectorizedQuery,
)

DEFAULT_TOP = 3


class RetrievalMode(str, Enum):
    """Which retrieval channels a query may use."""

    TEXT = "Text"
    VECTOR = "Vector"
    HYBRID = "Hybrid"


@dataclass(frozen=True)
class RetrievalOptions:
    """Per-query retrieval settings supplied by the caller."""

    top: int = DEFAULT_TOP
    source_file: Optional[str] = None
    semantic_ranker: bool = False
    semantic_captions: bool = False
    retrieval_mode: Optional[RetrievalMode] = None

    @property
    def use_semantic_captions(self) -> bool:
        """Captions only exist when the semantic ranker produced them."""
        # Unlike gating on semantic_captions alone, this never drops every hit
        # for lack of captions when the ranker is off
        return self.semantic_ranker and self.semantic_captions


@dataclass(frozen=True)
class VectorClause:
    """Vector similarity clause of a search request."""

    vector: Tuple[float, ...]
    k_nearest_neighbors: int
    fields: str


@dataclass(frozen=True)
class SearchRequest:
    """Assembled search request, built once per query and only sent."""

    search_text: Optional[str]
    filter: str
    top: int
    query_type: Optional[QueryType] = None
    semantic_configuration_name: Optional[str] = None
    query_caption: Optional[QueryCaptionType] = None
    vector_queries: Tuple[VectorClause, ...] = field(default_factory=tuple)

    @property
    def is_semantic(self) -> bool:
        return self.query_type == QueryType.SEMANTIC

    def to_search_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for azure.search.documents SearchClient.search."""
        kwargs: Dict[str, Any] = {
            "search_text": self.search_text,
            "top": self.top,
        }
        # An empty $filter is rejected by the service
        if self.filter:
            kwargs["filter"] = self.filter
        if self.is_semantic:
            kwargs["query_type"] = self.query_type
            kwargs["semantic_configuration_name"] = self.semantic_configuration_name
            kwargs["query_caption"] = self.query_caption
        if self.vector_queries:
            kwargs["vector_queries"] = [
                VectorizedQuery(
                    vector=list(clause.vector),
                    k_nearest_neighbors=clause.k_nearest_neighbors,
                    fields=clause.fields,
                )
                for clause in self.vector_queries
            ]
        return kwargs


@dataclass(frozen=True)
class SupportingContentRecord:
    """A cleaned single-line text fragment and the page it came from."""

    source_page: str
    content: str


def records_to_dicts(records: List[SupportingContentRecord]) -> List[Dict[str, str]]:
    return [{"source_page": r.source_page, "content": r.content} for r in records]
