"""
Abstract base class for document and policy store backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class SearchHit:
    """A ranked document returned by a store query."""
    id: str
    source: Dict[str, Any]
    score: float


class DocumentStoreInterface(ABC):
    """Abstract interface for the store holding monitored documents and policies."""

    @abstractmethod
    def index_document(
        self,
        index: str,
        document: Dict[str, Any],
        doc_id: Optional[str] = None
    ) -> str:
        """
        Add or replace a document in an index.

        Args:
            index: Index name
            document: Document fields
            doc_id: Optional explicit ID (generated when omitted)

        Returns:
            ID of the stored document
        """
        pass

    @abstractmethod
    def get_document(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a document by ID.

        Returns:
            Document fields if found, None otherwise
        """
        pass

    @abstractmethod
    def update_document(self, index: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge fields into an existing document.

        Returns:
            The updated document

        Raises:
            DocumentNotFoundException: If the document does not exist
        """
        pass

    @abstractmethod
    def search(
        self,
        index: str,
        queries: Iterable[str],
        field: str = "content",
        terms: Optional[Dict[str, Iterable[str]]] = None,
        size: int = 10
    ) -> List[SearchHit]:
        """
        Ranked free-text search.

        A document is a hit when it matches any of the text queries on
        ``field`` or any of the exact-value ``terms`` clauses.

        Args:
            index: Index name
            queries: Free-text queries, OR-combined
            field: Field the text queries run against
            terms: Field name -> allowed values, each an OR-ed clause
            size: Maximum number of hits

        Returns:
            Hits ordered by descending score
        """
        pass

    @abstractmethod
    def filter(
        self,
        index: str,
        field_values: Dict[str, Any],
        size: int = 100
    ) -> List[SearchHit]:
        """
        Exact-match filter; every field must equal its value.

        Returns:
            Matching documents in insertion order
        """
        pass

    @abstractmethod
    def list_documents(
        self,
        index: str,
        size: int = 100,
        sort_by: Optional[str] = None,
        descending: bool = True
    ) -> List[SearchHit]:
        """List documents of an index, optionally sorted by a field."""
        pass

    @abstractmethod
    def count(self, index: str, field_values: Optional[Dict[str, Any]] = None) -> int:
        """Number of documents in an index, optionally filtered."""
        pass

    @abstractmethod
    def persist(self) -> bool:
        """
        Persist the store to storage.

        Returns:
            True if persistence was successful
        """
        pass

    @abstractmethod
    def load(self) -> bool:
        """
        Load the store from storage.

        Returns:
            True if anything was loaded
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if the store is healthy and accessible.

        Returns:
            True if the store is healthy
        """
        pass
