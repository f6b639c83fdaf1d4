"""
In-process document store with BM25 ranked search and JSON persistence.
"""

import json
import os
import re
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
from rank_bm25 import BM25L

from .interface import DocumentStoreInterface, SearchHit
from ..exceptions import StoreException, DocumentNotFoundException, ConfigurationException

_TOKEN = re.compile(r'\b\w+\b')


def tokenize(text: Any) -> List[str]:
    """Lowercased word tokens of a field value."""
    if not isinstance(text, str):
        return []
    return [token.lower() for token in _TOKEN.findall(text)]


def _field_matches(value: Any, allowed: Iterable[Any]) -> bool:
    """Exact match against a scalar or any element of a list field."""
    allowed = list(allowed)
    if isinstance(value, (list, tuple)):
        return any(item in allowed for item in value)
    return value in allowed


class LocalDocumentStore(DocumentStoreInterface):
    """
    Store that keeps every index in memory.

    When ``storage_path`` is set each index is written to
    ``<storage_path>/<index>.json``. Text queries are ranked with BM25L over
    the tokenized query field; each satisfied terms clause adds 1.0.
    """

    def __init__(
        self,
        storage_path: Optional[str] = None,
        k1: float = 1.2,
        b: float = 0.75,
        persist_on_write: bool = True,
        logger=None
    ):
        """
        Initialize the local store.

        Args:
            storage_path: Directory for JSON persistence, or None for memory only
            k1: BM25 term frequency saturation
            b: BM25 length normalization
            persist_on_write: Persist after every write when storage_path is set
            logger: Optional StructuredLogger
        """
        if k1 < 0:
            raise ConfigurationException("k1 cannot be negative")
        if not 0 <= b <= 1:
            raise ConfigurationException("b must be between 0 and 1")

        self.storage_path = Path(storage_path) if storage_path else None
        self.k1 = k1
        self.b = b
        self.persist_on_write = persist_on_write
        self.logger = logger

        self._indices: Dict[str, Dict[str, Dict[str, Any]]] = {}
        # (index, field) -> (doc ids, token sets, ranker or None)
        self._rankers: Dict[Tuple[str, str], Tuple[List[str], List[set], Optional[BM25L]]] = {}
        self._lock = threading.RLock()

        if self.storage_path is not None:
            self.storage_path.mkdir(parents=True, exist_ok=True)
            self.load()

    def index_document(
        self,
        index: str,
        document: Dict[str, Any],
        doc_id: Optional[str] = None
    ) -> str:
        doc_id = doc_id or str(uuid.uuid4())

        with self._lock:
            self._indices.setdefault(index, {})[doc_id] = dict(document)
            self._invalidate(index)
            self._persist_if_enabled(index)

        return doc_id

    def get_document(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._indices.get(index, {}).get(doc_id)
            return dict(document) if document is not None else None

    def update_document(self, index: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            documents = self._indices.get(index, {})
            if doc_id not in documents:
                raise DocumentNotFoundException(index, doc_id)

            documents[doc_id].update(fields)
            self._invalidate(index)
            self._persist_if_enabled(index)
            return dict(documents[doc_id])

    def search(
        self,
        index: str,
        queries: Iterable[str],
        field: str = "content",
        terms: Optional[Dict[str, Iterable[str]]] = None,
        size: int = 10
    ) -> List[SearchHit]:
        queries = [q for q in queries if q]
        terms = {name: list(values) for name, values in (terms or {}).items()}

        with self._lock:
            documents = self._indices.get(index, {})
            if not documents:
                return []

            doc_ids, token_sets, ranker = self._ranker(index, field)
            scores = np.zeros(len(doc_ids))
            matched = np.zeros(len(doc_ids), dtype=bool)

            for query in queries:
                query_tokens = tokenize(query)
                overlap = np.array(
                    [bool(token_sets[i].intersection(query_tokens)) for i in range(len(doc_ids))],
                    dtype=bool
                )
                if ranker is None or not overlap.any():
                    continue
                scores += np.where(overlap, ranker.get_scores(query_tokens), 0.0)
                matched |= overlap

            for name, values in terms.items():
                satisfied = np.array(
                    [_field_matches(documents[doc_id].get(name), values) for doc_id in doc_ids],
                    dtype=bool
                )
                scores += satisfied.astype(float)
                matched |= satisfied

            # Stable sort keeps insertion order among equal scores
            order = np.argsort(-scores, kind="stable")
            hits = [
                SearchHit(id=doc_ids[i], source=dict(documents[doc_ids[i]]), score=float(scores[i]))
                for i in order if matched[i]
            ]

        return hits[:size]

    def filter(
        self,
        index: str,
        field_values: Dict[str, Any],
        size: int = 100
    ) -> List[SearchHit]:
        with self._lock:
            hits = [
                SearchHit(id=doc_id, source=dict(document), score=1.0)
                for doc_id, document in self._indices.get(index, {}).items()
                if self._matches_all(document, field_values)
            ]
        return hits[:size]

    def list_documents(
        self,
        index: str,
        size: int = 100,
        sort_by: Optional[str] = None,
        descending: bool = True
    ) -> List[SearchHit]:
        with self._lock:
            items = list(self._indices.get(index, {}).items())

        if sort_by:
            # Documents missing the field sort last
            present = [item for item in items if item[1].get(sort_by) is not None]
            missing = [item for item in items if item[1].get(sort_by) is None]
            present.sort(key=lambda item: item[1][sort_by], reverse=descending)
            items = present + missing

        return [
            SearchHit(id=doc_id, source=dict(document), score=1.0)
            for doc_id, document in items[:size]
        ]

    def count(self, index: str, field_values: Optional[Dict[str, Any]] = None) -> int:
        with self._lock:
            documents = self._indices.get(index, {})
            if not field_values:
                return len(documents)
            return sum(1 for document in documents.values() if self._matches_all(document, field_values))

    def index_names(self) -> List[str]:
        """Names of all indices holding at least one document."""
        with self._lock:
            return [name for name, documents in self._indices.items() if documents]

    def persist(self) -> bool:
        if self.storage_path is None:
            return False

        with self._lock:
            for index in list(self._indices):
                self._write_index(index)

        return True

    def load(self) -> bool:
        if self.storage_path is None or not self.storage_path.exists():
            return False

        loaded = False
        with self._lock:
            for index_file in sorted(self.storage_path.glob("*.json")):
                try:
                    with open(index_file, "r", encoding="utf-8") as f:
                        self._indices[index_file.stem] = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    raise StoreException(f"Failed to load index '{index_file.stem}': {str(e)}")
                loaded = True
            self._rankers.clear()

        if loaded and self.logger:
            self.logger.info(
                f"Loaded {len(self._indices)} indices from {self.storage_path}"
            )
        return loaded

    def health_check(self) -> bool:
        if self.storage_path is None:
            return True
        return self.storage_path.is_dir()

    def _ranker(self, index: str, field: str) -> Tuple[List[str], List[set], Optional[BM25L]]:
        """Build (or reuse) the BM25 ranker for one index field."""
        key = (index, field)
        if key not in self._rankers:
            documents = self._indices.get(index, {})
            doc_ids = list(documents.keys())
            corpus = [tokenize(documents[doc_id].get(field)) for doc_id in doc_ids]
            # BM25 needs a non-empty corpus with at least one token
            ranker = BM25L(corpus, k1=self.k1, b=self.b) if any(corpus) else None
            self._rankers[key] = (doc_ids, [set(tokens) for tokens in corpus], ranker)
        return self._rankers[key]

    def _invalidate(self, index: str) -> None:
        for key in [key for key in self._rankers if key[0] == index]:
            del self._rankers[key]

    def _persist_if_enabled(self, index: str) -> None:
        if self.persist_on_write and self.storage_path is not None:
            with self._lock:
                self._write_index(index)

    def _write_index(self, index: str) -> None:
        """Atomically replace one index file with the in-memory contents."""
        index_file = self.storage_path / f"{index}.json"
        try:
            fd, temp_path = tempfile.mkstemp(dir=self.storage_path, prefix=f".{index}.", suffix=".tmp")
        except OSError as e:
            raise StoreException(f"Failed to persist index '{index}': {str(e)}")

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._indices.get(index, {}), f, default=str)
            os.replace(temp_path, index_file)
        except (OSError, TypeError) as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise StoreException(f"Failed to persist index '{index}': {str(e)}")

    @staticmethod
    def _matches_all(document: Dict[str, Any], field_values: Dict[str, Any]) -> bool:
        for name, expected in field_values.items():
            value = document.get(name)
            if isinstance(value, (list, tuple)) and not isinstance(expected, (list, tuple)):
                if expected not in value:
                    return False
            elif value != expected:
                return False
        return True

    def __repr__(self) -> str:
        return (
            f"LocalDocumentStore(storage_path={self.storage_path}, "
            f"indices={len(self._indices)})"
        )
