"""
Ingestion workflow: analyze raw documents and submit them to the store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .exceptions import ComplianceMonitorException, InvalidDocumentException
from .models.document import MonitoredDocument
from .models.observability import create_log_context
from .models.policy import PolicyClause
from .services.analyzer import PIIAnalyzer
from .services.observability import StructuredLogger
from .services.policy_matcher import POLICY_INDEX
from .services.risk_scoring import FLAG_THRESHOLD, risk_level
from .storage.interface import DocumentStoreInterface

DOCUMENT_INDEX = "monitored-documents"


@dataclass
class IngestionSummary:
    """Outcome of one ingestion batch."""
    total: int = 0
    successful: int = 0
    failed: int = 0
    high_risk: int = 0
    flagged: int = 0
    document_ids: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "high_risk": self.high_risk,
            "flagged": self.flagged,
            "document_ids": list(self.document_ids),
            "errors": list(self.errors),
        }


class DocumentIngestor:
    """Enriches raw documents with their PII analysis and indexes them."""

    def __init__(
        self,
        store: DocumentStoreInterface,
        analyzer: Optional[PIIAnalyzer] = None,
        logger: Optional[StructuredLogger] = None,
        index: str = DOCUMENT_INDEX
    ):
        self.store = store
        self.analyzer = analyzer or PIIAnalyzer(logger=logger)
        self.logger = logger
        self.index = index

    def ingest_document(self, raw: Dict[str, Any]) -> MonitoredDocument:
        """
        Analyze and index a single raw document.

        Raises:
            InvalidDocumentException: If the payload is malformed
            StoreException: If the store rejects the document
        """
        if not isinstance(raw, dict):
            raise InvalidDocumentException(f"Document must be an object, got {type(raw).__name__}")
        document = MonitoredDocument.from_raw(raw, self.analyzer.analyze(raw.get("content")))
        self.store.index_document(self.index, document.to_dict(), doc_id=document.doc_id)
        return document

    def ingest(self, raw_documents: Iterable[Dict[str, Any]]) -> IngestionSummary:
        """
        Ingest a batch of raw documents.

        A malformed document or one the store rejects is counted as failed;
        the batch goes on.
        """
        summary = IngestionSummary()
        if self.logger:
            self.logger.set_context(create_log_context(operation="ingest", component="DocumentIngestor"))

        try:
            for position, raw in enumerate(raw_documents, start=1):
                summary.total += 1
                try:
                    document = self.ingest_document(raw)
                except ComplianceMonitorException as e:
                    summary.failed += 1
                    summary.errors.append(f"Document {position}: {str(e)}")
                    if self.logger:
                        self.logger.error(f"Failed to ingest document {position}", exception=e)
                    continue

                analysis = document.analysis
                summary.successful += 1
                summary.document_ids.append(document.doc_id)
                if analysis.risk_score >= FLAG_THRESHOLD:
                    summary.high_risk += 1
                if analysis.flagged:
                    summary.flagged += 1

                if self.logger:
                    self.logger.info(
                        f"Ingested document {position}",
                        document_id=document.doc_id,
                        source=document.source,
                        pii_count=analysis.count,
                        risk_level=risk_level(analysis.risk_score),
                        flagged=analysis.flagged
                    )

            if self.logger:
                self.logger.info("Ingestion complete", **summary.to_dict())
        finally:
            if self.logger:
                self.logger.clear_context()

        return summary

    def ingest_policies(self, clauses: Iterable[Union[PolicyClause, Dict[str, Any]]]) -> List[str]:
        """
        Index compliance policy clauses.

        Returns:
            IDs of the stored clauses

        Raises:
            StoreException: If the store rejects a clause
        """
        ids = []
        for clause in clauses:
            if isinstance(clause, dict):
                clause = PolicyClause.from_dict(clause)
            ids.append(self.store.index_document(POLICY_INDEX, clause.to_dict()))

        if self.logger:
            self.logger.info(f"Ingested {len(ids)} policy clauses")
        return ids
