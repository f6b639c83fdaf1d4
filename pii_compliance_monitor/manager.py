"""
Main ComplianceMonitor orchestrator that coordinates analysis, storage and policy lookup.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

import psutil

from .exceptions import PolicyLookupException
from .factory import StoreFactory
from .ingestion import DOCUMENT_INDEX, DocumentIngestor, IngestionSummary
from .models.config import MonitorConfig
from .models.document import MonitoredDocument, Violation, apply_violation_update
from .models.health import HealthStatus
from .models.observability import create_log_context
from .models.policy import PolicyClause
from .services.analyzer import PIIAnalyzer
from .services.observability import StructuredLogger
from .services.pii_detection import PIIDetectionService
from .services.policy_matcher import POLICY_INDEX, PolicyMatcher
from .services.recommendations import recommend
from .services.risk_scoring import FLAG_THRESHOLD, risk_level
from .storage.interface import DocumentStoreInterface, SearchHit

VIOLATION_INDEX = "flagged-violations"

# Upper bound for scans that aggregate over a whole index
_SCAN_SIZE = 10000


def _hit_to_dict(hit: SearchHit) -> Dict[str, Any]:
    return {"id": hit.id, **hit.source}


class ComplianceMonitor:
    """
    Main orchestrator that runs the analysis pipeline for incoming documents
    and serves the document, policy and violation views built on the store.
    """

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        store: Optional[DocumentStoreInterface] = None,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the compliance monitor.

        Args:
            config: Monitor configuration (defaults are used when omitted)
            store: Store collaborator; created from ``config.store`` when omitted
            logger: Structured logger; created from ``config.observability`` when omitted

        Raises:
            ConfigurationException: If the configuration is invalid or the
                store cannot be created
        """
        self.config = config or MonitorConfig()
        # Only a logger created here is closed by close()
        self._owns_logger = logger is None
        self.logger = logger or StructuredLogger.from_config(self.config.observability)
        self.store = store or StoreFactory.create_store(self.config.store, logger=self.logger)

        self.detector = PIIDetectionService()
        self.analyzer = PIIAnalyzer(self.detector, logger=self.logger)
        self.policy_matcher = PolicyMatcher(self.store)
        self.ingestor = DocumentIngestor(self.store, analyzer=self.analyzer, logger=self.logger)

    def analyze_document(
        self,
        content: str,
        source: str = "manual",
        author: str = "user"
    ) -> Dict[str, Any]:
        """
        Analyze, store and cross-reference a manually submitted document.

        A failed policy lookup is logged and leaves ``matchedPolicies`` empty;
        the detection result is still returned.

        Returns:
            Analysis report keyed for the HTTP API

        Raises:
            StoreException: If the document cannot be stored
        """
        log_context = create_log_context(operation="analyze_document", component="ComplianceMonitor")
        self.logger.set_context(log_context)

        try:
            analysis = self.analyzer.analyze(content)
            document = MonitoredDocument(
                content=content,
                source=source,
                channel="manual-upload",
                author=author,
                author_email=f"{author}@manual.input",
                analysis=analysis
            )
            doc_id = self.store.index_document(DOCUMENT_INDEX, document.to_dict(), doc_id=document.doc_id)

            matched_policies = []
            try:
                matched_policies = self.policy_matcher.find_matching_policies(analysis.kinds)
            except PolicyLookupException as e:
                e.correlation_id = log_context.correlation_id
                self.logger.warn(
                    "Policy lookup failed; returning detection result without policies",
                    document_id=doc_id,
                    error=str(e)
                )

            self.logger.info(
                "Analyzed document",
                document_id=doc_id,
                pii_count=analysis.count,
                risk_level=risk_level(analysis.risk_score),
                flagged=analysis.flagged,
                matched_policies=len(matched_policies)
            )

            return {
                "documentId": doc_id,
                "content": content,
                "piiDetected": [match.to_dict() for match in analysis.matches],
                "piiCount": analysis.count,
                "piiTypes": [kind.value for kind in analysis.kinds],
                "riskScore": analysis.risk_score,
                "riskLevel": risk_level(analysis.risk_score),
                "flagged": analysis.flagged,
                "matchedPolicies": [policy.to_dict() for policy in matched_policies],
                "recommendations": recommend(analysis.kinds, analysis.risk_score),
            }
        finally:
            self.logger.clear_context()

    def ingest_documents(self, raw_documents: Iterable[Dict[str, Any]]) -> IngestionSummary:
        """Analyze and index a batch of raw documents."""
        return self.ingestor.ingest(raw_documents)

    def ingest_policies(self, clauses: Iterable[Union[PolicyClause, Dict[str, Any]]]) -> List[str]:
        """Index compliance policy clauses."""
        return self.ingestor.ingest_policies(clauses)

    def get_stats(self) -> Dict[str, int]:
        """Dashboard counters."""
        documents = self.store.list_documents(DOCUMENT_INDEX, size=_SCAN_SIZE)
        return {
            "totalDocuments": self.store.count(DOCUMENT_INDEX),
            "flaggedDocuments": self.store.count(DOCUMENT_INDEX, {"flagged": True}),
            "highRiskDocuments": sum(
                1 for hit in documents if hit.source.get("risk_score", 0.0) >= FLAG_THRESHOLD
            ),
            "totalPolicies": self.store.count(POLICY_INDEX),
        }

    def list_documents(
        self,
        source: Optional[str] = None,
        flagged: Optional[bool] = None,
        min_risk: Optional[float] = None,
        size: int = 50
    ) -> List[Dict[str, Any]]:
        """Monitored documents, newest first, optionally above a minimum risk score."""
        field_values: Dict[str, Any] = {}
        if source:
            field_values["source"] = source
        if flagged is not None:
            field_values["flagged"] = flagged

        hits = self.store.filter(DOCUMENT_INDEX, field_values, size=_SCAN_SIZE)
        if min_risk is not None:
            hits = [hit for hit in hits if hit.source.get("risk_score", 0.0) >= min_risk]
        hits.sort(key=lambda hit: hit.source.get("timestamp") or "", reverse=True)
        return [_hit_to_dict(hit) for hit in hits[:size]]

    def flagged_documents(self, size: int = 50) -> List[Dict[str, Any]]:
        """Documents flagged for review, highest risk first."""
        hits = self.store.filter(DOCUMENT_INDEX, {"flagged": True}, size=_SCAN_SIZE)
        hits.sort(key=lambda hit: hit.source.get("risk_score", 0.0), reverse=True)
        return [_hit_to_dict(hit) for hit in hits[:size]]

    def list_policies(self, framework: Optional[str] = None, size: int = 100) -> List[Dict[str, Any]]:
        """Policy clauses, optionally restricted to one framework."""
        field_values = {"framework": framework} if framework else {}
        return [_hit_to_dict(hit) for hit in self.store.filter(POLICY_INDEX, field_values, size=size)]

    def search_policies(
        self,
        query: str,
        size: int = 10,
        framework: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Free-text policy search over clause content, optionally within one framework."""
        hits = self.store.search(
            POLICY_INDEX, queries=[query], field="content",
            size=_SCAN_SIZE if framework else size
        )
        if framework:
            # Store terms clauses widen a search, so the framework narrows the hits here
            hits = [hit for hit in hits if hit.source.get("framework") == framework][:size]
        return [{**_hit_to_dict(hit), "score": hit.score} for hit in hits]

    def create_violation(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Record a new violation in PENDING state."""
        record = Violation.from_request(fields).to_dict()
        violation_id = self.store.index_document(VIOLATION_INDEX, record)
        self.logger.info("Violation created", violation_id=violation_id, severity=record["severity"])
        return {"id": violation_id, **record}

    def update_violation(self, violation_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update to a violation.

        Raises:
            ValueError: If the status is unknown
            DocumentNotFoundException: If the violation does not exist
        """
        record = self.store.update_document(VIOLATION_INDEX, violation_id, apply_violation_update(updates))
        self.logger.info("Violation updated", violation_id=violation_id, status=record.get("status"))
        return {"id": violation_id, **record}

    def list_violations(self, status: Optional[str] = None, size: int = 100) -> List[Dict[str, Any]]:
        """Violations, most recently flagged first."""
        field_values = {"status": status} if status else {}
        hits = self.store.filter(VIOLATION_INDEX, field_values, size=_SCAN_SIZE)
        hits.sort(key=lambda hit: hit.source.get("flagged_at") or "", reverse=True)
        return [_hit_to_dict(hit) for hit in hits[:size]]

    def health(self) -> HealthStatus:
        """Health of the store and the detector, with process memory usage."""
        health_status = HealthStatus(status="healthy", timestamp=datetime.utcnow())

        try:
            store_healthy = self.store.health_check()
            health_status.add_component(
                "store", store_healthy,
                "Store is healthy" if store_healthy else "Store is unavailable"
            )
        except Exception as e:
            health_status.add_component("store", False, f"Store error: {str(e)}")

        detector_healthy = self.detector.health_check()
        health_status.add_component(
            "pii_detector", detector_healthy,
            "PII detector is healthy" if detector_healthy else "PII detector self-test failed",
            {"patterns": len(self.detector.patterns)}
        )

        memory_info = psutil.Process().memory_info()
        health_status.add_component(
            "process", True,
            f"Memory usage: {memory_info.rss / (1024 * 1024):.1f}MB",
            {"rss_mb": memory_info.rss / (1024 * 1024)}
        )

        return health_status

    def close(self) -> None:
        """Flush the store to disk and release the log handlers."""
        try:
            self.store.persist()
        finally:
            if self._owns_logger:
                self.logger.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
