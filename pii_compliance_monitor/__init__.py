"""
PII Compliance Monitor - detection and risk scoring of personal data in free text.

This package scans chat messages, emails and review comments for personally
identifiable information, scores the risk, flags documents for compliance
review, and cross-references findings against a library of policy clauses.
"""

from .manager import ComplianceMonitor
from .models import (
    MonitorConfig, StoreConfig, ObservabilityConfig, MonitoredDocument,
    Violation, ViolationStatus, HealthStatus, PIIKind, PIIMatch,
    AnalysisResult, PolicyClause, PolicyMatch
)
from .services import (
    PIIDetectionService, PIIAnalyzer, PolicyMatcher, StructuredLogger,
    detect, redact, score, risk_level, analyze, recommend
)
from .ingestion import DocumentIngestor, IngestionSummary
from .factory import StoreFactory
from .storage import DocumentStoreInterface, LocalDocumentStore, SearchHit
from .exceptions import (
    ComplianceMonitorException,
    ConfigurationException,
    StoreException,
    DocumentNotFoundException,
    PolicyLookupException,
    InvalidDocumentException
)

__version__ = "0.1.0"

__all__ = [
    "ComplianceMonitor",
    "MonitorConfig",
    "StoreConfig",
    "ObservabilityConfig",
    "MonitoredDocument",
    "Violation",
    "ViolationStatus",
    "HealthStatus",
    "PIIKind",
    "PIIMatch",
    "AnalysisResult",
    "PolicyClause",
    "PolicyMatch",
    "PIIDetectionService",
    "PIIAnalyzer",
    "PolicyMatcher",
    "StructuredLogger",
    "detect",
    "redact",
    "score",
    "risk_level",
    "analyze",
    "recommend",
    "DocumentIngestor",
    "IngestionSummary",
    "StoreFactory",
    "DocumentStoreInterface",
    "LocalDocumentStore",
    "SearchHit",
    "ComplianceMonitorException",
    "ConfigurationException",
    "StoreException",
    "DocumentNotFoundException",
    "PolicyLookupException",
    "InvalidDocumentException",
]
