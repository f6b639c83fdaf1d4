"""
Service layer: PII detection, redaction, risk scoring, policy matching and advice.
"""

from .pii_detection import PIIDetectionService, detect
from .redaction import redact
from .risk_scoring import RiskAssessment, score, risk_level
from .analyzer import PIIAnalyzer, analyze
from .policy_matcher import PolicyMatcher
from .recommendations import recommend
from .observability import StructuredLogger

__all__ = [
    "PIIDetectionService",
    "detect",
    "redact",
    "RiskAssessment",
    "score",
    "risk_level",
    "PIIAnalyzer",
    "analyze",
    "PolicyMatcher",
    "recommend",
    "StructuredLogger",
]
