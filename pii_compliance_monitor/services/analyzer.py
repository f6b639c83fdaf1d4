"""
Analysis assembler: detection, redaction and risk scoring for one document.
"""

from dataclasses import replace
from typing import Any, List, Optional

from ..models.pii import AnalysisResult, PIIKind, PIIMatch
from .observability import StructuredLogger
from .pii_detection import PIIDetectionService
from .redaction import redact
from .risk_scoring import score


class PIIAnalyzer:
    """Runs the detector, redacts every match and scores the kinds found."""

    def __init__(
        self,
        detector: Optional[PIIDetectionService] = None,
        logger: Optional[StructuredLogger] = None
    ):
        self.detector = detector or PIIDetectionService()
        self.logger = logger

    def analyze(self, text: Any) -> AnalysisResult:
        """
        Analyze a document's text.

        Missing or non-string content yields the zero-finding result.
        """
        if not isinstance(text, str) or not text:
            return AnalysisResult.empty()

        matches = [self._redacted(match) for match in self.detector.detect_pii(text)]
        kinds = self._distinct_kinds(matches)
        assessment = score(kinds)

        if self.logger:
            # Only counts and kinds are logged, never matched values
            self.logger.debug(
                "Analyzed document",
                pii_count=len(matches),
                pii_types=[kind.value for kind in kinds],
                risk_score=assessment.risk_score,
                flagged=assessment.flagged
            )

        return AnalysisResult(
            matches=tuple(matches),
            kinds=tuple(kinds),
            risk_score=assessment.risk_score,
            flagged=assessment.flagged
        )

    @staticmethod
    def _redacted(match: PIIMatch) -> PIIMatch:
        return replace(match, redacted_value=redact(match.kind, match.raw_value))

    @staticmethod
    def _distinct_kinds(matches: List[PIIMatch]) -> List[PIIKind]:
        kinds: List[PIIKind] = []
        for match in matches:
            if match.kind not in kinds:
                kinds.append(match.kind)
        return kinds


_default_analyzer = PIIAnalyzer()


def analyze(text: Any) -> AnalysisResult:
    """Analyze text with the default detector."""
    return _default_analyzer.analyze(text)
