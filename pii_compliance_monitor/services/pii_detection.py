"""
PII (Personally Identifiable Information) detection service.
"""

import re
from dataclasses import dataclass
from typing import List, Dict, Any, Optional

from ..models.pii import PIIKind, PIIMatch


@dataclass(frozen=True)
class PIIPattern:
    """Pattern for detecting one kind of PII."""
    kind: PIIKind
    pattern: re.Pattern
    confidence: float
    description: str
    # Candidates whose whole span matches this are dropped
    exclude: Optional[re.Pattern] = None


class PIIDetectionService:
    """
    Regex-based PII recognizer.

    Every pattern scans the whole text independently, so matches of different
    kinds may overlap. The only cross-kind suppression is that a phone
    candidate shaped exactly like an SSN is skipped.
    """

    def __init__(self):
        """Initialize PII detection service."""
        self.patterns = self._initialize_patterns()

    def _initialize_patterns(self) -> List[PIIPattern]:
        """Initialize regex patterns for PII detection, in scan order."""
        ssn_shape = re.compile(r'\d{3}-\d{2}-\d{4}', re.ASCII)

        patterns = [
            # Email addresses
            PIIPattern(
                kind=PIIKind.EMAIL,
                pattern=re.compile(
                    r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}'
                ),
                confidence=0.95,
                description="Email address"
            ),

            # Social Security Numbers, dashed form only
            PIIPattern(
                kind=PIIKind.SSN,
                pattern=re.compile(r'\b\d{3}-\d{2}-\d{4}\b', re.ASCII),
                confidence=0.99,
                description="Social Security Number"
            ),

            # Phone numbers (US format)
            PIIPattern(
                kind=PIIKind.PHONE,
                pattern=re.compile(
                    r'\b(?:\+1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b',
                    re.ASCII
                ),
                confidence=0.85,
                description="US phone number",
                exclude=ssn_shape
            ),

            # Credit card numbers: 16 digits in groups of four, no Luhn check
            PIIPattern(
                kind=PIIKind.CREDIT_CARD,
                pattern=re.compile(r'\b(?:\d{4}[- ]?){3}\d{4}\b', re.ASCII),
                confidence=0.90,
                description="Credit card number"
            ),

            # Any MM/DD/YYYY or MM-DD-YYYY date between 1900 and 2099
            PIIPattern(
                kind=PIIKind.DATE_OF_BIRTH,
                pattern=re.compile(
                    r'\b(?:0[1-9]|1[0-2])[/-](?:0[1-9]|[12]\d|3[01])[/-](?:19|20)\d{2}\b',
                    re.ASCII
                ),
                confidence=0.75,
                description="Date of birth"
            ),

            # IPv4 addresses
            PIIPattern(
                kind=PIIKind.IP_ADDRESS,
                pattern=re.compile(
                    r'\b(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}'
                    r'(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\b',
                    re.ASCII
                ),
                confidence=0.80,
                description="IP address"
            ),
        ]

        return patterns

    def detect_pii(self, text: Any) -> List[PIIMatch]:
        """
        Detect PII in text.

        Args:
            text: Text to analyze. Anything that is not a non-empty string
                yields no matches.

        Returns:
            Matches grouped by pattern in scan order (all emails first, then
            SSNs, and so on). Callers needing text order must sort.
        """
        if not isinstance(text, str) or not text:
            return []

        matches = []
        for pattern in self.patterns:
            matches.extend(self._scan(pattern, text))

        return matches

    def _scan(self, pattern: PIIPattern, text: str) -> List[PIIMatch]:
        """Run one pattern over the full text."""
        matches = []

        for match in pattern.pattern.finditer(text):
            value = match.group()
            if pattern.exclude is not None and pattern.exclude.fullmatch(value):
                continue

            matches.append(PIIMatch(
                kind=pattern.kind,
                raw_value=value,
                redacted_value="",
                start=match.start(),
                end=match.end(),
                confidence=pattern.confidence
            ))

        return matches

    def get_pii_summary(self, matches: List[PIIMatch]) -> Dict[str, Any]:
        """
        Get summary of detected PII.

        Args:
            matches: List of PII matches

        Returns:
            Summary dictionary
        """
        if not matches:
            return {
                "total_matches": 0,
                "pii_types": [],
                "type_counts": {},
                "total_chars_covered": 0
            }

        type_counts: Dict[str, int] = {}
        total_chars_covered = 0

        for match in matches:
            type_counts[match.kind.value] = type_counts.get(match.kind.value, 0) + 1
            total_chars_covered += match.length

        return {
            "total_matches": len(matches),
            "pii_types": list(type_counts.keys()),
            "type_counts": type_counts,
            "total_chars_covered": total_chars_covered
        }

    def get_available_patterns(self) -> List[Dict[str, Any]]:
        """
        Get information about available PII patterns.

        Returns:
            List of pattern information
        """
        return [
            {
                "kind": pattern.kind.value,
                "confidence": pattern.confidence,
                "description": pattern.description
            }
            for pattern in self.patterns
        ]

    def health_check(self) -> bool:
        """
        Perform health check on PII detection service.

        Returns:
            True if service is healthy
        """
        test_text = "Contact me at john.doe@example.com or call 555-123-4567"
        detected_kinds = {m.kind for m in self.detect_pii(test_text)}
        return {PIIKind.EMAIL, PIIKind.PHONE} <= detected_kinds

    def __repr__(self) -> str:
        return f"PIIDetectionService(patterns={len(self.patterns)})"


_default_service = PIIDetectionService()


def detect(text: Any) -> List[PIIMatch]:
    """Scan text with the default pattern set."""
    return _default_service.detect_pii(text)
