"""
Risk scoring for detected PII kinds.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Union

from ..models.pii import PIIKind

RISK_WEIGHTS: Dict[PIIKind, float] = {
    PIIKind.SSN: 1.0,
    PIIKind.CREDIT_CARD: 0.9,
    PIIKind.DATE_OF_BIRTH: 0.6,
    PIIKind.PHONE: 0.4,
    PIIKind.EMAIL: 0.3,
    PIIKind.IP_ADDRESS: 0.2,
}
DEFAULT_WEIGHT = 0.2

# Two high-severity kinds together saturate the score
NORMALIZER = 2.0

FLAG_THRESHOLD = 0.7
MEDIUM_THRESHOLD = 0.3


@dataclass(frozen=True)
class RiskAssessment:
    """Normalized risk value and the auto-flag decision."""
    risk_score: float
    flagged: bool


def kind_weight(kind: Union[PIIKind, str]) -> float:
    """Weight of a single kind; unknown kinds get DEFAULT_WEIGHT."""
    return RISK_WEIGHTS.get(kind, DEFAULT_WEIGHT)


def score(kinds: Iterable[Union[PIIKind, str]]) -> RiskAssessment:
    """
    Score the set of distinct PII kinds found in a document.

    Each kind counts once no matter how many matches it had.
    """
    total = math.fsum(kind_weight(kind) for kind in set(kinds))
    risk_score = min(total / NORMALIZER, 1.0)
    return RiskAssessment(risk_score=risk_score, flagged=risk_score >= FLAG_THRESHOLD)


def risk_level(risk_score: float) -> str:
    """Display label for a risk score: HIGH, MEDIUM or LOW."""
    if risk_score >= FLAG_THRESHOLD:
        return "HIGH"
    if risk_score >= MEDIUM_THRESHOLD:
        return "MEDIUM"
    return "LOW"
