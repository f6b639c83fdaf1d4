"""
Remediation advice for detected PII.
"""

from typing import Iterable, List, Tuple, Union

from ..models.pii import PIIKind
from .risk_scoring import FLAG_THRESHOLD

NO_PII_MESSAGE = "No PII detected. Document appears safe."

ESCALATION_MESSAGE = (
    "⚠️ HIGH RISK: Document should be escalated to compliance team within 24 hours."
)

# Most severe first; display order follows this table
KIND_ADVICE: Tuple[Tuple[PIIKind, Tuple[str, ...]], ...] = (
    (PIIKind.SSN, (
        "🔴 CRITICAL: Social Security Number detected. Immediately delete this "
        "content and notify the Data Protection Officer.",
        "Reference: GDPR Article 9 (Special Categories), HIPAA PHI Guidelines",
    )),
    (PIIKind.CREDIT_CARD, (
        "🔴 CRITICAL: Credit card information detected. This violates PCI-DSS "
        "standards. Remove immediately.",
        "Action: Redact card number, notify payment security team.",
    )),
    (PIIKind.EMAIL, (
        "🟡 Email addresses detected. Verify if disclosure is authorized.",
        "Reference: Internal Policy COM-002 (Communication Channel Rules)",
    )),
    (PIIKind.PHONE, (
        "🟡 Phone numbers detected. Confirm necessity and authorization for sharing.",
    )),
    (PIIKind.DATE_OF_BIRTH, (
        "🟡 Date of birth detected. Combined with other PII, this increases "
        "identity theft risk.",
    )),
)


def recommend(kinds: Iterable[Union[PIIKind, str]], risk_score: float) -> List[str]:
    """
    Build ordered remediation advice.

    Args:
        kinds: Distinct PII kinds found in the document
        risk_score: Normalized risk score of the document

    Returns:
        Advice strings, most severe first, with an escalation notice last
        when the score reaches the flag threshold
    """
    present = set(kinds)
    if not present:
        return [NO_PII_MESSAGE]

    recommendations: List[str] = []
    for kind, advice in KIND_ADVICE:
        if kind in present:
            recommendations.extend(advice)

    if risk_score >= FLAG_THRESHOLD:
        recommendations.append(ESCALATION_MESSAGE)

    return recommendations
