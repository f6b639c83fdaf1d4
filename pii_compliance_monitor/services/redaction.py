"""
Display-safe masking of detected PII values.
"""

import re
from typing import Callable, Dict, Union

from ..models.pii import PIIKind

_DIGIT = re.compile(r'\d', re.ASCII)
_NON_DIGIT = re.compile(r'\D', re.ASCII)


def _redact_email(value: str) -> str:
    local, sep, domain = value.partition("@")
    if not sep:
        return "*" * len(value)
    return local[:2] + "*" * max(len(local) - 2, 0) + "@" + domain


def _redact_ssn(value: str) -> str:
    return "XXX-XX-" + value[7:]


def _redact_phone(value: str) -> str:
    digits_to_mask = max(len(_DIGIT.findall(value)) - 4, 0)
    masked = []
    for char in value:
        if digits_to_mask and char.isdigit():
            masked.append("*")
            digits_to_mask -= 1
        else:
            masked.append(char)
    return "".join(masked)


def _redact_credit_card(value: str) -> str:
    digits = _NON_DIGIT.sub("", value)
    return "**** **** **** " + digits[12:]


def _redact_date(value: str) -> str:
    return "**/**/****"


def _redact_ip(value: str) -> str:
    return "***.***.***.***"


REDACTORS: Dict[PIIKind, Callable[[str], str]] = {
    PIIKind.EMAIL: _redact_email,
    PIIKind.SSN: _redact_ssn,
    PIIKind.PHONE: _redact_phone,
    PIIKind.CREDIT_CARD: _redact_credit_card,
    PIIKind.DATE_OF_BIRTH: _redact_date,
    PIIKind.IP_ADDRESS: _redact_ip,
}


def redact(kind: Union[PIIKind, str], raw_value: str) -> str:
    """
    Produce the masked display form of a matched value.

    Pure and deterministic per (kind, raw_value). Kinds without a dedicated
    rule are fully masked character by character.
    """
    try:
        redactor = REDACTORS[PIIKind(kind)]
    except ValueError:
        return "*" * len(raw_value)
    return redactor(raw_value)
