"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class SensitiveType(str, Enum):
    """Closed taxonomy of findings.  Values are the wire names."""
    EMAIL = "email"
    PHONE = "phone"
    SSN = "ssn"
    CARD = "card"
    BANK = "bank"
    INSURANCE_POLICY = "insurancePolicy"
    EMPLOYEE_ID = "employeeId"
    MEDICAL_RECORD_NUMBER = "medicalRecordNumber"


@dataclass(frozen=True, slots=True)
class SensitiveMatch:
    """A single detected identifier.  Carries no position."""
    type: SensitiveType
    value: str             # exact surface text, trimmed

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "value": self.value}


@dataclass(slots=True)
class RedactionResult:
    """Result of redacting a plain-text document."""
    text: str                                                 # redacted text
    matches: list[SensitiveMatch] = field(default_factory=list)
    counts: dict[SensitiveType, int] = field(default_factory=dict)  # distinct matches per type
    redactions_total: int = 0                                 # occurrences replaced
    header_updated: bool = False

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "matches": [m.to_dict() for m in self.matches],
            "counts": {t.value: n for t, n in self.counts.items()},
            "redactions_total": self.redactions_total,
            "header_updated": self.header_updated,
        }
