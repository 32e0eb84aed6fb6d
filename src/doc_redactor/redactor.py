"""Redactor: plain-text consumer of the detection engine.

Usage:
    from doc_redactor import Redactor

    redactor = Redactor()
    result = redactor.redact("Reach me at john@acme.com, MRN- 998877")
    print(result.text)
    # CONFIDENTIAL DOCUMENT
    # Reach me at [REDACTED EMAIL], MRN-[REDACTED]

Matches carry no offsets, so every value is re-located by a
case-insensitive literal search, one type group at a time.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field

from .patterns import detect
from .types import RedactionResult, SensitiveMatch, SensitiveType

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "CONFIDENTIAL DOCUMENT"

DEFAULT_MARKERS: dict[SensitiveType, str] = {
    SensitiveType.EMAIL: "[REDACTED EMAIL]",
    SensitiveType.PHONE: "[REDACTED PHONE]",
    SensitiveType.SSN: "[REDACTED SSN]",
    SensitiveType.CARD: "[REDACTED CARD]",
    SensitiveType.BANK: "[REDACTED BANK]",
    SensitiveType.INSURANCE_POLICY: "INS-[REDACTED]",
    SensitiveType.EMPLOYEE_ID: "EMP-[REDACTED]",
    SensitiveType.MEDICAL_RECORD_NUMBER: "MRN-[REDACTED]",
}


@dataclass
class RedactorConfig:
    """Configuration for the Redactor."""
    add_header: bool = True
    header_text: str = DEFAULT_HEADER
    # Partial overrides are merged over DEFAULT_MARKERS
    markers: dict[SensitiveType, str] = field(default_factory=dict)
    # Types to leave in place (e.g. keep emails readable)
    skip_types: set[SensitiveType] = field(default_factory=set)
    # Values that should NEVER be redacted (compared case-insensitively)
    allow_list: set[str] = field(default_factory=set)

    def marker_for(self, sensitive_type: SensitiveType) -> str:
        return self.markers.get(sensitive_type, DEFAULT_MARKERS[sensitive_type])


class Redactor:
    """Detects sensitive identifiers and replaces them with per-type markers."""

    def __init__(self, config: RedactorConfig | None = None) -> None:
        self.config = config or RedactorConfig()

    def find(self, text: str) -> list[SensitiveMatch]:
        """Run detection and apply skip_types / allow_list."""
        allowed = {v.lower() for v in self.config.allow_list}
        return [
            m for m in detect(text)
            if m.type not in self.config.skip_types and m.value.lower() not in allowed
        ]

    def redact(self, text: str) -> RedactionResult:
        """Redact ``text`` and report what was found and replaced."""
        cfg = self.config

        header_updated = False
        if cfg.add_header:
            header_updated = not _has_header(text, cfg.header_text)
            logger.info(
                "Header %s",
                "updated" if header_updated else "already present (no change)",
            )

        logger.info("Scanning document text (%s chars)", f"{len(text):,}")
        matches = self.find(text)

        counts = {t: 0 for t in SensitiveType}
        for m in matches:
            counts[m.type] += 1
        logger.info(
            "Found: %s",
            ", ".join(f"{n} {t.value}" for t, n in counts.items()),
        )

        result_text = text
        total = 0
        for sensitive_type in SensitiveType:
            group = [m for m in matches if m.type == sensitive_type]
            if not group:
                continue
            result_text, replaced = _replace_group(
                result_text, group, cfg.marker_for(sensitive_type)
            )
            logger.debug("%s: %d occurrence(s) replaced", sensitive_type.value, replaced)
            total += replaced

        if header_updated:
            result_text = f"{cfg.header_text}\n{result_text}"

        return RedactionResult(
            text=result_text,
            matches=matches,
            counts=counts,
            redactions_total=total,
            header_updated=header_updated,
        )


def _has_header(text: str, header: str) -> bool:
    return text.lstrip().upper().startswith(header.upper())


def _replace_group(
    text: str,
    group: list[SensitiveMatch],
    marker: str,
) -> tuple[str, int]:
    """Replace every case-insensitive occurrence of each value in the group."""
    total = 0
    for match in group:
        pattern = re.compile(re.escape(match.value), re.IGNORECASE)
        # Literal replacement: markers may contain backslashes
        text, n = pattern.subn(lambda _m: marker, text)
        total += n
    return text, total
