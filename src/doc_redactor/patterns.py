"""Regex scanners for sensitive identifiers in document text.

Each family is one scanner: it walks ``finditer`` over the text, applies
the family's validator, and yields ``(dedup_key, surface_value)`` pairs.
``detect`` runs the families in a fixed order, collapses duplicates
within each family and tags the survivors with their type.
"""

from __future__ import annotations
import logging
import re
from typing import Callable, Iterable, Iterator

from .types import SensitiveMatch, SensitiveType
from .validators import (
    digits_only,
    is_accepted_card,
    is_plausible_ssn_last4,
    is_valid_iban,
    normalize_iban,
)

logger = logging.getLogger(__name__)

_I = re.IGNORECASE | re.ASCII

# re.ASCII keeps \d and \b ASCII-only, but \s must still cover the Unicode
# spaces Word text carries (U+00A0 and friends).  Patterns write whitespace
# as "\s" inside a character class; _compile widens it.
_SPACE_CHARS = r"\s\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"


def _compile(pattern: str, flags: int = re.ASCII) -> re.Pattern:
    return re.compile(pattern.replace(r"\s", _SPACE_CHARS), flags)


# Email: word-bounded so trailing punctuation is left out
EMAIL_RE = _compile(r"\b[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}\b", _I)

# Phone: US-style, optional country code.  Lookarounds instead of \b so a
# leading "(" is captured and longer digit runs are rejected.
PHONE_RE = _compile(
    r"(?<!\d)"
    r"(?:\+?\d{1,3}[\-.\s]*)?"
    r"(?:\([\s]*\d{3}[\s]*\)|\d{3})"
    r"[\-.\s]*\d{3}[\-.\s]*\d{4}"
    r"(?!\d)"
)

SSN_RE = _compile(r"\b\d{3}-\d{2}-\d{4}\b")

# "... social security number ending in 8234"
SSN_LAST4_RE = _compile(
    r"\b(?:social security number|ssn)\b[^0-9]{0,80}(\d{4})\b", _I
)

# 13-19 digits with optional space/dash separators
CARD_CANDIDATE_RE = _compile(r"(?<!\d)(?:\d[ \-]*?){13,19}(?!\d)")

# e.g. "GB82 WEST 1234 5698 7654 32"
IBAN_CANDIDATE_RE = _compile(
    r"(?<![A-Z0-9])[A-Z]{2}\d{2}(?:[ ]?[A-Z0-9]){11,30}(?![A-Z0-9])", _I
)

ROUTING_RE = _compile(r"\brouting(?:[\s]*number)?[\s]*[:\-]?[\s]*(\d{9})\b", _I)
ACCOUNT_RE = _compile(
    r"\b(?:account|acct)(?:[\s]*(?:number|no\.?|#))?[\s]*[:\-]?[\s]*(\d{6,17})\b", _I
)
SORT_CODE_RE = _compile(
    r"\bsort[\s]*code[\s]*[:\-]?[\s]*(\d{2}[\- ]?\d{2}[\- ]?\d{2})\b", _I
)

# Prefix-coded document identifiers: "INS-44556677", "EMP-2024-5567", "MRN- 998877"
INS_POLICY_RE = _compile(r"\bINS[\-\s]*\d{6,14}\b", _I)
EMPLOYEE_ID_RE = _compile(r"\bEMP[\-\s]*\d{2,4}(?:[\-\s]*\d{2,6})+\b", _I)
MRN_RE = _compile(r"\bMRN[\-\s]*\d{4,14}\b", _I)

_ROUTING_SHAPE = re.compile(r"[0-9]{9}")
_ACCOUNT_SHAPE = re.compile(r"[0-9]{6,17}")


# ---------------------------------------------------------------------------
# Scanners: each yields (dedup_key, value)
# ---------------------------------------------------------------------------

def _scan_simple(pattern: re.Pattern) -> Callable[[str], Iterator[tuple[str, str]]]:
    """Scanner for single-pattern families keyed by lower-cased text."""
    def scan(text: str) -> Iterator[tuple[str, str]]:
        for m in pattern.finditer(text):
            raw = m.group().strip()
            if raw:
                yield raw.lower(), raw
    return scan


def scan_ssn_last4(text: str) -> Iterator[tuple[str, str]]:
    for m in SSN_LAST4_RE.finditer(text):
        last4 = m.group(1).strip()
        if is_plausible_ssn_last4(last4):
            yield last4, last4


def scan_cards(text: str) -> Iterator[tuple[str, str]]:
    for m in CARD_CANDIDATE_RE.finditer(text):
        raw = m.group()
        if is_accepted_card(text, m.start(), m.end()):
            yield digits_only(raw), raw


def scan_ibans(text: str) -> Iterator[tuple[str, str]]:
    for m in IBAN_CANDIDATE_RE.finditer(text):
        raw = m.group().strip()
        normalized = normalize_iban(raw)
        if is_valid_iban(normalized):
            yield normalized, raw


def scan_routing_numbers(text: str) -> Iterator[tuple[str, str]]:
    for m in ROUTING_RE.finditer(text):
        raw = m.group(1).strip()
        if _ROUTING_SHAPE.fullmatch(raw):
            yield f"routing:{raw}", raw


def scan_account_numbers(text: str) -> Iterator[tuple[str, str]]:
    for m in ACCOUNT_RE.finditer(text):
        raw = m.group(1).strip()
        if _ACCOUNT_SHAPE.fullmatch(raw):
            yield f"account:{raw}", raw


def scan_sort_codes(text: str) -> Iterator[tuple[str, str]]:
    for m in SORT_CODE_RE.finditer(text):
        raw = m.group(1).strip()
        digits = digits_only(raw)
        if len(digits) == 6:
            yield f"sort:{digits}", raw


def scan_bank_identifiers(text: str) -> Iterator[tuple[str, str]]:
    """IBAN, routing, account and sort code share one namespaced key space."""
    yield from scan_ibans(text)
    yield from scan_routing_numbers(text)
    yield from scan_account_numbers(text)
    yield from scan_sort_codes(text)


scan_emails = _scan_simple(EMAIL_RE)
scan_phones = _scan_simple(PHONE_RE)
scan_ssns = _scan_simple(SSN_RE)
scan_insurance_policies = _scan_simple(INS_POLICY_RE)
scan_employee_ids = _scan_simple(EMPLOYEE_ID_RE)
scan_medical_record_numbers = _scan_simple(MRN_RE)


# Fixed family order.  SSN appears twice: direct matches, then last-4 in
# context; each family deduplicates on its own.
_FAMILIES: list[tuple[SensitiveType, Callable[[str], Iterable[tuple[str, str]]]]] = [
    (SensitiveType.EMAIL, scan_emails),
    (SensitiveType.PHONE, scan_phones),
    (SensitiveType.SSN, scan_ssns),
    (SensitiveType.SSN, scan_ssn_last4),
    (SensitiveType.CARD, scan_cards),
    (SensitiveType.BANK, scan_bank_identifiers),
    (SensitiveType.INSURANCE_POLICY, scan_insurance_policies),
    (SensitiveType.EMPLOYEE_ID, scan_employee_ids),
    (SensitiveType.MEDICAL_RECORD_NUMBER, scan_medical_record_numbers),
]


def unique_values(candidates: Iterable[tuple[str, str]]) -> list[str]:
    """First-seen surface value per key, in first-seen order."""
    seen: dict[str, str] = {}
    for key, value in candidates:
        if key not in seen:
            seen[key] = value
    return list(seen.values())


def detect(text: str) -> list[SensitiveMatch]:
    """Find sensitive identifiers in ``text``.

    Returns a fresh list ordered by family, then by first occurrence.
    Never raises; no matches is an empty list.
    """
    if not text:
        return []

    out: list[SensitiveMatch] = []
    for sensitive_type, scanner in _FAMILIES:
        values = unique_values(scanner(text))
        out.extend(SensitiveMatch(type=sensitive_type, value=v) for v in values)
        if values:
            logger.debug("%s: %d match(es)", sensitive_type.value, len(values))
    return out
