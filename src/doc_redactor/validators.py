"""Acceptance rules for candidates that the scanners can't settle by shape alone.

Every function here is total: any string in, a bool (or a string) out.
"""

from __future__ import annotations
import re

_IBAN_SHAPE = re.compile(r"[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}")
_NON_DIGIT = re.compile(r"[^0-9]")

# Years that show up near "SSN" by accident (e.g. "SSN issued 1998")
SSN_LAST4_YEAR_RANGE = (1900, 2099)

CARD_CONTEXT_RADIUS = 50
_CARD_KEYWORDS = re.compile(
    r"\b(?:credit\s*card|debit\s*card|card\s*number|visa|mastercard|amex|american\s*express)\b"
)


def digits_only(value: str) -> str:
    return _NON_DIGIT.sub("", value)


def luhn_check(digits: str) -> bool:
    """Luhn mod-10 over a digits-only string.  Any non-digit fails."""
    if not digits:
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        if not "0" <= ch <= "9":
            return False
        d = ord(ch) - 48
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def normalize_iban(value: str) -> str:
    return re.sub(r"\s+", "", value).upper()


def is_valid_iban(iban: str) -> bool:
    """ISO 7064 mod-97 check on a normalized (no spaces, upper-case) IBAN.

    The remainder is folded one decimal digit at a time so the running
    value never exceeds two digits times ten.
    """
    if not _IBAN_SHAPE.fullmatch(iban):
        return False

    rearranged = iban[4:] + iban[:4]
    mod = 0
    for ch in rearranged:
        if "0" <= ch <= "9":
            mod = (mod * 10 + (ord(ch) - 48)) % 97
        elif "A" <= ch <= "Z":
            val = ord(ch) - 55  # 'A' -> 10
            mod = (mod * 10 + val // 10) % 97
            mod = (mod * 10 + val % 10) % 97
        else:
            return False
    return mod == 1


def is_plausible_ssn_last4(value: str) -> bool:
    """Four digits that don't look like a year."""
    if not re.fullmatch(r"[0-9]{4}", value):
        return False
    low, high = SSN_LAST4_YEAR_RANGE
    return not (low <= int(value) <= high)


def context_window(text: str, start: int, end: int, radius: int) -> str:
    """Lower-cased slice of ``text`` around [start, end), clipped to bounds."""
    return text[max(0, start - radius):min(len(text), end + radius)].lower()


def has_card_keyword(context: str) -> bool:
    return _CARD_KEYWORDS.search(context) is not None


def is_accepted_card(text: str, start: int, end: int) -> bool:
    """Luhn-valid, or explicitly labeled as a card nearby.

    Labeled test/demo numbers in documents often fail Luhn but still need
    redacting.
    """
    digits = digits_only(text[start:end])
    if not 13 <= len(digits) <= 19:
        return False
    if luhn_check(digits):
        return True
    return has_card_keyword(context_window(text, start, end, CARD_CONTEXT_RADIUS))
