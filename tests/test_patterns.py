"""Tests for the detection engine: scanners, dedup and family order."""

from doc_redactor import SensitiveMatch, SensitiveType, detect
from doc_redactor.patterns import unique_values
from doc_redactor.validators import digits_only


def _of_type(matches, sensitive_type):
    return [m.value for m in matches if m.type == sensitive_type]


# ── Email ────────────────────────────────────────────────────────────

def test_email_detection():
    matches = detect("Contact me at alice@example.com.")
    assert matches == [SensitiveMatch(SensitiveType.EMAIL, "alice@example.com")]


def test_email_dedup_case_insensitive_keeps_first_form():
    matches = detect("Write JOHN@Acme.com or john@acme.COM")
    assert _of_type(matches, SensitiveType.EMAIL) == ["JOHN@Acme.com"]


# ── Phone ────────────────────────────────────────────────────────────

def test_phone_formats():
    text = "Call (212) 555-1212, +1 212.555.1213 or 2125551214."
    assert _of_type(detect(text), SensitiveType.PHONE) == [
        "(212) 555-1212",
        "+1 212.555.1213",
        "2125551214",
    ]


def test_phone_not_inside_longer_digit_run():
    assert _of_type(detect("ref 12125551212999"), SensitiveType.PHONE) == []


def test_phone_unicode_space_separators():
    text = "Call 212\u00a0555\u00a01212 or (212)\u2009555-1213"
    assert _of_type(detect(text), SensitiveType.PHONE) == [
        "212\u00a0555\u00a01212",
        "(212)\u2009555-1213",
    ]


# ── SSN ──────────────────────────────────────────────────────────────

def test_ssn_direct():
    assert detect("SSN: 123-45-6789") == [SensitiveMatch(SensitiveType.SSN, "123-45-6789")]


def test_ssn_last4_in_context():
    matches = detect("social security number ending in 8234")
    assert matches == [SensitiveMatch(SensitiveType.SSN, "8234")]


def test_ssn_last4_year_excluded():
    assert detect("social security number ending in 1999") == []


def test_ssn_last4_gap_limit():
    near = "SSN" + " " * 80 + "8234"
    far = "SSN" + " " * 81 + "8234"
    assert _of_type(detect(near), SensitiveType.SSN) == ["8234"]
    assert _of_type(detect(far), SensitiveType.SSN) == []


def test_ssn_direct_before_last4():
    text = "SSN 123-45-6789. Spouse ssn last four: 4321"
    assert _of_type(detect(text), SensitiveType.SSN) == ["123-45-6789", "4321"]


# ── Card ─────────────────────────────────────────────────────────────

def test_card_luhn_valid():
    assert _of_type(detect("Paid with 4532015112830366"), SensitiveType.CARD) == [
        "4532015112830366"
    ]


def test_card_keyword_override():
    matches = detect("credit card number: 1111222233334445")
    assert _of_type(matches, SensitiveType.CARD) == ["1111222233334445"]


def test_card_rejected_without_keyword():
    matches = detect("Order reference 1111222233334445 shipped")
    assert _of_type(matches, SensitiveType.CARD) == []


def test_card_dedup_by_digits_keeps_first_formatting():
    text = "4532 0151 1283 0366 and again 4532-0151-1283-0366"
    assert _of_type(detect(text), SensitiveType.CARD) == ["4532 0151 1283 0366"]


def test_card_keyword_window_after_candidate():
    inside = "1111222233334445" + " " * 46 + "visa"
    outside = "1111222233334445" + " " * 47 + "visa"
    assert _of_type(detect(inside), SensitiveType.CARD) == ["1111222233334445"]
    assert _of_type(detect(outside), SensitiveType.CARD) == []


def test_card_keyword_window_before_candidate():
    inside = "visa" + " " * 46 + "1111222233334445"
    outside = "visa" + " " * 47 + "1111222233334445"
    assert _of_type(detect(inside), SensitiveType.CARD) == ["1111222233334445"]
    assert _of_type(detect(outside), SensitiveType.CARD) == []


# ── Bank ─────────────────────────────────────────────────────────────

def test_iban_with_spaces():
    matches = detect("IBAN: GB82 WEST 1234 5698 7654 32")
    assert _of_type(matches, SensitiveType.BANK) == ["GB82 WEST 1234 5698 7654 32"]


def test_iban_invalid_checksum_rejected():
    assert _of_type(detect("IBAN: GB83 WEST 1234 5698 7654 32"), SensitiveType.BANK) == []


def test_iban_dedup_by_normalized_form():
    text = "GB82WEST12345698765432 / gb82 west 1234 5698 7654 32"
    assert _of_type(detect(text), SensitiveType.BANK) == ["GB82WEST12345698765432"]


def test_routing_account_sort_code():
    text = (
        "Routing number: 021000021\n"
        "Account #: 12345678\n"
        "Sort code: 20-00-00\n"
    )
    assert _of_type(detect(text), SensitiveType.BANK) == ["021000021", "12345678", "20-00-00"]


def test_bank_sub_kinds_do_not_collide():
    text = "Routing number 123456789 and account number 123456789"
    assert _of_type(detect(text), SensitiveType.BANK) == ["123456789", "123456789"]


def test_bank_duplicates_collapse_within_sub_kind():
    text = "Account: 12345678. Later, acct no. 12345678 again."
    assert _of_type(detect(text), SensitiveType.BANK) == ["12345678"]


def test_bank_order_iban_routing_account_sort():
    text = (
        "Sort code 20 00 00, account 87654321, routing 021000021, "
        "IBAN GB82WEST12345698765432"
    )
    assert _of_type(detect(text), SensitiveType.BANK) == [
        "GB82WEST12345698765432", "021000021", "87654321", "20 00 00",
    ]


def test_iban_not_inside_longer_alphanumeric_run():
    assert detect("XGB82WEST12345698765432") == []


def test_bank_keywords_with_unicode_spaces():
    text = (
        "Routing number:\u00a0021000021\n"
        "Account\u00a0#:\u00a012345678\n"
        "Sort\u00a0code:\u00a020-00-00\n"
    )
    assert _of_type(detect(text), SensitiveType.BANK) == ["021000021", "12345678", "20-00-00"]


# ── Prefix-coded identifiers ─────────────────────────────────────────

def test_insurance_policy():
    assert detect("Policy INS-44556677") == [
        SensitiveMatch(SensitiveType.INSURANCE_POLICY, "INS-44556677")
    ]


def test_employee_id():
    assert detect("Badge EMP-2024-5567") == [
        SensitiveMatch(SensitiveType.EMPLOYEE_ID, "EMP-2024-5567")
    ]


def test_medical_record_number():
    assert detect("Patient MRN- 998877") == [
        SensitiveMatch(SensitiveType.MEDICAL_RECORD_NUMBER, "MRN- 998877")
    ]


def test_prefix_ids_case_insensitive_dedup():
    assert _of_type(detect("mrn 123456 and MRN 123456"), SensitiveType.MEDICAL_RECORD_NUMBER) == [
        "mrn 123456"
    ]


def test_prefix_ids_with_unicode_spaces():
    matches = detect("INS\u00a044556677, EMP\u00a02024\u202f5567, MRN\u00a0998877")
    assert matches == [
        SensitiveMatch(SensitiveType.INSURANCE_POLICY, "INS\u00a044556677"),
        SensitiveMatch(SensitiveType.EMPLOYEE_ID, "EMP\u00a02024\u202f5567"),
        SensitiveMatch(SensitiveType.MEDICAL_RECORD_NUMBER, "MRN\u00a0998877"),
    ]


# ── Entry point ──────────────────────────────────────────────────────

_SAMPLE = (
    "Email a@b.co, phone 212-555-1212, SSN 123-45-6789, "
    "card 4532015112830366, MRN-123456."
)


def test_family_order():
    assert [m.type for m in detect(_SAMPLE)] == [
        SensitiveType.EMAIL,
        SensitiveType.PHONE,
        SensitiveType.SSN,
        SensitiveType.CARD,
        SensitiveType.MEDICAL_RECORD_NUMBER,
    ]


def test_empty_and_clean_text():
    assert detect("") == []
    assert detect("   \n") == []
    assert detect("The weather is nice today in Melbourne") == []


def test_idempotent_fresh_list():
    first = detect(_SAMPLE)
    second = detect(_SAMPLE)
    assert first == second
    assert first is not second


def test_values_trimmed_and_unique_per_type():
    text = _SAMPLE + " " + _SAMPLE.upper() + (
        " IBAN GB82 WEST 1234 5698 7654 32, routing 021000021, "
        "INS 44556677 EMP 12 34 56"
    )
    matches = detect(text)
    assert matches
    seen = set()
    for m in matches:
        assert m.value and m.value == m.value.strip()
        key = digits_only(m.value) if m.type == SensitiveType.CARD else m.value.lower()
        assert (m.type, key) not in seen
        seen.add((m.type, key))


def test_cross_family_evaluated_independently():
    # The IBAN's trailing 14 digits are also a card candidate; "credit card"
    # is within 50 chars, so the card family keeps it while the bank family
    # still reports the whole IBAN.
    text = "credit card 4532015112830366 / IBAN GB82WEST12345698765432"
    matches = detect(text)
    assert _of_type(matches, SensitiveType.CARD) == ["4532015112830366", "12345698765432"]
    assert _of_type(matches, SensitiveType.BANK) == ["GB82WEST12345698765432"]


def test_card_family_does_not_suppress_bank():
    text = "IBAN GB82WEST12345698765432"
    matches = detect(text)
    assert _of_type(matches, SensitiveType.CARD) == []
    assert _of_type(matches, SensitiveType.BANK) == ["GB82WEST12345698765432"]


def test_pathological_digit_runs():
    assert detect("1" * 5000) == []
    matches = detect("1-" * 3000)
    assert _of_type(matches, SensitiveType.PHONE) == []


def test_unique_values_first_seen():
    assert unique_values([("a", "A"), ("b", "B"), ("a", "a2")]) == ["A", "B"]
