from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from ar_recon.core.normalizers import (
    extract_depositor,
    names_match,
    normalize_bank_date,
    normalize_name,
    parse_amount,
)


def test_normalize_name_strips_spaces_punctuation_and_case() -> None:
    assert normalize_name("ABC 홍길동") == "abc홍길동"
    assert normalize_name("(주) A.B.C") == "주abc"
    assert normalize_name("  Kim\tCo-Op  ") == "kimcoop"


def test_normalize_name_missing_values() -> None:
    assert normalize_name(None) == ""
    assert normalize_name(pd.NA) == ""
    assert normalize_name(float("nan")) == ""
    assert normalize_name("") == ""


def test_normalize_name_is_idempotent() -> None:
    for raw in ["ABC 홍길동", "(주)XYZ상사", "Kim & Lee"]:
        once = normalize_name(raw)
        assert normalize_name(once) == once


def test_names_match_containment_both_directions() -> None:
    assert names_match("ABC", "ABC 홍길동") is True
    assert names_match("ABC 홍길동", "abc") is True
    assert names_match("(주)XYZ", "xyz") is True
    assert names_match("ABC", "DEF") is False


def test_names_match_empty_names_never_match() -> None:
    assert names_match("", "ABC") is False
    assert names_match("ABC", "") is False
    assert names_match(None, "ABC") is False
    assert names_match("ABC", pd.NA) is False
    # Only punctuation normalizes to empty
    assert names_match("()", "ABC") is False


def test_names_match_is_symmetric() -> None:
    pairs = [("ABC", "ABC 홍길동"), ("XYZ", "DEF"), ("홍길동", "입금홍길동")]
    for a, b in pairs:
        assert names_match(a, b) == names_match(b, a)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-01-05", "2024-01-05"),
        ("2024.01.05 13:45:10", "2024-01-05"),
        ("2024.01.05", "2024-01-05"),
        ("2024/01/05", "2024-01-05"),
        ("20240105", "2024-01-05"),
        (45296, "2024-01-05"),
        (45296.5, "2024-01-05"),
        (20240105, "2024-01-05"),
        (20240105.0, "2024-01-05"),
        (datetime(2024, 1, 5, 9, 30), "2024-01-05"),
        (pd.Timestamp("2024-01-05 09:30"), "2024-01-05"),
        (date(2024, 1, 5), "2024-01-05"),
    ],
)
def test_normalize_bank_date_layouts(value: object, expected: str) -> None:
    assert normalize_bank_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "05/01/2024", "not a date", pd.NaT, 0, 5_000_000, 10**12, float("inf")],
)
def test_normalize_bank_date_unrecognized(value: object) -> None:
    assert normalize_bank_date(value) is None


def test_parse_amount() -> None:
    assert parse_amount("1,234,000") == 1234000
    assert parse_amount(1234000.0) == 1234000
    assert parse_amount(50000) == 50000
    assert parse_amount(" 3,000원") == 3000
    assert parse_amount("") == 0
    assert parse_amount(None) == 0
    assert parse_amount(float("nan")) == 0
    assert parse_amount("abc") == 0


def test_extract_depositor() -> None:
    assert extract_depositor("입금 홍길동") == "홍길동"
    assert extract_depositor("타행이체 ABC상사") == "ABC상사"
    assert extract_depositor("무통장입금 김철수") == "김철수"
    assert extract_depositor("  ABC상사  ") == "ABC상사"
    assert extract_depositor("") == ""
    assert extract_depositor(None) == ""
