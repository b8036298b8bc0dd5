# tests/test_normalizer.py

import pytest

from salesbi.calculator.normalizer import normalize_amount, to_canonical_string


@pytest.mark.parametrize("text, expected", [
    ("R$ 1.234,56", 1234.56),
    ("1.000.000", 1000000.0),
    ("  42 ", 42.0),
    ("12,5", 12.5),
    ("-300,25", -300.25),
    ("€ 99", 99.0),
])
def test_parses_pt_br_currency_text(text, expected):
    assert normalize_amount(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "R$", "1,2,3", "12abc", "nan", "inf", None])
def test_malformed_input_becomes_zero(text):
    assert normalize_amount(text) == 0.0


def test_numbers_pass_through():
    assert normalize_amount(1500) == 1500.0
    assert normalize_amount(12.75) == 12.75
    assert normalize_amount(float('nan')) == 0.0
    assert normalize_amount(True) == 0.0


@pytest.mark.parametrize("value", [0, 1, 1234.5, 0.1, -17.25, 2180000, 1e-05, 123456789.125])
def test_normalizer_is_idempotent_through_canonical_string(value):
    first = normalize_amount(value)
    assert normalize_amount(to_canonical_string(first)) == first


def test_canonical_string_uses_decimal_comma():
    assert to_canonical_string(1234.5) == "1234,5"
