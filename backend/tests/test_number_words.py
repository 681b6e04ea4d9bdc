from __future__ import annotations

from decimal import Decimal

import pytest

from citepay.services.number_words import amount_in_words, split_amount, words


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, "ZERO"),
        (15, "FIFTEEN"),
        (20, "TWENTY"),
        (42, "FORTY TWO"),
        (100, "ONE HUNDRED"),
        (119, "ONE HUNDRED NINETEEN"),
        (1001, "ONE THOUSAND ONE"),
        (1500, "ONE THOUSAND FIVE HUNDRED"),
        (1000000, "ONE MILLION"),
        (2000500, "TWO MILLION FIVE HUNDRED"),
        (1000000000, "ONE BILLION"),
        (999999, "NINE HUNDRED NINETY NINE THOUSAND NINE HUNDRED NINETY NINE"),
    ],
)
def test_words(n, expected):
    assert words(n) == expected


def test_billion_boundary_takes_billions_path():
    assert words(1_000_000_001) == "ONE BILLION ONE"
    assert words(999_999_999_999).startswith("NINE HUNDRED NINETY NINE BILLION")


@pytest.mark.parametrize("n", [1, 7, 99, 1000, 12345, 10**6 + 1, 10**9 + 10**6, 10**12 - 1])
def test_words_never_empty(n):
    assert words(n).strip()
    assert "  " not in words(n)


def test_words_rejects_negative():
    with pytest.raises(ValueError):
        words(-1)


def test_split_amount_rounds_centavos_half_up():
    assert split_amount(Decimal("123.455")) == (123, 46)
    assert split_amount(Decimal("123.454")) == (123, 45)
    assert split_amount(Decimal("0.995")) == (1, 0)


def test_amount_in_words_whole_pesos():
    assert amount_in_words(Decimal("1500.00")) == "ONE THOUSAND FIVE HUNDRED PESOS ONLY"


def test_amount_in_words_with_centavos():
    assert amount_in_words(Decimal("250.75")) == "TWO HUNDRED FIFTY PESOS AND SEVENTY FIVE CENTAVOS ONLY"


def test_amount_in_words_zero():
    assert amount_in_words(Decimal("0")) == "ZERO PESOS ONLY"
