"""Spell amounts out in words for official receipts.

``words`` converts a non-negative integer to uppercase English by
decomposing it by magnitude.  ``amount_in_words`` applies it to a
peso amount, producing text such as::

    ONE THOUSAND FIVE HUNDRED PESOS AND TWENTY CENTAVOS ONLY
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

_ONES = (
    "ZERO", "ONE", "TWO", "THREE", "FOUR", "FIVE", "SIX", "SEVEN", "EIGHT", "NINE",
    "TEN", "ELEVEN", "TWELVE", "THIRTEEN", "FOURTEEN", "FIFTEEN", "SIXTEEN",
    "SEVENTEEN", "EIGHTEEN", "NINETEEN",
)
_TENS = {
    2: "TWENTY", 3: "THIRTY", 4: "FORTY", 5: "FIFTY",
    6: "SIXTY", 7: "SEVENTY", 8: "EIGHTY", 9: "NINETY",
}
# Largest first
_MAGNITUDES = (
    (1_000_000_000, "BILLION"),
    (1_000_000, "MILLION"),
    (1_000, "THOUSAND"),
)

CURRENCY_MAJOR = "PESOS"
CURRENCY_MINOR = "CENTAVOS"
CENTAVO = Decimal("0.01")


def words(n: int) -> str:
    """Return ``n`` spelled out in uppercase English words."""
    if n < 0:
        raise ValueError(f"cannot spell a negative number: {n}")
    if n < 20:
        return _ONES[n]
    if n < 100:
        tens, rem = divmod(n, 10)
        return _TENS[tens] + (f" {_ONES[rem]}" if rem else "")
    if n < 1000:
        hundreds, rem = divmod(n, 100)
        return f"{_ONES[hundreds]} HUNDRED" + (f" {words(rem)}" if rem else "")
    for divisor, label in _MAGNITUDES:
        if n >= divisor:
            count, rem = divmod(n, divisor)
            return f"{words(count)} {label}" + (f" {words(rem)}" if rem else "")
    raise AssertionError("unreachable")  # pragma: no cover


def split_amount(total: Decimal) -> Tuple[int, int]:
    """Split an amount into whole pesos and centavos.

    Centavos are rounded half-up, so ``123.455`` gives ``(123, 46)``.
    """
    cents = Decimal(total).quantize(CENTAVO, rounding=ROUND_HALF_UP)
    pesos = int(cents)
    return pesos, int((cents - pesos) * 100)


def amount_in_words(total: Decimal) -> str:
    """Currency words for ``total``, terminated with ``ONLY``."""
    pesos, centavos = split_amount(total)
    text = f"{words(pesos)} {CURRENCY_MAJOR}"
    if centavos:
        text += f" AND {words(centavos)} {CURRENCY_MINOR}"
    return f"{text} ONLY"
