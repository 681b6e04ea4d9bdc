"""Pick the fine tier that applies to a violation occurrence.

Tariffs carry up to three amounts: first offense, second offense and
third-or-later offense.  A missing second or third tier falls back to
the first-offense amount.
"""

from __future__ import annotations

from decimal import Decimal

from citepay.models.schemas import ViolationTypeTariff


def resolve_fine(tariff: ViolationTypeTariff, offense_count: int) -> Decimal:
    """Return the fine owed for the ``offense_count``-th offense.

    Counts below 1 are treated as a first offense.
    """
    if offense_count >= 3:
        amount = tariff.fine_amount_3
    elif offense_count == 2:
        amount = tariff.fine_amount_2
    else:
        amount = tariff.fine_amount_1
    return amount if amount is not None else tariff.fine_amount_1
