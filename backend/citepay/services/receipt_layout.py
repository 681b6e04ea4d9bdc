"""Fixed field positions for the printed official receipt.

The municipal OR form is pre-printed on 100 x 200 mm stock, so every
field has a fixed box measured in millimetres from the top-left corner
of the page.  The layout is plain data; :mod:`citepay.services.receipt_renderer`
turns it into paint operations.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Tuple

ALIGN_LEFT = "L"
ALIGN_RIGHT = "R"
ALIGN_CENTER = "C"


@dataclass(frozen=True)
class LayoutField:
    """A text box in millimetres; ``height`` is per line when ``lines`` > 1."""

    x: float
    y: float
    width: float
    height: float
    align: str = ALIGN_LEFT
    lines: int = 1

    @property
    def multiline(self) -> bool:
        return self.lines > 1

    def shifted(self, dy: float) -> "LayoutField":
        return replace(self, y=self.y + dy)


@dataclass(frozen=True)
class FixedLayout:
    page_width: float
    page_height: float
    font_size: float
    fields: Dict[str, LayoutField]
    line_label: LayoutField
    line_amount: LayoutField
    row_pitch: float
    max_rows: int
    checkbox_cash: LayoutField
    checkbox_electronic: LayoutField
    total_label_text: str = "TOTAL:"
    mark_text: str = "X"

    def row(self, index: int) -> Tuple[LayoutField, LayoutField]:
        """Label and amount boxes for line item ``index`` (0-based)."""
        dy = index * self.row_pitch
        return self.line_label.shifted(dy), self.line_amount.shifted(dy)


REFERENCE_LAYOUT = FixedLayout(
    page_width=100.0,
    page_height=200.0,
    font_size=8.0,
    fields={
        "receipt_number": LayoutField(6.6, 44.4, 30, 4),
        "date": LayoutField(6.6, 49.4, 30, 4),
        "payor": LayoutField(7.1, 65.0, 85, 6),
        "total_label": LayoutField(10.6, 128.2, 60, 6),
        "total_amount": LayoutField(61.9, 128.7, 20, 6, ALIGN_RIGHT),
        "amount_in_words": LayoutField(7.1, 140.7, 85, 4, lines=4),
    },
    line_label=LayoutField(5.1, 79.2, 60, 6),
    line_amount=LayoutField(62.0, 79.2, 20, 6, ALIGN_RIGHT),
    row_pitch=8.0,
    max_rows=10,
    checkbox_cash=LayoutField(20.9, 150.6, 4, 4),
    checkbox_electronic=LayoutField(46.5, 150.6, 4, 4),
)
