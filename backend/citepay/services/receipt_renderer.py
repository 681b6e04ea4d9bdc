"""Paint receipt documents onto the fixed OR form as a PDF.

Rendering happens in two steps.  :meth:`ReceiptRenderer.plan` turns a
:class:`~citepay.models.schemas.ReceiptDocument` into an ordered list of
:class:`PaintOp` (text + box), applying the line-item cap and the
payment-method checkbox rule.  :meth:`ReceiptRenderer.render` then paints
those operations with PyMuPDF on a single page, over the scanned form
image when one is available.

Each call builds its own PyMuPDF document, so a renderer instance can be
shared between requests.  PyMuPDF itself is not thread-safe, so painting is
serialised on a module-level lock.

Text is set in DejaVu Sans, bundled under ``citepay/fonts``, because the
Base-14 fonts have no peso sign.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF

from citepay.core.errors import RenderFailed
from citepay.models.enums import PaymentCategory
from citepay.models.schemas import ReceiptDocument
from citepay.services.receipt_layout import (
    ALIGN_LEFT,
    ALIGN_CENTER,
    ALIGN_RIGHT,
    FixedLayout,
    LayoutField,
    REFERENCE_LAYOUT,
)
from citepay.utils.helpers import format_money

logger = logging.getLogger(__name__)

MM_TO_PT = 72.0 / 25.4
BUNDLED_FONT_PATH = Path(__file__).resolve().parents[1] / "fonts" / "DejaVuSans.ttf"
RECEIPT_FONT = "receiptfont"

_RENDER_LOCK = threading.Lock()


def mm(value: float) -> float:
    return value * MM_TO_PT


@dataclass(frozen=True)
class PaintOp:
    name: str
    text: str
    box: LayoutField


class ReceiptRenderer:
    """Render receipts on a :class:`FixedLayout`."""

    def __init__(
        self,
        layout: FixedLayout = REFERENCE_LAYOUT,
        template_path: Optional[str] = None,
        font_path: Optional[str] = None,
        currency_symbol: str = "₱",
    ):
        self.layout = layout
        self.template_path = Path(template_path) if template_path else None
        self.font_path = Path(font_path) if font_path else BUNDLED_FONT_PATH
        self.currency_symbol = currency_symbol

    # ------------------------------------------------------------------
    # Planning

    def plan(self, doc: ReceiptDocument) -> List[PaintOp]:
        layout = self.layout
        fields = layout.fields
        ops = [
            PaintOp("receipt_number", doc.receipt_number, fields["receipt_number"]),
            PaintOp("date", doc.date, fields["date"]),
            PaintOp("payor", doc.payor, fields["payor"]),
        ]
        for index, line in enumerate(doc.lines[: layout.max_rows]):
            label_box, amount_box = layout.row(index)
            ops.append(PaintOp("line_label", line.label, label_box))
            ops.append(PaintOp("line_amount", self.money(line.amount), amount_box))
        if len(doc.lines) > layout.max_rows:
            logger.info(
                "Receipt %s has %d violations; printing the first %d",
                doc.receipt_number,
                len(doc.lines),
                layout.max_rows,
            )
        ops.append(PaintOp("total_label", layout.total_label_text, fields["total_label"]))
        ops.append(PaintOp("total_amount", self.money(doc.total), fields["total_amount"]))
        ops.append(PaintOp("amount_in_words", doc.amount_in_words, fields["amount_in_words"]))

        checkbox = self.checkbox_for(doc.payment_category)
        if checkbox is not None:
            ops.append(PaintOp("payment_method_mark", layout.mark_text, checkbox))
        return ops

    def checkbox_for(self, category: PaymentCategory) -> Optional[LayoutField]:
        if category is PaymentCategory.CASH:
            return self.layout.checkbox_cash
        if category is PaymentCategory.ELECTRONIC:
            return self.layout.checkbox_electronic
        return None

    def money(self, amount) -> str:
        return format_money(amount, self.currency_symbol)

    # ------------------------------------------------------------------
    # Painting

    def render(self, doc: ReceiptDocument) -> bytes:
        """Return the receipt as PDF bytes."""
        ops = self.plan(doc)
        with _RENDER_LOCK:
            pdf = fitz.open()
            try:
                page = pdf.new_page(width=mm(self.layout.page_width), height=mm(self.layout.page_height))
                self._paint_background(page)
                fontname, font = self._load_font(page)
                for op in ops:
                    self._paint(page, op, fontname, font)
                return pdf.tobytes(garbage=3, deflate=True)
            except RenderFailed:
                raise
            except Exception as exc:
                logger.exception("Failed to render receipt %s", doc.receipt_number)
                raise RenderFailed("UNABLE TO GENERATE RECEIPT") from exc
            finally:
                pdf.close()

    def _paint_background(self, page) -> None:
        if self.template_path is None:
            return
        if not self.template_path.is_file():
            logger.info("Receipt template %s not found; rendering without it", self.template_path)
            return
        page.insert_image(page.rect, filename=str(self.template_path))

    def _load_font(self, page):
        path = self.font_path
        if not path.is_file():
            logger.warning("Receipt font %s not found; using %s", path, BUNDLED_FONT_PATH.name)
            path = BUNDLED_FONT_PATH
        font = fitz.Font(fontfile=str(path))
        if not all(font.has_glyph(ord(ch)) for ch in self.currency_symbol):
            logger.warning("Receipt font %s cannot draw %r", path, self.currency_symbol)
        page.insert_font(fontname=RECEIPT_FONT, fontfile=str(path))
        return RECEIPT_FONT, font

    def _paint(self, page, op: PaintOp, fontname: str, font) -> None:
        size = self.layout.font_size
        box = op.box
        if box.multiline:
            rect = fitz.Rect(mm(box.x), mm(box.y), mm(box.x + box.width), mm(box.y + box.height * box.lines))
            remaining = page.insert_textbox(
                rect, op.text, fontsize=size, fontname=fontname, align=_TEXTBOX_ALIGN[box.align]
            )
            if remaining < 0:
                raise RenderFailed(f"{op.name.upper().replace('_', ' ')} DOES NOT FIT ON THE RECEIPT")
            return

        # Single-line cell: vertically centred, horizontally aligned in its box
        width = font.text_length(op.text, fontsize=size)
        left, box_width = mm(box.x), mm(box.width)
        if box.align == ALIGN_RIGHT:
            x = left + box_width - width
        elif box.align == ALIGN_CENTER:
            x = left + (box_width - width) / 2
        else:
            x = left
        baseline = mm(box.y) + mm(box.height) / 2 + (font.ascender + font.descender) / 2 * size
        page.insert_text((x, baseline), op.text, fontsize=size, fontname=fontname)


_TEXTBOX_ALIGN = {
    ALIGN_LEFT: fitz.TEXT_ALIGN_LEFT,
    ALIGN_RIGHT: fitz.TEXT_ALIGN_RIGHT,
    ALIGN_CENTER: fitz.TEXT_ALIGN_CENTER,
}
