"""Render an official receipt to a PDF file from the command line.

Usage:
  python -m citepay.scripts.render_receipt OR-2025-000123 [-o receipt.pdf]

Useful when the browser route is unavailable or to check the print
alignment against the pre-printed form.  Exits non-zero with the
receipt error message when the receipt cannot be built.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from citepay.api.dependencies import get_receipt_renderer
from citepay.core.database import AsyncSessionLocal
from citepay.core.errors import ReceiptError
from citepay.models.schemas import receipt_filename
from citepay.services.receipt_repository import SqlReceiptRepository
from citepay.services.receipt_service import ReceiptService


async def render(receipt_number: str, output: Path | None) -> int:
    async with AsyncSessionLocal() as session:
        service = ReceiptService(SqlReceiptRepository(session))
        try:
            doc = await service.build(receipt_number)
        except ReceiptError as exc:
            print(exc.message, file=sys.stderr)
            return 1
    try:
        pdf = get_receipt_renderer().render(doc)
    except ReceiptError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    target = output or Path(receipt_filename(doc.receipt_number))
    target.write_bytes(pdf)
    print(f"Wrote {target} ({len(doc.lines)} violations, total {doc.total})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("receipt_number")
    parser.add_argument("-o", "--output", type=Path, default=None)
    args = parser.parse_args(argv)
    return asyncio.run(render(args.receipt_number, args.output))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
