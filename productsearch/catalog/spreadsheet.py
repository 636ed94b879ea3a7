"""Spreadsheet decoding for bulk product loads.

Reads every sheet of an ``.xlsx`` workbook and maps the first five
columns of each row to a Product:

    0 -> id, 1 -> name, 2 -> description, 3 -> price, 4 -> category

Missing cells take defaults ("" for text, 0 for price). A row whose
values cannot form a valid Product is returned with an error instead
of failing the whole workbook.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any

import structlog
from openpyxl import load_workbook
from pydantic import ValidationError

from productsearch.catalog.models import Product
from productsearch.domain.exceptions import DecodeError

logger = structlog.get_logger()

COLUMNS = ("id", "name", "description", "price", "category")


@dataclass(frozen=True)
class DecodedRow:
    """One data row of the workbook.

    Attributes:
        sheet: Sheet title.
        row: 1-based row number within the sheet.
        document_id: Id cell text ("" if blank).
        product: Decoded product, if the row is valid.
        error: Why the row could not be decoded, if it is not.
    """

    sheet: str
    row: int
    document_id: str = ""
    product: Product | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        """Check if the row produced a product."""
        return self.product is not None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _cell_text(value: Any) -> str:
    """Render a cell as text, dropping the ``.0`` of integral numbers."""
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def _cell_price(value: Any) -> float:
    """Read a price cell.

    Raises:
        ValueError: If the cell holds something other than a number.
    """
    if _is_blank(value):
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"price must be numeric, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ValueError(f"price must be numeric, got {value!r}") from None
    raise ValueError(f"price must be numeric, got {value!r}")


def _format_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def decode_row(sheet: str, row_number: int, values: Sequence[Any]) -> DecodedRow:
    """Map one row of cell values to a product.

    Args:
        sheet: Sheet title.
        row_number: 1-based row number.
        values: Cell values in column order.

    Returns:
        Decoded row with either a product or an error.
    """
    cells = list(values[: len(COLUMNS)]) + [None] * (len(COLUMNS) - len(values))
    document_id = _cell_text(cells[0])

    try:
        price = _cell_price(cells[3])
    except ValueError as e:
        return DecodedRow(
            sheet=sheet, row=row_number, document_id=document_id, error=str(e)
        )

    try:
        product = Product(
            id=document_id,
            name=_cell_text(cells[1]),
            description=_cell_text(cells[2]),
            price=price,
            category=_cell_text(cells[4]),
        )
    except ValidationError as e:
        return DecodedRow(
            sheet=sheet,
            row=row_number,
            document_id=document_id,
            error=_format_validation_error(e),
        )

    return DecodedRow(
        sheet=sheet, row=row_number, document_id=document_id, product=product
    )


def decode_workbook(data: bytes, header_rows: int = 0) -> list[DecodedRow]:
    """Decode all data rows of a workbook.

    Fully blank rows are skipped, as are the first ``header_rows`` rows
    of every sheet.

    Args:
        data: Raw ``.xlsx`` bytes.
        header_rows: Leading rows to skip on each sheet.

    Returns:
        Decoded rows in sheet, then row, order.

    Raises:
        DecodeError: If the bytes are not a readable workbook.
    """
    if not data:
        raise DecodeError("source is empty")

    try:
        workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except Exception as e:
        # openpyxl surfaces bad input as zipfile, KeyError or its own exceptions
        raise DecodeError(f"not a readable workbook ({type(e).__name__}: {e})") from e

    rows: list[DecodedRow] = []
    sheet_count = len(workbook.sheetnames)
    try:
        for sheet in workbook.worksheets:
            for row_number, values in enumerate(sheet.iter_rows(values_only=True), start=1):
                if row_number <= header_rows:
                    continue
                if all(_is_blank(value) for value in values):
                    continue
                rows.append(decode_row(sheet.title, row_number, values))
    except Exception as e:
        # read-only sheets are parsed lazily while iterating
        raise DecodeError(f"unreadable worksheet ({type(e).__name__}: {e})") from e
    finally:
        workbook.close()

    logger.info(
        "Workbook decoded",
        rows=len(rows),
        invalid_rows=sum(1 for row in rows if not row.is_valid),
        sheets=sheet_count,
    )
    return rows
