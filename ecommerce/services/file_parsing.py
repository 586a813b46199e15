# ecommerce/services/file_parsing.py
"""Spreadsheet/CSV reading and row validation for product import.

Excel files are read positionally from the first worksheet (row 1 is the
header); CSV files are read by header name. Both produce ``ImportRow``
objects with loosely-coerced values, validation happens afterwards so that
every problem in a file can be reported at once.
"""
import io
import logging
import zipfile
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from ..errors import BadRequestError
from ..schemas import ImportRow

logger = logging.getLogger(__name__)

COLUMNS = ["Name", "Description", "ImageUrl", "Price", "Stock", "CategoryName", "IsAvailable"]
FIELDS = ["name", "description", "image_url", "price", "stock", "category_name", "is_available"]

EXCEL_EXTENSIONS = (".xlsx", ".xls")
CSV_EXTENSIONS = (".csv",)

FIRST_DATA_ROW = 2  # spreadsheet row number of the first record


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    return isinstance(value, str) and not value.strip()


def _text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_decimal(value: Any) -> Optional[Decimal]:
    if _is_blank(value):
        return None
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def parse_int(value: Any) -> Optional[int]:
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_bool(value: Any) -> Optional[bool]:
    if _is_blank(value):
        return None
    text = str(value).strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no"):
        return False
    return None


def _to_row(raw: Dict[str, Any]) -> ImportRow:
    return ImportRow(
        name=_text(raw.get("name")),
        description=_text(raw.get("description")),
        image_url=_text(raw.get("image_url")),
        price=parse_decimal(raw.get("price")),
        stock=parse_int(raw.get("stock")),
        category_name=_text(raw.get("category_name")),
        is_available=parse_bool(raw.get("is_available")),
    )


def _records(frame: pd.DataFrame) -> List[ImportRow]:
    rows = []
    for values in frame.itertuples(index=False, name=None):
        if all(_is_blank(v) for v in values):
            continue
        rows.append(_to_row(dict(zip(FIELDS, values))))
    return rows


def parse_excel(content: bytes) -> List[ImportRow]:
    try:
        frame = pd.read_excel(io.BytesIO(content), sheet_name=0, header=0, dtype=object)
    except (ValueError, KeyError, OSError, zipfile.BadZipFile, InvalidFileException, XLRDError) as e:
        raise BadRequestError(f"Could not read Excel file: {e}")

    if frame.empty:
        raise BadRequestError("Excel file has no data")

    # positional: extra columns are ignored, missing trailing ones read as blank
    rows = _records(frame.iloc[:, :len(FIELDS)])
    if not rows:
        raise BadRequestError("Excel file has no data")
    return rows


def parse_csv(content: bytes) -> List[ImportRow]:
    try:
        frame = pd.read_csv(
            io.BytesIO(content),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        raise BadRequestError("CSV file is empty")
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise BadRequestError(f"Could not read CSV file: {e}")

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in COLUMNS if c not in frame.columns]
    if missing:
        raise BadRequestError(f"CSV file is missing columns: {', '.join(missing)}")

    return _records(frame[COLUMNS])


def parse_file(filename: Optional[str], content: bytes) -> List[ImportRow]:
    if not content:
        raise BadRequestError("File is empty")

    name = (filename or "").lower()
    if name.endswith(EXCEL_EXTENSIONS):
        rows = parse_excel(content)
    elif name.endswith(CSV_EXTENSIONS):
        rows = parse_csv(content)
    else:
        raise BadRequestError("Unsupported file format. Please use .xlsx, .xls, or .csv files")
    logger.debug("Parsed %d rows from %s", len(rows), filename)
    return rows


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_row(row: ImportRow, row_number: int) -> List[str]:
    errors = []
    prefix = f"Row {row_number}:"

    if not row.name:
        errors.append(f"{prefix} Product name is required")
    if not row.description:
        errors.append(f"{prefix} Description is required")

    if not row.image_url:
        errors.append(f"{prefix} Image URL is required")
    elif not is_valid_url(row.image_url):
        errors.append(f"{prefix} Invalid image URL format")

    if row.price is None or row.price <= 0:
        errors.append(f"{prefix} Price is required and must be greater than 0")
    if row.stock is None or row.stock < 0:
        errors.append(f"{prefix} Stock is required and cannot be negative")
    if not row.category_name:
        errors.append(f"{prefix} Category name is required")

    return errors


def validate_rows(rows: List[ImportRow]):
    """Returns (valid rows with their row numbers, all error messages)."""
    valid = []
    errors: List[str] = []
    for index, row in enumerate(rows):
        row_number = index + FIRST_DATA_ROW
        row_errors = validate_row(row, row_number)
        if row_errors:
            errors.extend(row_errors)
        else:
            valid.append((row_number, row))
    return valid, errors
