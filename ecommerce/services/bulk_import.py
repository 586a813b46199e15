# ecommerce/services/bulk_import.py
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..errors import AppError
from ..models import Product
from ..schemas import ImportPreviewOut, ImportResultOut
from .file_parsing import parse_file, validate_rows

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 10
BATCH_SIZE = 1000


def preview_import(filename: Optional[str], content: bytes) -> ImportPreviewOut:
    preview = ImportPreviewOut()
    try:
        rows = parse_file(filename, content)
    except AppError as e:
        preview.errors.append(f"Error processing file: {e.message}")
        return preview

    valid, errors = validate_rows(rows)
    preview.total_records = len(rows)
    preview.valid_records = len(valid)
    preview.invalid_records = len(rows) - len(valid)
    preview.preview_data = [row for _, row in valid[:PREVIEW_SIZE]]
    preview.errors = errors
    return preview


async def import_products(db: AsyncSession, filename: Optional[str], content: bytes) -> ImportResultOut:
    """Insert new products and update existing ones from an uploaded file.

    A row updates the active product with the same name (case-insensitive)
    in the same category, otherwise it inserts. Every write happens in one
    transaction, flushed every ``BATCH_SIZE`` rows.
    """
    result = ImportResultOut()

    rows = parse_file(filename, content)
    valid, errors = validate_rows(rows)
    result.error_messages = list(errors)

    if not valid:
        result.total_failed = len(rows)
        result.message = "No valid records found in the file"
        return result
    result.total_failed = len(rows) - len(valid)

    try:
        categories = await crud.category_map_by_name(db)
        wanted = {categories[r.category_name.strip().lower()] for _, r in valid
                  if r.category_name.strip().lower() in categories}
        existing = await crud.products_by_name_in_categories(db, wanted)

        pending = 0
        for row_number, row in valid:
            category_id = categories.get(row.category_name.strip().lower())
            if category_id is None:
                result.error_messages.append(f"Row {row_number}: Category '{row.category_name}' not found")
                result.total_failed += 1
                continue

            name = row.name.strip()
            key = (name.lower(), category_id)
            product = existing.get(key)
            if product is None:
                product = Product(name=name, category_id=category_id, is_deleted=False)
                db.add(product)
                existing[key] = product
                result.total_inserted += 1
            else:
                result.total_updated += 1

            product.description = row.description
            product.image_url = row.image_url
            product.price = row.price
            product.stock = row.stock
            product.is_available = True if row.is_available is None else row.is_available

            pending += 1
            if pending >= BATCH_SIZE:
                await db.flush()
                pending = 0

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Bulk import of %s failed", filename)
        return ImportResultOut(
            total_failed=len(rows),
            error_messages=errors + [f"Error during bulk import: {e.__class__.__name__}"],
            message="Bulk import failed",
        )

    result.message = (
        f"Successfully imported {result.total_inserted} products and updated {result.total_updated} products. "
        f"{result.total_failed} records failed due to validation errors."
    )
    logger.info(
        "Bulk import of %s: %d inserted, %d updated, %d failed",
        filename, result.total_inserted, result.total_updated, result.total_failed,
    )
    return result
