#!/usr/bin/env python3
"""
Serialization of extracted items to JSON, CSV, plain text and Excel.
"""

import csv
import io
import json
import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Font

from .exceptions import ItemExtractorError, UnsupportedExportFormat
from .models import ExtractedItem, ItemCandidate
from .validator import validate

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('json', 'csv', 'txt', 'xlsx')

TABLE_COLUMNS = ('Stock Code', 'Description', 'Quantity', 'Unit Price')
COLUMN_WIDTHS = (20, 60, 10, 15)
SHEET_TITLE = 'Extracted Data'

_CENTS = Decimal('0.01')


def format_price(price: Decimal) -> str:
    return str(price.quantize(_CENTS))


def table_rows(items: Sequence[ExtractedItem], limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Rows keyed by display column title, for previews and spreadsheets."""
    selected = items if limit is None else items[:limit]
    return [
        {
            'Stock Code': item.stock_code,
            'Description': item.description,
            'Quantity': item.quantity,
            'Unit Price': float(item.unit_price),
        }
        for item in selected
    ]


def export_items(items: Sequence[ExtractedItem], fmt: str = 'json') -> str:
    """
    Export items as a string.

    Args:
        items: Items to export
        fmt: 'json', 'csv' or 'txt' (case-insensitive)

    Returns:
        Formatted data

    Raises:
        UnsupportedExportFormat: for any other format
    """
    fmt_name = (fmt or '').lower()
    if fmt_name not in ('json', 'csv', 'txt'):
        raise UnsupportedExportFormat(fmt)

    if not items and fmt_name != 'csv':
        return '[]' if fmt_name == 'json' else ''

    if fmt_name == 'json':
        return _to_json(items)
    if fmt_name == 'csv':
        return _to_csv(items)
    return _to_text(items)


def _to_json(items: Sequence[ExtractedItem]) -> str:
    return json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False)


def _to_csv(items: Sequence[ExtractedItem]) -> str:
    include_source = any(item.source_file is not None for item in items)
    headers = ['stockCode', 'description', 'quantity', 'unitPrice']
    if include_source:
        headers.append('sourceFile')

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(headers)
    for item in items:
        row = [item.stock_code, item.description, item.quantity, format_price(item.unit_price)]
        if include_source:
            row.append(item.source_file or '')
        writer.writerow(row)
    return output.getvalue()


def _to_text(items: Sequence[ExtractedItem]) -> str:
    return '\n'.join(
        f"Stock Code: {item.stock_code}\n"
        f"Description: {item.description}\n"
        f"Quantity: {item.quantity}\n"
        f"Unit Price: ${format_price(item.unit_price)}\n"
        "---"
        for item in items
    )


def items_from_json(data: str) -> List[ExtractedItem]:
    """
    Parse items back from the JSON export.

    Each record is checked with the basic validation rules before an item is
    built from it.

    Raises:
        ItemExtractorError: if the data is not an array or a record is not a valid item
    """
    records = json.loads(data)
    if not isinstance(records, list):
        raise ItemExtractorError("Expected a JSON array of items")

    items = []
    for index, record in enumerate(records):
        try:
            candidate = ItemCandidate(
                stock_code=record['stockCode'],
                description=record['description'],
                quantity=int(record['quantity']),
                unit_price=Decimal(str(record['unitPrice'])).quantize(_CENTS),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise ItemExtractorError(f"Record {index} could not be parsed: {e}") from e

        if not validate(candidate):
            raise ItemExtractorError(f"Record {index} is not a valid item")

        items.append(replace(candidate.to_item(), source_file=record.get('sourceFile')))

    return items


def default_export_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"extracted_data_{today.isoformat()}.xlsx"


def create_workbook(items: Sequence[ExtractedItem]) -> Workbook:
    """Build a workbook with one sheet holding the four display columns."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE

    sheet.append(list(TABLE_COLUMNS))
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for row in table_rows(items):
        sheet.append([row[column] for column in TABLE_COLUMNS])

    for letter, width in zip('ABCD', COLUMN_WIDTHS):
        sheet.column_dimensions[letter].width = width

    return workbook


def write_excel(items: Sequence[ExtractedItem], path: Union[str, Path, None] = None) -> Path:
    """
    Save items to an .xlsx file.

    Args:
        items: Items to write
        path: Output path, ``extracted_data_<date>.xlsx`` when omitted

    Returns:
        Path of the written file
    """
    if not items:
        raise ItemExtractorError("No data available to download.")

    output = Path(path) if path else Path(default_export_name())
    create_workbook(items).save(str(output))
    logger.info(f"Excel file saved to: {output}")
    return output


def write_export(items: Sequence[ExtractedItem], fmt: str, path: Union[str, Path]) -> Path:
    """Write items to a file in any of the supported formats."""
    fmt_name = (fmt or '').lower()
    if fmt_name == 'xlsx':
        return write_excel(items, path)

    content = export_items(items, fmt_name)
    output = Path(path)
    output.write_text(content, encoding='utf-8')
    logger.info(f"Results saved to: {output}")
    return output
