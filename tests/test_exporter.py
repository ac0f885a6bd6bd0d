#!/usr/bin/env python3
"""
Tests for item export formats.
"""

import csv
import io
import json
import os
import sys
import tempfile
import unittest
from datetime import date
from decimal import Decimal
from pathlib import Path

from openpyxl import load_workbook

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from item_extractor.exceptions import ItemExtractorError, UnsupportedExportFormat
from item_extractor.exporter import (
    default_export_name,
    export_items,
    items_from_json,
    table_rows,
    write_excel,
    write_export,
)
from item_extractor.models import ExtractedItem


class TestExportItems(unittest.TestCase):

    def setUp(self):
        self.items = [
            ExtractedItem("ABC-100", "Widget Assembly", 5, Decimal("12.50"), source_file="a.pdf"),
            ExtractedItem("XY-9", "Power cable, 2m", 10, Decimal("4.25"), source_file="b.pdf"),
        ]

    def test_json(self):
        data = json.loads(export_items(self.items, 'json'))
        self.assertEqual(data[0], {
            "stockCode": "ABC-100",
            "description": "Widget Assembly",
            "quantity": 5,
            "unitPrice": 12.5,
            "sourceFile": "a.pdf",
        })

    def test_json_round_trip(self):
        restored = items_from_json(export_items(self.items, 'json'))
        self.assertEqual(restored, self.items)

    def test_json_round_trip_without_source(self):
        items = [ExtractedItem("AB-1", "Cord reel", 3, Decimal("0.10"))]
        self.assertEqual(items_from_json(export_items(items, 'json')), items)

    def test_csv(self):
        output = export_items(self.items, 'CSV')
        rows = list(csv.reader(io.StringIO(output)))
        self.assertEqual(rows[0], ["stockCode", "description", "quantity", "unitPrice", "sourceFile"])
        self.assertEqual(rows[2], ["XY-9", "Power cable, 2m", "10", "4.25", "b.pdf"])
        self.assertTrue(output.splitlines()[1].startswith('"ABC-100","Widget Assembly","5","12.50"'))

    def test_csv_escapes_quotes(self):
        items = [ExtractedItem("AB-1", 'Bolt "M5"', 1, Decimal("1.00"))]
        output = export_items(items, 'csv')
        self.assertIn('"Bolt ""M5"""', output)
        self.assertNotIn("sourceFile", output)

    def test_txt(self):
        output = export_items(self.items[:1], 'txt')
        self.assertEqual(
            output,
            "Stock Code: ABC-100\n"
            "Description: Widget Assembly\n"
            "Quantity: 5\n"
            "Unit Price: $12.50\n"
            "---",
        )

    def test_empty(self):
        self.assertEqual(export_items([], 'json'), '[]')
        self.assertEqual(export_items([], 'csv'), '"stockCode","description","quantity","unitPrice"\n')
        self.assertEqual(export_items([], 'txt'), '')

    def test_unsupported_format(self):
        with self.assertRaises(UnsupportedExportFormat):
            export_items(self.items, 'xml')
        with self.assertRaises(ValueError):
            export_items([], 'yaml')

    def test_items_from_json_requires_array(self):
        with self.assertRaises(ItemExtractorError):
            items_from_json('{"stockCode": "AB-1"}')

    def test_items_from_json_rejects_invalid_records(self):
        bad_records = [
            {"stockCode": "AB-1", "description": "Cord reel", "quantity": 0, "unitPrice": 1.0},
            {"stockCode": "AB-1", "description": "Cord reel", "quantity": 2, "unitPrice": -3.5},
            {"stockCode": "A", "description": "Cord reel", "quantity": 2, "unitPrice": 1.0},
            {"stockCode": "AB-1", "description": "Cd", "quantity": 2, "unitPrice": 1.0},
            {"stockCode": "AB-1", "description": "Cord reel", "quantity": "two", "unitPrice": 1.0},
            {"stockCode": "AB-1", "description": "Cord reel", "quantity": 2},
        ]
        for record in bad_records:
            with self.subTest(record=record):
                with self.assertRaises(ItemExtractorError):
                    items_from_json(json.dumps([record]))

    def test_table_rows(self):
        rows = table_rows(self.items, limit=1)
        self.assertEqual(rows, [{
            'Stock Code': 'ABC-100',
            'Description': 'Widget Assembly',
            'Quantity': 5,
            'Unit Price': 12.5,
        }])


class TestExcelExport(unittest.TestCase):

    def setUp(self):
        self.items = [
            ExtractedItem("ABC-100", "Widget Assembly", 5, Decimal("12.50")),
            ExtractedItem("DEF-200", "Power Adapter", 12, Decimal("8.00")),
        ]
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def test_write_excel(self):
        path = write_excel(self.items, os.path.join(self.temp_dir.name, "out.xlsx"))

        workbook = load_workbook(path)
        sheet = workbook["Extracted Data"]
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0], ("Stock Code", "Description", "Quantity", "Unit Price"))
        self.assertEqual(rows[1], ("ABC-100", "Widget Assembly", 5, 12.5))
        self.assertEqual(len(rows), 3)
        self.assertEqual(sheet.column_dimensions['A'].width, 20)
        self.assertEqual(sheet.column_dimensions['B'].width, 60)

    def test_write_excel_without_items(self):
        with self.assertRaises(ItemExtractorError):
            write_excel([], os.path.join(self.temp_dir.name, "out.xlsx"))

    def test_write_export_text_formats(self):
        path = write_export(self.items, 'txt', os.path.join(self.temp_dir.name, "out.txt"))
        self.assertIn("Stock Code: DEF-200", path.read_text(encoding='utf-8'))

    def test_write_export_unsupported(self):
        with self.assertRaises(UnsupportedExportFormat):
            write_export(self.items, 'pdf', os.path.join(self.temp_dir.name, "out.pdf"))

    def test_default_export_name(self):
        self.assertEqual(default_export_name(date(2024, 1, 15)), "extracted_data_2024-01-15.xlsx")


if __name__ == '__main__':
    unittest.main()
