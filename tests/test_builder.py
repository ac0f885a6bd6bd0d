#!/usr/bin/env python3
"""
Tests for building item candidates from raw matches.
"""

import sys
import unittest
from decimal import Decimal
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from item_extractor.builder import (
    build_candidate,
    clean_description,
    normalize_stock_code,
    parse_quantity,
    parse_unit_price,
)
from item_extractor.exceptions import CandidateParseError
from item_extractor.patterns import RawCandidate


class TestCleanDescription(unittest.TestCase):

    def test_strips_specifications(self):
        self.assertEqual(clean_description("Widget  Assembly Specifications: 10mm steel"), "Widget Assembly")
        self.assertEqual(clean_description("Widget specifications: lower case"), "Widget")

    def test_removes_disallowed_characters(self):
        self.assertEqual(clean_description("Cable (2m) #5!"), "Cable 2m 5")
        self.assertEqual(clean_description("Bolt, M5 x 20mm. zinc-plated"), "Bolt, M5 x 20mm. zinc-plated")

    def test_collapses_whitespace(self):
        self.assertEqual(clean_description("  Hex \n bolt\tset "), "Hex bolt set")

    def test_empty(self):
        self.assertEqual(clean_description(""), "")
        self.assertEqual(clean_description(None), "")


class TestFieldParsing(unittest.TestCase):

    def test_normalize_stock_code(self):
        self.assertEqual(normalize_stock_code(" ab-100 "), "AB-100")
        self.assertEqual(normalize_stock_code(None), "")

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity("12"), 12)
        self.assertEqual(parse_quantity(" 7 "), 7)
        self.assertEqual(parse_quantity("007"), 7)

    def test_parse_quantity_invalid(self):
        for value in ["abc", "", None, "1.5", "1_000"]:
            with self.subTest(value=value):
                with self.assertRaises(CandidateParseError):
                    parse_quantity(value)

    def test_parse_unit_price(self):
        test_cases = [
            ("12.50", Decimal("12.50")),
            ("$1,234.5", Decimal("1234.50")),
            ("12.345", Decimal("12.35")),
            ("3", Decimal("3.00")),
            ("€9.99", Decimal("9.99")),
        ]
        for value, expected in test_cases:
            with self.subTest(value=value):
                price = parse_unit_price(value)
                self.assertEqual(price, expected)
                self.assertEqual(price.as_tuple().exponent, -2)

    def test_parse_unit_price_invalid(self):
        for value in ["abc", "", None, "NaN", "Infinity"]:
            with self.subTest(value=value):
                with self.assertRaises(CandidateParseError):
                    parse_unit_price(value)


class TestBuildCandidate(unittest.TestCase):

    def test_builds_candidate(self):
        raw = RawCandidate(pattern_id=0, groups=(" abc-100", "Widget Assembly", "5", "12.50"), raw="...")
        candidate = build_candidate(raw)

        self.assertIsNotNone(candidate)
        self.assertEqual(candidate.stock_code, "ABC-100")
        self.assertEqual(candidate.description, "Widget Assembly")
        self.assertEqual(candidate.quantity, 5)
        self.assertEqual(candidate.unit_price, Decimal("12.50"))
        self.assertEqual(candidate.pattern_id, 0)

    def test_too_few_captures(self):
        raw = RawCandidate(pattern_id=3, groups=("AB-1", "Widget", "5"), raw="...")
        self.assertIsNone(build_candidate(raw))

    def test_non_numeric_quantity_dropped(self):
        raw = RawCandidate(pattern_id=3, groups=("AB-1", "Widget", "abc", "1.00"), raw="...")
        self.assertIsNone(build_candidate(raw))

    def test_non_numeric_price_dropped(self):
        raw = RawCandidate(pattern_id=3, groups=("AB-1", "Widget", "2", "n/a"), raw="...")
        self.assertIsNone(build_candidate(raw))

    def test_to_item_carries_fields(self):
        raw = RawCandidate(pattern_id=1, groups=("AB-12", "Hex bolt set", "4", "3.10"), raw="...")
        item = build_candidate(raw).to_item()
        self.assertEqual(item.stock_code, "AB-12")
        self.assertEqual(item.pattern_id, 1)
        self.assertIsNone(item.source_file)


if __name__ == '__main__':
    unittest.main()
