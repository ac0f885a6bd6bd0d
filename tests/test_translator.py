#!/usr/bin/env python3
"""
Tests for description translation.
"""

import sys
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import requests

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from item_extractor.models import ExtractedItem
from item_extractor.translator import MYMEMORY_URL, DescriptionTranslator, translate_descriptions


def api_response(text, status=200):
    response = MagicMock()
    response.json.return_value = {"responseStatus": status, "responseData": {"translatedText": text}}
    return response


class TestDescriptionTranslator(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.translator = DescriptionTranslator(session=self.session)

    def test_exact_dictionary_match(self):
        self.assertEqual(self.translator.translate("Cable"), "电缆")
        self.session.get.assert_not_called()

    def test_fully_covered_by_dictionary(self):
        self.assertEqual(self.translator.translate("cable connector"), "电缆 连接器")
        self.session.get.assert_not_called()

    def test_falls_back_to_api(self):
        self.session.get.return_value = api_response("电源线")

        self.assertEqual(self.translator.translate("Power cable"), "电源线")
        self.session.get.assert_called_once_with(
            MYMEMORY_URL,
            params={"q": "Power cable", "langpair": "en|zh"},
            timeout=10.0,
        )

    def test_api_results_cached(self):
        self.session.get.return_value = api_response("小部件")

        self.translator.translate("Widget Assembly")
        self.translator.translate("Widget Assembly")

        self.assertEqual(self.session.get.call_count, 1)
        self.translator.clear_cache()
        self.translator.translate("Widget Assembly")
        self.assertEqual(self.session.get.call_count, 2)

    def test_api_failure_returns_original(self):
        self.session.get.side_effect = requests.ConnectionError("offline")
        self.assertEqual(self.translator.translate("Widget Assembly"), "Widget Assembly")

    def test_api_bad_status_returns_original(self):
        self.session.get.return_value = api_response("", status=403)
        self.assertEqual(self.translator.translate("Widget Assembly"), "Widget Assembly")

    def test_without_api_uses_partial_dictionary(self):
        translator = DescriptionTranslator(use_api=False, session=self.session)
        self.assertEqual(translator.translate("Power cable"), "Power 电缆")
        self.session.get.assert_not_called()

    def test_blank_text(self):
        self.assertEqual(self.translator.translate(""), "")
        self.assertEqual(self.translator.translate("  "), "  ")


class TestTranslateDescriptions(unittest.TestCase):

    def test_replaces_descriptions_in_place(self):
        items = [
            ExtractedItem("AB-1", "cable", 2, Decimal("1.00"), source_file="a.pdf", pattern_id=0),
            ExtractedItem("AB-2", "mouse", 3, Decimal("2.00"), source_file="b.pdf", pattern_id=1),
        ]
        original = items
        calls = []

        result = translate_descriptions(items, str.upper, progress=lambda *args: calls.append(args), delay=0)

        self.assertIs(result, original)
        self.assertEqual([i.description for i in items], ["CABLE", "MOUSE"])
        self.assertEqual(items[0].stock_code, "AB-1")
        self.assertEqual(items[1].source_file, "b.pdf")
        self.assertEqual(items[1].pattern_id, 1)
        self.assertEqual(calls, [(0, 2, "Translating item 1 of 2..."), (1, 2, "Translating item 2 of 2...")])

    def test_no_revalidation(self):
        items = [ExtractedItem("AB-1", "Widget Assembly", 2, Decimal("1.00"))]
        translate_descriptions(items, lambda text: "", delay=0)
        self.assertEqual(items[0].description, "")


if __name__ == '__main__':
    unittest.main()
