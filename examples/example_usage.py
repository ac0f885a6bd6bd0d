#!/usr/bin/env python3
"""
Example usage of the PDF Item Extractor
Demonstrates single-text extraction, batch processing and export with sample data.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from item_extractor import Document, ExtractionOptions, ItemExtractor, export_items, process_batch


def create_sample_order_text():
    """Create sample order text for demonstration."""
    return """
    PURCHASE ORDER - SHENZHEN COMPONENTS LTD

    No.  Part Number   Product Name                     Quantity   Unit Price
    1    ABC-100       Widget Assembly                  5          $12.50 yuan
         Specifications: zinc alloy, 40mm
    2    DEF-200       Power Adapter (EU plug)          12         $8.00 yuan
    3    GHI-300       Cord                             30         $0.95 yuan

    Accessories
    JK_40  Hex bolt set  qty: 100  price: $0.35
    XY-9 "Power cable, 2m" 10 @ $4.25
    """


def demonstrate_single_text():
    print("=" * 60)
    print("DEMONSTRATION: Single text, basic and strict validation")
    print("=" * 60)

    text = create_sample_order_text()
    for strict in (False, True):
        extractor = ItemExtractor(ExtractionOptions(strict_mode=strict))
        result = extractor.extract(text)
        print(f"\nstrict={strict}: {len(result.items)} items, {result.stats.rejected} rejected")
        print(export_items(result.items, 'txt'))


def demonstrate_batch():
    print("\n" + "=" * 60)
    print("DEMONSTRATION: Batch with a duplicate and an unreadable file")
    print("=" * 60)

    documents = [
        Document("order_march.pdf", text=create_sample_order_text()),
        Document("order_april.pdf", text="1 ABC-100 Widget Assembly 5 $12.50 yuan"),
        Document("missing.pdf", path="missing.pdf"),
    ]
    result = process_batch(
        documents,
        progress=lambda done, total, message: print(f"[{done}/{total}] {message}"),
    )

    print(f"\n{result.status_message}")
    print(f"Summary: {result.summary()}")
    print(export_items(result.items, 'json'))


if __name__ == "__main__":
    demonstrate_single_text()
    demonstrate_batch()
