"""
Order-preserving deduplication of extracted items.
"""

import logging
from typing import Any, Iterable, List, Sequence, Tuple

from .models import ExtractedItem

logger = logging.getLogger(__name__)

DEFAULT_COMPARE_FIELDS: Tuple[str, ...] = ("stock_code", "description", "quantity", "unit_price")

ITEM_FIELDS = ("stock_code", "description", "quantity", "unit_price", "source_file", "pattern_id")

FIELD_ALIASES = {
    "stockCode": "stock_code",
    "unitPrice": "unit_price",
    "sourceFile": "source_file",
    "patternId": "pattern_id",
}


def resolve_field_name(name: str) -> str:
    """Map a field name (snake_case or export camelCase) to the item attribute."""
    resolved = FIELD_ALIASES.get(name, name)
    if resolved not in ITEM_FIELDS:
        raise ValueError(f"Unknown item field: {name}")
    return resolved


def dedupe_key(item: ExtractedItem, key_fields: Sequence[str] = DEFAULT_COMPARE_FIELDS,
               case_sensitive: bool = False) -> Tuple[Any, ...]:
    """Composite comparison key for an item. String values are case-folded unless case_sensitive."""
    values = []
    for name in key_fields:
        value = getattr(item, name)
        if isinstance(value, str) and not case_sensitive:
            value = value.casefold()
        values.append(value)
    return tuple(values)


def dedupe(items: Iterable[ExtractedItem],
           key_fields: Sequence[str] = DEFAULT_COMPARE_FIELDS,
           case_sensitive: bool = False) -> List[ExtractedItem]:
    """
    Remove duplicate items, keeping the first occurrence of each key.

    Args:
        items: Items in the order they were found
        key_fields: Fields that make up the comparison key
        case_sensitive: Compare string fields without case folding

    Returns:
        Unique items in order of first appearance
    """
    fields = tuple(resolve_field_name(name) for name in key_fields)
    seen = set()
    unique = []
    total = 0

    for item in items:
        total += 1
        key = dedupe_key(item, fields, case_sensitive)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)

    logger.info(f"Removed {total - len(unique)} duplicates ({len(unique)} unique of {total})")
    return unique
