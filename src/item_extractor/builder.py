#!/usr/bin/env python3
"""
Turns raw pattern captures into typed item candidates.
"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from .exceptions import CandidateParseError
from .models import ItemCandidate
from .patterns import RawCandidate

logger = logging.getLogger(__name__)

_SPECIFICATIONS = re.compile(r'Specifications:[\s\S]*', re.IGNORECASE)
_WHITESPACE = re.compile(r'\s+')
_DISALLOWED = re.compile(r'[^\w\s,.-]')
_INTEGER = re.compile(r'[+-]?\d+')
_CENTS = Decimal('0.01')


def clean_description(description: Optional[str]) -> str:
    """Strip the specifications block, collapse whitespace and drop stray punctuation."""
    if not description:
        return ""

    description = _SPECIFICATIONS.sub('', description)
    description = _WHITESPACE.sub(' ', description)
    description = _DISALLOWED.sub('', description)
    return description.strip()


def normalize_stock_code(stock_code: Optional[str]) -> str:
    if not stock_code:
        return ""
    return stock_code.strip().upper()


def parse_quantity(value: Any) -> int:
    """Parse a base-10 integer quantity."""
    text = str(value).strip() if value is not None else ""
    if not _INTEGER.fullmatch(text):
        raise CandidateParseError(f"Invalid quantity: {value!r}")
    return int(text, 10)


def parse_unit_price(value: Any) -> Decimal:
    """Parse a price, dropping currency symbols and thousands separators, rounded to cents."""
    if value is None:
        raise CandidateParseError("Missing unit price")

    # Remove currency symbols and extra whitespace
    price_str = re.sub(r'[\$\€\£\¥]', '', str(value).strip())
    price_str = price_str.replace(',', '')

    try:
        price = Decimal(price_str)
    except InvalidOperation as e:
        raise CandidateParseError(f"Invalid unit price: {value!r}") from e

    if not price.is_finite():
        raise CandidateParseError(f"Invalid unit price: {value!r}")
    return price.quantize(_CENTS, rounding=ROUND_HALF_UP)


def build_candidate(raw: RawCandidate) -> Optional[ItemCandidate]:
    """
    Build an item candidate from a pattern match.

    Returns None when the match has fewer than four captures or its quantity or
    price is not numeric. The candidate still has to pass validation.
    """
    if len(raw.groups) < 4:
        logger.debug(f"Pattern {raw.pattern_id + 1} produced {len(raw.groups)} captures, expected 4")
        return None

    stock_code, description, quantity, unit_price = raw.groups[:4]
    try:
        return ItemCandidate(
            stock_code=normalize_stock_code(stock_code),
            description=clean_description(description),
            quantity=parse_quantity(quantity),
            unit_price=parse_unit_price(unit_price),
            pattern_id=raw.pattern_id,
            raw_match=raw.raw,
        )
    except CandidateParseError as e:
        logger.debug(f"Dropping match {raw.raw!r}: {e}")
        return None
