"""
Acceptance rules for item candidates.
"""

import re
from decimal import Decimal
from numbers import Number
from typing import Any

from .config import DEFAULT_LIMITS, ValidationLimits

_STRICT_STOCK_CODE = re.compile(r'[A-Z0-9_-]+')


def validate(item: Any, strict: bool = False, limits: ValidationLimits = DEFAULT_LIMITS) -> bool:
    """
    Check a candidate (or item) against the basic rules and, in strict mode,
    the tighter shape and range rules. Has no side effects.
    """
    if item is None:
        return False

    stock_code = getattr(item, 'stock_code', None)
    description = getattr(item, 'description', None)
    quantity = getattr(item, 'quantity', None)
    unit_price = getattr(item, 'unit_price', None)

    if not isinstance(stock_code, str) or len(stock_code) < limits.min_stock_code_length:
        return False
    if not isinstance(description, str) or len(description) < limits.min_description_length:
        return False
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        return False
    if isinstance(unit_price, bool) or not isinstance(unit_price, (Decimal, Number)):
        return False
    if isinstance(unit_price, Decimal) and not unit_price.is_finite():
        return False
    if not unit_price > 0:
        return False

    if not strict:
        return True

    return (
        _STRICT_STOCK_CODE.fullmatch(stock_code) is not None
        and limits.strict_min_description_length <= len(description) <= limits.strict_max_description_length
        and quantity <= limits.strict_max_quantity
        and unit_price <= limits.strict_max_unit_price
    )
