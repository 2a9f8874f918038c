import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from config import settings
from errors import Violation
from schemas import Product, ProductVariation

QUANTITY_POINTER = "/data/attributes/quantity"
PURCHASED_ENTITY_POINTER = "/data/relationships/purchased_entity"
QUANTITY_SCALE = 2
QUANTITY_MAX = Decimal("999999999999999.99")


def coerce_quantity(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        return None
    if isinstance(value, float):
        value = str(value)
    try:
        quantity = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not quantity.is_finite():
        return None
    return quantity


def validate_quantity(value: Any, quantity_min: Optional[Decimal] = None) -> List[Violation]:
    minimum = settings.quantity_min if quantity_min is None else quantity_min
    quantity = coerce_quantity(value)
    if quantity is None:
        return [Violation("quantity", "This value should be a valid number.", QUANTITY_POINTER)]
    violations: List[Violation] = []
    if quantity < minimum:
        violations.append(
            Violation("quantity", f"This value should be {minimum} or more.", QUANTITY_POINTER)
        )
    if quantity > QUANTITY_MAX:
        violations.append(
            Violation("quantity", f"This value should be {QUANTITY_MAX} or less.", QUANTITY_POINTER)
        )
    if -quantity.as_tuple().exponent > QUANTITY_SCALE:
        violations.append(
            Violation(
                "quantity",
                f"This value should have at most {QUANTITY_SCALE} decimal places.",
                QUANTITY_POINTER,
            )
        )
    return violations


def validate_purchased_entity(
    variation: Optional[ProductVariation],
    product: Optional[Product],
    sku_pattern: Optional[str] = None,
) -> List[Violation]:
    if variation is None:
        return [
            Violation(
                "purchased_entity",
                "The referenced entity does not exist.",
                PURCHASED_ENTITY_POINTER,
            )
        ]
    pattern = settings.sku_pattern if sku_pattern is None else sku_pattern
    violations: List[Violation] = []
    if not re.fullmatch(pattern, variation.sku):
        violations.append(
            Violation(
                "purchased_entity",
                f"The SKU {variation.sku} does not match the allowed pattern.",
                PURCHASED_ENTITY_POINTER,
            )
        )
    if not variation.status or (product is not None and not product.status):
        violations.append(
            Violation(
                "purchased_entity",
                f"{variation.title or variation.sku} is not available.",
                PURCHASED_ENTITY_POINTER,
            )
        )
    return violations
