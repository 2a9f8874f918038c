"""Tests for order item constraints."""
from decimal import Decimal

import pytest

from schemas import Product, ProductVariation
from services.order_item_validation import (
    coerce_quantity,
    validate_purchased_entity,
    validate_quantity,
)


def _variation(**overrides) -> ProductVariation:
    values = {"id": 2, "uuid": "variation-2", "sku": "ABC123", "title": "Test product", "product_id": 1}
    values.update(overrides)
    return ProductVariation(**values)


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, Decimal("10")),
        ("2.50", Decimal("2.50")),
        (0.5, Decimal("0.5")),
        ("abc", None),
        (None, None),
        (True, None),
        ("NaN", None),
        ([0, [5], 0], None),
        ((0, (5,), 0), None),
        ({"number": 5}, None),
    ],
)
def test_coerce_quantity(value, expected):
    assert coerce_quantity(value) == expected


def test_quantity_at_minimum_is_valid():
    assert validate_quantity(0) == []


def test_negative_quantity():
    violations = validate_quantity(-1)

    assert len(violations) == 1
    assert violations[0].property_path == "quantity"
    assert violations[0].message == "This value should be 0 or more."
    assert violations[0].pointer == "/data/attributes/quantity"


def test_custom_minimum():
    violations = validate_quantity(1, quantity_min=Decimal("2"))

    assert [violation.message for violation in violations] == ["This value should be 2 or more."]


def test_quantity_precision():
    violations = validate_quantity("1.125")

    assert violations[0].message == "This value should have at most 2 decimal places."


def test_valid_sku():
    assert validate_purchased_entity(_variation(), Product(id=1, uuid="product-1")) == []


@pytest.mark.parametrize("sku", ["TEST_123", "ABC 123", "ABC/1", ""])
def test_sku_outside_pattern(sku):
    violations = validate_purchased_entity(_variation(sku=sku), None)

    assert violations
    assert violations[0].pointer == "/data/relationships/purchased_entity"


def test_custom_sku_pattern():
    assert validate_purchased_entity(_variation(sku="TEST_123"), None, sku_pattern=r"^[A-Z0-9_]+$") == []


def test_unpublished_product():
    product = Product(id=1, uuid="product-1", status=False)

    violations = validate_purchased_entity(_variation(), product)

    assert [violation.message for violation in violations] == ["Test product is not available."]


def test_missing_variation():
    violations = validate_purchased_entity(None, None)

    assert violations[0].message == "The referenced entity does not exist."


def test_quantity_above_maximum():
    violations = validate_quantity("1e1000000")

    assert [violation.message for violation in violations] == [
        "This value should be 999999999999999.99 or less."
    ]
