"""Shared fixtures: a seeded in-memory cart and a TestClient wired to it."""
import os

os.environ.setdefault("SUPABASE_URL", "https://cart-api-test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from auth import get_current_user_id
from main import app
from repositories.cart_repository import (
    ORDER_ITEM_TABLE,
    ORDER_TABLE,
    PRODUCT_TABLE,
    VARIATION_TABLE,
)
from supabase_client import get_supabase
from tests.fake_supabase import FakeSupabase

USER_ID = "5b0b2a4e-6f0d-4c52-9a51-2f3e0b6c1d77"
OTHER_USER_ID = "0e4a3b71-96f2-4d8e-8b1c-7d9c1f6a2e10"
ORDER_UUID = "b7c1d2e3-4f50-4a6b-8c7d-9e0f1a2b3c4d"
ORDER_ITEM_UUID = "c3d4e5f6-0718-4293-a4b5-c6d7e8f90a1b"
VARIATION_UUID = "f1e2d3c4-b5a6-4978-8695-a4b3c2d1e0f9"
OTHER_VARIATION_UUID = "9dc0ce8a-1d62-40a2-bbf9-7b6041fd08d1"


def seed_cart(db: FakeSupabase, sku: str = "ABC123", **order_overrides: Any) -> None:
    db.rows(PRODUCT_TABLE).append(
        {
            "id": 1,
            "uuid": "2a3b4c5d-6e7f-4081-92a3-b4c5d6e7f809",
            "type": "default",
            "title": "Test product",
            "status": True,
            "stores": [1],
        }
    )
    db.rows(VARIATION_TABLE).extend(
        [
            {
                "id": 1,
                "uuid": OTHER_VARIATION_UUID,
                "type": "default",
                "product_id": None,
                "sku": "TEST",
                "status": True,
                "price_number": "4.00",
                "price_currency_code": "USD",
            },
            {
                "id": 2,
                "uuid": VARIATION_UUID,
                "type": "default",
                "product_id": 1,
                "sku": sku,
                "title": "Test product",
                "status": True,
                "price_number": "4.00",
                "price_currency_code": "USD",
            },
        ]
    )
    order = {
        "id": 1,
        "uuid": ORDER_UUID,
        "type": "default",
        "order_number": "6",
        "state": "draft",
        "cart": True,
        "uid": USER_ID,
        "mail": "test@example.com",
        "ip_address": "127.0.0.1",
        "store_id": 1,
        "version": 1,
        "total_price_number": "4.00",
        "total_price_currency_code": "USD",
    }
    order.update(order_overrides)
    db.rows(ORDER_TABLE).append(order)
    db.rows(ORDER_ITEM_TABLE).append(
        {
            "id": 1,
            "uuid": ORDER_ITEM_UUID,
            "type": "default",
            "order_id": 1,
            "purchased_entity_id": 2,
            "title": "Test product",
            "quantity": "1",
            "unit_price_number": "4.00",
            "unit_price_currency_code": "USD",
            "total_price_number": "4.00",
            "total_price_currency_code": "USD",
        }
    )


def update_document(fragment: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": "order-item--default", "id": ORDER_ITEM_UUID}
    data.update(fragment or {})
    data.setdefault("attributes", {})
    data.setdefault("relationships", {})
    return {"data": data}


def item_url(order_uuid: str = ORDER_UUID, order_item_uuid: str = ORDER_ITEM_UUID) -> str:
    return f"/cart/{order_uuid}/items/{order_item_uuid}"


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def seeded_db(fake_db: FakeSupabase) -> FakeSupabase:
    seed_cart(fake_db)
    return fake_db


@pytest.fixture
def test_client(fake_db: FakeSupabase):
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_supabase] = lambda: fake_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
