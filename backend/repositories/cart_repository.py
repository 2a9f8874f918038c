from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from supabase import Client

from schemas import Order, OrderItem, Price, Product, ProductVariation

ORDER_TABLE = "commerce_order"
ORDER_ITEM_TABLE = "commerce_order_item"
PRODUCT_TABLE = "commerce_product"
VARIATION_TABLE = "commerce_product_variation"


def _price_from_row(row: Dict[str, Any], prefix: str) -> Optional[Price]:
    number = row.get(f"{prefix}_number")
    currency_code = row.get(f"{prefix}_currency_code")
    if number is None or not currency_code:
        return None
    return Price(number=str(number), currency_code=currency_code)


def _price_columns(price: Optional[Price], prefix: str) -> Dict[str, Any]:
    if price is None:
        return {f"{prefix}_number": None, f"{prefix}_currency_code": None}
    return {
        f"{prefix}_number": str(price.number),
        f"{prefix}_currency_code": price.currency_code,
    }


def _order_item_from_row(row: Dict[str, Any]) -> OrderItem:
    return OrderItem(
        id=row["id"],
        uuid=row["uuid"],
        type=row.get("type") or "default",
        order_id=row["order_id"],
        purchased_entity_id=row.get("purchased_entity_id"),
        title=row.get("title"),
        quantity=str(row.get("quantity") or "0"),
        unit_price=_price_from_row(row, "unit_price"),
        total_price=_price_from_row(row, "total_price"),
    )


def _order_from_row(row: Dict[str, Any], items: List[OrderItem]) -> Order:
    return Order(
        id=row["id"],
        uuid=row["uuid"],
        type=row.get("type") or "default",
        order_number=row.get("order_number"),
        state=row.get("state") or "draft",
        cart=bool(row.get("cart")),
        uid=row.get("uid"),
        mail=row.get("mail"),
        ip_address=row.get("ip_address"),
        store_id=row.get("store_id"),
        version=int(row.get("version") or 1),
        total_price=_price_from_row(row, "total_price"),
        order_items=items,
    )


def _variation_from_row(row: Dict[str, Any]) -> ProductVariation:
    return ProductVariation(
        id=row["id"],
        uuid=row["uuid"],
        type=row.get("type") or "default",
        product_id=row.get("product_id"),
        sku=row["sku"],
        title=row.get("title"),
        status=bool(row.get("status")),
        price=_price_from_row(row, "price"),
    )


def fetch_order_items(client: Client, order_id: int) -> List[OrderItem]:
    response = (
        client.table(ORDER_ITEM_TABLE)
        .select("*")
        .eq("order_id", order_id)
        .order("id")
        .execute()
    )
    return [_order_item_from_row(row) for row in response.data or []]


def fetch_cart(client: Client, order_uuid: str, user_id: str) -> Optional[Order]:
    response = (
        client.table(ORDER_TABLE)
        .select("*")
        .eq("uuid", order_uuid)
        .eq("uid", user_id)
        .eq("cart", True)
        .eq("state", "draft")
        .limit(1)
        .execute()
    )
    rows = response.data or []
    if not rows:
        return None
    row = rows[0]
    return _order_from_row(row, fetch_order_items(client, row["id"]))


def fetch_variations(client: Client, variation_ids: Iterable[int]) -> Dict[int, ProductVariation]:
    ids = sorted({variation_id for variation_id in variation_ids if variation_id is not None})
    if not ids:
        return {}
    response = client.table(VARIATION_TABLE).select("*").in_("id", ids).execute()
    variations = [_variation_from_row(row) for row in response.data or []]
    return {variation.id: variation for variation in variations}


def fetch_product(client: Client, product_id: int) -> Optional[Product]:
    response = (
        client.table(PRODUCT_TABLE)
        .select("*")
        .eq("id", product_id)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    if not rows:
        return None
    row = rows[0]
    return Product(
        id=row["id"],
        uuid=row["uuid"],
        type=row.get("type") or "default",
        title=row.get("title"),
        status=bool(row.get("status")),
        stores=row.get("stores") or [],
    )


def update_order(client: Client, order: Order, *, expected_version: int) -> bool:
    """Write the order row only if its stored version is still ``expected_version``.

    The stored version is bumped by one. Returns False when no row matched,
    which means another request saved the order first.
    """
    payload = {
        "version": expected_version + 1,
        "changed": datetime.now(timezone.utc).isoformat(),
        **_price_columns(order.total_price, "total_price"),
    }
    response = (
        client.table(ORDER_TABLE)
        .update(payload)
        .eq("id", order.id)
        .eq("version", expected_version)
        .execute()
    )
    return bool(response.data)


def update_order_item(client: Client, item: OrderItem) -> None:
    payload = {
        "quantity": str(item.quantity),
        "changed": datetime.now(timezone.utc).isoformat(),
        **_price_columns(item.total_price, "total_price"),
    }
    client.table(ORDER_ITEM_TABLE).update(payload).eq("id", item.id).execute()


def delete_order_item(client: Client, item_id: int) -> None:
    client.table(ORDER_ITEM_TABLE).delete().eq("id", item_id).execute()
