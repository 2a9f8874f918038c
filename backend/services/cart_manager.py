import logging
from decimal import Decimal
from typing import Optional

from supabase import Client

from errors import ConflictError
from repositories.cart_repository import delete_order_item, update_order, update_order_item
from schemas import Order, OrderItem, Price

logger = logging.getLogger("cart-api")

CONFLICT_MESSAGE = "The order has been modified since it was loaded."


def _order_total(order: Order) -> Optional[Price]:
    total: Optional[Price] = None
    for item in order.order_items:
        if item.total_price is None:
            continue
        total = item.total_price if total is None else total.add(item.total_price)
    return total


def refresh_order(order: Order) -> None:
    for item in order.order_items:
        if item.unit_price is not None:
            item.total_price = item.unit_price.multiply(item.quantity)
    order.total_price = _order_total(order)


def save_cart_item(client: Client, order: Order, item: OrderItem) -> Order:
    """Persist ``item`` and the refreshed cart totals.

    A zero quantity removes the item from the cart. The order row is written
    first, guarded by the version the caller loaded; losing that race raises
    ConflictError before the item row is touched.
    """
    loaded_version = order.version
    removed = item.quantity == Decimal("0")
    if removed:
        order.order_items = [existing for existing in order.order_items if existing.id != item.id]
    else:
        order.order_items = [item if existing.id == item.id else existing for existing in order.order_items]
    refresh_order(order)

    if not update_order(client, order, expected_version=loaded_version):
        logger.warning(
            "Order %s version mismatch: loaded version %s is stale", order.uuid, loaded_version
        )
        raise ConflictError(CONFLICT_MESSAGE)
    order.version = loaded_version + 1

    if removed:
        delete_order_item(client, item.id)
        logger.info("Removed order item %s from cart %s", item.uuid, order.uuid)
    else:
        update_order_item(client, item)
        logger.info(
            "Updated order item %s in cart %s: quantity=%s", item.uuid, order.uuid, item.quantity
        )
    return order
