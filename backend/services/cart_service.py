import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError
from supabase import Client

from errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    UnprocessableEntityError,
)
from repositories.cart_repository import fetch_cart, fetch_product, fetch_variations
from schemas import CartDocument, UpdateItemDocument
from services.cart_manager import CONFLICT_MESSAGE, save_cart_item
from services.field_access import check_field_access
from services.order_item_validation import (
    coerce_quantity,
    validate_purchased_entity,
    validate_quantity,
)
from services.resource_serializer import build_cart_document, order_item_type_name

logger = logging.getLogger("cart-api")

INVALID_DOCUMENT_MESSAGE = "The request body must be a JSON:API document with a data member."


def parse_update_document(body: bytes) -> UpdateItemDocument:
    try:
        return UpdateItemDocument.model_validate_json(body or b"null")
    except ValidationError as exc:
        raise BadRequestError(INVALID_DOCUMENT_MESSAGE) from exc


def _parse_version(value: Any, source: str) -> int:
    text = str(value).strip()
    if text.startswith("W/"):
        text = text[2:]
    text = text.strip('"')
    try:
        return int(text)
    except ValueError as exc:
        raise BadRequestError(f"Invalid order version in {source}: {value}") from exc


def expected_order_version(document: UpdateItemDocument, if_match: Optional[str] = None) -> Optional[int]:
    if if_match:
        return _parse_version(if_match, "If-Match header")
    meta_version = document.data.meta.get("order_version")
    if meta_version is None:
        return None
    return _parse_version(meta_version, "data.meta.order_version")


def process_update(
    client: Client,
    user_id: str,
    order_uuid: str,
    order_item_uuid: str,
    document: UpdateItemDocument,
    expected_version: Optional[int] = None,
) -> CartDocument:
    order = fetch_cart(client, order_uuid, user_id)
    if order is None:
        raise NotFoundError("Cart not found.")
    stored_item = order.get_item(order_item_uuid)
    if stored_item is None:
        raise NotFoundError("Order item not found in cart.")

    resource = document.data
    type_name = order_item_type_name(stored_item)
    if resource.type != type_name:
        raise ConflictError(
            f"The resource type {resource.type} does not match the targeted resource type {type_name}.",
            pointer="/data/type",
        )
    if resource.id != stored_item.uuid:
        raise ConflictError(
            "The resource id in the document does not match the targeted order item.",
            pointer="/data/id",
        )
    if expected_version is not None and expected_version != order.version:
        logger.warning(
            "Cart %s is at version %s, request expected %s",
            order.uuid,
            order.version,
            expected_version,
        )
        raise ConflictError(CONFLICT_MESSAGE)

    variations = fetch_variations(client, [item.purchased_entity_id for item in order.order_items])
    variation = variations.get(stored_item.purchased_entity_id)
    changes = check_field_access(resource, order, stored_item, variation)

    item = stored_item.model_copy()
    raw_quantity = changes.get("quantity", item.quantity)
    quantity = coerce_quantity(raw_quantity)
    violations = validate_quantity(raw_quantity)
    # A removal only needs a valid quantity.
    if quantity != 0:
        product = fetch_product(client, variation.product_id) if variation and variation.product_id else None
        violations += validate_purchased_entity(variation, product)
    if violations:
        raise UnprocessableEntityError(violations=violations)
    item.quantity = quantity

    order = save_cart_item(client, order, item)
    return build_cart_document(order, variations)


async def update_cart_item(
    client: Client,
    user_id: str,
    order_uuid: str,
    order_item_uuid: str,
    document: UpdateItemDocument,
    expected_version: Optional[int] = None,
) -> CartDocument:
    return await asyncio.to_thread(
        process_update,
        client,
        user_id,
        order_uuid,
        order_item_uuid,
        document,
        expected_version,
    )
