from typing import Any, Dict, Mapping, Optional

from schemas import CartDocument, Order, OrderItem, Price, ProductVariation, ResourceObject

ORDER_ENTITY_TYPE = "order"
ORDER_ITEM_ENTITY_TYPE = "order-item"
VARIATION_ENTITY_TYPE = "product-variation"


def resource_type_name(entity_type: str, bundle: str) -> str:
    return f"{entity_type}--{bundle}"


def order_item_type_name(item: OrderItem) -> str:
    return resource_type_name(ORDER_ITEM_ENTITY_TYPE, item.type)


def serialize_price(price: Optional[Price]) -> Optional[Dict[str, str]]:
    if price is None:
        return None
    return {"number": str(price.number), "currency_code": price.currency_code}


def variation_identifier(variation: Optional[ProductVariation]) -> Optional[Dict[str, str]]:
    if variation is None:
        return None
    return {
        "type": resource_type_name(VARIATION_ENTITY_TYPE, variation.type),
        "id": variation.uuid,
    }


def order_item_attributes(item: OrderItem) -> Dict[str, Any]:
    return {
        "title": item.title,
        "quantity": str(item.quantity),
        "unit_price": serialize_price(item.unit_price),
        "total_price": serialize_price(item.total_price),
    }


def order_item_resource(
    item: OrderItem,
    order: Order,
    variation: Optional[ProductVariation],
) -> ResourceObject:
    return ResourceObject(
        type=order_item_type_name(item),
        id=item.uuid,
        attributes=order_item_attributes(item),
        relationships={
            "order_id": {
                "data": {
                    "type": resource_type_name(ORDER_ENTITY_TYPE, order.type),
                    "id": order.uuid,
                }
            },
            "purchased_entity": {"data": variation_identifier(variation)},
        },
    )


def order_resource(order: Order) -> ResourceObject:
    return ResourceObject(
        type=resource_type_name(ORDER_ENTITY_TYPE, order.type),
        id=order.uuid,
        attributes={
            "order_number": order.order_number,
            "state": order.state,
            "email": order.mail,
            "total_price": serialize_price(order.total_price),
        },
        relationships={
            "order_items": {
                "data": [
                    {"type": order_item_type_name(item), "id": item.uuid}
                    for item in order.order_items
                ]
            }
        },
    )


def build_cart_document(order: Order, variations: Mapping[int, ProductVariation]) -> CartDocument:
    included = [
        order_item_resource(item, order, variations.get(item.purchased_entity_id))
        for item in order.order_items
    ]
    return CartDocument(
        data=order_resource(order),
        included=included,
        meta={"order_version": order.version},
    )
