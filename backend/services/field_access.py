from typing import Any, Dict, Optional

from errors import AccessDeniedError, UnprocessableEntityError
from schemas import Order, OrderItem, ProductVariation, ResourceObjectPayload
from services.resource_serializer import (
    ORDER_ENTITY_TYPE,
    order_item_attributes,
    order_item_type_name,
    resource_type_name,
    variation_identifier,
)

EDITABLE_ATTRIBUTES = frozenset({"quantity"})
IMMUTABLE_RELATIONSHIPS = frozenset({"purchased_entity"})


def _deny(field_name: str, pointer: str) -> AccessDeniedError:
    if field_name in IMMUTABLE_RELATIONSHIPS:
        message = f"The `{field_name}` field cannot be modified."
    else:
        message = f"The current user is not allowed to PATCH the selected field ({field_name})."
    return AccessDeniedError(message, pointer=pointer)


def _unknown_field(field_name: str, type_name: str, pointer: str) -> UnprocessableEntityError:
    return UnprocessableEntityError(
        f"The attribute {field_name} does not exist on the {type_name} resource type.",
        pointer=pointer,
    )


def check_field_access(
    resource: ResourceObjectPayload,
    order: Order,
    item: OrderItem,
    variation: Optional[ProductVariation],
) -> Dict[str, Any]:
    """Return the submitted attribute values the caller may apply to ``item``.

    Fields whose submitted value equals the stored one are skipped. Any
    other change to a field outside EDITABLE_ATTRIBUTES is denied.
    """
    type_name = order_item_type_name(item)
    current_attributes = order_item_attributes(item)
    changes: Dict[str, Any] = {}

    for name, value in resource.attributes.items():
        pointer = f"/data/attributes/{name}"
        if name not in current_attributes:
            raise _unknown_field(name, type_name, pointer)
        if name in EDITABLE_ATTRIBUTES:
            changes[name] = value
        elif value != current_attributes[name]:
            raise _deny(name, pointer)

    current_relationships = {
        "order_id": {
            "type": resource_type_name(ORDER_ENTITY_TYPE, order.type),
            "id": order.uuid,
        },
        "purchased_entity": variation_identifier(variation),
    }
    for name, relationship in resource.relationships.items():
        pointer = f"/data/relationships/{name}"
        if name not in current_relationships:
            raise _unknown_field(name, type_name, pointer)
        submitted = relationship.data.model_dump() if relationship.data else None
        if submitted != current_relationships[name]:
            raise _deny(name, pointer)

    return changes
