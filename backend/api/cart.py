from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from supabase import Client

from auth import get_current_user_id
from errors import JSONAPI_MEDIA_TYPE
from services.cart_service import (
    expected_order_version,
    parse_update_document,
    update_cart_item,
)
from supabase_client import get_supabase

router = APIRouter(prefix="/cart", tags=["cart"])


@router.api_route("/{order_uuid}/items/{order_item_uuid}", methods=["POST", "PATCH"])
async def update_item(
    order_uuid: str,
    order_item_uuid: str,
    request: Request,
    if_match: Optional[str] = Header(default=None),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
) -> JSONResponse:
    document = parse_update_document(await request.body())
    expected_version = expected_order_version(document, if_match)
    cart = await update_cart_item(
        client,
        user_id,
        order_uuid,
        order_item_uuid,
        document,
        expected_version,
    )
    return JSONResponse(content=cart.model_dump(mode="json"), media_type=JSONAPI_MEDIA_TYPE)
