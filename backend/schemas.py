from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Price(BaseModel):
    number: Decimal
    currency_code: str = Field(..., min_length=3, max_length=3)

    def multiply(self, factor: Decimal) -> "Price":
        return Price(number=self.number * factor, currency_code=self.currency_code)

    def add(self, other: "Price") -> "Price":
        if other.currency_code != self.currency_code:
            raise ValueError(
                f"Cannot add prices in different currencies: {self.currency_code}, {other.currency_code}"
            )
        return Price(number=self.number + other.number, currency_code=self.currency_code)


class Product(BaseModel):
    id: int
    uuid: str
    type: str = "default"
    title: Optional[str] = None
    status: bool = True
    stores: List[int] = []


class ProductVariation(BaseModel):
    id: int
    uuid: str
    type: str = "default"
    product_id: Optional[int] = None
    sku: str
    title: Optional[str] = None
    status: bool = True
    price: Optional[Price] = None


class OrderItem(BaseModel):
    id: int
    uuid: str
    type: str = "default"
    order_id: int
    purchased_entity_id: Optional[int] = None
    title: Optional[str] = None
    quantity: Decimal = Decimal("1")
    unit_price: Optional[Price] = None
    total_price: Optional[Price] = None


class Order(BaseModel):
    id: int
    uuid: str
    type: str = "default"
    order_number: Optional[str] = None
    state: str = "draft"
    cart: bool = True
    uid: Optional[str] = None
    mail: Optional[str] = None
    ip_address: Optional[str] = None
    store_id: Optional[int] = None
    version: int = 1
    total_price: Optional[Price] = None
    order_items: List[OrderItem] = []

    def get_item(self, order_item_uuid: str) -> Optional[OrderItem]:
        for item in self.order_items:
            if item.uuid == order_item_uuid:
                return item
        return None


class ResourceIdentifier(BaseModel):
    type: str
    id: str


class RelationshipPayload(BaseModel):
    data: Optional[ResourceIdentifier] = None


class ResourceObjectPayload(BaseModel):
    type: str
    id: str
    attributes: Dict[str, Any] = {}
    relationships: Dict[str, RelationshipPayload] = {}
    meta: Dict[str, Any] = {}


class UpdateItemDocument(BaseModel):
    data: ResourceObjectPayload


class ResourceObject(BaseModel):
    type: str
    id: str
    attributes: Dict[str, Any] = {}
    relationships: Dict[str, Any] = {}


class CartDocument(BaseModel):
    jsonapi: Dict[str, str] = {"version": "1.0"}
    data: ResourceObject
    included: List[ResourceObject] = []
    meta: Dict[str, Any] = {}
