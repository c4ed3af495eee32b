"""Pydantic schemas for orders.

This module exposes the request/validation schemas used by the orders API
and the read DTOs used to render domain orders. The wire format uses
camelCase keys (``restaurantId``, ``menuItemId``...); the schemas accept
both the alias and the field name on input.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from .domain import Order, OrderItemRequest


class OrderItemIn(BaseModel):
    """Input schema for a single order line item.

    Attributes:
        menu_item_id: Menu item identifier, non-empty.
        quantity: Positive integer indicating units requested. Strict, so
            ``2.5`` or ``"2"`` are rejected rather than coerced.
    """

    model_config = ConfigDict(populate_by_name=True)

    menu_item_id: str = Field(alias="menuItemId", min_length=1, max_length=64)
    quantity: StrictInt = Field(gt=0)


class CreateOrderDTO(BaseModel):
    """Schema for creating an order.

    Attributes:
        restaurant_id: Restaurant to order from.
        items: At least one `OrderItemIn`.
    """

    model_config = ConfigDict(populate_by_name=True)

    restaurant_id: str = Field(alias="restaurantId", min_length=1, max_length=64)
    items: list[OrderItemIn] = Field(min_length=1)

    def to_domain_items(self) -> list[OrderItemRequest]:
        return [OrderItemRequest(menu_item_id=i.menu_item_id, quantity=i.quantity) for i in self.items]


class PlaceOrderDTO(BaseModel):
    """Schema for placing an order. The payment method is optional."""

    model_config = ConfigDict(populate_by_name=True)

    payment_method_id: Optional[str] = Field(default=None, alias="paymentMethodId", min_length=1, max_length=64)


class OrderItemReadDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    menu_item_id: str = Field(serialization_alias="menuItemId")
    quantity: int
    unit_price_cents: int = Field(serialization_alias="unitPriceCents")


class OrderReadDTO(BaseModel):
    """Output schema for an order as returned by the API."""

    id: str
    owner_id: str = Field(serialization_alias="ownerId")
    restaurant_id: str = Field(serialization_alias="restaurantId")
    items: list[OrderItemReadDTO]
    total_cents: int = Field(serialization_alias="totalCents")
    status: str
    country: str
    payment_method_id: Optional[str] = Field(default=None, serialization_alias="paymentMethodId")
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")

    @classmethod
    def from_domain(cls, order: Order) -> "OrderReadDTO":
        return cls(
            id=order.id,
            owner_id=order.owner_id,
            restaurant_id=order.restaurant_id,
            items=[
                OrderItemReadDTO(
                    menu_item_id=i.menu_item_id,
                    quantity=i.quantity,
                    unit_price_cents=i.unit_price_cents,
                )
                for i in order.items
            ],
            total_cents=order.total_cents,
            status=order.status.value,
            country=order.country.value,
            payment_method_id=order.payment_method_id,
            created_at=order.created_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
