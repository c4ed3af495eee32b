"""Pydantic read schemas for catalog browsing."""

from pydantic import BaseModel, Field

from apps.orders.domain import MenuItem, Restaurant


class RestaurantReadDTO(BaseModel):
    id: str
    name: str
    country: str
    description: str = ""

    @classmethod
    def from_domain(cls, r: Restaurant) -> "RestaurantReadDTO":
        return cls(id=r.id, name=r.name, country=r.country.value, description=r.description)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class MenuItemReadDTO(BaseModel):
    id: str
    restaurant_id: str = Field(serialization_alias="restaurantId")
    name: str
    price_cents: int = Field(serialization_alias="priceCents")
    country: str
    description: str = ""

    @classmethod
    def from_domain(cls, m: MenuItem) -> "MenuItemReadDTO":
        return cls(
            id=m.id,
            restaurant_id=m.restaurant_id,
            name=m.name,
            price_cents=m.price_cents,
            country=m.country.value,
            description=m.description,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
