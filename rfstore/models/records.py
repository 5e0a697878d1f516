"""
Storefront records as returned by the REST API.

The wire format is camelCase JSON; attributes here are snake_case.
Records are frozen: optimistic updates replace an item with a modified copy
instead of mutating it in place.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Size = Literal["S", "M", "L", "XL", "XXL"]

SIZES: tuple[str, ...] = ("S", "M", "L", "XL", "XXL")


class Role(str, Enum):
    """Account role reported by the auth endpoints."""

    USER = "USER"
    ADMIN = "ADMIN"


class StoreRecord(BaseModel):
    """Base for all records parsed at the network boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize back to the wire format."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Product(StoreRecord):
    """A jersey offered by the store. Read-only from the client's side."""

    id: int
    name: str
    price: Decimal
    description: str | None = None
    team: str | None = None
    photo_url: str | None = None
    licenced: bool | None = None


class CollectionItem(StoreRecord):
    """An entry of a server collection, addressed by a stable numeric id."""

    id: int
    product: Product


class CartItem(CollectionItem):
    """A line of the user's cart."""

    size: str
    quantity: int
    player: str | None = None
    number: str | None = None
    price: Decimal | None = None

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        # Shirt numbers come back as either strings or integers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class WishlistItem(CollectionItem):
    """A product saved to the user's wishlist."""


class InventoryRow(CollectionItem):
    """Stock held for one (product, size) pair."""

    size: Size
    quantity: int


class SizeStock(StoreRecord):
    """Stock for one size of a product, as listed by the per-product endpoint.

    The server does not include the row id here.
    """

    size: Size
    quantity: int
    id: int | None = None


class User(StoreRecord):
    """The authenticated account."""

    id: int
    email: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class Cart(StoreRecord):
    """The cart owned by a user. Only the id is needed to add items."""

    id: int
