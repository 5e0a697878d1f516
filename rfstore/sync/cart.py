"""
Cart controller.

Quantities are bounded to [MIN_CART_QUANTITY, MAX_CART_QUANTITY]. Out-of-range
quantities are not errors: the +/- controls are simply disabled, so a
rejected quantity changes nothing and issues no request.
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from rfstore.config import MAX_CART_QUANTITY, MIN_CART_QUANTITY, settings
from rfstore.models.failure import AuthorizationError, StoreError
from rfstore.models.records import Cart, CartItem
from rfstore.parsers.payloads import parse_record
from rfstore.sync.controller import CollectionSyncController

logger = logging.getLogger(__name__)


def quantity_in_bounds(quantity: Any) -> bool:
    """Whether `quantity` is an integer within the cart bounds."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return False
    return MIN_CART_QUANTITY <= quantity <= MAX_CART_QUANTITY


class CartController(CollectionSyncController[CartItem]):
    """The logged-in user's cart."""

    item_model = CartItem
    item_resource = "/cartItems"
    label = "cart items"

    def collection_path(self) -> str:
        return f"/cart/user/{self.owner_id}/items"

    def validate(self, item: CartItem, changes: Mapping[str, Any]) -> bool:
        if "quantity" in changes:
            return quantity_in_bounds(changes["quantity"])
        return True

    def update_payload(self, item: CartItem, changes: Mapping[str, Any]) -> dict[str, Any]:
        return {"quantity": changes.get("quantity", item.quantity)}

    # -------------------------------------------------------------------------
    # Quantity controls
    # -------------------------------------------------------------------------

    async def set_quantity(self, item_id: int, quantity: int) -> bool:
        return await self.update(item_id, {"quantity": quantity})

    async def increment(self, item_id: int) -> bool:
        item = self.get(item_id)
        if item is None:
            return False
        return await self.set_quantity(item_id, item.quantity + 1)

    async def decrement(self, item_id: int) -> bool:
        item = self.get(item_id)
        if item is None:
            return False
        return await self.set_quantity(item_id, item.quantity - 1)

    def can_increment(self, item_id: int) -> bool:
        item = self.get(item_id)
        return item is not None and item.quantity < MAX_CART_QUANTITY

    def can_decrement(self, item_id: int) -> bool:
        item = self.get(item_id)
        return item is not None and item.quantity > MIN_CART_QUANTITY

    # -------------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------------

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal(0))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------------
    # Adding
    # -------------------------------------------------------------------------

    async def add_to_cart(
        self,
        product_id: int,
        size: str,
        quantity: int = 1,
        player: str | None = None,
        number: str | None = None,
    ) -> bool:
        """
        Add a product to the user's cart, then reload the cart.

        Validation problems are reported inline through `field_errors`.
        """
        if not self.check_access():
            return False

        self.field_errors = {}
        if not size:
            self.field_errors["size"] = "Please select a size before adding to cart"
        if not quantity_in_bounds(quantity):
            self.field_errors["quantity"] = (
                f"Quantity must be between {MIN_CART_QUANTITY} and {MAX_CART_QUANTITY}"
            )
        if self.field_errors:
            self.session.notifier.warning(next(iter(self.field_errors.values())))
            return False

        try:
            data = await self.session.api.get(f"/cart/user/{self.owner_id}")
            cart = parse_record(Cart, data)
            await self.session.api.post(
                "/cart/add",
                json={
                    "cartId": cart.id,
                    "productId": product_id,
                    "size": size,
                    "quantity": quantity,
                    "player": player or None,
                    "number": number or None,
                },
            )
        except AuthorizationError:
            self.session.notifier.error("Authentication required. Please log in again.")
            self.session.navigator.navigate(settings.login_route)
            return False
        except StoreError as e:
            logger.error("Error adding product %d to cart: %s", product_id, e.message)
            self.session.notifier.error(
                e.message or "Failed to add item to cart. Please try again."
            )
            return False

        self.session.notifier.success("Product added to cart successfully!")
        await self.load()
        return True
