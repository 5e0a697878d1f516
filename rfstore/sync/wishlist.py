import logging
from collections.abc import Mapping
from typing import Any

from rfstore.config import settings
from rfstore.models.failure import AuthorizationError, StoreError
from rfstore.models.records import WishlistItem
from rfstore.sync.controller import CollectionSyncController

logger = logging.getLogger(__name__)


class WishlistController(CollectionSyncController[WishlistItem]):
    """
    The logged-in user's wishlist.

    Entries have no editable attributes: they are only added and removed.
    """

    item_model = WishlistItem
    item_resource = "/wishlistItems"
    label = "wishlist items"

    remove_failed_message = "Could not remove the item from your wishlist."
    removed_message = "Product removed from wishlist"

    def collection_path(self) -> str:
        return f"/wishlist/user/{self.owner_id}/items"

    def validate(self, item: WishlistItem, changes: Mapping[str, Any]) -> bool:
        return False

    def contains_locally(self, product_id: int) -> bool:
        return any(item.product.id == product_id for item in self.items)

    async def contains(self, product_id: int) -> bool:
        """Ask the server whether the product is on the wishlist. False on failure."""
        if not self.session.is_authenticated:
            return False
        try:
            data = await self.session.api.get(
                f"/wishlist/user/{self.owner_id}/check/{product_id}"
            )
        except StoreError as e:
            logger.warning("Wishlist check for product %d failed: %s", product_id, e.message)
            return False
        return bool(isinstance(data, dict) and data.get("inWishlist"))

    async def add(self, product_id: int) -> bool:
        """Add a product to the wishlist, then reload it."""
        if not self.check_access():
            return False

        try:
            await self.session.api.post(
                "/wishlist/add",
                json={"userId": self.owner_id, "productId": product_id},
            )
        except AuthorizationError:
            self.session.notifier.error("Authentication required. Please log in again.")
            self.session.navigator.navigate(settings.login_route)
            return False
        except StoreError as e:
            logger.error("Error adding product %d to wishlist: %s", product_id, e.message)
            self.session.notifier.error("Failed to add to wishlist")
            return False

        self.session.notifier.success("Product added to wishlist")
        await self.load()
        return True

    async def remove_product(self, product_id: int) -> bool:
        """Remove the wishlist entry for a product, if it is listed locally."""
        for item in self.items:
            if item.product.id == product_id:
                return await self.remove(item.id)
        return False
