"""
Collection sync controllers.

Optimistic local state for the cart, the wishlist and the admin inventory.
"""

from rfstore.sync.cart import CartController, quantity_in_bounds
from rfstore.sync.controller import CollectionSyncController
from rfstore.sync.inventory import (
    DUPLICATE_SIZE_MESSAGE,
    InventoryController,
    InventoryStats,
    StockForm,
    parse_stock_quantity,
    stock_status,
)
from rfstore.sync.wishlist import WishlistController

__all__ = [
    "DUPLICATE_SIZE_MESSAGE",
    "CartController",
    "CollectionSyncController",
    "InventoryController",
    "InventoryStats",
    "StockForm",
    "WishlistController",
    "parse_stock_quantity",
    "quantity_in_bounds",
    "stock_status",
]
