from rfstore.models.failure import (
    AuthorizationError,
    ConflictError,
    FailureKind,
    NotAuthenticatedError,
    OperationFailedError,
    PayloadError,
    StoreError,
    ValidationFailedError,
)
from rfstore.models.feedback import Navigator, Notification, Notifier, Severity
from rfstore.models.records import (
    SIZES,
    Cart,
    CartItem,
    CollectionItem,
    InventoryRow,
    Product,
    Role,
    Size,
    SizeStock,
    User,
    WishlistItem,
)
from rfstore.models.session import StoreSession

__all__ = [
    "AuthorizationError",
    "Cart",
    "CartItem",
    "CollectionItem",
    "ConflictError",
    "FailureKind",
    "InventoryRow",
    "Navigator",
    "NotAuthenticatedError",
    "Notification",
    "Notifier",
    "OperationFailedError",
    "PayloadError",
    "Product",
    "Role",
    "SIZES",
    "Severity",
    "Size",
    "SizeStock",
    "StoreError",
    "StoreSession",
    "User",
    "ValidationFailedError",
    "WishlistItem",
]
