"""
Inventory controller for the admin stock screen.

Besides the optimistic stock edits every collection supports, new and edited
rows go through form validation and a duplicate (product, size) precheck.

The precheck is read-then-write: two admins submitting the same pair at the
same time can both pass it. The server remains responsible for uniqueness.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from rfstore.config import LOW_STOCK_THRESHOLD, SIZE_ORDER, settings
from rfstore.models.failure import (
    AuthorizationError,
    ConflictError,
    StoreError,
    ValidationFailedError,
)
from rfstore.models.records import SIZES, InventoryRow, Product, SizeStock
from rfstore.models.session import StoreSession
from rfstore.parsers.payloads import parse_records
from rfstore.sync.controller import CollectionSyncController

logger = logging.getLogger(__name__)

DUPLICATE_SIZE_MESSAGE = (
    "This size already exists for the selected product. "
    "Please edit the existing entry instead."
)

QUANTITY_REQUIRED = "Quantity is required"
QUANTITY_INVALID = "Quantity must be a positive number"
PRODUCT_REQUIRED = "Product selection is required"
PRODUCT_INVALID = "Invalid product selected"
SIZE_INVALID = "Size must be one of " + ", ".join(SIZES)


@dataclass
class StockForm:
    """Raw values of the add/edit stock dialog, as typed."""

    product_id: str = ""
    size: str = "M"
    quantity: str = ""


@dataclass(frozen=True)
class InventoryStats:
    total_items: int
    low_stock_items: int
    out_of_stock_items: int
    total_stock_value: Decimal


def parse_stock_quantity(value: Any) -> tuple[int | None, str | None]:
    """
    Parse a stock quantity from a form field or a number.

    Returns:
        (quantity, None) when valid, (None, message) otherwise
    """
    if isinstance(value, bool):
        return None, QUANTITY_INVALID
    if isinstance(value, int):
        return (value, None) if value >= 0 else (None, QUANTITY_INVALID)
    if value is None or not str(value).strip():
        return None, QUANTITY_REQUIRED
    try:
        quantity = int(str(value).strip())
    except ValueError:
        return None, QUANTITY_INVALID
    if quantity < 0:
        return None, QUANTITY_INVALID
    return quantity, None


def stock_status(quantity: int) -> str:
    if quantity == 0:
        return "Out of Stock"
    if quantity < LOW_STOCK_THRESHOLD:
        return "Low Stock"
    return "In Stock"


class InventoryController(CollectionSyncController[InventoryRow]):
    """All inventory rows. Admin only."""

    item_model = InventoryRow
    item_resource = "/productInventory"
    label = "inventory"

    unauthorized_message = "Unauthorized. Please make sure you have admin privileges."
    removed_message = "Stock deleted successfully"

    def __init__(self, session: StoreSession) -> None:
        super().__init__(session)
        self.products: list[Product] = []

    def collection_path(self) -> str:
        return self.item_resource

    def check_access(self) -> bool:
        if not super().check_access():
            return False
        if not self.session.is_admin:
            logger.info("User %s is not an admin, leaving stock management", self.session.user_id)
            self.session.navigator.navigate(settings.home_route)
            return False
        return True

    def validate(self, item: InventoryRow, changes: Mapping[str, Any]) -> bool:
        if "quantity" not in changes:
            return True
        quantity, error = parse_stock_quantity(changes["quantity"])
        if error is not None or quantity != changes["quantity"]:
            self.field_errors["quantity"] = error or QUANTITY_INVALID
            return False
        self.field_errors.pop("quantity", None)
        return True

    def update_payload(self, item: InventoryRow, changes: Mapping[str, Any]) -> dict[str, Any]:
        return item.model_copy(update=dict(changes)).to_payload()

    async def set_stock(self, item_id: int, quantity: Any) -> bool:
        """
        Optimistically set the stock of a row.

        Accepts the raw field value. Invalid input is reported inline through
        `field_errors["quantity"]` and sends nothing.
        """
        parsed, error = parse_stock_quantity(quantity)
        if error is not None:
            self.field_errors["quantity"] = error
            return False
        return await self.update(item_id, {"quantity": parsed})

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def load_products(self) -> bool:
        """Load the product choices offered by the stock form."""
        try:
            self.products = parse_records(Product, await self.session.api.get("/product"))
        except StoreError as e:
            logger.error("Error fetching products: %s", e.message)
            self.session.notifier.error("Failed to fetch products")
            return False
        return True

    def find_product(self, product_id: int) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    # -------------------------------------------------------------------------
    # Create / edit
    # -------------------------------------------------------------------------

    def validate_form(self, form: StockForm) -> dict[str, str]:
        """Validate the stock form. Errors are also kept in `field_errors`."""
        errors: dict[str, str] = {}

        if not form.product_id.strip():
            errors["product_id"] = PRODUCT_REQUIRED
        elif not form.product_id.strip().isdigit():
            errors["product_id"] = PRODUCT_INVALID

        if form.size not in SIZES:
            errors["size"] = SIZE_INVALID

        _, quantity_error = parse_stock_quantity(form.quantity)
        if quantity_error is not None:
            errors["quantity"] = quantity_error

        self.field_errors = errors
        return errors

    def clear_field_error(self, field_name: str) -> None:
        """Drop the inline error of a field the user started editing."""
        self.field_errors.pop(field_name, None)

    async def size_exists(self, product_id: int, size: str, editing_id: int | None = None) -> bool:
        """
        Whether the product already has a row for `size`.

        The row being edited does not count. The per-product listing omits
        row ids, so when they are missing one match is attributed to the
        edited row if its local product and size are the submitted ones.
        A failed lookup counts as no conflict.
        """
        try:
            data = await self.session.api.get(f"{self.item_resource}/product/{product_id}")
            entries = parse_records(SizeStock, data)
        except StoreError as e:
            logger.error("Error checking existing inventory: %s", e.message)
            return False

        matches = [entry for entry in entries if entry.size == size]
        if editing_id is None:
            return bool(matches)

        matches = [entry for entry in matches if entry.id != editing_id]
        edited = self.get(editing_id)
        if edited is not None and edited.product.id == product_id and edited.size == size:
            anonymous = [entry for entry in matches if entry.id is None]
            if anonymous:
                matches.remove(anonymous[0])
        return bool(matches)

    async def check_submission(
        self, form: StockForm, editing_id: int | None = None
    ) -> tuple[Product, int]:
        """
        Run every local check of a stock submission.

        Returns:
            The selected product and the parsed quantity

        Raises:
            ValidationFailedError: If a form field is invalid
            ConflictError: If the product already has a row for the size
        """
        errors = self.validate_form(form)
        if errors:
            raise ValidationFailedError(errors)

        product_id = int(form.product_id.strip())
        quantity, _ = parse_stock_quantity(form.quantity)

        if await self.size_exists(product_id, form.size, editing_id):
            raise ConflictError(
                DUPLICATE_SIZE_MESSAGE,
                detail=f"product={product_id} size={form.size}",
            )

        product = self.find_product(product_id)
        if product is None:
            raise ValidationFailedError({"product_id": PRODUCT_INVALID})

        return product, quantity  # type: ignore[return-value]

    async def submit(self, form: StockForm, editing_id: int | None = None) -> bool:
        """
        Validate, precheck, then create (POST) or update (PUT) a row.

        On success the inventory is reloaded from the server.
        """
        try:
            product, quantity = await self.check_submission(form, editing_id)
        except ValidationFailedError as e:
            self.field_errors = e.field_errors
            if e.field_errors.get("product_id") == PRODUCT_INVALID:
                self.session.notifier.error(PRODUCT_INVALID)
            return False
        except ConflictError as e:
            logger.info("Rejected duplicate stock entry: %s", e.detail)
            self.session.notifier.error(e.message)
            return False

        body = {"product": product.to_payload(), "size": form.size, "quantity": quantity}
        try:
            if editing_id is not None:
                await self.session.api.put(self.item_path(editing_id), json=body)
            else:
                await self.session.api.post(self.item_resource, json=body)
        except AuthorizationError:
            self.session.notifier.error(self.unauthorized_message)
            return False
        except StoreError as e:
            logger.error("Error saving stock for product %d: %s", product.id, e.message)
            self.session.notifier.error(e.message)
            return False

        action = "updated" if editing_id is not None else "added"
        self.session.notifier.success(f"Stock {action} successfully")
        await self.load()
        return True

    async def create(self, form: StockForm) -> bool:
        return await self.submit(form)

    async def edit(self, item_id: int, form: StockForm) -> bool:
        return await self.submit(form, editing_id=item_id)

    # -------------------------------------------------------------------------
    # Display helpers
    # -------------------------------------------------------------------------

    def search(self, query: str) -> list[InventoryRow]:
        needle = query.strip().lower()
        return [row for row in self.items if needle in row.product.name.lower()]

    def sorted_rows(self, rows: list[InventoryRow] | None = None) -> list[InventoryRow]:
        """Rows ordered by product name, then size."""
        rows = self.items if rows is None else rows
        return sorted(
            rows, key=lambda row: (row.product.name.casefold(), SIZE_ORDER.get(row.size, 99))
        )

    def stats(self) -> InventoryStats:
        return InventoryStats(
            total_items=len(self.items),
            low_stock_items=sum(1 for row in self.items if row.quantity < LOW_STOCK_THRESHOLD),
            out_of_stock_items=sum(1 for row in self.items if row.quantity == 0),
            total_stock_value=sum(
                (row.product.price * row.quantity for row in self.items), Decimal(0)
            ),
        )
