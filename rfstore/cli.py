"""
Command-line view of a store collection.

Logs in, loads the cart, wishlist or inventory, and prints it.

    rfstore-cart --email fan@example.com --password secret cart
"""

import argparse
import asyncio
import logging
import os
import sys

from rfstore.client.api import StoreApiClient
from rfstore.client.auth import AuthService
from rfstore.config import settings
from rfstore.models.failure import StoreError
from rfstore.sync.cart import CartController
from rfstore.sync.inventory import InventoryController, stock_status
from rfstore.sync.wishlist import WishlistController

logger = logging.getLogger(__name__)

COLLECTIONS = ("cart", "wishlist", "inventory")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"Show a {settings.app_name} collection")
    parser.add_argument("collection", choices=COLLECTIONS, help="Collection to show")
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument(
        "--password",
        default=os.environ.get("RFSTORE_PASSWORD", ""),
        help="Account password (defaults to $RFSTORE_PASSWORD)",
    )
    parser.add_argument("--url", default=None, help="API base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def format_collection(
    name: str, controller: CartController | WishlistController | InventoryController
) -> list[str]:
    """Render a loaded controller as printable lines."""
    if not controller.items:
        return [f"Your {name} is empty"]

    lines: list[str] = []
    if isinstance(controller, CartController):
        for item in controller.items:
            lines.append(
                f"{item.id:>5}  {item.product.name}  size {item.size}  "
                f"x{item.quantity}  {item.line_total}"
            )
        lines.append(f"Subtotal: {controller.subtotal}")
    elif isinstance(controller, WishlistController):
        for entry in controller.items:
            lines.append(f"{entry.id:>5}  {entry.product.name}  {entry.product.price}")
    elif isinstance(controller, InventoryController):
        for row in controller.sorted_rows():
            lines.append(
                f"{row.id:>5}  {row.product.name}  {row.size:<3}  "
                f"{row.quantity:>4}  {stock_status(row.quantity)}"
            )
        stats = controller.stats()
        lines.append(
            f"{stats.total_items} rows, {stats.low_stock_items} low, "
            f"{stats.out_of_stock_items} out of stock, value {stats.total_stock_value}"
        )
    return lines


async def show_collection(
    name: str,
    email: str,
    password: str,
    base_url: str | None = None,
    api: StoreApiClient | None = None,
) -> int:
    """
    Log in, load a collection and print it.

    Returns:
        Process exit code
    """
    api = api or StoreApiClient(base_url=base_url)
    async with api:
        try:
            session = await AuthService(api).login(email, password)
        except StoreError as e:
            logger.error("Login failed: %s", e.message)
            return 1

        controller: CartController | WishlistController | InventoryController
        if name == "cart":
            controller = CartController(session)
        elif name == "wishlist":
            controller = WishlistController(session)
        else:
            controller = InventoryController(session)

        if not await controller.load():
            for message in session.notifier.messages():
                print(message, file=sys.stderr)
            if len(session.navigator.history) > 1:
                print(f"Redirected to {session.navigator.current}", file=sys.stderr)
            return 1

        for line in format_collection(name, controller):
            print(line)
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(show_collection(args.collection, args.email, args.password, args.url))


if __name__ == "__main__":
    sys.exit(main())
