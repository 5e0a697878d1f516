"""
Collection sync controller: optimistic local state over a server collection.

Holds an ordered local copy of a server collection (cart lines, wishlist
entries, inventory rows) and keeps it consistent with the server:

- load() replaces the local list wholesale with the server's listing
- apply_optimistic() changes the local list immediately, before any request
- commit() sends the change; on failure the list is rolled back by refetch
- remove() drops the item locally, then deletes it; on failure, refetch

Rollback is coarse: a failed mutation discards ALL local state and reloads it
from the server. There is no per-mutation undo.

INVARIANTS:
- Item ids are unique within the local list
- A mutation rejected by validate() changes nothing and sends nothing
- After a failed commit the local list equals the next successful listing

SEQUENCING:
Every optimistic mutation gets a number from a monotonic counter, recorded
per item. A failed commit that has been overtaken by a newer mutation of the
same item does not roll back; the newer mutation's outcome decides. A load
takes a number from the same counter when it starts. Items mutated after that
keep their local state when the listing arrives, and items removed after that
stay removed. A listing that arrives after a newer load started is dropped.

All state is touched only from coroutines on one event loop, so there are no
data races, only out-of-order completions, which the sequencing covers.
"""

import itertools
import logging
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from rfstore.config import settings
from rfstore.models.failure import (
    AuthorizationError,
    NotAuthenticatedError,
    PayloadError,
    StoreError,
)
from rfstore.models.records import CollectionItem
from rfstore.models.session import StoreSession
from rfstore.parsers.payloads import parse_collection

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=CollectionItem)


class CollectionSyncController(Generic[T]):
    """
    Base controller for one server collection.

    Subclasses set `item_model` and `item_resource`, and implement
    collection_path(). validate() and update_payload() are the hooks for
    domain bounds and wire format.
    """

    item_model: ClassVar[type[CollectionItem]]
    item_resource: ClassVar[str]
    label: ClassVar[str] = "items"

    unauthorized_message: ClassVar[str] = "Unauthorized. Please log in again."
    update_failed_message: ClassVar[str] = "Update failed. Showing the saved state."
    remove_failed_message: ClassVar[str] = "Could not remove the item. Showing the saved state."
    removed_message: ClassVar[str | None] = None

    def __init__(self, session: StoreSession) -> None:
        self.session = session
        self.items: list[T] = []
        self.field_errors: dict[str, str] = {}
        self.loading = False
        self.loaded = False
        self._sequence = itertools.count(1)
        self._item_versions: dict[int, int] = {}
        self._load_version = 0

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def collection_path(self) -> str:
        """API path of the full listing."""
        raise NotImplementedError

    def item_path(self, item_id: int) -> str:
        return f"{self.item_resource}/{item_id}"

    def validate(self, item: T, changes: Mapping[str, Any]) -> bool:
        """Whether a mutation is within domain bounds. Rejection is silent."""
        return True

    def update_payload(self, item: T, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Request body for committing `changes` to `item`."""
        return dict(changes)

    def check_access(self) -> bool:
        """
        Whether the session may load this collection.

        Anonymous sessions are sent to the login screen instead.
        """
        if not self.session.is_authenticated:
            logger.info("No user in session, redirecting to login")
            self.session.navigator.navigate(settings.login_route)
            return False
        return True

    @property
    def owner_id(self) -> int:
        """Id of the user owning the collection.

        Raises:
            NotAuthenticatedError: If the session is anonymous
        """
        if self.session.user is None:
            raise NotAuthenticatedError()
        return self.session.user.id

    # -------------------------------------------------------------------------
    # Local list
    # -------------------------------------------------------------------------

    def get(self, item_id: int) -> T | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def ids(self) -> list[int]:
        return [item.id for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self.items))

    def _replace(self, replacement: T) -> None:
        self.items = [replacement if item.id == replacement.id else item for item in self.items]

    def _bump(self, item_id: int) -> int:
        version = next(self._sequence)
        self._item_versions[item_id] = version
        return version

    def is_current(self, item_id: int, version: int | None) -> bool:
        """Whether `version` is still the latest mutation of the item."""
        return self._item_versions.get(item_id) == version

    def _reconcile(self, listing: list[T], started_at: int) -> list[T]:
        """
        Merge a listing with mutations applied while it was in flight.

        Items mutated after `started_at` keep their local value; items
        removed after it are left out.
        """
        newer = {item_id for item_id, v in self._item_versions.items() if v > started_at}
        if not newer:
            return listing

        local = {item.id: item for item in self.items}
        merged: list[T] = []
        for item in listing:
            if item.id not in newer:
                merged.append(item)
            elif item.id in local:
                merged.append(local[item.id])
        logger.debug("Kept local state of %s ids %s over the listing", self.label, sorted(newer))
        return merged

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Replace the local list with the server's listing.

        On 401/403 the user is notified and sent to the login screen. Any
        other failure is notified and leaves the local list untouched.

        Returns:
            True if the local list now mirrors the server
        """
        if not self.check_access():
            return False

        self._load_version += 1
        version = self._load_version
        started_at = next(self._sequence)
        self.loading = True
        try:
            data = await self.session.api.get(self.collection_path())
            items: list[T] = parse_collection(self.item_model, data)  # type: ignore[assignment]
        except AuthorizationError as e:
            logger.warning("Loading %s rejected (HTTP %s)", self.label, e.status_code)
            self.session.notifier.error(self.unauthorized_message)
            self.session.navigator.navigate(settings.login_route)
            return False
        except PayloadError as e:
            logger.error("Invalid %s listing: %s (%s)", self.label, e.message, e.detail)
            self.session.notifier.error(f"Failed to fetch {self.label}")
            return False
        except StoreError as e:
            logger.error("Error fetching %s: %s", self.label, e.message)
            self.session.notifier.error(f"Failed to fetch {self.label}")
            return False
        finally:
            if version == self._load_version:
                self.loading = False

        if version != self._load_version:
            logger.debug(
                "Dropping stale %s listing (load %d < %d)", self.label, version, self._load_version
            )
            return False

        self.items = self._reconcile(items, started_at)
        self.loaded = True
        logger.debug("Loaded %d %s", len(items), self.label)
        return True

    def apply_optimistic(self, item_id: int, changes: Mapping[str, Any]) -> bool:
        """
        Apply a mutation to the local list immediately.

        Returns:
            False, with nothing changed, if the item is unknown or the
            mutation is out of bounds
        """
        item = self.get(item_id)
        if item is None:
            logger.debug("Ignoring mutation of unknown %s id=%d", self.label, item_id)
            return False
        if not self.validate(item, changes):
            logger.debug("Rejected mutation of %s id=%d: %s", self.label, item_id, dict(changes))
            return False

        self._replace(item.model_copy(update=dict(changes)))
        self._bump(item_id)
        return True

    async def commit(self, item_id: int, changes: Mapping[str, Any]) -> bool:
        """
        Send a mutation already applied with apply_optimistic().

        On failure the local list is reloaded from the server, unless a newer
        mutation of the same item has been applied in the meantime.

        Returns:
            True if the server accepted the mutation
        """
        version = self._item_versions.get(item_id)
        item = self.get(item_id)
        payload = self.update_payload(item, changes) if item is not None else dict(changes)

        try:
            await self.session.api.put(self.item_path(item_id), json=payload)
        except StoreError as e:
            logger.warning("Updating %s id=%d failed: %s", self.label, item_id, e.message)
            if not self.is_current(item_id, version):
                logger.info(
                    "Skipping rollback of %s id=%d, superseded by a newer change",
                    self.label,
                    item_id,
                )
                return False
            self.session.notifier.error(self.update_failed_message)
            await self.load()
            return False

        return True

    async def update(self, item_id: int, changes: Mapping[str, Any]) -> bool:
        """Optimistically apply a mutation, then commit it."""
        if not self.apply_optimistic(item_id, changes):
            return False
        return await self.commit(item_id, changes)

    async def remove(self, item_id: int) -> bool:
        """
        Remove an item locally, then delete it on the server.

        Removing an id that is not in the local list does nothing.
        On failure the local list is reloaded from the server.
        """
        if self.get(item_id) is None:
            return False

        self.items = [item for item in self.items if item.id != item_id]
        self._bump(item_id)

        try:
            await self.session.api.delete(self.item_path(item_id))
        except StoreError as e:
            logger.warning("Removing %s id=%d failed: %s", self.label, item_id, e.message)
            self.session.notifier.error(self.remove_failed_message)
            await self.load()
            return False

        if self.removed_message:
            self.session.notifier.success(self.removed_message)
        return True
