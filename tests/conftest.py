from collections.abc import AsyncIterator

import httpx
import pytest
from fake_store import FakeStore, create_app
from payloads import ADMIN, API, FAN

from rfstore.client.api import StoreApiClient
from rfstore.client.auth import AuthService
from rfstore.models.session import StoreSession


@pytest.fixture
async def api() -> AsyncIterator[StoreApiClient]:
    """API client for respx-mocked tests."""
    client = StoreApiClient(base_url=API, timeout=5.0)
    yield client
    await client.aclose()


@pytest.fixture
def fan_session(api: StoreApiClient) -> StoreSession:
    return StoreSession(api=api, user=FAN)


@pytest.fixture
def admin_session(api: StoreApiClient) -> StoreSession:
    return StoreSession(api=api, user=ADMIN)


@pytest.fixture
def anonymous_session(api: StoreApiClient) -> StoreSession:
    return StoreSession(api=api)


# =============================================================================
# FAKE STORE (end-to-end through ASGITransport)
# =============================================================================


@pytest.fixture
def fake_store() -> FakeStore:
    store = FakeStore()
    store.add_user(7, "fan@example.com", "hala-steaua")
    store.add_user(1, "admin@example.com", "admin-pass", role="ADMIN")
    store.add_product(10, "FCSB Home 2024", 250.0)
    store.add_product(11, "Dinamo Away 2024", 120.5, team="Dinamo")
    store.add_cart_item(1, 7, 10, quantity=3)
    store.add_cart_item(2, 7, 11, quantity=1)
    store.add_wishlist_item(5, 7, 11)
    store.add_inventory(20, 10, "M", 12)
    store.add_inventory(21, 10, "L", 3)
    store.add_inventory(22, 11, "S", 0)
    return store


@pytest.fixture
async def store_api(fake_store: FakeStore) -> AsyncIterator[StoreApiClient]:
    transport = httpx.ASGITransport(app=create_app(fake_store))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield StoreApiClient(base_url="http://test/api", client=client)


@pytest.fixture
async def store_fan(store_api: StoreApiClient) -> StoreSession:
    return await AuthService(store_api).login("fan@example.com", "hala-steaua")


@pytest.fixture
async def store_admin(store_api: StoreApiClient) -> StoreSession:
    return await AuthService(store_api).login("admin@example.com", "admin-pass")