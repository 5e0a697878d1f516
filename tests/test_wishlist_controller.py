import json

import httpx
import pytest
import respx
from payloads import API, wishlist_item_json

from rfstore.models.feedback import Severity
from rfstore.models.session import StoreSession
from rfstore.sync.wishlist import WishlistController

WISHLIST_ITEMS = f"{API}/wishlist/user/7/items"


@pytest.fixture
def wishlist(fan_session: StoreSession) -> WishlistController:
    return WishlistController(fan_session)


@pytest.mark.asyncio
@respx.mock
async def test_load_lists_entries(wishlist: WishlistController) -> None:
    respx.get(WISHLIST_ITEMS).mock(
        return_value=httpx.Response(
            200, json=[wishlist_item_json(5, product_id=11), wishlist_item_json(6)]
        )
    )

    assert await wishlist.load()

    assert wishlist.ids() == [5, 6]
    assert wishlist.contains_locally(11)
    assert not wishlist.contains_locally(99)


@pytest.mark.asyncio
@respx.mock
async def test_entries_cannot_be_edited(wishlist: WishlistController) -> None:
    respx.get(WISHLIST_ITEMS).mock(return_value=httpx.Response(200, json=[wishlist_item_json()]))
    await wishlist.load()

    assert not await wishlist.update(5, {"product": None})
    assert len(respx.calls) == 1


@pytest.mark.asyncio
@respx.mock
async def test_remove_product_deletes_entry(wishlist: WishlistController) -> None:
    respx.get(WISHLIST_ITEMS).mock(
        return_value=httpx.Response(200, json=[wishlist_item_json(5, product_id=11)])
    )
    route = respx.delete(f"{API}/wishlistItems/5").mock(
        return_value=httpx.Response(200, text="Wishlist item deleted successfully")
    )
    await wishlist.load()

    assert await wishlist.remove_product(11)

    assert route.called
    assert wishlist.items == []
    assert wishlist.session.notifier.latest.message == "Product removed from wishlist"


@pytest.mark.asyncio
async def test_remove_product_not_listed_is_noop(wishlist: WishlistController) -> None:
    with respx.mock:
        assert not await wishlist.remove_product(11)
        assert not respx.calls


@pytest.mark.asyncio
@respx.mock
async def test_failed_remove_refetches(wishlist: WishlistController) -> None:
    listing = respx.get(WISHLIST_ITEMS).mock(
        return_value=httpx.Response(200, json=[wishlist_item_json(5)])
    )
    respx.delete(f"{API}/wishlistItems/5").mock(return_value=httpx.Response(500))
    await wishlist.load()

    assert not await wishlist.remove(5)

    assert wishlist.ids() == [5]
    assert listing.call_count == 2
    assert wishlist.session.notifier.messages(Severity.ERROR) == [
        "Could not remove the item from your wishlist."
    ]


@pytest.mark.asyncio
@respx.mock
async def test_add_posts_and_reloads(wishlist: WishlistController) -> None:
    add = respx.post(f"{API}/wishlist/add").mock(return_value=httpx.Response(200))
    respx.get(WISHLIST_ITEMS).mock(
        return_value=httpx.Response(200, json=[wishlist_item_json(8, product_id=10)])
    )

    assert await wishlist.add(10)

    assert json.loads(add.calls.last.request.content) == {"userId": 7, "productId": 10}
    assert wishlist.contains_locally(10)
    assert wishlist.session.notifier.messages(Severity.SUCCESS) == [
        "Product added to wishlist"
    ]


@pytest.mark.asyncio
@respx.mock
async def test_add_failure_notifies(wishlist: WishlistController) -> None:
    respx.post(f"{API}/wishlist/add").mock(return_value=httpx.Response(500))

    assert not await wishlist.add(10)

    assert wishlist.session.notifier.latest.message == "Failed to add to wishlist"


@pytest.mark.asyncio
@respx.mock
async def test_add_with_expired_session_redirects(wishlist: WishlistController) -> None:
    respx.post(f"{API}/wishlist/add").mock(return_value=httpx.Response(401))

    assert not await wishlist.add(10)

    assert wishlist.session.navigator.current == "/login"


@pytest.mark.asyncio
async def test_add_when_anonymous_redirects(anonymous_session: StoreSession) -> None:
    wishlist = WishlistController(anonymous_session)

    with respx.mock:
        assert not await wishlist.add(10)
        assert not respx.calls

    assert anonymous_session.navigator.current == "/login"


@pytest.mark.asyncio
@pytest.mark.parametrize("in_wishlist", [True, False])
@respx.mock
async def test_contains_asks_server(wishlist: WishlistController, in_wishlist: bool) -> None:
    respx.get(f"{API}/wishlist/user/7/check/11").mock(
        return_value=httpx.Response(200, json={"inWishlist": in_wishlist})
    )

    assert await wishlist.contains(11) is in_wishlist


@pytest.mark.asyncio
@respx.mock
async def test_contains_is_false_on_failure(wishlist: WishlistController) -> None:
    respx.get(f"{API}/wishlist/user/7/check/11").mock(side_effect=httpx.ConnectError("down"))

    assert await wishlist.contains(11) is False


@pytest.mark.asyncio
async def test_contains_is_false_when_anonymous(anonymous_session: StoreSession) -> None:
    assert await WishlistController(anonymous_session).contains(11) is False
