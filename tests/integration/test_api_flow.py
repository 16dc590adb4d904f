"""End-to-end API flow over the ASGI app with a fake ledger behind the session."""

import pytest

from tests.fakes import ALICE, BOB, CAROL, NFT

pytestmark = pytest.mark.asyncio

WALLET = "X-Wallet-Address"


async def _items(client, **params) -> list[dict]:
    resp = await client.get("/api/v1/items", params=params)
    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == 0
    return body["data"]["items"]


async def test_health(client) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_first_view_loads_catalog(client) -> None:
    resp = await client.get("/api/v1/items")
    data = resp.json()["data"]
    assert data["generation"] == 1
    assert data["total"] == 2
    assert {i["market_role"] for i in data["items"]} == {"DIRECT_LISTING", "AUCTION"}
    listing = next(i for i in data["items"] if i["market_role"] == "DIRECT_LISTING")
    assert listing["price_wei"] == str(5 * 10**17)
    assert listing["price_display"] == "0.5 ETH"
    assert listing["name"] == "Harbor Lights"
    assert listing["image_url"] == "https://ipfs.io/ipfs/QmImg1"


async def test_request_id_echoed(client) -> None:
    resp = await client.get("/api/v1/stats", headers={"X-Request-ID": "trace-42"})
    assert resp.json()["request_id"] == "trace-42"
    assert resp.headers["X-Request-ID"] == "trace-42"

    generated = await client.get("/api/v1/stats")
    assert generated.json()["request_id"] == generated.headers["X-Request-ID"]
    assert generated.headers["X-Request-ID"].startswith("req_")


async def test_filters_and_sort(client) -> None:
    assert [i["name"] for i in await _items(client, search="glitch")] == ["Glitch Fox"]
    assert [i["name"] for i in await _items(client, category="art")] == ["Harbor Lights"]
    assert [i["market_role"] for i in await _items(client, buy_now="false")] == ["AUCTION"]
    assert await _items(client, min_price="2") == []
    ordered = await _items(client, sort="price_desc")
    assert [i["token_id"] for i in ordered] == [2, 1]


async def test_invalid_filter(client) -> None:
    resp = await client.get("/api/v1/items", params={"min_price": "abc"})
    assert resp.status_code == 422
    assert resp.json()["code"] == 2003
    resp = await client.get("/api/v1/items", params={"networks": "mainnet"})
    assert resp.status_code == 422


async def test_refresh_failure_reports_unavailable(client, ledger) -> None:
    ledger.fail_reads = True
    resp = await client.post("/api/v1/items/refresh")
    assert resp.status_code == 503
    assert resp.json()["code"] == 2001

    notices = (await client.get("/api/v1/notices")).json()["data"]
    assert [n["message"] for n in notices] == ["Failed to load listings"]


async def test_item_detail(client) -> None:
    resp = await client.get(f"/api/v1/items/{NFT}/1")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["market_role"] == "DIRECT_LISTING"
    assert data["owner"] == ALICE

    resp = await client.get(f"/api/v1/items/{NFT}/42")
    assert resp.status_code == 404
    assert resp.json()["code"] == 2002


async def test_clock_watch_and_release(client) -> None:
    await _items(client)
    resp = await client.get(f"/api/v1/items/{NFT}/2/clock")
    assert resp.status_code == 200
    clock = resp.json()["data"]
    assert clock["phase"] == "COUNTING"
    assert not clock["has_ended"]
    assert clock["label"].startswith("0h 59m") or clock["label"].startswith("1h 0m")

    # Token 1 is a listing, not an auction
    assert (await client.get(f"/api/v1/items/{NFT}/1/clock")).status_code == 404

    released = await client.delete(f"/api/v1/items/{NFT}/2/clock")
    assert released.json()["data"] == {"released": True}


async def test_actions_require_wallet(client) -> None:
    await _items(client)
    resp = await client.post("/api/v1/actions/buy", json={"listing_id": 0})
    assert resp.status_code == 401
    assert resp.json()["code"] == 3003


async def test_buy_flow(client, ledger) -> None:
    await _items(client)
    resp = await client.post(
        "/api/v1/actions/buy", json={"listing_id": 0}, headers={WALLET: CAROL}
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["operation_id"] == "buy"
    assert data["loyalty_estimate"] == 5
    assert data["loyalty_points"] == 5
    assert data["catalog_refreshed"]

    roles = [i["market_role"] for i in await _items(client)]
    assert roles == ["AUCTION"]
    notices = (await client.get("/api/v1/notices")).json()["data"]
    assert notices[0]["message"] == "Purchase successful!"
    assert notices[0]["detail"]["points_earned"] == 5

    dismissed = await client.delete("/api/v1/notices/buy")
    assert dismissed.json()["data"] == {"dismissed": True}
    assert (await client.get("/api/v1/notices")).json()["data"] == []


async def test_seller_cannot_buy_own_listing(client) -> None:
    await _items(client)
    resp = await client.post(
        "/api/v1/actions/buy", json={"listing_id": 0}, headers={WALLET: ALICE}
    )
    assert resp.status_code == 422
    assert resp.json()["message"] == "You cannot buy your own listing"


async def test_bid_validation_and_success(client, ledger) -> None:
    await _items(client)
    low = await client.post(
        "/api/v1/actions/bid", json={"auction_id": 0, "amount": "0.5"}, headers={WALLET: CAROL}
    )
    assert low.status_code == 422
    assert low.json()["message"] == "Bid must be higher than current price"

    bad = await client.post(
        "/api/v1/actions/bid", json={"auction_id": 0, "amount": "lots"}, headers={WALLET: CAROL}
    )
    assert bad.json()["message"] == "Enter a valid bid amount"

    ok = await client.post(
        "/api/v1/actions/bid", json={"auction_id": 0, "amount": "1.5"}, headers={WALLET: CAROL}
    )
    assert ok.status_code == 200
    assert ledger.auctions[0].highest_bidder == CAROL
    auction = (await _items(client, buy_now="false"))[0]
    assert auction["effective_price_display"] == "1.5 ETH"


async def test_rejected_write_maps_to_502(client, ledger) -> None:
    await _items(client)
    ledger.reject["cancelListing"] = "Not seller"
    resp = await client.post(
        "/api/v1/actions/cancel", json={"listing_id": 0}, headers={WALLET: ALICE}
    )
    assert resp.status_code == 502
    assert resp.json()["code"] == 3002
    assert resp.json()["message"] == "Not seller"


async def test_profile_and_stats(client) -> None:
    resp = await client.get("/api/v1/profile")
    assert resp.status_code == 401

    resp = await client.get("/api/v1/profile", headers={WALLET: BOB})
    profile = resp.json()["data"]
    assert [i["token_id"] for i in profile["owned"]] == [2]
    assert [i["token_id"] for i in profile["auctions"]] == [2]
    assert profile["rank"] == "Bronze"

    stats = (await client.get("/api/v1/stats")).json()["data"]
    assert stats["listings_count"] == 1
    assert stats["active_auctions_count"] == 1
    assert stats["sellers"] == 2
    assert stats["total_volume_display"] == "0.0 ETH"
