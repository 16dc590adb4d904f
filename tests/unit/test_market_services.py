"""Unit tests for item detail, profile and statistics services."""

import pytest

from src.nm_common.enums import LoyaltyRank, MarketRole
from src.nm_common.errors import CatalogUnavailableError, ItemNotFoundError
from src.nm_ledger.domain.models import SaleRecord
from src.nm_market.application.detail import ItemDetailService
from src.nm_market.application.profile import ProfileService
from src.nm_market.application.stats import StatsService
from tests.fakes import ALICE, BOB, CAROL, ETH, NFT, FakeLedger, build_resolver

OTHER_NFT = "0xOtherCollection00000000000000000000000C"


@pytest.fixture
def ledger() -> FakeLedger:
    fake = FakeLedger()
    t1 = fake.mint(ALICE)  # listed by Alice
    t2 = fake.mint(BOB)  # auctioned by Bob
    fake.mint(ALICE)  # held, unlisted
    fake.mint(CAROL)
    fake.add_listing(ALICE, t1, ETH)
    fake.add_auction(BOB, t2, ETH, end_time=int(fake.now) - 100, active=False)
    fake.add_auction(BOB, t2, 2 * ETH, end_time=int(fake.now) + 600)
    fake.sales.append(SaleRecord(NFT, 4, ALICE, CAROL, 3 * ETH, int(fake.now) - 1000))
    fake.sales.append(SaleRecord(OTHER_NFT, 1, CAROL, BOB, ETH, int(fake.now) - 500))
    fake.loyalty[ALICE.lower()] = 530
    return fake


DOCS = {1: {"name": "Harbor"}, 3: {"name": "Keepsake"}}


class TestItemDetail:
    @pytest.mark.asyncio
    async def test_listed_item(self, ledger) -> None:
        item = await ItemDetailService(ledger, build_resolver(ledger, DOCS)).get_item(NFT, 1)
        assert item.market_role == MarketRole.DIRECT_LISTING
        assert item.listing_id == 0
        assert item.owner == ALICE
        assert item.name == "Harbor"

    @pytest.mark.asyncio
    async def test_active_auction_preferred_over_inactive(self, ledger) -> None:
        item = await ItemDetailService(ledger, build_resolver(ledger)).get_item(NFT, 2)
        assert item.market_role == MarketRole.AUCTION
        assert item.auction_id == 1
        assert item.min_bid == 2 * ETH

    @pytest.mark.asyncio
    async def test_unlisted_item(self, ledger) -> None:
        item = await ItemDetailService(ledger, build_resolver(ledger, DOCS)).get_item(NFT, 3)
        assert item.market_role == MarketRole.UNLISTED
        assert item.owner == ALICE
        assert item.name == "Keepsake"

    @pytest.mark.asyncio
    async def test_address_case_insensitive(self, ledger) -> None:
        item = await ItemDetailService(ledger, build_resolver(ledger)).get_item(NFT.lower(), 1)
        assert item.is_listing

    @pytest.mark.asyncio
    async def test_missing_token(self, ledger) -> None:
        with pytest.raises(ItemNotFoundError):
            await ItemDetailService(ledger, build_resolver(ledger)).get_item(NFT, 999)

    @pytest.mark.asyncio
    async def test_ledger_down(self, ledger) -> None:
        ledger.fail_reads = True
        with pytest.raises(CatalogUnavailableError):
            await ItemDetailService(ledger, build_resolver(ledger)).get_item(NFT, 1)


class TestProfile:
    @pytest.mark.asyncio
    async def test_alice(self, ledger) -> None:
        service = ProfileService(ledger, build_resolver(ledger, DOCS), NFT)
        profile = await service.get_profile(ALICE)

        assert sorted(i.token_id for i in profile.owned) == [1, 3]
        assert all(i.market_role == MarketRole.UNLISTED for i in profile.owned)
        assert [i.token_id for i in profile.listings] == [1]
        assert profile.auctions == []
        assert [s.buyer for s in profile.sales] == [CAROL]
        assert profile.loyalty_points == 530
        assert profile.rank == LoyaltyRank.GOLD

    @pytest.mark.asyncio
    async def test_bob_sees_only_active_auctions(self, ledger) -> None:
        profile = await ProfileService(ledger, build_resolver(ledger), NFT).get_profile(BOB.lower())
        assert [a.auction_id for a in profile.auctions] == [1]
        assert len(profile.sales) == 1
        assert profile.rank == LoyaltyRank.BRONZE

    @pytest.mark.asyncio
    async def test_unreadable_token_skipped(self, ledger) -> None:
        del ledger.owners[(NFT.lower(), 3)]
        profile = await ProfileService(ledger, build_resolver(ledger), NFT).get_profile(ALICE)
        assert [i.token_id for i in profile.owned] == [1]

    @pytest.mark.asyncio
    async def test_ledger_down(self, ledger) -> None:
        ledger.fail_reads = True
        with pytest.raises(CatalogUnavailableError):
            await ProfileService(ledger, build_resolver(ledger), NFT).get_profile(ALICE)


class TestStats:
    @pytest.mark.asyncio
    async def test_aggregates(self, ledger) -> None:
        stats = await StatsService(ledger).get_stats()
        assert stats.collections == 2
        assert stats.sellers == 3
        assert stats.total_volume == 4 * ETH
        assert stats.highest_sale == 3 * ETH
        assert stats.sales_count == 2
        assert stats.listings_count == 1
        assert stats.active_auctions_count == 1

    @pytest.mark.asyncio
    async def test_empty_market(self) -> None:
        stats = await StatsService(FakeLedger()).get_stats()
        assert stats.total_volume == 0
        assert stats.highest_sale == 0
        assert stats.collections == 0
