"""Pydantic schemas for nm_market API responses.

Wei amounts are serialized as decimal strings next to an ether display
string ("0.5 ETH"); JSON numbers cannot carry uint256 values.
"""

from typing import Any

from pydantic import BaseModel

from src.nm_auction.clock import AuctionClockState
from src.nm_common.enums import ClockPhase, LoyaltyRank, MarketRole
from src.nm_common.notices import Notice
from src.nm_common.wei import wei_to_display
from src.nm_content.resolver import resolve
from src.nm_ledger.domain.models import SaleRecord
from src.nm_market.application.profile import Profile
from src.nm_market.application.stats import MarketStats
from src.nm_market.domain.models import Catalog, MarketItem


def _wei(value: int | None) -> str | None:
    return str(value) if value is not None else None


def _display(value: int | None) -> str | None:
    return wei_to_display(value) if value is not None else None


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class ItemOut(BaseModel):
    token_id: int
    nft_address: str
    market_role: MarketRole
    seller: str | None
    owner: str | None
    listing_id: int | None
    auction_id: int | None
    price_wei: str | None
    price_display: str | None
    min_bid_wei: str | None
    highest_bid_wei: str | None
    highest_bidder: str | None
    end_time: int | None
    auction_active: bool
    effective_price_wei: str | None
    effective_price_display: str | None
    name: str
    description: str
    category: str
    image: str
    image_url: str

    @classmethod
    def from_domain(cls, item: MarketItem) -> "ItemOut":
        return cls(
            token_id=item.token_id,
            nft_address=item.nft_address,
            market_role=item.market_role,
            seller=item.seller,
            owner=item.owner,
            listing_id=item.listing_id,
            auction_id=item.auction_id,
            price_wei=_wei(item.price),
            price_display=_display(item.price),
            min_bid_wei=_wei(item.min_bid),
            highest_bid_wei=_wei(item.highest_bid),
            highest_bidder=item.highest_bidder,
            end_time=item.end_time,
            auction_active=item.auction_active,
            effective_price_wei=_wei(item.effective_price),
            effective_price_display=_display(item.effective_price),
            name=item.name,
            description=item.description,
            category=item.category,
            image=item.image,
            image_url=resolve(item.image),
        )


class ItemListResponse(BaseModel):
    items: list[ItemOut]
    total: int
    generation: int
    loaded_at: str

    @classmethod
    def build(cls, items: list[MarketItem], catalog: Catalog) -> "ItemListResponse":
        return cls(
            items=[ItemOut.from_domain(i) for i in items],
            total=len(items),
            generation=catalog.generation,
            loaded_at=catalog.loaded_at.isoformat(),
        )


class RefreshResponse(BaseModel):
    committed: bool
    generation: int
    total: int


class ClockOut(BaseModel):
    nft_address: str
    token_id: int
    end_time: int
    remaining_seconds: float
    label: str
    has_ended: bool
    phase: ClockPhase

    @classmethod
    def from_state(cls, item: MarketItem, state: AuctionClockState) -> "ClockOut":
        return cls(
            nft_address=item.nft_address,
            token_id=item.token_id,
            end_time=item.end_time or 0,
            remaining_seconds=state.remaining,
            label=state.label,
            has_ended=state.has_ended,
            phase=state.phase,
        )


# ---------------------------------------------------------------------------
# Profile / stats
# ---------------------------------------------------------------------------


class SaleOut(BaseModel):
    nft_address: str
    token_id: int
    seller: str
    buyer: str
    price_wei: str
    price_display: str
    timestamp: int

    @classmethod
    def from_domain(cls, sale: SaleRecord) -> "SaleOut":
        return cls(
            nft_address=sale.nft,
            token_id=sale.token_id,
            seller=sale.seller,
            buyer=sale.buyer,
            price_wei=str(sale.price),
            price_display=wei_to_display(sale.price),
            timestamp=sale.timestamp,
        )


class ProfileOut(BaseModel):
    account: str
    loyalty_points: int
    rank: LoyaltyRank
    owned: list[ItemOut]
    listings: list[ItemOut]
    auctions: list[ItemOut]
    sales: list[SaleOut]

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileOut":
        return cls(
            account=profile.account,
            loyalty_points=profile.loyalty_points,
            rank=profile.rank,
            owned=[ItemOut.from_domain(i) for i in profile.owned],
            listings=[ItemOut.from_domain(i) for i in profile.listings],
            auctions=[ItemOut.from_domain(i) for i in profile.auctions],
            sales=[SaleOut.from_domain(s) for s in profile.sales],
        )


class StatsOut(BaseModel):
    collections: int
    sellers: int
    sales_count: int
    listings_count: int
    active_auctions_count: int
    total_volume_wei: str
    total_volume_display: str
    highest_sale_wei: str
    highest_sale_display: str

    @classmethod
    def from_domain(cls, stats: MarketStats) -> "StatsOut":
        return cls(
            collections=stats.collections,
            sellers=stats.sellers,
            sales_count=stats.sales_count,
            listings_count=stats.listings_count,
            active_auctions_count=stats.active_auctions_count,
            total_volume_wei=str(stats.total_volume),
            total_volume_display=wei_to_display(stats.total_volume),
            highest_sale_wei=str(stats.highest_sale),
            highest_sale_display=wei_to_display(stats.highest_sale),
        )


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


class NoticeOut(BaseModel):
    operation_id: str
    level: str
    message: str
    detail: dict[str, Any]
    posted_at: str

    @classmethod
    def from_domain(cls, notice: Notice) -> "NoticeOut":
        return cls(
            operation_id=notice.operation_id,
            level=notice.level.value,
            message=notice.message,
            detail=dict(notice.detail),
            posted_at=notice.posted_at.isoformat(),
        )
