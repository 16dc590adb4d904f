"""Domain models for nm_market — immutable item snapshots and view state."""

from dataclasses import dataclass, field
from datetime import datetime

from src.nm_common.enums import MarketRole, Network


@dataclass(frozen=True)
class MarketItem:
    """One tradeable item as of one catalog snapshot.

    Invariant: market_role decides which field group is populated:
      DIRECT_LISTING: listing_id + price
      AUCTION:        auction_id + min_bid/highest_bid/highest_bidder/end_time
      UNLISTED:       neither
    """

    token_id: int
    nft_address: str
    market_role: MarketRole
    seller: str | None = None
    owner: str | None = None

    listing_id: int | None = None
    price: int | None = None

    auction_id: int | None = None
    min_bid: int | None = None
    highest_bid: int | None = None
    highest_bidder: str | None = None
    end_time: int | None = None
    auction_active: bool = False

    name: str = ""
    description: str = ""
    category: str = ""
    image: str = ""

    def __post_init__(self) -> None:
        if self.token_id < 0:
            raise ValueError(f"token_id must be >= 0, got {self.token_id}")
        listing_group = (self.listing_id, self.price)
        auction_group = (
            self.auction_id,
            self.min_bid,
            self.highest_bid,
            self.highest_bidder,
            self.end_time,
        )
        has_listing = any(v is not None for v in listing_group)
        has_auction = any(v is not None for v in auction_group)

        if self.market_role == MarketRole.DIRECT_LISTING:
            ok = all(v is not None for v in listing_group) and not has_auction
        elif self.market_role == MarketRole.AUCTION:
            ok = all(v is not None for v in auction_group) and not has_listing
        else:
            ok = not has_listing and not has_auction
        if not ok:
            raise ValueError(
                f"{self.market_role.value} item {self.nft_address}#{self.token_id} "
                f"has inconsistent price fields"
            )
        if self.market_role != MarketRole.AUCTION and self.auction_active:
            raise ValueError("auction_active is only valid for AUCTION items")

    @property
    def is_listing(self) -> bool:
        return self.market_role == MarketRole.DIRECT_LISTING

    @property
    def is_auction(self) -> bool:
        return self.market_role == MarketRole.AUCTION

    @property
    def effective_price(self) -> int | None:
        """Auction: highest bid if nonzero else min bid. Listing: fixed price."""
        if self.market_role == MarketRole.AUCTION:
            return self.highest_bid if self.highest_bid else self.min_bid
        return self.price

    @property
    def sequence_index(self) -> int:
        """Role-scoped ledger index, used as a recency proxy."""
        if self.market_role == MarketRole.AUCTION:
            return self.auction_id  # type: ignore[return-value]
        if self.market_role == MarketRole.DIRECT_LISTING:
            return self.listing_id  # type: ignore[return-value]
        return -1

    @property
    def identity_key(self) -> tuple[str, int, MarketRole]:
        return (self.nft_address.lower(), self.token_id, self.market_role)

    @property
    def accepts_bids(self) -> bool:
        return self.market_role == MarketRole.AUCTION and self.auction_active


@dataclass(frozen=True)
class Catalog:
    """One committed catalog snapshot; `generation` identifies the load request."""

    items: tuple[MarketItem, ...]
    generation: int
    loaded_at: datetime

    def find(self, nft_address: str, token_id: int, role: MarketRole) -> MarketItem | None:
        key = (nft_address.lower(), token_id, role)
        for item in self.items:
            if item.identity_key == key:
                return item
        return None

    def find_listing(self, listing_id: int) -> MarketItem | None:
        for item in self.items:
            if item.is_listing and item.listing_id == listing_id:
                return item
        return None

    def find_auction(self, auction_id: int) -> MarketItem | None:
        for item in self.items:
            if item.is_auction and item.auction_id == auction_id:
                return item
        return None


@dataclass(frozen=True)
class StatusFlags:
    buy_now: bool = True
    on_auction: bool = True


@dataclass(frozen=True)
class PriceRange:
    """Inclusive bounds in wei; None means unbounded on that side."""

    min: int | None = None
    max: int | None = None

    @property
    def is_bounded(self) -> bool:
        return self.min is not None or self.max is not None


def _default_networks() -> frozenset[Network]:
    return frozenset({Network.SEPOLIA})


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    category: str | None = None
    status: StatusFlags = field(default_factory=StatusFlags)
    price_range: PriceRange = field(default_factory=PriceRange)
    networks: frozenset[Network] = field(default_factory=_default_networks)
