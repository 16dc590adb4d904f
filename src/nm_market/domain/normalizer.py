"""Item normalizer: ledger record + resolved metadata -> MarketItem.

No I/O. Metadata arrives pre-resolved (or None when resolution failed or
was not attempted); a missing document only degrades the descriptive fields.
"""

from src.nm_common.enums import MarketRole
from src.nm_common.wei import to_safe_int
from src.nm_content.metadata_client import TokenMetadata
from src.nm_ledger.domain.models import AuctionRecord, ListingRecord
from src.nm_market.domain.models import MarketItem


def placeholder_name(token_id: int) -> str:
    return f"NFT #{token_id}"


def _descriptive(token_id: int, metadata: TokenMetadata | None) -> dict[str, str]:
    if metadata is None:
        return {
            "name": placeholder_name(token_id),
            "image": "",
            "description": "",
            "category": "",
        }
    return {
        "name": metadata.name or placeholder_name(token_id),
        "image": metadata.image,
        "description": metadata.description,
        "category": metadata.category,
    }


def normalize_listing(
    record: ListingRecord,
    listing_id: int,
    metadata: TokenMetadata | None,
    owner: str | None = None,
) -> MarketItem:
    return MarketItem(
        token_id=record.token_id,
        nft_address=record.nft,
        market_role=MarketRole.DIRECT_LISTING,
        seller=record.seller,
        owner=owner,
        listing_id=to_safe_int(listing_id, "listingId"),
        price=record.price,
        **_descriptive(record.token_id, metadata),
    )


def normalize_auction(
    record: AuctionRecord,
    auction_id: int,
    metadata: TokenMetadata | None,
    owner: str | None = None,
) -> MarketItem:
    return MarketItem(
        token_id=record.token_id,
        nft_address=record.nft,
        market_role=MarketRole.AUCTION,
        seller=record.seller,
        owner=owner,
        auction_id=to_safe_int(auction_id, "auctionId"),
        min_bid=record.min_bid,
        highest_bid=record.highest_bid,
        highest_bidder=record.highest_bidder,
        end_time=record.end_time,
        auction_active=record.active,
        **_descriptive(record.token_id, metadata),
    )


def normalize_unlisted(
    nft_address: str,
    token_id: int,
    metadata: TokenMetadata | None,
    owner: str | None = None,
) -> MarketItem:
    token_id = to_safe_int(token_id, "tokenId")
    return MarketItem(
        token_id=token_id,
        nft_address=nft_address,
        market_role=MarketRole.UNLISTED,
        owner=owner,
        **_descriptive(token_id, metadata),
    )


def normalize(
    record: ListingRecord | AuctionRecord | None,
    role: MarketRole,
    metadata: TokenMetadata | None,
    *,
    index: int | None = None,
    nft_address: str | None = None,
    token_id: int | None = None,
    owner: str | None = None,
) -> MarketItem:
    """Role-dispatching entry point.

    DIRECT_LISTING needs a ListingRecord + index, AUCTION an AuctionRecord +
    index, UNLISTED an (nft_address, token_id) pair. Anything else is a
    ValueError.
    """
    if role == MarketRole.DIRECT_LISTING:
        if not isinstance(record, ListingRecord) or index is None:
            raise ValueError("DIRECT_LISTING requires a ListingRecord and its index")
        return normalize_listing(record, index, metadata, owner)
    if role == MarketRole.AUCTION:
        if not isinstance(record, AuctionRecord) or index is None:
            raise ValueError("AUCTION requires an AuctionRecord and its index")
        return normalize_auction(record, index, metadata, owner)
    if nft_address is None or token_id is None:
        raise ValueError("UNLISTED requires nft_address and token_id")
    return normalize_unlisted(nft_address, token_id, metadata, owner)
