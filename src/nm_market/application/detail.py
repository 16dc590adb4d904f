"""ItemDetailService — one token's current market view, read straight from the ledger.

Unlike the catalog, detail lookups include unlisted tokens and always
populate `owner`.
"""

import asyncio
import logging

from src.nm_common.errors import CatalogUnavailableError, ItemNotFoundError, LedgerError
from src.nm_content.metadata_client import MetadataResolver
from src.nm_ledger.domain.models import AuctionRecord, ListingRecord
from src.nm_ledger.domain.repository import LedgerReaderProtocol
from src.nm_market.domain.models import MarketItem
from src.nm_market.domain.normalizer import (
    normalize_auction,
    normalize_listing,
    normalize_unlisted,
)

logger = logging.getLogger(__name__)


def _same_token(nft: str, token_id: int, rec: ListingRecord | AuctionRecord) -> bool:
    return rec.nft.lower() == nft.lower() and rec.token_id == token_id


def latest_listing(
    listings: list[ListingRecord], nft: str, token_id: int
) -> tuple[int, ListingRecord] | None:
    """Highest-index listing for the token, consistent with catalog dedup."""
    found = None
    for index, rec in enumerate(listings):
        if _same_token(nft, token_id, rec):
            found = (index, rec)
    return found


def latest_active_auction(
    auctions: list[AuctionRecord], nft: str, token_id: int
) -> tuple[int, AuctionRecord] | None:
    found = None
    for index, rec in enumerate(auctions):
        if rec.active and _same_token(nft, token_id, rec):
            found = (index, rec)
    return found


class ItemDetailService:
    def __init__(self, reader: LedgerReaderProtocol, resolver: MetadataResolver) -> None:
        self._reader = reader
        self._resolver = resolver

    async def get_item(self, nft: str, token_id: int) -> MarketItem:
        try:
            owner = await self._reader.owner_of(nft, token_id)
        except LedgerError as exc:
            # ownerOf reverts for tokens that were never minted
            logger.info("ownerOf %s#%s failed: %s", nft, token_id, exc)
            raise ItemNotFoundError(nft, token_id) from exc

        try:
            metadata, listings, auctions = await asyncio.gather(
                self._resolver.resolve_for(nft, token_id),
                self._reader.get_all_listings(),
                self._reader.get_all_auctions(),
            )
        except LedgerError as exc:
            raise CatalogUnavailableError(str(exc)) from exc

        auction = latest_active_auction(auctions, nft, token_id)
        if auction is not None:
            index, rec = auction
            return normalize_auction(rec, index, metadata, owner=owner)
        listing = latest_listing(listings, nft, token_id)
        if listing is not None:
            index, rec = listing
            return normalize_listing(rec, index, metadata, owner=owner)
        return normalize_unlisted(nft, token_id, metadata, owner=owner)
