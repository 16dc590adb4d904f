"""Catalog aggregation — ledger streams + metadata -> one deduplicated Catalog.

CatalogAggregator performs a single load; it never mutates the ledger.
CatalogStore owns the committed catalog and decides, by generation number,
whether a finished load is still the latest one the session asked for.
"""

import asyncio
import logging

from src.nm_common.datetime_utils import utc_now
from src.nm_common.errors import CatalogUnavailableError, LedgerError
from src.nm_content.metadata_client import MetadataResolver
from src.nm_ledger.domain.models import AuctionRecord, ListingRecord
from src.nm_ledger.domain.repository import LedgerReaderProtocol
from src.nm_market.domain.models import Catalog, MarketItem
from src.nm_market.domain.normalizer import normalize_auction, normalize_listing

logger = logging.getLogger(__name__)


def dedupe(items: list[MarketItem]) -> list[MarketItem]:
    """Keep one item per identity_key; a later record replaces an earlier one.

    The surviving item takes the position of the first occurrence.
    """
    by_key: dict[tuple, MarketItem] = {}
    for item in items:
        key = item.identity_key
        if key in by_key:
            logger.warning(
                "Duplicate %s record for %s#%s: index %s replaces %s",
                item.market_role.value,
                item.nft_address,
                item.token_id,
                item.sequence_index,
                by_key[key].sequence_index,
            )
        by_key[key] = item
    return list(by_key.values())


class CatalogAggregator:
    def __init__(self, reader: LedgerReaderProtocol, resolver: MetadataResolver) -> None:
        self._reader = reader
        self._resolver = resolver

    async def _fetch_records(self) -> tuple[list[ListingRecord], list[AuctionRecord]]:
        try:
            listings, auctions = await asyncio.gather(
                self._reader.get_all_listings(),
                self._reader.get_all_auctions(),
            )
        except LedgerError as exc:
            raise CatalogUnavailableError(str(exc)) from exc
        return listings, auctions

    async def _listing_items(self, listings: list[ListingRecord]) -> list[MarketItem]:
        metadata = await asyncio.gather(
            *(self._resolver.resolve_for(rec.nft, rec.token_id) for rec in listings)
        )
        return [
            normalize_listing(rec, index, meta)
            for index, (rec, meta) in enumerate(zip(listings, metadata))
        ]

    async def _auction_items(self, auctions: list[AuctionRecord]) -> list[MarketItem]:
        # Ledger index is the position in the full list, inactive rows included
        active = [(index, rec) for index, rec in enumerate(auctions) if rec.active]
        metadata = await asyncio.gather(
            *(self._resolver.resolve_for(rec.nft, rec.token_id) for _, rec in active)
        )
        return [
            normalize_auction(rec, index, meta)
            for (index, rec), meta in zip(active, metadata)
        ]

    async def load_catalog(self, generation: int = 0) -> Catalog:
        listings, auctions = await self._fetch_records()
        listing_items, auction_items = await asyncio.gather(
            self._listing_items(listings),
            self._auction_items(auctions),
        )
        items = dedupe(listing_items + auction_items)
        logger.info(
            "Catalog generation %d loaded: %d listings, %d active auctions (%d raw auctions)",
            generation,
            len(listing_items),
            len(auction_items),
            len(auctions),
        )
        return Catalog(items=tuple(items), generation=generation, loaded_at=utc_now())


class CatalogStore:
    """Latest-request-wins holder of the committed catalog."""

    def __init__(self) -> None:
        self._issued = 0
        self._current = Catalog(items=(), generation=0, loaded_at=utc_now())

    @property
    def current(self) -> Catalog:
        return self._current

    @property
    def latest_generation(self) -> int:
        return self._issued

    def begin(self) -> int:
        self._issued += 1
        return self._issued

    def commit(self, catalog: Catalog) -> bool:
        if catalog.generation != self._issued:
            logger.info(
                "Discarding stale catalog generation %d (latest is %d)",
                catalog.generation,
                self._issued,
            )
            return False
        self._current = catalog
        return True
