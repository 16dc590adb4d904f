"""StatsService — marketplace-wide aggregates over sales, listings and auctions."""

import asyncio
from dataclasses import dataclass

from src.nm_common.errors import CatalogUnavailableError, LedgerError
from src.nm_ledger.domain.repository import LedgerReaderProtocol


@dataclass(frozen=True)
class MarketStats:
    collections: int
    sellers: int
    total_volume: int
    highest_sale: int
    sales_count: int
    listings_count: int
    active_auctions_count: int


class StatsService:
    def __init__(self, reader: LedgerReaderProtocol) -> None:
        self._reader = reader

    async def get_stats(self) -> MarketStats:
        try:
            listings, auctions, sales = await asyncio.gather(
                self._reader.get_all_listings(),
                self._reader.get_all_auctions(),
                self._reader.get_sales(),
            )
        except LedgerError as exc:
            raise CatalogUnavailableError(str(exc)) from exc
        collections: set[str] = set()
        sellers: set[str] = set()
        for rec in [*sales, *listings, *auctions]:
            collections.add(rec.nft.lower())
            sellers.add(rec.seller.lower())

        return MarketStats(
            collections=len(collections),
            sellers=len(sellers),
            total_volume=sum(s.price for s in sales),
            highest_sale=max((s.price for s in sales), default=0),
            sales_count=len(sales),
            listings_count=len(listings),
            active_auctions_count=sum(1 for a in auctions if a.active),
        )
