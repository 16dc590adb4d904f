"""MarketSession — explicit context object for one client session.

Holds the ledger handles, the catalog store, the auction clocks and the
notice board. Wallet identity is never stored here; every action takes the
caller's account as an argument.
"""

import asyncio
import logging

from src.nm_auction.registry import ClockRegistry
from src.nm_common.enums import SortKey
from src.nm_common.errors import CatalogUnavailableError, LedgerError
from src.nm_common.notices import CATALOG_NOTICE_ID, NoticeBoard
from src.nm_content.metadata_client import MetadataResolver
from src.nm_ledger.domain.repository import LedgerReaderProtocol, LedgerWriterProtocol
from src.nm_market.application.catalog import CatalogAggregator, CatalogStore
from src.nm_market.domain import pipeline
from src.nm_market.domain.models import Catalog, FilterState, MarketItem

logger = logging.getLogger(__name__)


class MarketSession:
    def __init__(
        self,
        reader: LedgerReaderProtocol,
        writer: LedgerWriterProtocol,
        resolver: MetadataResolver,
        nft_address: str,
        marketplace_address: str,
        registry: ClockRegistry | None = None,
        notices: NoticeBoard | None = None,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.resolver = resolver
        self.nft_address = nft_address
        self.marketplace_address = marketplace_address
        self.aggregator = CatalogAggregator(reader, resolver)
        self.store = CatalogStore()
        self.clocks = registry or ClockRegistry()
        self.notices = notices or NoticeBoard()
        self._first_load: asyncio.Future[bool] | None = None

    @property
    def catalog(self) -> Catalog:
        return self.store.current

    async def refresh(self) -> bool:
        """Load and commit a fresh catalog.

        Returns False when a newer refresh started meanwhile and this result
        was discarded. Raises CatalogUnavailableError after posting the
        catalog notice; the previously committed catalog stays in place.
        """
        generation = self.store.begin()
        try:
            catalog = await self.aggregator.load_catalog(generation)
        except CatalogUnavailableError as exc:
            logger.warning("Catalog load %d failed: %s", generation, exc.message)
            self.notices.error(CATALOG_NOTICE_ID, "Failed to load listings")
            raise
        if not self.store.commit(catalog):
            return False
        self.clocks.supersede()
        self.notices.dismiss(CATALOG_NOTICE_ID)
        return True

    async def ensure_loaded(self) -> None:
        """Load the catalog once before the first view.

        Concurrent first views share one in-flight load. A failed load is
        retried by the next caller.
        """
        if self.store.current.generation != 0:
            return
        if self._first_load is None or self._first_load.done():
            self._first_load = asyncio.ensure_future(self.refresh())
        await asyncio.shield(self._first_load)

    def view(self, filters: FilterState, sort_key: SortKey = SortKey.RECENT) -> list[MarketItem]:
        return pipeline.apply(self.store.current.items, filters, sort_key)

    async def loyalty_balance(self, account: str) -> int | None:
        """Authoritative loyalty points from the ledger; None if the read fails."""
        try:
            return await self.reader.loyalty_points(account)
        except LedgerError as exc:
            logger.warning("Loyalty balance read failed for %s: %s", account, exc)
            return None

    async def close(self) -> None:
        await self.clocks.close()
