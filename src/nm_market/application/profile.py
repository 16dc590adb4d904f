"""ProfileService — everything the marketplace knows about one account."""

import asyncio
import logging
from dataclasses import dataclass

from src.nm_common.enums import LoyaltyRank
from src.nm_common.errors import CatalogUnavailableError, LedgerError
from src.nm_content.metadata_client import MetadataResolver
from src.nm_ledger.domain.models import SaleRecord
from src.nm_ledger.domain.repository import LedgerReaderProtocol
from src.nm_loyalty.estimator import rank_for
from src.nm_market.domain.models import MarketItem
from src.nm_market.domain.normalizer import (
    normalize_auction,
    normalize_listing,
    normalize_unlisted,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    account: str
    owned: list[MarketItem]
    listings: list[MarketItem]
    auctions: list[MarketItem]
    sales: list[SaleRecord]
    loyalty_points: int
    rank: LoyaltyRank


class ProfileService:
    def __init__(
        self,
        reader: LedgerReaderProtocol,
        resolver: MetadataResolver,
        nft_address: str,
    ) -> None:
        self._reader = reader
        self._resolver = resolver
        self._nft_address = nft_address

    async def _owned_token(self, account: str, token_id: int) -> MarketItem | None:
        try:
            owner = await self._reader.owner_of(self._nft_address, token_id)
        except LedgerError as exc:
            # Burned or unreadable tokens are skipped
            logger.warning("ownerOf %s#%s failed: %s", self._nft_address, token_id, exc)
            return None
        if owner.lower() != account.lower():
            return None
        metadata = await self._resolver.resolve_for(self._nft_address, token_id)
        return normalize_unlisted(self._nft_address, token_id, metadata, owner=owner)

    async def _owned(self, account: str) -> list[MarketItem]:
        total = await self._reader.token_count(self._nft_address)
        # Token ids start at 1
        found = await asyncio.gather(
            *(self._owned_token(account, token_id) for token_id in range(1, total + 1))
        )
        return [item for item in found if item is not None]

    async def get_profile(self, account: str) -> Profile:
        me = account.lower()
        try:
            points, owned, listings, auctions, sales = await asyncio.gather(
                self._reader.loyalty_points(account),
                self._owned(account),
                self._reader.get_all_listings(),
                self._reader.get_all_auctions(),
                self._reader.get_sales(),
            )
        except LedgerError as exc:
            raise CatalogUnavailableError(str(exc)) from exc

        mine_listed = [(i, r) for i, r in enumerate(listings) if r.seller.lower() == me]
        mine_auctions = [
            (i, r) for i, r in enumerate(auctions) if r.active and r.seller.lower() == me
        ]
        listed_meta, auction_meta = await asyncio.gather(
            asyncio.gather(*(self._resolver.resolve_for(r.nft, r.token_id) for _, r in mine_listed)),
            asyncio.gather(
                *(self._resolver.resolve_for(r.nft, r.token_id) for _, r in mine_auctions)
            ),
        )

        return Profile(
            account=account,
            owned=owned,
            listings=[
                normalize_listing(r, i, meta) for (i, r), meta in zip(mine_listed, listed_meta)
            ],
            auctions=[
                normalize_auction(r, i, meta) for (i, r), meta in zip(mine_auctions, auction_meta)
            ],
            sales=[s for s in sales if s.seller.lower() == me or s.buyer.lower() == me],
            loyalty_points=points,
            rank=rank_for(points),
        )
