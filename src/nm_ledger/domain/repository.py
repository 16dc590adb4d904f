# src/nm_ledger/domain/repository.py
"""Ledger Protocols — dependency inversion for testability.

Unit tests inject AsyncMock objects conforming to these Protocols.
The infrastructure layer provides the HTTP gateway implementation.
"""

from typing import Protocol

from src.nm_ledger.domain.models import (
    AuctionRecord,
    ListingRecord,
    SaleRecord,
    TxReceipt,
)


class PendingTransaction(Protocol):
    tx_hash: str

    async def wait(self) -> TxReceipt:
        """Block until the write is committed. Raises LedgerError if it reverts."""
        ...


class LedgerReaderProtocol(Protocol):
    async def get_all_listings(self) -> list[ListingRecord]: ...

    async def get_all_auctions(self) -> list[AuctionRecord]: ...

    async def get_sales(self) -> list[SaleRecord]: ...

    async def token_uri(self, nft: str, token_id: int) -> str: ...

    async def owner_of(self, nft: str, token_id: int) -> str: ...

    async def token_count(self, nft: str) -> int: ...

    async def loyalty_points(self, account: str) -> int: ...

    async def is_approved_for_all(self, nft: str, owner: str, operator: str) -> bool: ...


class LedgerWriterProtocol(Protocol):
    async def buy_item(self, sender: str, listing_id: int, value: int) -> PendingTransaction: ...

    async def cancel_listing(self, sender: str, listing_id: int) -> PendingTransaction: ...

    async def list_item(
        self, sender: str, nft: str, token_id: int, price: int
    ) -> PendingTransaction: ...

    async def start_auction(
        self, sender: str, nft: str, token_id: int, min_bid: int, duration: int
    ) -> PendingTransaction: ...

    async def bid(self, sender: str, auction_id: int, value: int) -> PendingTransaction: ...

    async def end_auction(self, sender: str, auction_id: int) -> PendingTransaction: ...

    async def set_approval_for_all(
        self, sender: str, nft: str, operator: str, approved: bool
    ) -> PendingTransaction: ...
