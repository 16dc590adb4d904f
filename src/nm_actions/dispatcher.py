"""ActionDispatcher — user-initiated ledger writes and their consequences.

Every action follows the same sequence:

  validate locally (rules) -> [approve marketplace] -> submit write
  -> loading notice -> await commitment -> success notice -> reload catalog
  -> loyalty estimate / ledger balance

A failed or rejected write posts an error notice under the action's stable
id, raises ActionRejectedError and does not reload. A reload failure after a
committed write only touches the catalog notice.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from config.settings import settings
from src.nm_actions.rules.amount import check_positive_amount, check_positive_duration
from src.nm_actions.rules.auction_state import (
    check_bid_above_current,
    check_open_for_bids,
    check_ready_to_settle,
)
from src.nm_actions.rules.ownership import check_is_seller, check_not_seller
from src.nm_actions.rules.wallet import check_wallet_connected
from src.nm_common.datetime_utils import unix_now
from src.nm_common.enums import ActionKind
from src.nm_common.errors import (
    ActionRejectedError,
    ActionValidationError,
    CatalogUnavailableError,
    LedgerError,
)
from src.nm_common.wei import to_safe_int
from src.nm_ledger.domain.repository import PendingTransaction
from src.nm_loyalty.estimator import estimate
from src.nm_market.application.session import MarketSession
from src.nm_market.domain.models import MarketItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ActionText:
    loading: str
    success: str
    failure: str


_TEXT: dict[ActionKind, _ActionText] = {
    ActionKind.BUY: _ActionText("Processing purchase...", "Purchase successful!", "Purchase failed"),
    ActionKind.LIST: _ActionText("Listing NFT...", "NFT listed successfully!", "Listing failed"),
    ActionKind.CANCEL: _ActionText("Canceling listing...", "Listing canceled!", "Cancel failed"),
    ActionKind.START_AUCTION: _ActionText(
        "Starting auction...", "Auction started successfully!", "Auction failed"
    ),
    ActionKind.BID: _ActionText("Placing bid...", "Bid placed successfully!", "Bidding failed"),
    ActionKind.END_AUCTION: _ActionText(
        "Ending auction...", "Auction finalized!", "Failed to end auction"
    ),
}


@dataclass(frozen=True)
class ActionResult:
    operation_id: str
    tx_hash: str
    loyalty_estimate: int = 0
    loyalty_points: int | None = None
    catalog_refreshed: bool = True


class ActionDispatcher:
    def __init__(self, session: MarketSession, now: Callable[[], float] = unix_now) -> None:
        self._session = session
        self._now = now

    # ---------- Lookups ----------

    def _listing(self, listing_id: int) -> MarketItem:
        item = self._session.catalog.find_listing(listing_id)
        if item is None:
            raise ActionValidationError(f"Listing {listing_id} is not in the current catalog", 404)
        return item

    def _auction(self, auction_id: int) -> MarketItem:
        item = self._session.catalog.find_auction(auction_id)
        if item is None:
            raise ActionValidationError(f"Auction {auction_id} is not in the current catalog", 404)
        return item

    # ---------- Shared flow ----------

    async def _ensure_approval(self, account: str, nft: str) -> None:
        operator = self._session.marketplace_address
        if await self._session.reader.is_approved_for_all(nft, account, operator):
            return
        logger.info("Approving marketplace %s for %s on %s", operator, account, nft)
        pending = await self._session.writer.set_approval_for_all(account, nft, operator, True)
        await pending.wait()

    async def _execute(
        self,
        kind: ActionKind,
        submit: Callable[[], Awaitable[PendingTransaction]],
        settled_price: int | None = None,
        account: str | None = None,
    ) -> ActionResult:
        op = kind.value
        text = _TEXT[kind]
        notices = self._session.notices
        try:
            pending = await submit()
            notices.loading(op, text.loading)
            receipt = await pending.wait()
        except LedgerError as exc:
            reason = exc.reason or text.failure
            logger.warning("%s rejected: %s (%s)", op, reason, exc)
            notices.error(op, reason)
            raise ActionRejectedError(op, reason) from exc

        points = estimate(settled_price) if settled_price is not None else 0
        notices.success(op, text.success, tx_hash=receipt.tx_hash, points_earned=points)
        logger.info("%s settled: tx=%s", op, receipt.tx_hash)

        refreshed = True
        try:
            await self._session.refresh()
        except CatalogUnavailableError:
            refreshed = False

        balance = None
        if account is not None:
            balance = await self._session.loyalty_balance(account)

        return ActionResult(
            operation_id=op,
            tx_hash=receipt.tx_hash,
            loyalty_estimate=points,
            loyalty_points=balance,
            catalog_refreshed=refreshed,
        )

    # ---------- Actions ----------

    async def buy(self, account: str | None, listing_id: int) -> ActionResult:
        buyer = check_wallet_connected(account)
        item = self._listing(listing_id)
        check_not_seller(buyer, item.seller, "You cannot buy your own listing")
        price = item.price or 0
        return await self._execute(
            ActionKind.BUY,
            lambda: self._session.writer.buy_item(buyer, listing_id, price),
            settled_price=price,
            account=buyer,
        )

    async def list_item(
        self, account: str | None, nft: str, token_id: int, price: str
    ) -> ActionResult:
        seller = check_wallet_connected(account)
        token_id = to_safe_int(token_id, "tokenId")
        price_wei = check_positive_amount(price, "Please enter a valid price")

        async def submit() -> PendingTransaction:
            self._session.notices.loading(ActionKind.LIST.value, "Approving marketplace...")
            await self._ensure_approval(seller, nft)
            return await self._session.writer.list_item(seller, nft, token_id, price_wei)

        return await self._execute(ActionKind.LIST, submit)

    async def cancel(self, account: str | None, listing_id: int) -> ActionResult:
        seller = check_wallet_connected(account)
        item = self._listing(listing_id)
        check_is_seller(seller, item.seller)
        return await self._execute(
            ActionKind.CANCEL,
            lambda: self._session.writer.cancel_listing(seller, listing_id),
        )

    async def start_auction(
        self,
        account: str | None,
        nft: str,
        token_id: int,
        min_bid: str,
        duration: int | None = None,
    ) -> ActionResult:
        seller = check_wallet_connected(account)
        token_id = to_safe_int(token_id, "tokenId")
        min_bid_wei = check_positive_amount(min_bid, "Enter a valid minimum bid")
        seconds = check_positive_duration(
            settings.DEFAULT_AUCTION_DURATION_SECONDS if duration is None else duration
        )

        async def submit() -> PendingTransaction:
            await self._ensure_approval(seller, nft)
            return await self._session.writer.start_auction(
                seller, nft, token_id, min_bid_wei, seconds
            )

        return await self._execute(ActionKind.START_AUCTION, submit)

    async def bid(self, account: str | None, auction_id: int, amount: str) -> ActionResult:
        bidder = check_wallet_connected(account)
        item = self._auction(auction_id)
        bid_wei = check_positive_amount(amount, "Enter a valid bid amount")
        check_open_for_bids(item, self._now())
        check_not_seller(bidder, item.seller, "You cannot bid on your own auction")
        check_bid_above_current(item, bid_wei)
        return await self._execute(
            ActionKind.BID,
            lambda: self._session.writer.bid(bidder, auction_id, bid_wei),
        )

    async def end_auction(self, account: str | None, auction_id: int) -> ActionResult:
        caller = check_wallet_connected(account)
        item = self._auction(auction_id)
        check_ready_to_settle(item, self._now())
        # No bids settles at zero
        final_price = item.highest_bid or 0
        return await self._execute(
            ActionKind.END_AUCTION,
            lambda: self._session.writer.end_auction(caller, auction_id),
            settled_price=final_price,
            account=caller,
        )
