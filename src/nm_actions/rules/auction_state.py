"""Auction lifecycle preconditions for bid and settlement.

An auction has ended once now > end_time (strict), matching the clock's
`remaining < 0` transition.
"""

from src.nm_common.errors import ActionValidationError
from src.nm_market.domain.models import MarketItem


def has_ended(item: MarketItem, now: float) -> bool:
    return item.end_time is not None and now > item.end_time


def check_open_for_bids(item: MarketItem, now: float) -> None:
    if not item.accepts_bids:
        raise ActionValidationError("Auction is no longer active")
    if has_ended(item, now):
        raise ActionValidationError("Auction has ended")


def check_ready_to_settle(item: MarketItem, now: float) -> None:
    if not item.auction_active:
        raise ActionValidationError("Auction is already settled")
    if not has_ended(item, now):
        raise ActionValidationError("Auction has not ended yet")


def check_bid_above_current(item: MarketItem, bid_wei: int) -> None:
    """Bid must be strictly greater than the effective price (exact wei compare)."""
    current = item.effective_price or 0
    if bid_wei <= current:
        raise ActionValidationError("Bid must be higher than current price")
