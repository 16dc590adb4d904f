"""Loyalty point accrual estimate and rank tiers.

The marketplace awards 10 points per whole ether settled. The estimate is
advisory; the ledger's loyaltyPoints(account) is authoritative.
"""

from src.nm_common.enums import LoyaltyRank
from src.nm_common.wei import WEI_PER_ETHER

POINTS_PER_ETHER = 10

# Descending thresholds, first match wins
_RANK_THRESHOLDS: tuple[tuple[int, LoyaltyRank], ...] = (
    (1000, LoyaltyRank.PLATINUM),
    (500, LoyaltyRank.GOLD),
    (100, LoyaltyRank.SILVER),
)


def estimate(price_wei: int) -> int:
    """floor(price_wei * 10 / 1e18), exact integer arithmetic."""
    if price_wei < 0:
        raise ValueError(f"price_wei must be >= 0, got {price_wei}")
    return price_wei * POINTS_PER_ETHER // WEI_PER_ETHER


def rank_for(points: int) -> LoyaltyRank:
    for threshold, rank in _RANK_THRESHOLDS:
        if points >= threshold:
            return rank
    return LoyaltyRank.BRONZE
