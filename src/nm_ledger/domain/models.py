"""Ledger records — raw marketplace rows after range-checked conversion.

Keys follow the ledger's ABI names (`tokenId`, `minBid`, ...). Every numeric
field goes through the checked converters, so a record that exists is safe
to compare and sort with plain int arithmetic.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from src.nm_common.wei import to_safe_int, to_wei

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def require(raw: Mapping[str, Any], keys: list[str], kind: str) -> None:
    missing = [k for k in keys if k not in raw or raw[k] is None]
    if missing:
        raise ValueError(
            f"{kind} record missing required keys={missing}. present_keys={sorted(raw.keys())}"
        )


@dataclass(frozen=True)
class ListingRecord:
    nft: str
    token_id: int
    seller: str
    price: int

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ListingRecord":
        require(raw, ["nft", "tokenId", "seller", "price"], "listing")
        return cls(
            nft=str(raw["nft"]),
            token_id=to_safe_int(raw["tokenId"], "tokenId"),
            seller=str(raw["seller"]),
            price=to_wei(raw["price"], "price"),
        )


@dataclass(frozen=True)
class AuctionRecord:
    nft: str
    token_id: int
    seller: str
    min_bid: int
    highest_bid: int
    highest_bidder: str
    end_time: int
    active: bool

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "AuctionRecord":
        require(
            raw,
            ["nft", "tokenId", "seller", "minBid", "highestBid", "endTime", "active"],
            "auction",
        )
        return cls(
            nft=str(raw["nft"]),
            token_id=to_safe_int(raw["tokenId"], "tokenId"),
            seller=str(raw["seller"]),
            min_bid=to_wei(raw["minBid"], "minBid"),
            highest_bid=to_wei(raw["highestBid"], "highestBid"),
            highest_bidder=str(raw.get("highestBidder") or ZERO_ADDRESS),
            end_time=to_safe_int(raw["endTime"], "endTime"),
            active=bool(raw["active"]),
        )


@dataclass(frozen=True)
class SaleRecord:
    """Append-only historical fact; never mutated."""

    nft: str
    token_id: int
    seller: str
    buyer: str
    price: int
    timestamp: int

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "SaleRecord":
        require(raw, ["nft", "tokenId", "seller", "buyer", "price", "timestamp"], "sale")
        return cls(
            nft=str(raw["nft"]),
            token_id=to_safe_int(raw["tokenId"], "tokenId"),
            seller=str(raw["seller"]),
            buyer=str(raw["buyer"]),
            price=to_wei(raw["price"], "price"),
            timestamp=to_safe_int(raw["timestamp"], "timestamp"),
        )


@dataclass(frozen=True)
class TxReceipt:
    tx_hash: str
    block_number: int | None = None
