"""Pydantic request/response schemas for nm_actions.

Amounts are entered in ETH as strings ("0.25") and converted exactly to wei;
a float field would already have lost precision by the time we see it.
"""

from pydantic import BaseModel, Field

from config.settings import settings
from src.nm_actions.dispatcher import ActionResult


class BuyRequest(BaseModel):
    listing_id: int = Field(..., ge=0)


class ListRequest(BaseModel):
    nft_address: str = Field(default_factory=lambda: settings.NFT_CONTRACT_ADDRESS)
    token_id: int = Field(..., ge=0)
    price: str = Field(..., description="Price in ETH")


class CancelRequest(BaseModel):
    listing_id: int = Field(..., ge=0)


class StartAuctionRequest(BaseModel):
    nft_address: str = Field(default_factory=lambda: settings.NFT_CONTRACT_ADDRESS)
    token_id: int = Field(..., ge=0)
    min_bid: str = Field(..., description="Minimum bid in ETH")
    duration_seconds: int | None = None


class BidRequest(BaseModel):
    auction_id: int = Field(..., ge=0)
    amount: str = Field(..., description="Bid in ETH")


class EndAuctionRequest(BaseModel):
    auction_id: int = Field(..., ge=0)


class ActionResultOut(BaseModel):
    operation_id: str
    tx_hash: str
    loyalty_estimate: int
    loyalty_points: int | None
    catalog_refreshed: bool

    @classmethod
    def from_domain(cls, result: ActionResult) -> "ActionResultOut":
        return cls(
            operation_id=result.operation_id,
            tx_hash=result.tx_hash,
            loyalty_estimate=result.loyalty_estimate,
            loyalty_points=result.loyalty_points,
            catalog_refreshed=result.catalog_refreshed,
        )
