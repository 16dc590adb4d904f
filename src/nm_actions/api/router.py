"""nm_actions REST endpoints. All require the X-Wallet-Address header.

POST /actions/buy
POST /actions/list
POST /actions/cancel
POST /actions/auction/start
POST /actions/bid
POST /actions/auction/end
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.nm_actions.application.schemas import (
    ActionResultOut,
    BidRequest,
    BuyRequest,
    CancelRequest,
    EndAuctionRequest,
    ListRequest,
    StartAuctionRequest,
)
from src.nm_actions.dispatcher import ActionDispatcher, ActionResult
from src.nm_common.response import ApiResponse, success_response
from src.nm_gateway.dependencies import get_session, get_wallet
from src.nm_gateway.middleware.request_log import request_id_of
from src.nm_market.application.session import MarketSession

router = APIRouter(prefix="/actions", tags=["actions"])


def get_dispatcher(
    session: Annotated[MarketSession, Depends(get_session)],
) -> ActionDispatcher:
    return ActionDispatcher(session)


Dispatcher = Annotated[ActionDispatcher, Depends(get_dispatcher)]
Wallet = Annotated[str | None, Depends(get_wallet)]


def _ok(result: ActionResult, request: Request) -> ApiResponse:
    return success_response(ActionResultOut.from_domain(result), request_id_of(request))


@router.post("/buy")
async def buy(
    body: BuyRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    return _ok(await dispatcher.buy(wallet, body.listing_id), request)


@router.post("/list")
async def list_item(
    body: ListRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    result = await dispatcher.list_item(wallet, body.nft_address, body.token_id, body.price)
    return _ok(result, request)


@router.post("/cancel")
async def cancel(
    body: CancelRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    return _ok(await dispatcher.cancel(wallet, body.listing_id), request)


@router.post("/auction/start")
async def start_auction(
    body: StartAuctionRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    result = await dispatcher.start_auction(
        wallet, body.nft_address, body.token_id, body.min_bid, body.duration_seconds
    )
    return _ok(result, request)


@router.post("/bid")
async def bid(
    body: BidRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    return _ok(await dispatcher.bid(wallet, body.auction_id, body.amount), request)


@router.post("/auction/end")
async def end_auction(
    body: EndAuctionRequest, request: Request, dispatcher: Dispatcher, wallet: Wallet
) -> ApiResponse:
    return _ok(await dispatcher.end_auction(wallet, body.auction_id), request)
