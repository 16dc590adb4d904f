"""nm_market REST endpoints.

GET    /items                              — filtered/sorted catalog view
POST   /items/refresh                      — reload the catalog from the ledger
GET    /items/{nft}/{token_id}             — single item detail (incl. unlisted)
GET    /items/{nft}/{token_id}/clock       — auction countdown (starts the clock)
DELETE /items/{nft}/{token_id}/clock       — stop watching an auction
GET    /profile                            — connected wallet's profile
GET    /stats                              — marketplace aggregates
GET    /notices                            — active notices
DELETE /notices/{operation_id}             — dismiss a notice
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.nm_actions.rules.wallet import check_wallet_connected
from src.nm_auction.registry import clock_key
from src.nm_common.enums import MarketRole, SortKey
from src.nm_common.errors import ItemNotFoundError
from src.nm_common.response import ApiResponse, success_response
from src.nm_gateway.dependencies import get_session, get_wallet
from src.nm_gateway.middleware.request_log import request_id_of
from src.nm_market.application.detail import ItemDetailService
from src.nm_market.application.profile import ProfileService
from src.nm_market.application.schemas import (
    ClockOut,
    ItemListResponse,
    ItemOut,
    NoticeOut,
    ProfileOut,
    RefreshResponse,
    StatsOut,
)
from src.nm_market.application.session import MarketSession
from src.nm_market.application.stats import StatsService
from src.nm_market.domain.pipeline import filter_state_from_params

router = APIRouter(tags=["market"])

Session = Annotated[MarketSession, Depends(get_session)]


@router.get("/items")
async def list_items(
    request: Request,
    session: Session,
    search: str | None = Query(None),
    category: str | None = Query(None),
    buy_now: bool = Query(True),
    on_auction: bool = Query(True),
    min_price: str | None = Query(None, description="Lower bound in ETH, inclusive"),
    max_price: str | None = Query(None, description="Upper bound in ETH, inclusive"),
    networks: list[str] | None = Query(None),
    sort: SortKey = Query(SortKey.RECENT),
) -> ApiResponse:
    filters = filter_state_from_params(
        search, category, buy_now, on_auction, min_price, max_price, networks
    )
    await session.ensure_loaded()
    items = session.view(filters, sort)
    result = ItemListResponse.build(items, session.catalog)
    return success_response(result, request_id_of(request))


@router.post("/items/refresh")
async def refresh_items(request: Request, session: Session) -> ApiResponse:
    committed = await session.refresh()
    catalog = session.catalog
    result = RefreshResponse(
        committed=committed, generation=catalog.generation, total=len(catalog.items)
    )
    return success_response(result, request_id_of(request))


@router.get("/items/{nft_address}/{token_id}")
async def get_item(
    nft_address: str, token_id: int, request: Request, session: Session
) -> ApiResponse:
    service = ItemDetailService(session.reader, session.resolver)
    item = await service.get_item(nft_address, token_id)
    return success_response(ItemOut.from_domain(item), request_id_of(request))


@router.get("/items/{nft_address}/{token_id}/clock")
async def get_clock(
    nft_address: str, token_id: int, request: Request, session: Session
) -> ApiResponse:
    item = session.catalog.find(nft_address, token_id, MarketRole.AUCTION)
    if item is None:
        raise ItemNotFoundError(nft_address, token_id)
    state = session.clocks.watch(item)
    return success_response(ClockOut.from_state(item, state), request_id_of(request))


@router.delete("/items/{nft_address}/{token_id}/clock")
async def release_clock(
    nft_address: str, token_id: int, request: Request, session: Session
) -> ApiResponse:
    released = session.clocks.release(clock_key(nft_address, token_id))
    return success_response({"released": released}, request_id_of(request))


@router.get("/profile")
async def get_profile(
    request: Request,
    session: Session,
    wallet: Annotated[str | None, Depends(get_wallet)],
) -> ApiResponse:
    account = check_wallet_connected(wallet)
    service = ProfileService(session.reader, session.resolver, session.nft_address)
    profile = await service.get_profile(account)
    return success_response(ProfileOut.from_domain(profile), request_id_of(request))


@router.get("/stats")
async def get_stats(request: Request, session: Session) -> ApiResponse:
    stats = await StatsService(session.reader).get_stats()
    return success_response(StatsOut.from_domain(stats), request_id_of(request))


@router.get("/notices")
async def list_notices(request: Request, session: Session) -> ApiResponse:
    notices = [NoticeOut.from_domain(n).model_dump() for n in session.notices.active()]
    return success_response(notices, request_id_of(request))


@router.delete("/notices/{operation_id}")
async def dismiss_notice(operation_id: str, request: Request, session: Session) -> ApiResponse:
    dismissed = session.notices.dismiss(operation_id)
    return success_response({"dismissed": dismissed}, request_id_of(request))
