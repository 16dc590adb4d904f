"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.nm_actions.api.router import router as actions_router
from src.nm_common.errors import AppError
from src.nm_common.response import response_for_error
from src.nm_content.metadata_client import MetadataClient, MetadataResolver
from src.nm_gateway.middleware.request_log import RequestLogMiddleware, request_id_of
from src.nm_ledger.infrastructure.gateway import HttpLedgerGateway
from src.nm_market.api.router import router as market_router
from src.nm_market.application.session import MarketSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build the ledger gateway and session. Shutdown: stop clocks, close clients."""
    ledger = HttpLedgerGateway()
    metadata = MetadataClient()
    app.state.session = MarketSession(
        reader=ledger,
        writer=ledger,
        resolver=MetadataResolver(ledger, metadata),
        nft_address=settings.NFT_CONTRACT_ADDRESS,
        marketplace_address=settings.MARKETPLACE_CONTRACT_ADDRESS,
    )
    logger.info("Ledger gateway %s, marketplace %s", ledger.base_url, ledger.marketplace_address)
    yield
    await app.state.session.close()
    await metadata.aclose()
    await ledger.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = response_for_error(exc, request_id_of(request))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(market_router, prefix="/api/v1")
app.include_router(actions_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
