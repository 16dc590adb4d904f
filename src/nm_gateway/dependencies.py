"""FastAPI dependencies: the process-wide MarketSession and the caller's wallet.

Usage in any router:
    from src.nm_gateway.dependencies import get_session, get_wallet

    @router.post("/buy")
    async def buy(
        session: Annotated[MarketSession, Depends(get_session)],
        wallet: Annotated[str | None, Depends(get_wallet)],
    ): ...
"""

from fastapi import Header, Request

from src.nm_common.errors import InternalError
from src.nm_market.application.session import MarketSession

WALLET_HEADER = "X-Wallet-Address"


def get_session(request: Request) -> MarketSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise InternalError("Market session is not initialized")
    return session


def get_wallet(
    x_wallet_address: str | None = Header(None, alias=WALLET_HEADER),
) -> str | None:
    """Connected wallet account, or None when the header is absent or blank."""
    if x_wallet_address is None or not x_wallet_address.strip():
        return None
    return x_wallet_address.strip()
