"""HttpLedgerGateway — ledger read/write adapter over the ledger gateway HTTP API.

The gateway service owns signing, gas and consensus; this adapter only
speaks JSON to it. Integers travel as decimal strings both ways.

Read endpoints:
  GET  /marketplace/listings | /marketplace/auctions | /marketplace/sales
  GET  /marketplace/loyalty/{account}
  GET  /nft/{nft}/tokens/{token_id}/uri | /owner
  GET  /nft/{nft}/token-count
  GET  /nft/{nft}/approvals/{owner}/{operator}

Write endpoints:
  POST /tx              {"from", "contract", "method", "args", "value"} -> {"hash"}
  GET  /tx/{hash}       {"status": "pending" | "confirmed" | "reverted", "reason", "blockNumber"}
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from config.settings import settings
from src.nm_common.errors import LedgerError
from src.nm_common.wei import to_safe_int
from src.nm_ledger.domain.models import (
    AuctionRecord,
    ListingRecord,
    SaleRecord,
    TxReceipt,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _checked(convert: Callable[[object, str], int], value: object, field: str) -> int:
    """Apply a checked converter; a non-numeric value is a malformed response."""
    try:
        return convert(value, field)
    except ValueError as exc:
        raise LedgerError(f"malformed {field}: {exc}") from exc


def _reason_from(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    err = body.get("error")
    if isinstance(err, dict):
        return err.get("reason") or err.get("message")
    return body.get("reason")


class HttpPendingTransaction:
    """Commitment handle for one submitted write; `wait()` polls until settled."""

    def __init__(
        self,
        gateway: "HttpLedgerGateway",
        tx_hash: str,
        poll_interval: float,
        timeout: float,
    ) -> None:
        self.tx_hash = tx_hash
        self._gateway = gateway
        self._poll_interval = poll_interval
        self._timeout = timeout

    async def wait(self) -> TxReceipt:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        while True:
            body = await self._gateway._get_object(f"/tx/{self.tx_hash}")
            status = body.get("status")
            if status == "confirmed":
                block = body.get("blockNumber")
                if block is not None:
                    block = _checked(to_safe_int, block, "blockNumber")
                return TxReceipt(tx_hash=self.tx_hash, block_number=block)
            if status in ("reverted", "rejected", "failed"):
                raise LedgerError(f"transaction {self.tx_hash} {status}", reason=body.get("reason"))
            if loop.time() >= deadline:
                raise LedgerError(f"transaction {self.tx_hash} not confirmed in {self._timeout}s")
            await asyncio.sleep(self._poll_interval)


class HttpLedgerGateway:
    """Implements LedgerReaderProtocol and LedgerWriterProtocol."""

    def __init__(
        self,
        base_url: str | None = None,
        marketplace_address: str | None = None,
        client: httpx.AsyncClient | None = None,
        poll_interval: float | None = None,
        tx_timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.LEDGER_GATEWAY_URL).rstrip("/")
        self.marketplace_address = marketplace_address or settings.MARKETPLACE_CONTRACT_ADDRESS
        self._http = client or httpx.AsyncClient(timeout=settings.LEDGER_TIMEOUT_SECONDS)
        self._poll_interval = (
            settings.TX_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
        )
        self._tx_timeout = settings.TX_TIMEOUT_SECONDS if tx_timeout is None else tx_timeout

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---------- Low-level ----------

    async def _get(self, path: str) -> Any:
        try:
            resp = await self._http.get(f"{self.base_url}{path}")
        except httpx.HTTPError as exc:
            raise LedgerError(f"GET {path} failed: {exc}") from exc
        if resp.is_error:
            raise LedgerError(f"GET {path} -> {resp.status_code}", reason=_reason_from(resp))
        try:
            return resp.json()
        except ValueError as exc:
            raise LedgerError(f"GET {path} returned a non-JSON body") from exc

    async def _get_object(self, path: str) -> dict[str, Any]:
        body = await self._get(path)
        if not isinstance(body, dict):
            raise LedgerError(f"GET {path} returned {type(body).__name__}, expected an object")
        return body

    async def _get_field(self, path: str, key: str) -> Any:
        body = await self._get_object(path)
        if body.get(key) is None:
            raise LedgerError(f"GET {path} response has no {key!r}")
        return body[key]

    async def _get_rows(self, path: str, parse: Callable[[Any], T]) -> list[T]:
        """Parse a list payload row by row. Range overflow is not wrapped."""
        rows = await self._get(path)
        if not isinstance(rows, list):
            raise LedgerError(f"GET {path} returned {type(rows).__name__}, expected a list")
        try:
            return [parse(row) for row in rows]
        except (ValueError, TypeError, AttributeError) as exc:
            raise LedgerError(f"GET {path} returned a malformed row: {exc}") from exc

    async def _send(
        self,
        sender: str,
        contract: str,
        method: str,
        args: list[Any],
        value: int = 0,
    ) -> HttpPendingTransaction:
        payload = {
            "from": sender,
            "contract": contract,
            "method": method,
            "args": [str(a) if isinstance(a, int) and not isinstance(a, bool) else a for a in args],
            "value": str(value),
        }
        try:
            resp = await self._http.post(f"{self.base_url}/tx", json=payload)
        except httpx.HTTPError as exc:
            raise LedgerError(f"{method} submission failed: {exc}") from exc
        if resp.is_error:
            raise LedgerError(f"{method} -> {resp.status_code}", reason=_reason_from(resp))
        try:
            tx_hash = str(resp.json()["hash"])
        except (ValueError, KeyError, TypeError) as exc:
            raise LedgerError(f"{method} submission returned no transaction hash") from exc
        logger.info("Submitted %s from %s: tx=%s", method, sender, tx_hash)
        return HttpPendingTransaction(self, tx_hash, self._poll_interval, self._tx_timeout)

    # ---------- Reads ----------

    async def get_all_listings(self) -> list[ListingRecord]:
        return await self._get_rows("/marketplace/listings", ListingRecord.from_raw)

    async def get_all_auctions(self) -> list[AuctionRecord]:
        return await self._get_rows("/marketplace/auctions", AuctionRecord.from_raw)

    async def get_sales(self) -> list[SaleRecord]:
        return await self._get_rows("/marketplace/sales", SaleRecord.from_raw)

    async def token_uri(self, nft: str, token_id: int) -> str:
        body = await self._get_object(f"/nft/{nft}/tokens/{token_id}/uri")
        return str(body.get("uri") or "")

    async def owner_of(self, nft: str, token_id: int) -> str:
        return str(await self._get_field(f"/nft/{nft}/tokens/{token_id}/owner", "owner"))

    async def token_count(self, nft: str) -> int:
        count = await self._get_field(f"/nft/{nft}/token-count", "count")
        return _checked(to_safe_int, count, "tokenCount")

    async def loyalty_points(self, account: str) -> int:
        points = await self._get_field(f"/marketplace/loyalty/{account}", "points")
        return _checked(to_safe_int, points, "loyaltyPoints")

    async def is_approved_for_all(self, nft: str, owner: str, operator: str) -> bool:
        body = await self._get_object(f"/nft/{nft}/approvals/{owner}/{operator}")
        return bool(body.get("approved"))

    # ---------- Writes ----------

    async def buy_item(self, sender: str, listing_id: int, value: int) -> HttpPendingTransaction:
        return await self._send(sender, self.marketplace_address, "buyItem", [listing_id], value)

    async def cancel_listing(self, sender: str, listing_id: int) -> HttpPendingTransaction:
        return await self._send(sender, self.marketplace_address, "cancelListing", [listing_id])

    async def list_item(
        self, sender: str, nft: str, token_id: int, price: int
    ) -> HttpPendingTransaction:
        return await self._send(
            sender, self.marketplace_address, "listItem", [nft, token_id, price]
        )

    async def start_auction(
        self, sender: str, nft: str, token_id: int, min_bid: int, duration: int
    ) -> HttpPendingTransaction:
        return await self._send(
            sender, self.marketplace_address, "startAuction", [nft, token_id, min_bid, duration]
        )

    async def bid(self, sender: str, auction_id: int, value: int) -> HttpPendingTransaction:
        return await self._send(sender, self.marketplace_address, "bid", [auction_id], value)

    async def end_auction(self, sender: str, auction_id: int) -> HttpPendingTransaction:
        return await self._send(sender, self.marketplace_address, "endAuction", [auction_id])

    async def set_approval_for_all(
        self, sender: str, nft: str, operator: str, approved: bool
    ) -> HttpPendingTransaction:
        return await self._send(sender, nft, "setApprovalForAll", [operator, approved])
