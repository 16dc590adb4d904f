"""Off-chain token metadata: HTTP fetch + per-item resolution with fallback.

MetadataClient.fetch raises MetadataUnavailableError on any failure.
MetadataResolver.resolve_for swallows that error (and a failing tokenURI
read) and returns None, so one bad token never aborts a catalog load.
"""

import asyncio
import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from config.settings import settings
from src.nm_common.errors import LedgerError, MetadataUnavailableError
from src.nm_content.resolver import resolve
from src.nm_ledger.domain.repository import LedgerReaderProtocol

logger = logging.getLogger(__name__)


class TokenMetadata(BaseModel):
    """Descriptive document behind a token's content locator."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    image: str = ""
    description: str = ""
    category: str = ""


class MetadataClient:
    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._http = client or httpx.AsyncClient(
            timeout=settings.METADATA_TIMEOUT_SECONDS,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch(self, url: str) -> TokenMetadata:
        if not url:
            raise MetadataUnavailableError(url, "empty locator")
        try:
            resp = await self._http.get(url)
            resp.raise_for_status()
            doc = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise MetadataUnavailableError(url, str(exc)) from exc
        if not isinstance(doc, dict):
            raise MetadataUnavailableError(url, f"expected object, got {type(doc).__name__}")
        try:
            return TokenMetadata.model_validate(doc)
        except ValidationError as exc:
            raise MetadataUnavailableError(url, "shape mismatch") from exc


class MetadataResolver:
    """tokenURI -> gateway URL -> metadata document, bounded by a semaphore."""

    def __init__(
        self,
        reader: LedgerReaderProtocol,
        client: MetadataClient,
        concurrency: int | None = None,
    ) -> None:
        self._reader = reader
        self._client = client
        self._limit = asyncio.Semaphore(concurrency or settings.METADATA_CONCURRENCY)

    async def resolve_for(self, nft: str, token_id: int) -> TokenMetadata | None:
        async with self._limit:
            try:
                locator = await self._reader.token_uri(nft, token_id)
                return await self._client.fetch(resolve(locator))
            except (LedgerError, MetadataUnavailableError) as exc:
                logger.warning("Metadata unavailable for %s#%s: %s", nft, token_id, exc)
                return None
            except Exception:
                # Any other failure still degrades only this item
                logger.exception("Unexpected metadata failure for %s#%s", nft, token_id)
                return None
