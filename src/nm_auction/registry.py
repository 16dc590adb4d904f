"""ClockRegistry — one running AuctionClock task per watched auction item.

Owned by a MarketSession. A fresh catalog load supersedes every clock; the
next view re-watches whatever auctions the new catalog still shows.
"""

import asyncio
import logging
from collections.abc import Callable

from src.nm_auction.clock import AuctionClock, AuctionClockState
from src.nm_common.datetime_utils import unix_now
from src.nm_market.domain.models import MarketItem

logger = logging.getLogger(__name__)

ClockKey = tuple[str, int]


def clock_key(nft_address: str, token_id: int) -> ClockKey:
    return (nft_address.lower(), token_id)


class ClockRegistry:
    def __init__(
        self,
        now: Callable[[], float] = unix_now,
        interval: float | None = None,
    ) -> None:
        self._now = now
        self._interval = interval
        self._clocks: dict[ClockKey, AuctionClock] = {}
        self._tasks: dict[ClockKey, asyncio.Task[AuctionClockState]] = {}

    def __len__(self) -> int:
        return len(self._clocks)

    def __contains__(self, key: object) -> bool:
        return key in self._clocks

    def watch(self, item: MarketItem) -> AuctionClockState | None:
        """Start a clock for an auction item; a second call is a no-op.

        Non-auction items are ignored and return None.
        """
        if not item.is_auction or item.end_time is None:
            return None
        key = clock_key(item.nft_address, item.token_id)
        clock = self._clocks.get(key)
        if clock is not None:
            return clock.state

        clock = AuctionClock(item.end_time, now=self._now)
        self._clocks[key] = clock
        if not clock.state.has_ended:
            self._tasks[key] = asyncio.create_task(
                clock.run(on_ended=lambda _state, k=key: self._on_ended(k), interval=self._interval),
                name=f"auction-clock-{key[0]}-{key[1]}",
            )
        return clock.state

    def _on_ended(self, key: ClockKey) -> None:
        logger.info("Auction %s#%s ended; settlement available", key[0], key[1])
        self._tasks.pop(key, None)

    def state_of(self, key: ClockKey) -> AuctionClockState | None:
        clock = self._clocks.get(key)
        return clock.state if clock is not None else None

    def release(self, key: ClockKey) -> bool:
        """Stop and forget one clock (item left the view)."""
        task = self._tasks.pop(key, None)
        if task is not None:
            task.cancel()
        return self._clocks.pop(key, None) is not None

    def supersede(self) -> None:
        """Stop every clock; called after a fresh catalog commit."""
        if self._clocks:
            logger.debug("Superseding %d auction clocks", len(self._clocks))
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
        self._clocks.clear()

    async def close(self) -> None:
        tasks = list(self._tasks.values())
        self.supersede()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
