"""AuctionClock — per-auction countdown state machine.

    COUNTING(remaining >= 0) --tick, remaining < 0--> ENDED

ENDED is terminal: further ticks return the same state. Only a fresh catalog
load (which creates a new clock) can show the auction again. The clock never
writes to the MarketItem; end_time/auction_active stay owned by the catalog.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from config.settings import settings
from src.nm_common.datetime_utils import unix_now
from src.nm_common.enums import ClockPhase

logger = logging.getLogger(__name__)

ENDED_LABEL = "Ended"

_DAY = 24 * 3600


@dataclass(frozen=True)
class AuctionClockState:
    remaining: float
    label: str
    phase: ClockPhase

    @property
    def has_ended(self) -> bool:
        return self.phase == ClockPhase.ENDED


def format_remaining(seconds: float) -> str:
    """'2d 3h 4m' when at least a day is left, else '3h 4m 5s' (whole seconds)."""
    total = max(0, math.floor(seconds))
    days = total // _DAY
    hours = (total % _DAY) // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    return f"{hours}h {minutes}m {secs}s"


class AuctionClock:
    def __init__(self, end_time: int, now: Callable[[], float] = unix_now) -> None:
        self.end_time = end_time
        self._now = now
        self._state = self._compute()

    @property
    def state(self) -> AuctionClockState:
        return self._state

    def _compute(self) -> AuctionClockState:
        remaining = self.end_time - self._now()
        if remaining < 0:
            return AuctionClockState(remaining=0.0, label=ENDED_LABEL, phase=ClockPhase.ENDED)
        return AuctionClockState(
            remaining=remaining,
            label=format_remaining(remaining),
            phase=ClockPhase.COUNTING,
        )

    def tick(self) -> AuctionClockState:
        if not self._state.has_ended:
            self._state = self._compute()
        return self._state

    async def run(
        self,
        on_tick: Callable[[AuctionClockState], None] | None = None,
        on_ended: Callable[[AuctionClockState], Awaitable[None] | None] | None = None,
        interval: float | None = None,
    ) -> AuctionClockState:
        """Tick every `interval` seconds until ENDED, then stop.

        Cancelling the task is the supported way to stop a clock early.
        """
        period = settings.AUCTION_TICK_SECONDS if interval is None else interval
        while not self._state.has_ended:
            await asyncio.sleep(period)
            state = self.tick()
            if on_tick is not None:
                on_tick(state)
        if on_ended is not None:
            result = on_ended(self._state)
            if asyncio.iscoroutine(result):
                await result
        return self._state
