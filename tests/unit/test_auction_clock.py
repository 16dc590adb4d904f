"""Unit tests for the auction countdown state machine and its registry."""

import asyncio

import pytest

from src.nm_auction.clock import ENDED_LABEL, AuctionClock, format_remaining
from src.nm_auction.registry import ClockRegistry, clock_key
from src.nm_common.enums import ClockPhase, MarketRole
from src.nm_market.domain.models import MarketItem

T0 = 1_700_000_000.0


class SteppingTime:
    """Returns T0 on the first call, then advances by `step` on every later call."""

    def __init__(self, start: float = T0, step: float = 1.01) -> None:
        self.t = start
        self.step = step
        self._first = True

    def __call__(self) -> float:
        if self._first:
            self._first = False
        else:
            self.t += self.step
        return self.t


class FixedTime:
    def __init__(self, t: float = T0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


def _auction_item(end_time: int, token_id: int = 9) -> MarketItem:
    return MarketItem(
        token_id=token_id,
        nft_address="0xNft",
        market_role=MarketRole.AUCTION,
        auction_id=0,
        min_bid=10**18,
        highest_bid=0,
        highest_bidder="0x0",
        end_time=end_time,
        auction_active=True,
    )


class TestFormatRemaining:
    @pytest.mark.parametrize(
        "seconds,label",
        [
            (0, "0h 0m 0s"),
            (59.9, "0h 0m 59s"),
            (3600, "1h 0m 0s"),
            (3661, "1h 1m 1s"),
            (86399, "23h 59m 59s"),
            (86400, "1d 0h 0m"),
            (90061, "1d 1h 1m"),
            (3 * 86400 + 7200 + 300 + 9, "3d 2h 5m"),
        ],
    )
    def test_labels(self, seconds: float, label: str) -> None:
        assert format_remaining(seconds) == label


class TestAuctionClock:
    def test_counting_initially(self) -> None:
        clock = AuctionClock(int(T0) + 3600, now=FixedTime())
        assert clock.state.phase == ClockPhase.COUNTING
        assert clock.state.label == "1h 0m 0s"
        assert not clock.state.has_ended

    def test_zero_remaining_still_counting(self) -> None:
        clock = AuctionClock(int(T0), now=FixedTime())
        assert not clock.tick().has_ended

    def test_past_end_time_is_ended(self) -> None:
        clock = AuctionClock(int(T0) - 1, now=FixedTime())
        assert clock.state.has_ended
        assert clock.state.label == ENDED_LABEL

    def test_ends_within_five_ticks_and_stays_ended(self) -> None:
        clock = AuctionClock(int(T0) + 5, now=SteppingTime())
        states = [clock.tick() for _ in range(5)]
        assert states[-1].has_ended
        assert all(not s.has_ended for s in states[:-1])
        for _ in range(10):
            assert clock.tick().label == ENDED_LABEL

    def test_whole_second_ticks_end_on_sixth(self) -> None:
        clock = AuctionClock(int(T0) + 5, now=SteppingTime(step=1.0))
        states = [clock.tick() for _ in range(6)]
        assert not states[4].has_ended
        assert states[5].has_ended

    def test_ended_is_terminal_even_if_time_goes_back(self) -> None:
        now = FixedTime(T0 + 10)
        clock = AuctionClock(int(T0), now=now)
        assert clock.state.has_ended
        now.t = T0 - 100
        assert clock.tick().has_ended

    @pytest.mark.asyncio
    async def test_run_stops_after_end(self) -> None:
        clock = AuctionClock(int(T0) + 5, now=SteppingTime())
        seen = []
        ended = []
        final = await clock.run(on_tick=seen.append, on_ended=ended.append, interval=0)
        assert final.has_ended
        assert len(seen) == 5
        assert ended == [final]

    @pytest.mark.asyncio
    async def test_run_awaits_async_on_ended(self) -> None:
        clock = AuctionClock(int(T0) + 1, now=SteppingTime())
        flag = asyncio.Event()

        async def on_ended(_state) -> None:
            flag.set()

        await clock.run(on_ended=on_ended, interval=0)
        assert flag.is_set()

    def test_clock_does_not_touch_item(self) -> None:
        item = _auction_item(int(T0) - 5)
        clock = AuctionClock(item.end_time, now=FixedTime())
        clock.tick()
        assert item.auction_active is True


class TestClockRegistry:
    @pytest.mark.asyncio
    async def test_ignores_non_auctions(self) -> None:
        registry = ClockRegistry(now=FixedTime())
        item = MarketItem(token_id=1, nft_address="0x", market_role=MarketRole.UNLISTED)
        assert registry.watch(item) is None
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_watch_is_idempotent(self) -> None:
        registry = ClockRegistry(now=FixedTime())
        item = _auction_item(int(T0) + 3600)
        first = registry.watch(item)
        second = registry.watch(item)
        assert first == second
        assert len(registry) == 1
        await registry.close()

    @pytest.mark.asyncio
    async def test_release(self) -> None:
        registry = ClockRegistry(now=FixedTime())
        item = _auction_item(int(T0) + 3600)
        registry.watch(item)
        key = clock_key("0xNFT", 9)
        assert key in registry
        assert registry.release(key)
        assert registry.state_of(key) is None
        assert not registry.release(key)

    @pytest.mark.asyncio
    async def test_supersede_clears_everything(self) -> None:
        registry = ClockRegistry(now=FixedTime())
        registry.watch(_auction_item(int(T0) + 60, token_id=1))
        registry.watch(_auction_item(int(T0) + 60, token_id=2))
        registry.supersede()
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_already_ended_auction(self) -> None:
        registry = ClockRegistry(now=FixedTime())
        state = registry.watch(_auction_item(int(T0) - 1))
        assert state.has_ended
        await registry.close()

    @pytest.mark.asyncio
    async def test_running_clock_reaches_ended(self) -> None:
        registry = ClockRegistry(now=SteppingTime(), interval=0)
        registry.watch(_auction_item(int(T0) + 3))
        key = clock_key("0xNft", 9)
        for _ in range(50):
            if registry.state_of(key).has_ended:
                break
            await asyncio.sleep(0)
        assert registry.state_of(key).has_ended
        await registry.close()
