"""Unit tests for action precondition rules."""

import pytest

from src.nm_actions.rules.amount import check_positive_amount, check_positive_duration
from src.nm_actions.rules.auction_state import (
    check_bid_above_current,
    check_open_for_bids,
    check_ready_to_settle,
    has_ended,
)
from src.nm_actions.rules.ownership import check_is_seller, check_not_seller, same_account
from src.nm_actions.rules.wallet import check_wallet_connected
from src.nm_common.enums import MarketRole
from src.nm_common.errors import ActionValidationError, WalletNotConnectedError
from src.nm_market.domain.models import MarketItem

ETH = 10**18
END = 1_700_000_000


def _auction(active: bool = True, highest_bid: int = 0) -> MarketItem:
    return MarketItem(
        token_id=9,
        nft_address="0xNft",
        market_role=MarketRole.AUCTION,
        seller="0xSeller",
        auction_id=0,
        min_bid=ETH,
        highest_bid=highest_bid,
        highest_bidder="0x0",
        end_time=END,
        auction_active=active,
    )


class TestWallet:
    def test_connected(self) -> None:
        assert check_wallet_connected(" 0xabc ") == "0xabc"

    @pytest.mark.parametrize("account", [None, "", "   "])
    def test_not_connected(self, account) -> None:
        with pytest.raises(WalletNotConnectedError):
            check_wallet_connected(account)


class TestAmount:
    def test_valid(self) -> None:
        assert check_positive_amount("0.25", "bad") == ETH // 4

    @pytest.mark.parametrize("text", [None, "", "0", "-1", "abc", "0.0000000000000000001"])
    def test_invalid(self, text) -> None:
        with pytest.raises(ActionValidationError) as exc_info:
            check_positive_amount(text, "Please enter a valid price")
        assert exc_info.value.message == "Please enter a valid price"

    def test_duration(self) -> None:
        assert check_positive_duration(3600) == 3600

    @pytest.mark.parametrize("seconds", [0, -5, 2**53, True])
    def test_invalid_duration(self, seconds) -> None:
        with pytest.raises(ActionValidationError):
            check_positive_duration(seconds)


class TestOwnership:
    def test_same_account_case_insensitive(self) -> None:
        assert same_account("0xABC", "0xabc")
        assert not same_account("0xabc", None)

    def test_not_seller(self) -> None:
        check_not_seller("0xBuyer", "0xSeller", "own")
        with pytest.raises(ActionValidationError, match="own"):
            check_not_seller("0xSELLER", "0xseller", "own")

    def test_is_seller(self) -> None:
        check_is_seller("0xseller", "0xSeller")
        with pytest.raises(ActionValidationError) as exc_info:
            check_is_seller("0xOther", "0xSeller")
        assert exc_info.value.http_status == 403


class TestAuctionState:
    def test_has_ended_is_strict(self) -> None:
        assert not has_ended(_auction(), END)
        assert has_ended(_auction(), END + 1)

    def test_open_for_bids(self) -> None:
        check_open_for_bids(_auction(), END - 10)

    def test_bid_after_end(self) -> None:
        with pytest.raises(ActionValidationError, match="ended"):
            check_open_for_bids(_auction(), END + 1)

    def test_bid_on_inactive(self) -> None:
        with pytest.raises(ActionValidationError, match="no longer active"):
            check_open_for_bids(_auction(active=False), END - 10)

    def test_settle_requires_end(self) -> None:
        with pytest.raises(ActionValidationError, match="not ended"):
            check_ready_to_settle(_auction(), END)
        check_ready_to_settle(_auction(), END + 1)

    def test_settle_requires_active(self) -> None:
        with pytest.raises(ActionValidationError, match="already settled"):
            check_ready_to_settle(_auction(active=False), END + 1)

    def test_bid_must_exceed_min_bid(self) -> None:
        with pytest.raises(ActionValidationError):
            check_bid_above_current(_auction(), ETH)
        check_bid_above_current(_auction(), ETH + 1)

    def test_bid_must_exceed_highest_bid(self) -> None:
        item = _auction(highest_bid=2 * ETH)
        with pytest.raises(ActionValidationError):
            check_bid_above_current(item, 2 * ETH)
        check_bid_above_current(item, 2 * ETH + 1)
