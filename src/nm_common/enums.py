"""Global enums — values are the wire format used in API payloads and query params."""

from enum import Enum


class MarketRole(str, Enum):
    """Mutually exclusive market role; decides which derived fields are valid."""
    UNLISTED = "UNLISTED"
    DIRECT_LISTING = "DIRECT_LISTING"
    AUCTION = "AUCTION"


class SortKey(str, Enum):
    RECENT = "recent"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


class Network(str, Enum):
    SEPOLIA = "sepolia"
    LOCALHOST = "localhost"


class ClockPhase(str, Enum):
    COUNTING = "COUNTING"
    ENDED = "ENDED"


class ActionKind(str, Enum):
    """Ledger write actions; the value doubles as the stable notice id."""
    BUY = "buy"
    LIST = "list"
    CANCEL = "cancel"
    START_AUCTION = "auction"
    BID = "bid"
    END_AUCTION = "end"


class NoticeLevel(str, Enum):
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class LoyaltyRank(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"
