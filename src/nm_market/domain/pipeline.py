"""Filter/sort pipeline over a catalog snapshot.

Pure and total: never mutates items, never raises for any catalog content,
and returns a new list referencing the same MarketItem objects.

Stage order: query -> category -> status -> price range -> network -> sort.
Price comparisons and ordering use exact int wei; no float conversion.
"""

from collections.abc import Iterable, Sequence

from config.settings import settings
from src.nm_common.enums import Network, SortKey
from src.nm_common.errors import InvalidFilterError
from src.nm_common.wei import format_ether, parse_ether
from src.nm_market.domain.models import FilterState, MarketItem, PriceRange, StatusFlags


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def _price_text(item: MarketItem) -> str | None:
    price = item.effective_price
    return format_ether(price) if price is not None else None


def matches_query(item: MarketItem, query: str) -> bool:
    """Case-insensitive match on name, exact token id, seller, category, or price text."""
    q = query.strip().lower()
    if not q:
        return True
    if q in item.name.lower():
        return True
    if q == str(item.token_id):
        return True
    if item.seller and q in item.seller.lower():
        return True
    if q in item.category.lower():
        return True
    price_text = _price_text(item)
    return price_text is not None and q in price_text


def matches_category(item: MarketItem, category: str | None) -> bool:
    if not category:
        return True
    return item.category.lower() == category.strip().lower()


def matches_status(item: MarketItem, status: StatusFlags) -> bool:
    if status.buy_now and item.is_listing:
        return True
    return status.on_auction and item.is_auction


def matches_price(item: MarketItem, price_range: PriceRange) -> bool:
    if not price_range.is_bounded:
        return True
    price = item.effective_price
    if price is None:
        return False
    low = price_range.min if price_range.min is not None else 0
    if price < low:
        return False
    return price_range.max is None or price <= price_range.max


def sort_items(items: list[MarketItem], sort_key: SortKey) -> list[MarketItem]:
    """Stable sort; cross-role index ties keep catalog order."""
    if sort_key == SortKey.PRICE_ASC:
        return sorted(items, key=lambda i: i.effective_price or 0)
    if sort_key == SortKey.PRICE_DESC:
        return sorted(items, key=lambda i: -(i.effective_price or 0))
    return sorted(items, key=lambda i: -i.sequence_index)


def apply(
    items: Iterable[MarketItem],
    filters: FilterState,
    sort_key: SortKey = SortKey.RECENT,
) -> list[MarketItem]:
    candidates = list(items)

    if not (filters.status.buy_now or filters.status.on_auction):
        return []
    if not filters.networks:
        return []

    candidates = [i for i in candidates if matches_query(i, filters.query)]
    candidates = [i for i in candidates if matches_category(i, filters.category)]
    candidates = [i for i in candidates if matches_status(i, filters.status)]
    candidates = [i for i in candidates if matches_price(i, filters.price_range)]

    return sort_items(candidates, sort_key)


# ---------------------------------------------------------------------------
# Query-parameter reconstruction
# ---------------------------------------------------------------------------


def _parse_bound(raw: str | None, name: str) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        wei = parse_ether(raw)
    except ValueError as exc:
        raise InvalidFilterError(f"{name}: {exc}") from None
    if wei < 0:
        raise InvalidFilterError(f"{name} must not be negative")
    return wei


def _parse_networks(raw: Sequence[str] | None) -> frozenset[Network]:
    names = settings.DEFAULT_NETWORKS if raw is None else raw
    out: set[Network] = set()
    for name in names:
        name = name.strip().lower()
        if not name:
            continue
        try:
            out.add(Network(name))
        except ValueError:
            raise InvalidFilterError(f"unknown network {name!r}") from None
    return frozenset(out)


def filter_state_from_params(
    search: str | None = None,
    category: str | None = None,
    buy_now: bool = True,
    on_auction: bool = True,
    min_price: str | None = None,
    max_price: str | None = None,
    networks: Sequence[str] | None = None,
) -> FilterState:
    """Build a FilterState from navigation/query parameters.

    Price bounds are display units (ether) and are converted exactly to wei.
    """
    return FilterState(
        query=(search or "").strip().lower(),
        category=(category or "").strip().lower() or None,
        status=StatusFlags(buy_now=buy_now, on_auction=on_auction),
        price_range=PriceRange(
            min=_parse_bound(min_price, "min_price"),
            max=_parse_bound(max_price, "max_price"),
        ),
        networks=_parse_networks(networks),
    )
