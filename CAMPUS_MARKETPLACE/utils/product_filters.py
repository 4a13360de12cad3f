from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
from schemas.product_schema import ListingQuery, SortOrder
from utils.parsing import parse_leading_int

# bucket key -> (min, max); max None = no upper bound
PRICE_RANGE_OPTIONS = {
    "all":       (0, None),
    "0":         (0, 0),
    "1-100":     (1, 100),
    "100-500":   (100, 500),
    "500-1000":  (500, 1000),
    "1000-5000": (1000, 5000),
    "5000+":     (5000, None),
}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _resolve_field(listing: Any, path: str) -> Any:
    value = listing
    for key in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(key)
        else:
            value = getattr(value, key, None)
    return value


def _as_plain(value: Any) -> Any:
    # str-valued enums compare and print as their value
    return getattr(value, "value", value)


def listing_price(listing: Any) -> int:
    price = parse_leading_int(_as_plain(_resolve_field(listing, "price")))
    return price if price is not None else 0


def listing_timestamp(listing: Any) -> Optional[float]:
    value = _resolve_field(listing, "created_at")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH).total_seconds()


def _newest_first_key(listing: Any) -> tuple:
    # unparseable dates sort ahead of every valid one
    timestamp = listing_timestamp(listing)
    if timestamp is None:
        return (0, 0.0)
    return (1, -timestamp)


def _matches_search(listing: Any, needle: str, fields: List[str]) -> bool:
    for field in fields:
        value = _as_plain(_resolve_field(listing, field))
        if value is not None and needle in str(value).casefold():
            return True
    return False


def filter_listings(listings: Iterable[Any], query: ListingQuery) -> List[Any]:
    filtered = list(listings)

    needle = (query.search_query or "").strip().casefold()
    if needle:
        filtered = [p for p in filtered if _matches_search(p, needle, query.search_fields)]

    # no boxes checked means show everything
    if query.selected_categories:
        categories = set(query.selected_categories)
        filtered = [p for p in filtered if _as_plain(_resolve_field(p, "category")) in categories]

    if query.selected_branches:
        branches = set(query.selected_branches)
        filtered = [
            p for p in filtered
            if not _resolve_field(p, "branch") or _resolve_field(p, "branch") in branches
        ]

    if query.selected_price_range and query.selected_price_range != "all":
        bounds: Optional[tuple] = PRICE_RANGE_OPTIONS.get(query.selected_price_range)
        if bounds is not None:
            low, high = bounds
            filtered = [
                p for p in filtered
                if listing_price(p) >= low and (high is None or listing_price(p) <= high)
            ]

    if query.show_free_only:
        filtered = [p for p in filtered if listing_price(p) == 0]

    if query.sort_order == SortOrder.PRICE_DESC:
        filtered.sort(key=listing_price, reverse=True)
    elif query.sort_order == SortOrder.PRICE_ASC:
        filtered.sort(key=listing_price)
    elif query.sort_order == SortOrder.NEWEST:
        filtered.sort(key=_newest_first_key)

    return filtered


def active_filter_count(query: ListingQuery) -> int:
    return (
        len(query.selected_categories)
        + len(query.selected_branches)
        + (1 if query.selected_price_range and query.selected_price_range != "all" else 0)
        + (1 if query.show_free_only else 0)
    )
