from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Mapping


STOCK_FILTERS = ("all", "in_stock", "low_stock", "out_of_stock")
SORT_ORDERS = ("asc", "desc")

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

# Largest accepted monetary filter: $999,999,999.99 (keeps cents within a 64-bit integer)
MAX_AMOUNT_CENTS = 99_999_999_999

_INT_RE = re.compile(r"[+-]?[0-9]+")


class ValidationError(ValueError):
    """
    400-level input problem.

    Carries every offending field so the caller can report them all at once:
    errors = {"limit": "Invalid limit parameter", ...}
    str(exc) is the first message, matching the single-message error body.
    """

    def __init__(self, errors: dict[str, str] | str):
        if isinstance(errors, str):
            errors = {"request": errors}
        self.errors = dict(errors)
        super().__init__(next(iter(self.errors.values()), "Validation failed"))


class NotFoundError(LookupError):
    """404-level lookup miss (product or warehouse id does not exist)."""


@dataclass(frozen=True)
class FilterDescriptor:
    search: str | None = None
    category: str | None = None
    price_min_cents: int | None = None
    price_max_cents: int | None = None
    warehouse_id: int | None = None
    stock_filter: str = "all"

    def to_dict(self) -> dict:
        """Echo of the applied filters for the listing response."""
        out: dict[str, Any] = {"stock_filter": self.stock_filter}
        if self.search is not None:
            out["search"] = self.search
        if self.category is not None:
            out["category"] = self.category
        if self.warehouse_id is not None:
            out["warehouse_id"] = self.warehouse_id
        if self.price_min_cents is not None:
            out["price_min_cents"] = self.price_min_cents
        if self.price_max_cents is not None:
            out["price_max_cents"] = self.price_max_cents
        return out


@dataclass(frozen=True)
class PaginationDescriptor:
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SortDescriptor:
    # Not validated here: unknown fields fall back to "name" in the query builder.
    sort_by: str = "name"
    sort_order: str = "asc"


@dataclass(frozen=True)
class DistributionFilters:
    warehouse_id: int | None = None
    product_id: int | None = None
    category: str | None = None
    min_value_cents: int | None = None


@dataclass
class _ErrorCollector:
    errors: dict[str, str] = field(default_factory=dict)

    def add(self, key: str, message: str) -> None:
        # First error per field wins
        self.errors.setdefault(key, message)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def _clean(args: Mapping[str, Any], key: str) -> str | None:
    """Empty / whitespace-only values are treated as absent."""
    raw = args.get(key)
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def _parse_int(raw: str) -> int | None:
    # Plain digits only: rejects "1.5", "1e3", "abc"
    if not _INT_RE.fullmatch(raw):
        return None
    return int(raw)


def _parse_money_cents(raw: str) -> int | None:
    """Currency amount ("12.5") -> cents (1250). None when not a finite number >= 0."""
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0 or amount > Decimal(MAX_AMOUNT_CENTS).scaleb(-2):
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_amount(cents: int | None) -> float:
    """Cents (1250) -> currency amount (12.5) for JSON output."""
    return round((cents or 0) / 100, 2)


def _positive_id(args: Mapping[str, Any], key: str, errors: _ErrorCollector) -> int | None:
    raw = _clean(args, key)
    if raw is None:
        return None
    value = _parse_int(raw)
    if value is None or value < 1:
        errors.add(key, f"Invalid {key} parameter")
        return None
    return value


def _money(args: Mapping[str, Any], key: str, errors: _ErrorCollector) -> int | None:
    raw = _clean(args, key)
    if raw is None:
        return None
    cents = _parse_money_cents(raw)
    if cents is None:
        errors.add(key, f"Invalid {key} parameter")
    return cents


def normalize_listing_params(
    args: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
) -> tuple[FilterDescriptor, PaginationDescriptor, SortDescriptor]:
    """
    Validates + normalizes raw (string-typed) product listing query params.

    Returns (filters, pagination, sort). Raises ValidationError listing every
    invalid field; nothing is queried when this raises.

    Rules:
    - empty strings are absent (a blank ?category= must not match nothing)
    - warehouse_id: positive integer
    - price_min / price_max: non-negative numbers in currency units -> cents,
      price_min <= price_max when both given
    - stock_filter: all | in_stock | low_stock | out_of_stock
    - page >= 1, limit in [1, min(max_limit, MAX_PAGE_LIMIT)]
    - sort_order: asc | desc (case-insensitive); sort_by is passed through
    """
    errors = _ErrorCollector()

    search = _clean(args, "search")
    category = _clean(args, "category")
    warehouse_id = _positive_id(args, "warehouse_id", errors)
    price_min = _money(args, "price_min", errors)
    price_max = _money(args, "price_max", errors)

    if price_min is not None and price_max is not None and price_min > price_max:
        errors.add("price_range", "price_min cannot exceed price_max")

    stock_filter = _clean(args, "stock_filter") or "all"
    if stock_filter not in STOCK_FILTERS:
        errors.add("stock_filter", f"Invalid stock_filter parameter: '{stock_filter}'")

    page = 1
    raw_page = _clean(args, "page")
    if raw_page is not None:
        parsed = _parse_int(raw_page)
        if parsed is None or parsed < 1:
            errors.add("page", "Invalid page parameter")
        else:
            page = parsed

    # Configuration may narrow the page size cap but never widen it
    max_limit = min(max_limit, MAX_PAGE_LIMIT)
    limit = min(max(default_limit, 1), max_limit)
    raw_limit = _clean(args, "limit")
    if raw_limit is not None:
        parsed = _parse_int(raw_limit)
        if parsed is None or not (1 <= parsed <= max_limit):
            errors.add("limit", "Invalid limit parameter")
        else:
            limit = parsed

    sort_by = _clean(args, "sort_by") or "name"
    sort_order = (_clean(args, "sort_order") or "asc").lower()
    if sort_order not in SORT_ORDERS:
        errors.add("sort_order", "Invalid sort_order parameter")

    errors.raise_if_any()

    return (
        FilterDescriptor(
            search=search,
            category=category,
            price_min_cents=price_min,
            price_max_cents=price_max,
            warehouse_id=warehouse_id,
            stock_filter=stock_filter,
        ),
        PaginationDescriptor(page=page, limit=limit),
        SortDescriptor(sort_by=sort_by, sort_order=sort_order),
    )


def normalize_distribution_params(args: Mapping[str, Any]) -> DistributionFilters:
    """Validates warehouse distribution query params (all optional)."""
    errors = _ErrorCollector()

    warehouse_id = _positive_id(args, "warehouse_id", errors)
    product_id = _positive_id(args, "product_id", errors)
    min_value = _money(args, "min_value", errors)

    errors.raise_if_any()

    return DistributionFilters(
        warehouse_id=warehouse_id,
        product_id=product_id,
        category=_clean(args, "category"),
        min_value_cents=min_value,
    )


def parse_positive_int(args: Mapping[str, Any], key: str, default: int | None = None) -> int | None:
    """Single optional positive-integer param (e.g. report warehouse_id, threshold)."""
    errors = _ErrorCollector()
    value = _positive_id(args, key, errors)
    errors.raise_if_any()
    return default if value is None else value
