# Overview: Service-layer operations for dashboard metrics and distribution reports.

from __future__ import annotations

import math

from sqlalchemy import and_, case, func

from ..extensions import db
from ..models import Location, Product, StockLevel
from ..validation import FilterDescriptor
from .inventory_query_service import count_filtered_products

LOW_STOCK_WARNING_THRESHOLD = 50

# A product needs a coefficient-of-variation score above this to be reported.
PRODUCT_IMBALANCE_MIN_SCORE = 0.3


def _product_count_status(count: int) -> str:
    if count == 0:
        return "critical"
    if count < 10:
        return "warning"
    return "normal"


def _low_stock_status(count: int) -> str:
    if count >= 50:
        return "critical"
    if count >= 20:
        return "warning"
    return "normal"


def _out_of_stock_status(count: int) -> str:
    if count >= 10:
        return "critical"
    if count >= 5:
        return "warning"
    return "normal"


def _stock_value_status(value_cents: int) -> str:
    if value_cents == 0:
        return "critical"
    if value_cents < 1_000_000:
        return "warning"
    return "normal"


def _stock_value(warehouse_id: int | None) -> tuple[int, int]:
    """(total value in cents over costed rows, active products with an uncosted row)."""
    value_query = (
        db.session.query(
            func.coalesce(func.sum(StockLevel.quantity_on_hand * StockLevel.unit_cost_cents), 0)
        )
        .join(Product, Product.id == StockLevel.product_id)
        .filter(Product.is_active.is_(True), StockLevel.unit_cost_cents > 0)
    )
    excluded_query = (
        db.session.query(func.count(func.distinct(Product.id)))
        .join(StockLevel, StockLevel.product_id == Product.id)
        .filter(Product.is_active.is_(True), StockLevel.unit_cost_cents <= 0)
    )
    if warehouse_id is not None:
        value_query = value_query.filter(StockLevel.location_id == warehouse_id)
        excluded_query = excluded_query.filter(StockLevel.location_id == warehouse_id)

    return int(value_query.scalar() or 0), int(excluded_query.scalar() or 0)


def summary_metrics(warehouse_id: int | None = None) -> dict:
    """
    Dashboard metric cards.

    Product counts go through the listing's count query with the matching
    stock_filter, so a card always equals the total of the list it links to.
    """
    total_products = count_filtered_products(FilterDescriptor(warehouse_id=warehouse_id))
    low_stock = count_filtered_products(
        FilterDescriptor(warehouse_id=warehouse_id, stock_filter="low_stock")
    )
    out_of_stock = count_filtered_products(
        FilterDescriptor(warehouse_id=warehouse_id, stock_filter="out_of_stock")
    )
    value_cents, excluded = _stock_value(warehouse_id)

    return {
        "warehouse_id": warehouse_id,
        "total_products": {
            "value": total_products,
            "status": _product_count_status(total_products),
        },
        "low_stock": {
            "value": low_stock,
            "status": _low_stock_status(low_stock),
            "threshold": LOW_STOCK_WARNING_THRESHOLD,
        },
        "out_of_stock": {
            "value": out_of_stock,
            "status": _out_of_stock_status(out_of_stock),
        },
        "total_stock_value": {
            "value_cents": value_cents,
            "currency": "USD",
            "status": _stock_value_status(value_cents),
            "excluded_products": excluded,
        },
    }


def _equalizing_transfers(locations: list[dict], total_stock: int) -> list[dict]:
    """
    Moves that bring each location toward an equal share of total_stock.

    Largest holders give first; each move is capped by what the source still
    has in excess and what the target still lacks.
    """
    ideal = total_stock // len(locations)
    ordered = sorted(locations, key=lambda loc: -loc["quantity"])

    excess = [[loc, loc["quantity"] - ideal] for loc in ordered if loc["quantity"] > ideal]
    deficit = [[loc, ideal - loc["quantity"]] for loc in ordered if loc["quantity"] < ideal]

    transfers = []
    for source in excess:
        for target in deficit:
            quantity = min(source[1], target[1])
            if quantity <= 0:
                continue
            transfers.append({
                "from_warehouse_id": source[0]["warehouse_id"],
                "to_warehouse_id": target[0]["warehouse_id"],
                "suggested_quantity": quantity,
            })
            source[1] -= quantity
            target[1] -= quantity
    return transfers


def product_distribution_imbalances(
    *,
    product_id: int | None = None,
    category: str | None = None,
) -> list[dict]:
    """
    Products stocked in two or more active warehouses whose split is uneven.

    score = min(cv / 2, 1) where cv is the coefficient of variation of the
    per-warehouse share of the product's stock. Only scores above 0.3 are
    reported, most imbalanced first.
    """
    query = (
        db.session.query(
            Product.id.label("product_id"),
            Product.sku,
            Product.name.label("product_name"),
            Location.id.label("warehouse_id"),
            Location.name.label("warehouse_name"),
            StockLevel.quantity_on_hand,
        )
        .join(StockLevel, StockLevel.product_id == Product.id)
        .join(Location, Location.id == StockLevel.location_id)
        .filter(
            Product.is_active.is_(True),
            Location.is_active.is_(True),
            StockLevel.quantity_on_hand > 0,
        )
    )
    if product_id is not None:
        query = query.filter(Product.id == product_id)
    if category:
        query = query.filter(Product.category == category)

    rows = query.order_by(Product.name.asc(), Product.id.asc(), Location.name.asc()).all()

    products: dict[int, dict] = {}
    for row in rows:
        entry = products.setdefault(row.product_id, {
            "product_id": row.product_id,
            "sku": row.sku,
            "name": row.product_name,
            "total_stock": 0,
            "locations": [],
        })
        entry["total_stock"] += row.quantity_on_hand
        entry["locations"].append({
            "warehouse_id": row.warehouse_id,
            "warehouse_name": row.warehouse_name,
            "quantity": row.quantity_on_hand,
        })

    imbalances = []
    for entry in products.values():
        locations = entry["locations"]
        if len(locations) < 2:
            continue

        total = entry["total_stock"]
        for loc in locations:
            loc["percentage"] = round(loc["quantity"] / total * 100, 2)

        shares = [loc["quantity"] / total * 100 for loc in locations]
        mean = sum(shares) / len(shares)
        variance = sum((s - mean) ** 2 for s in shares) / len(shares)
        cv = math.sqrt(variance) / mean if mean > 0 else 0.0
        score = min(cv / 2, 1.0)

        if score <= PRODUCT_IMBALANCE_MIN_SCORE:
            continue

        entry["imbalance_score"] = round(score, 4)
        entry["suggested_transfers"] = _equalizing_transfers(locations, total)
        imbalances.append(entry)

    return sorted(imbalances, key=lambda e: -e["imbalance_score"])


def warehouse_summary_stats(warehouse_id: int | None = None) -> dict:
    locations_query = db.session.query(func.count(Location.id)).filter(Location.is_active.is_(True))

    stock_query = (
        db.session.query(
            func.count(func.distinct(Product.id)).label("total_products"),
            func.coalesce(
                func.sum(StockLevel.quantity_on_hand * StockLevel.unit_cost_cents), 0
            ).label("total_value_cents"),
            func.count(
                func.distinct(case((StockLevel.quantity_on_hand > 0, StockLevel.location_id)))
            ).label("warehouses_with_inventory"),
        )
        .select_from(StockLevel)
        .join(Product, Product.id == StockLevel.product_id)
        .join(Location, Location.id == StockLevel.location_id)
        .filter(Product.is_active.is_(True), Location.is_active.is_(True))
    )

    if warehouse_id is not None:
        locations_query = locations_query.filter(Location.id == warehouse_id)
        stock_query = stock_query.filter(Location.id == warehouse_id)

    total_warehouses = int(locations_query.scalar() or 0)
    row = stock_query.one()
    total_value = int(row.total_value_cents or 0)

    return {
        "total_warehouses": total_warehouses,
        "total_products": int(row.total_products or 0),
        "total_value_cents": total_value,
        "average_value_per_warehouse_cents": (
            round(total_value / total_warehouses) if total_warehouses > 0 else 0
        ),
        "warehouses_with_inventory": int(row.warehouses_with_inventory or 0),
    }


def low_diversity_warehouses(threshold: int = 10) -> list[dict]:
    """Active warehouses stocking fewer than `threshold` distinct active products."""
    product_count = func.count(func.distinct(Product.id))
    stocked_value = func.coalesce(
        func.sum(
            case(
                (Product.id.isnot(None), StockLevel.quantity_on_hand * StockLevel.unit_cost_cents),
                else_=0,
            )
        ),
        0,
    )

    rows = (
        db.session.query(
            Location.id.label("warehouse_id"),
            Location.name.label("warehouse_name"),
            product_count.label("product_count"),
            stocked_value.label("total_value_cents"),
        )
        .outerjoin(
            StockLevel,
            and_(StockLevel.location_id == Location.id, StockLevel.quantity_on_hand > 0),
        )
        .outerjoin(
            Product,
            and_(Product.id == StockLevel.product_id, Product.is_active.is_(True)),
        )
        .filter(Location.is_active.is_(True))
        .group_by(Location.id, Location.name)
        .having(product_count < threshold)
        .order_by(product_count.asc(), Location.name.asc())
        .all()
    )

    return [
        {
            "warehouse_id": row.warehouse_id,
            "warehouse_name": row.warehouse_name,
            "product_count": int(row.product_count or 0),
            "total_value_cents": int(row.total_value_cents or 0),
        }
        for row in rows
    ]
