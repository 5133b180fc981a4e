# Overview: Service-layer operations for warehouse distribution; builds per-warehouse aggregates and runs the analysis.

"""
Warehouse distribution.

Builds one entry per in-scope warehouse from the stock rows, then feeds the
frozen WarehouseAggregate values to the analyzer and the transfer engine.

PER-WAREHOUSE FIGURES:
- products / total_products / total_value(_cents): rows with stock on hand
  whose value meets min_value (when given)
- out_of_stock_count: rows with nothing on hand
- low_stock_count: rows below the location reorder point (override, else the
  product reorder point)
The low/out counts are health indicators and ignore min_value.

Every active warehouse in scope is listed, including empty ones.
"""
from __future__ import annotations

from dataclasses import replace

from flask import current_app

from ..extensions import db
from ..models import Location, Product, StockLevel
from ..validation import DistributionFilters, NotFoundError, cents_to_amount
from .distribution_analysis import WarehouseAggregate, analyze_imbalance, classify_capacity
from .stock_status import LOW_STOCK, OUT_OF_STOCK, classify_stock_status
from .transfer_service import suggest_transfers
from .warehouse_service import require_warehouse


def _scope_locations(filters: DistributionFilters) -> list[Location]:
    query = db.session.query(Location).filter(Location.is_active.is_(True))
    if filters.warehouse_id is not None:
        query = query.filter(Location.id == filters.warehouse_id)
    return query.order_by(Location.name.asc(), Location.id.asc()).all()


def _stock_rows(filters: DistributionFilters, location_ids: list[int]):
    query = (
        db.session.query(
            StockLevel.location_id,
            StockLevel.quantity_on_hand,
            StockLevel.quantity_reserved,
            StockLevel.unit_cost_cents,
            StockLevel.reorder_point.label("location_reorder_point"),
            Product.id.label("product_id"),
            Product.sku,
            Product.name.label("product_name"),
            Product.category,
            Product.reorder_point.label("product_reorder_point"),
        )
        .join(Product, Product.id == StockLevel.product_id)
        .filter(
            Product.is_active.is_(True),
            StockLevel.location_id.in_(location_ids),
        )
    )

    if filters.product_id is not None:
        query = query.filter(Product.id == filters.product_id)

    if filters.category:
        query = query.filter(Product.category == filters.category)

    return query.order_by(Product.name.asc(), Product.id.asc()).all()


def build_warehouse_breakdown(filters: DistributionFilters) -> list[dict]:
    """Per-warehouse entries (ordered by warehouse name) with their product rows."""
    locations = _scope_locations(filters)
    if not locations:
        return []

    breakdown: dict[int, dict] = {
        loc.id: {
            "warehouse_id": loc.id,
            "warehouse_name": loc.name,
            "warehouse_address": loc.formatted_address,
            "total_products": 0,
            "total_value_cents": 0,
            "total_value": 0.0,
            "low_stock_count": 0,
            "out_of_stock_count": 0,
            "products": [],
        }
        for loc in locations
    }

    over_reserved = 0
    for row in _stock_rows(filters, list(breakdown)):
        entry = breakdown[row.location_id]
        quantity = int(row.quantity_on_hand or 0)
        reserved = int(row.quantity_reserved or 0)
        unit_cost = int(row.unit_cost_cents or 0)

        if reserved > quantity:
            over_reserved += 1

        reorder_point = row.location_reorder_point
        if reorder_point is None:
            reorder_point = row.product_reorder_point or 0

        status = classify_stock_status(quantity, reorder_point)
        if status == OUT_OF_STOCK:
            entry["out_of_stock_count"] += 1
            continue
        if status == LOW_STOCK:
            entry["low_stock_count"] += 1

        value = quantity * unit_cost
        if filters.min_value_cents is not None and value < filters.min_value_cents:
            continue

        entry["products"].append({
            "product_id": row.product_id,
            "sku": row.sku,
            "name": row.product_name,
            "category": row.category,
            "quantity": quantity,
            "quantity_available": max(quantity - reserved, 0),
            "unit_cost_cents": unit_cost,
            "total_value_cents": value,
            "stock_status": status,
        })
        entry["total_value_cents"] += value

    for entry in breakdown.values():
        entry["total_products"] = len(entry["products"])
        entry["total_value"] = cents_to_amount(entry["total_value_cents"])

    if over_reserved:
        current_app.logger.warning(
            "Distribution: %s stock rows have quantity_reserved above quantity_on_hand",
            over_reserved,
        )

    return list(breakdown.values())


def to_aggregate(entry: dict) -> WarehouseAggregate:
    return WarehouseAggregate(
        warehouse_id=entry["warehouse_id"],
        warehouse_name=entry["warehouse_name"],
        total_products=entry["total_products"],
        total_value_cents=entry["total_value_cents"],
        low_stock_count=entry["low_stock_count"],
        out_of_stock_count=entry["out_of_stock_count"],
    )


def get_warehouse_distribution(filters: DistributionFilters | None = None) -> dict:
    """
    Distribution operation.

    Returns:
        {
            "warehouses": [...],            # per-warehouse entries with products
            "transfer_suggestions": [...],  # ordered high -> low priority
            "capacity": [...],              # one per warehouse
            "imbalance": {"score", "level"},
        }
    """
    filters = filters or DistributionFilters()

    warehouses = build_warehouse_breakdown(filters)
    aggregates = [to_aggregate(w) for w in warehouses]

    suggestions = suggest_transfers(aggregates)
    capacity = classify_capacity(aggregates)
    imbalance = analyze_imbalance(aggregates)

    current_app.logger.info(
        "Distribution analysed: %s warehouses, imbalance %.3f (%s), %s transfer suggestions",
        len(aggregates),
        imbalance.score,
        imbalance.level,
        len(suggestions),
    )

    return {
        "warehouses": warehouses,
        "transfer_suggestions": [s.to_dict() for s in suggestions],
        "capacity": [c.to_dict() for c in capacity],
        "imbalance": imbalance.to_dict(),
    }


def get_warehouse_products(warehouse_id: int, filters: DistributionFilters | None = None) -> dict:
    """
    One warehouse entry (products and counts) under the remaining filters.

    Raises:
        NotFoundError: unknown or inactive warehouse
    """
    warehouse = require_warehouse(warehouse_id)
    if not warehouse.is_active:
        raise NotFoundError("Warehouse not found")

    scoped = replace(filters or DistributionFilters(), warehouse_id=warehouse_id)
    entries = build_warehouse_breakdown(scoped)
    return entries[0]
