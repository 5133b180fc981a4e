# backend/inventory_dashboard/services/product_service.py
"""
Product read operations: detail view and category list.

The detail view sums the same stock rows the listing aggregates and classifies
the total with the same function, so list and detail never disagree on status.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Location, Product, StockLevel
from ..validation import NotFoundError
from .stock_status import classify_stock_status


def get_product(product_id: int) -> Product | None:
    return db.session.query(Product).filter_by(id=product_id).first()


def _stock_breakdown(product: Product) -> list[dict]:
    rows = (
        db.session.query(StockLevel, Location)
        .join(Location, Location.id == StockLevel.location_id)
        .filter(StockLevel.product_id == product.id)
        .order_by(Location.name.asc(), Location.id.asc())
        .all()
    )
    return [
        {
            "warehouse_id": location.id,
            "warehouse_name": location.name,
            "warehouse_address": location.formatted_address,
            "quantity": level.quantity_on_hand,
            "quantity_reserved": level.quantity_reserved,
            "quantity_available": level.quantity_available,
            "unit_cost_cents": level.unit_cost_cents,
            "reorder_point": level.effective_reorder_point(product.reorder_point),
            "value_cents": level.value_cents,
        }
        for level, location in rows
    ]


def get_product_detail(product_id: int) -> dict:
    """
    Product with its per-warehouse stock breakdown.

    Raises:
        NotFoundError: product does not exist
    """
    product = get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")

    stock_levels = _stock_breakdown(product)
    total_stock = sum(level["quantity"] for level in stock_levels)

    if not product.is_active and total_stock > 0:
        current_app.logger.warning(
            "Inactive product sku=%s still holds %s units", product.sku, total_stock
        )

    data = product.to_dict()
    data.update({
        "stock_levels": stock_levels,
        "total_stock": total_stock,
        "total_value_cents": sum(level["value_cents"] for level in stock_levels),
        "stock_status": classify_stock_status(total_stock, product.reorder_point),
    })
    return data


def list_categories() -> list[str]:
    rows = (
        db.session.query(Product.category)
        .filter(Product.is_active.is_(True))
        .distinct()
        .order_by(Product.category.asc())
        .all()
    )
    return [row.category for row in rows]
