# Overview: Stock status classification shared by listings, detail views and reports.

"""
Stock status rules.

A product's status compares its AGGREGATE on-hand quantity (sum over its
stock rows, optionally restricted to one warehouse) with its reorder point:

    total == 0                 -> out_of_stock
    0 < total < reorder_point  -> low_stock
    total >= reorder_point     -> adequate

classify_stock_status() is the Python form used on fetched rows.
stock_filter_clause() is the SQL form used as a HAVING predicate by the
listing and the counts, so both sides of the pagination agree.
"""
from __future__ import annotations

from sqlalchemy import and_

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
ADEQUATE = "adequate"

STOCK_STATUSES = (OUT_OF_STOCK, LOW_STOCK, ADEQUATE)


def classify_stock_status(total_quantity: int, reorder_point: int) -> str:
    if total_quantity <= 0:
        return OUT_OF_STOCK
    if total_quantity < reorder_point:
        return LOW_STOCK
    return ADEQUATE


def stock_filter_clause(stock_filter: str, total_stock, reorder_point):
    """
    SQL predicate for a listing stock_filter, evaluated on the aggregate.

    Must be applied after GROUP BY (HAVING), never as a WHERE on raw rows:
    a product with one empty warehouse and one stocked warehouse is in stock.

    Returns None for "all" (no predicate).
    """
    if stock_filter == "out_of_stock":
        return total_stock == 0
    if stock_filter == "low_stock":
        return and_(total_stock > 0, total_stock < reorder_point)
    if stock_filter == "in_stock":
        return total_stock > 0
    return None
