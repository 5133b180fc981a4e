# Overview: Service-layer operations for the product stock listing; builds the aggregate query and its count.

"""
Product listing with aggregate stock figures.

One query builder (_filtered_product_query) feeds both the page query and the
count query. The count wraps the very same query object in a subquery, so the
search/category/price/warehouse WHERE clauses and the HAVING stock predicate
cannot drift apart between pagination.total and the returned page.

WAREHOUSE SCOPE:
When filters.warehouse_id is set, stock rows are restricted to that warehouse
in the JOIN (before aggregation). total_stock / total_value then mean "in that
warehouse", and only products carried there (having a stock row) are listed.

CONSISTENCY:
The page and count statements run in the same session transaction. Under
snapshot isolation they see the same data; under read-committed (and SQLite
with concurrent writers) a write landing between the two statements may leave
pagination.total briefly stale. This is accepted.
"""
from __future__ import annotations

import math

from flask import current_app
from sqlalchemy import and_, case, func, or_

from ..extensions import db
from ..models import Product, StockLevel
from ..validation import FilterDescriptor, PaginationDescriptor, SortDescriptor, cents_to_amount
from .stock_status import classify_stock_status, stock_filter_clause

# Requested sort fields outside this allow-list silently fall back to "name".
SORTABLE_FIELDS = ("name", "sku", "category", "sale_price", "cost_price", "total_stock")
DEFAULT_SORT_FIELD = "name"


def _aggregate_columns():
    total_stock = func.coalesce(func.sum(StockLevel.quantity_on_hand), 0)
    warehouse_count = func.count(
        func.distinct(case((StockLevel.quantity_on_hand > 0, StockLevel.location_id)))
    )
    total_value = func.coalesce(
        func.sum(StockLevel.quantity_on_hand * StockLevel.unit_cost_cents), 0
    )
    return total_stock, warehouse_count, total_value


def _filtered_product_query(filters: FilterDescriptor):
    """
    Returns (query, total_stock_expr) for every active product matching filters.

    Grouped by product; unsorted and unpaginated.
    """
    total_stock, warehouse_count, total_value = _aggregate_columns()

    product_columns = (
        Product.id,
        Product.sku,
        Product.name,
        Product.category,
        Product.description,
        Product.sale_price_cents,
        Product.cost_price_cents,
        Product.reorder_point,
    )

    query = db.session.query(
        *product_columns,
        total_stock.label("total_stock"),
        warehouse_count.label("warehouse_count"),
        total_value.label("total_value_cents"),
    )

    if filters.warehouse_id is not None:
        query = query.join(
            StockLevel,
            and_(
                StockLevel.product_id == Product.id,
                StockLevel.location_id == filters.warehouse_id,
            ),
        )
    else:
        query = query.outerjoin(StockLevel, StockLevel.product_id == Product.id)

    query = query.filter(Product.is_active.is_(True))

    if filters.search:
        query = query.filter(
            or_(
                Product.name.icontains(filters.search, autoescape=True),
                Product.sku.icontains(filters.search, autoescape=True),
                Product.description.icontains(filters.search, autoescape=True),
            )
        )

    if filters.category:
        query = query.filter(Product.category == filters.category)

    if filters.price_min_cents is not None:
        query = query.filter(Product.sale_price_cents >= filters.price_min_cents)

    if filters.price_max_cents is not None:
        query = query.filter(Product.sale_price_cents <= filters.price_max_cents)

    query = query.group_by(*product_columns)

    having = stock_filter_clause(filters.stock_filter, total_stock, Product.reorder_point)
    if having is not None:
        query = query.having(having)

    return query, total_stock


def resolve_sort_field(sort_by: str | None) -> str:
    if sort_by in SORTABLE_FIELDS:
        return sort_by
    return DEFAULT_SORT_FIELD


def _order_by(sort: SortDescriptor, total_stock) -> list:
    columns = {
        "name": Product.name,
        "sku": Product.sku,
        "category": Product.category,
        "sale_price": Product.sale_price_cents,
        "cost_price": Product.cost_price_cents,
        "total_stock": total_stock,
    }
    column = columns[resolve_sort_field(sort.sort_by)]
    primary = column.desc() if sort.sort_order == "desc" else column.asc()
    # Product.id keeps page boundaries stable when the sort key ties
    return [primary, Product.id.asc()]


def _row_to_dict(row) -> dict:
    total_stock = int(row.total_stock or 0)
    reorder_point = int(row.reorder_point or 0)
    total_value_cents = int(row.total_value_cents or 0)
    return {
        "id": row.id,
        "sku": row.sku,
        "name": row.name,
        "category": row.category,
        "sale_price": cents_to_amount(row.sale_price_cents),
        "cost_price": cents_to_amount(row.cost_price_cents),
        "sale_price_cents": row.sale_price_cents,
        "cost_price_cents": row.cost_price_cents,
        "reorder_point": reorder_point,
        "total_stock": total_stock,
        "warehouse_count": int(row.warehouse_count or 0),
        "total_value": cents_to_amount(total_value_cents),
        "total_value_cents": total_value_cents,
        "stock_status": classify_stock_status(total_stock, reorder_point),
    }


def fetch_products_with_stock(
    filters: FilterDescriptor,
    sort: SortDescriptor,
    pagination: PaginationDescriptor | None = None,
) -> list[dict]:
    """
    Sorted product rows with total_stock, warehouse_count, total_value_cents
    and stock_status. pagination=None returns every matching row.
    """
    query, total_stock = _filtered_product_query(filters)
    query = query.order_by(*_order_by(sort, total_stock))

    if pagination is not None:
        query = query.offset(pagination.offset).limit(pagination.limit)

    return [_row_to_dict(row) for row in query.all()]


def count_filtered_products(filters: FilterDescriptor) -> int:
    """Exact number of products matching filters (same predicate as the page)."""
    query, _ = _filtered_product_query(filters)
    total = db.session.query(func.count()).select_from(query.subquery()).scalar()
    return int(total or 0)


def build_pagination_meta(pagination: PaginationDescriptor, total: int) -> dict:
    total_pages = math.ceil(total / pagination.limit) if total > 0 else 0
    return {
        "page": pagination.page,
        "limit": pagination.limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": pagination.page < total_pages,
        "hasPrev": pagination.page > 1,
    }


def list_products(
    filters: FilterDescriptor,
    pagination: PaginationDescriptor,
    sort: SortDescriptor,
) -> dict:
    """
    Listing operation: one page of products plus pagination metadata.

    Returns:
        {"products": [...], "filters": {...}, "pagination": {...}, "sort": {...}}
    """
    products = fetch_products_with_stock(filters, sort, pagination)
    total = count_filtered_products(filters)

    current_app.logger.debug(
        "Product listing page=%s limit=%s returned %s of %s (stock_filter=%s)",
        pagination.page,
        pagination.limit,
        len(products),
        total,
        filters.stock_filter,
    )

    return {
        "products": products,
        "filters": filters.to_dict(),
        "pagination": build_pagination_meta(pagination, total),
        "sort": {
            "sort_by": resolve_sort_field(sort.sort_by),
            "sort_order": sort.sort_order,
        },
    }
