# Overview: Flask API routes for product listing and lookups; parses input and returns JSON responses.

# backend/inventory_dashboard/routes/products.py
"""
Product routes (read-only).

Query params are validated in full before any query runs; an invalid listing
request never touches the database.
"""
from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from ..services import inventory_query_service, product_service
from ..validation import NotFoundError, ValidationError, normalize_listing_params
from .errors import not_found, store_unavailable, validation_error

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    Filtered, sorted, paginated product listing with stock aggregates.

    Query params:
    - search, category, warehouse_id, price_min, price_max (currency units)
    - stock_filter: all | in_stock | low_stock | out_of_stock
    - page (>= 1), limit (1..MAX_PAGE_LIMIT)
    - sort_by (unknown names fall back to "name"), sort_order: asc | desc
    """
    try:
        filters, pagination, sort = normalize_listing_params(
            request.args,
            default_limit=current_app.config["DEFAULT_PAGE_LIMIT"],
            max_limit=current_app.config["MAX_PAGE_LIMIT"],
        )
    except ValidationError as exc:
        return validation_error(exc)

    try:
        result = inventory_query_service.list_products(filters, pagination, sort)
    except SQLAlchemyError:
        return store_unavailable("product listing")
    return jsonify(result), 200


@products_bp.get("/categories")
def list_categories():
    try:
        categories = product_service.list_categories()
    except SQLAlchemyError:
        return store_unavailable("category lookup")
    return jsonify({"categories": categories}), 200


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        return jsonify(product_service.get_product_detail(product_id)), 200
    except NotFoundError as exc:
        return not_found(exc)
    except SQLAlchemyError:
        return store_unavailable("product detail")
