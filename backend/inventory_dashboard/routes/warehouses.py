# Overview: Flask API routes for warehouses and stock distribution analysis.

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from ..services import distribution_service, warehouse_service
from ..validation import NotFoundError, ValidationError, normalize_distribution_params
from .errors import not_found, store_unavailable, validation_error

warehouses_bp = Blueprint("warehouses", __name__, url_prefix="/api/warehouses")


@warehouses_bp.get("")
def list_warehouses():
    include_inactive = request.args.get("include_inactive", "false").lower() == "true"
    try:
        warehouses = warehouse_service.list_warehouses(include_inactive=include_inactive)
    except SQLAlchemyError:
        return store_unavailable("warehouse lookup")
    return jsonify({"warehouses": [w.to_dict() for w in warehouses]}), 200


@warehouses_bp.get("/distribution")
def warehouse_distribution():
    """
    Per-warehouse stock breakdown with transfer suggestions, capacity bands
    and the overall imbalance score.

    Query params: warehouse_id, product_id, category, min_value (currency units)
    """
    try:
        filters = normalize_distribution_params(request.args)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        return jsonify(distribution_service.get_warehouse_distribution(filters)), 200
    except SQLAlchemyError:
        return store_unavailable("warehouse distribution")


@warehouses_bp.get("/<int:warehouse_id>/products")
def warehouse_products(warehouse_id: int):
    try:
        filters = normalize_distribution_params(request.args)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        return jsonify(distribution_service.get_warehouse_products(warehouse_id, filters)), 200
    except NotFoundError as exc:
        return not_found(exc)
    except SQLAlchemyError:
        return store_unavailable("warehouse products")
