from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from ..services import reporting_service
from ..validation import ValidationError, parse_positive_int
from .errors import store_unavailable, validation_error


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
def summary():
    try:
        warehouse_id = parse_positive_int(request.args, "warehouse_id")
    except ValidationError as exc:
        return validation_error(exc)

    try:
        return jsonify(reporting_service.summary_metrics(warehouse_id)), 200
    except SQLAlchemyError:
        return store_unavailable("summary metrics")


@reports_bp.get("/stock-imbalances")
def stock_imbalances():
    try:
        product_id = parse_positive_int(request.args, "product_id")
    except ValidationError as exc:
        return validation_error(exc)

    category = (request.args.get("category") or "").strip() or None

    try:
        products = reporting_service.product_distribution_imbalances(
            product_id=product_id,
            category=category,
        )
    except SQLAlchemyError:
        return store_unavailable("stock imbalance report")
    return jsonify({"products": products, "total": len(products)}), 200


@reports_bp.get("/warehouse-summary")
def warehouse_summary():
    try:
        warehouse_id = parse_positive_int(request.args, "warehouse_id")
    except ValidationError as exc:
        return validation_error(exc)

    try:
        return jsonify(reporting_service.warehouse_summary_stats(warehouse_id)), 200
    except SQLAlchemyError:
        return store_unavailable("warehouse summary")


@reports_bp.get("/low-diversity")
def low_diversity():
    try:
        threshold = parse_positive_int(request.args, "threshold", default=10)
    except ValidationError as exc:
        return validation_error(exc)

    try:
        warehouses = reporting_service.low_diversity_warehouses(threshold)
    except SQLAlchemyError:
        return store_unavailable("low diversity report")
    return jsonify({"warehouses": warehouses, "threshold": threshold}), 200
