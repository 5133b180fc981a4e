# Overview: JSON error bodies shared by the API blueprints.

"""
Error responses.

- ValidationError -> 400 {"error": first message, "errors": {field: message}}
- NotFoundError   -> 404 {"error": message}
- SQLAlchemyError -> 503 {"error": ..., "retryable": true}

A 503 tells the caller the request was fine and may be retried; a 400 never
succeeds on retry.
"""
from flask import current_app, jsonify

from ..validation import NotFoundError, ValidationError


def validation_error(exc: ValidationError):
    return jsonify({"error": str(exc), "errors": exc.errors}), 400


def not_found(exc: NotFoundError):
    return jsonify({"error": str(exc)}), 404


def store_unavailable(operation: str):
    """Log the active exception and answer 503."""
    current_app.logger.exception("Data store failure during %s", operation)
    return jsonify({"error": "Inventory data is temporarily unavailable", "retryable": True}), 503
