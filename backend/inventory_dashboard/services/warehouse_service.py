# Overview: Service-layer lookups for warehouse locations.

from __future__ import annotations

from ..extensions import db
from ..models import Location
from ..validation import NotFoundError


def list_warehouses(include_inactive: bool = False) -> list[Location]:
    query = db.session.query(Location)
    if not include_inactive:
        query = query.filter(Location.is_active.is_(True))
    return query.order_by(Location.name.asc(), Location.id.asc()).all()


def get_warehouse(warehouse_id: int) -> Location | None:
    return db.session.query(Location).filter_by(id=warehouse_id).first()


def require_warehouse(warehouse_id: int) -> Location:
    """
    Resolve a warehouse id or raise NotFoundError.

    An unknown id is "not found", never an empty aggregate.
    """
    warehouse = get_warehouse(warehouse_id)
    if warehouse is None:
        raise NotFoundError("Warehouse not found")
    return warehouse
