from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

WAREHOUSE_TYPES = ("main", "secondary", "distribution", "storage")


class Location(db.Model):
    """
    Warehouse location.

    Independent entity: products are attached to it only through StockLevel
    rows. Inactive locations are hidden from the warehouse list and from the
    distribution analysis.
    """
    __tablename__ = "locations"
    __table_args__ = (
        db.CheckConstraint(
            "warehouse_type IN (" + ", ".join(f"'{t}'" for t in WAREHOUSE_TYPES) + ")",
            name="ck_locations_warehouse_type",
        ),
        db.Index("ix_locations_active_name", "is_active", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)

    address = db.Column(db.Text, nullable=True)
    city = db.Column(db.String(100), nullable=True)
    state = db.Column(db.String(50), nullable=True)
    zip_code = db.Column(db.String(20), nullable=True)

    warehouse_type = db.Column(db.String(32), nullable=False, default="main", index=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    stock_levels = db.relationship("StockLevel", back_populates="location", lazy=True)

    def __repr__(self) -> str:
        return f"<Location id={self.id} name={self.name!r}>"

    @property
    def formatted_address(self) -> str | None:
        """Single-line address, e.g. "12 Dock Rd, Austin, TX 78701"."""
        if not self.address:
            return None
        out = self.address
        if self.city:
            out += f", {self.city}"
        if self.state:
            out += f", {self.state}"
        if self.zip_code:
            out += f" {self.zip_code}"
        return out

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.formatted_address,
            "warehouse_type": self.warehouse_type,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
        }
