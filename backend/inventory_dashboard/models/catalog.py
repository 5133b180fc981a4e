from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class Product(db.Model):
    """
    Product master data.

    Products are owned by the catalog. StockLevel rows reference a product
    but never own it: a product may have zero, one or many stock rows.

    PRICING DESIGN DECISION:
    Prices are stored in integer cents (frontend may only format for display).
    cost_price_cents <= sale_price_cents is enforced at the database level.

    STOCK STATUS:
    A product's status is derived from the SUM of quantity_on_hand across its
    stock rows compared against Product.reorder_point (not the per-location
    override). See services/stock_status.py.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("sale_price_cents >= 0", name="ck_products_sale_price_nonneg"),
        db.CheckConstraint("cost_price_cents >= 0", name="ck_products_cost_price_nonneg"),
        db.CheckConstraint("cost_price_cents <= sale_price_cents", name="ck_products_cost_le_sale"),
        db.CheckConstraint("reorder_point >= 0", name="ck_products_reorder_point_nonneg"),
        db.Index("ix_products_active_name", "is_active", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    sku = db.Column(db.String(100), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=False, index=True)

    cost_price_cents = db.Column(db.Integer, nullable=False, default=0)
    sale_price_cents = db.Column(db.Integer, nullable=False, default=0)

    reorder_point = db.Column(db.Integer, nullable=False, default=0, index=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    stock_levels = db.relationship("StockLevel", back_populates="product", lazy=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "cost_price_cents": self.cost_price_cents,
            "sale_price_cents": self.sale_price_cents,
            "reorder_point": self.reorder_point,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
