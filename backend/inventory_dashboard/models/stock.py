from __future__ import annotations

from ..extensions import db


class StockLevel(db.Model):
    """
    Stock of one product at one location.

    quantity_available is derived (on_hand - reserved, floored at 0) rather
    than stored, so it cannot drift from the two columns it depends on.

    reorder_point is a per-location override used for per-warehouse health
    counts; NULL means "use Product.reorder_point". Aggregate product status
    always uses the product-level reorder point.

    Rows are not assumed to be reconciled: catalog tooling may leave
    reserved > on_hand or zero-quantity rows behind.
    """
    __tablename__ = "stock_levels"
    __table_args__ = (
        db.UniqueConstraint("product_id", "location_id", name="uq_stock_levels_product_location"),
        db.CheckConstraint("quantity_on_hand >= 0", name="ck_stock_levels_on_hand_nonneg"),
        db.CheckConstraint("quantity_reserved >= 0", name="ck_stock_levels_reserved_nonneg"),
        db.CheckConstraint("unit_cost_cents >= 0", name="ck_stock_levels_unit_cost_nonneg"),
        db.Index("ix_stock_levels_location_product", "location_id", "product_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)

    quantity_on_hand = db.Column(db.Integer, nullable=False, default=0, index=True)
    quantity_reserved = db.Column(db.Integer, nullable=False, default=0)

    unit_cost_cents = db.Column(db.Integer, nullable=False, default=0)

    reorder_point = db.Column(db.Integer, nullable=True)

    last_updated = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    product = db.relationship("Product", back_populates="stock_levels")
    location = db.relationship("Location", back_populates="stock_levels")

    def __repr__(self) -> str:
        return (
            f"<StockLevel product_id={self.product_id} location_id={self.location_id} "
            f"on_hand={self.quantity_on_hand}>"
        )

    @property
    def quantity_available(self) -> int:
        return max((self.quantity_on_hand or 0) - (self.quantity_reserved or 0), 0)

    @property
    def value_cents(self) -> int:
        return (self.quantity_on_hand or 0) * (self.unit_cost_cents or 0)

    def effective_reorder_point(self, product_reorder_point: int) -> int:
        if self.reorder_point is None:
            return product_reorder_point
        return self.reorder_point
