from __future__ import annotations

from ..extensions import db
from barflow.time_utils import to_utc_z


class Category(db.Model):
    """
    Menu category lookup (name + icon identifier).

    Products reference categories by name only; deleting a category leaves
    products with an orphan category name.
    """
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    icon = db.Column(db.String(64), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
        }


class Product(db.Model):
    """
    Sellable catalog item with its on-hand stock.

    Stock is a mutable integer: raised by replenishment, lowered by order
    placement, or set directly by an admin edit.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    cost_price_cents = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    stock = db.Column(db.Integer, nullable=False, default=0)
    alert_threshold = db.Column(db.Integer, nullable=False, default=5)
    category = db.Column(db.String(64), nullable=True, index=True)
    image = db.Column(db.String(512), nullable=True)
    description = db.Column(db.Text, nullable=True)
    is_available = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.alert_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price_cents": self.price_cents,
            "cost_price_cents": self.cost_price_cents,
            "stock": self.stock,
            "alert_threshold": self.alert_threshold,
            "is_low_stock": self.is_low_stock,
            "category": self.category,
            "image": self.image,
            "description": self.description,
            "is_available": self.is_available,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class StockMovement(db.Model):
    """
    Append-only stock ledger row written by replenishment.

    IMMUTABLE: Records are never updated or deleted, and product_id is not a
    foreign key so history outlives a deleted product.
    """
    __tablename__ = "stock_history"
    __table_args__ = (
        db.Index("ix_stock_history_product_occurred", "product_id", "timestamp"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    occurred_at = db.Column("timestamp", db.DateTime(timezone=True), nullable=False)
    note = db.Column(db.String(255), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "occurred_at": to_utc_z(self.occurred_at),
            "note": self.note,
        }
