from __future__ import annotations

from ..extensions import db
from barflow.time_utils import to_utc_z


class Order(db.Model):
    """
    Order header routed to the preparation queue.

    Table and client are point-in-time snapshots (name / id + name), not
    foreign keys: deleting a table or client never rewrites history.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_status_created", "status", "timestamp"),
        db.Index("ix_orders_table_status", "table_name", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    total_cents = db.Column(db.Integer, nullable=False)

    # PENDING -> READY -> SERVED -> PAID, forward only
    status = db.Column(db.String(16), nullable=False, default="PENDING", index=True)
    created_at = db.Column("timestamp", db.DateTime(timezone=True), nullable=False)

    table_number = db.Column(db.Integer, nullable=True)
    table_name = db.Column(db.String(64), nullable=False)
    client_id = db.Column(db.Integer, nullable=True, index=True)
    client_name = db.Column(db.String(128), nullable=True)

    # Set only when the order is settled
    payment_method = db.Column(db.String(32), nullable=True)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)

    items = db.relationship(
        "OrderItem",
        backref="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
        lazy=True,
    )

    @property
    def is_paid(self) -> bool:
        return self.status == "PAID"

    def to_dict(self, include_items: bool = True) -> dict:
        data = {
            "id": self.id,
            "total_cents": self.total_cents,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "table_number": self.table_number,
            "table_name": self.table_name,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "payment_method": self.payment_method,
            "paid_at": to_utc_z(self.paid_at) if self.paid_at else None,
            "item_count": sum(item.quantity for item in self.items),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class OrderItem(db.Model):
    """Order line; price and cost are captured at sale time."""
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, nullable=True)

    name = db.Column(db.String(128), nullable=False)
    price_cents = db.Column(db.Integer, nullable=False)
    cost_price_cents = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    quantity = db.Column(db.Integer, nullable=False)

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    @property
    def line_cost_cents(self) -> int:
        return self.cost_price_cents * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "cost_price_cents": self.cost_price_cents,
            "quantity": self.quantity,
            "line_total_cents": self.line_total_cents,
        }
