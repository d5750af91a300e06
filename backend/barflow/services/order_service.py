"""
Order Service - order placement and preparation lifecycle

WHY: An order is the unit the kitchen/bar works from and the unit a table
is occupied by. Placing one writes the header, its lines, the stock debits
and the table occupancy together, or nothing at all.

Stock debits are best-effort: a line whose product cannot be
found (renamed or deleted since the cart was built) is still sold, and the
miss is reported on the returned OrderPlacement instead of failing the order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flask import current_app

from ..extensions import db
from ..models import Order, OrderItem, Product, Client
from ..validation import NotFoundError
from barflow.time_utils import utcnow
from .atomic import run_atomic
from . import table_service


ORDER_PENDING = "PENDING"
ORDER_READY = "READY"
ORDER_SERVED = "SERVED"
ORDER_PAID = "PAID"

# Forward-only progression; skipping ahead is allowed, going back is not.
ORDER_STATUS_FLOW = [ORDER_PENDING, ORDER_READY, ORDER_SERVED, ORDER_PAID]


class OrderError(Exception):
    """Raised for order operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


@dataclass
class StockDebit:
    """Outcome of debiting one order line from stock."""
    item_name: str
    quantity: int
    product_id: int | None = None
    stock_after: int | None = None

    @property
    def applied(self) -> bool:
        return self.product_id is not None

    @property
    def oversold(self) -> bool:
        return self.stock_after is not None and self.stock_after < 0

    def to_dict(self) -> dict:
        return {
            "item_name": self.item_name,
            "quantity": self.quantity,
            "product_id": self.product_id,
            "stock_after": self.stock_after,
            "applied": self.applied,
            "oversold": self.oversold,
        }


@dataclass
class OrderPlacement:
    order: Order
    debits: list[StockDebit] = field(default_factory=list)
    table_found: bool = True

    @property
    def unmatched_items(self) -> list[str]:
        return [d.item_name for d in self.debits if not d.applied]

    @property
    def oversold_items(self) -> list[str]:
        return [d.item_name for d in self.debits if d.oversold]

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "stock_debits": [d.to_dict() for d in self.debits],
            "unmatched_items": self.unmatched_items,
            "oversold_items": self.oversold_items,
            "table_found": self.table_found,
        }


def _resolve_product(item: dict) -> Product | None:
    """
    One product per line: the given product_id, else the lowest id with that
    name. Duplicate names are never debited together.
    """
    product_id = item.get("product_id")
    if product_id is not None:
        product = db.session.get(Product, product_id)
        if product is not None:
            return product
    return (
        db.session.query(Product)
        .filter_by(name=item["name"])
        .order_by(Product.id.asc())
        .first()
    )


def _debit_stock(product: Product | None, item_name: str, quantity: int) -> StockDebit:
    if product is None:
        return StockDebit(item_name=item_name, quantity=quantity)
    product.stock = product.stock - quantity
    return StockDebit(
        item_name=item_name,
        quantity=quantity,
        product_id=product.id,
        stock_after=product.stock,
    )


def place_order(items: list[dict], table_name: str, client_id: int | None = None) -> OrderPlacement:
    """
    Create an order with its lines, debit stock and occupy the table.

    Each item: {"name", "quantity", optional "price_cents", "cost_price_cents",
    "product_id"}. Price and cost default to the matching product's current
    values; cost is frozen on the line so later cost changes never rewrite
    historical margins.

    Raises:
        OrderError: empty cart, bad quantity, or a line with no price
        NotFoundError: client_id given but unknown
    """
    if not items:
        raise OrderError("Order must contain at least one item")
    table_name = (table_name or "").strip()
    if not table_name:
        raise OrderError("table_name is required")

    def _op():
        client = None
        if client_id is not None:
            client = db.session.get(Client, client_id)
            if client is None:
                raise NotFoundError(f"Client {client_id} not found")

        order = Order(
            total_cents=0,
            status=ORDER_PENDING,
            created_at=utcnow(),
            table_name=table_name,
            client_id=client.id if client else None,
            client_name=client.name if client else None,
        )
        db.session.add(order)

        debits = []
        total = 0
        for item in items:
            name = item["name"]
            quantity = item["quantity"]
            if quantity <= 0:
                raise OrderError("Quantity must be positive", details={"item": name})

            product = _resolve_product(item)

            price = item.get("price_cents")
            if price is None:
                if product is None:
                    raise OrderError("Item has no price and no matching product", details={"item": name})
                price = product.price_cents

            cost = item.get("cost_price_cents")
            if cost is None:
                cost = product.cost_price_cents if product is not None else 0

            order.items.append(
                OrderItem(
                    product_id=product.id if product is not None else None,
                    name=name,
                    price_cents=price,
                    cost_price_cents=cost,
                    quantity=quantity,
                )
            )
            total += price * quantity
            debits.append(_debit_stock(product, name, quantity))

        order.total_cents = total
        table = table_service.mark_occupied(table_name)
        db.session.flush()
        return OrderPlacement(order=order, debits=debits, table_found=table is not None)

    placement = run_atomic(_op)

    for name in placement.unmatched_items:
        current_app.logger.warning("Order %s: no product named %r; stock not debited", placement.order.id, name)
    for name in placement.oversold_items:
        current_app.logger.warning("Order %s: %r sold below zero stock", placement.order.id, name)

    return placement


def apply_status_transition(order: Order, new_status: str) -> Order:
    """Validate and apply a forward-only status change. Caller owns the commit."""
    if new_status not in ORDER_STATUS_FLOW:
        raise OrderError(f"Invalid status: {new_status}. Must be one of {ORDER_STATUS_FLOW}")
    if order.status == ORDER_PAID:
        raise OrderError("Order is already paid", details={"order_id": order.id})
    if ORDER_STATUS_FLOW.index(new_status) <= ORDER_STATUS_FLOW.index(order.status):
        raise OrderError(
            "Order status can only move forward",
            details={"order_id": order.id, "from": order.status, "to": new_status},
        )
    order.status = new_status
    return order


def advance_status(order_id: int, new_status: str) -> Order:
    """
    Move an order along PENDING -> READY -> SERVED.

    PAID is reserved to settlement, which also records the payment and its
    side effects.
    """
    if new_status == ORDER_PAID:
        raise OrderError("Orders are marked PAID by settling them")

    def _op():
        order = get_order(order_id)
        apply_status_transition(order, new_status)
        return order

    return run_atomic(_op)


def get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")
    return order


def list_orders(status: str | None = None, table_name: str | None = None) -> list[Order]:
    """All orders newest first, with their lines."""
    query = db.session.query(Order)
    if status:
        query = query.filter(Order.status == status)
    if table_name:
        query = query.filter(Order.table_name == table_name)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def list_unpaid_orders(table_name: str | None = None) -> list[Order]:
    query = db.session.query(Order).filter(Order.status != ORDER_PAID)
    if table_name:
        query = query.filter(Order.table_name == table_name)
    return query.order_by(Order.created_at.asc(), Order.id.asc()).all()


def export_orders() -> list[dict]:
    """Read-only dump of every order with its lines."""
    return [order.to_dict() for order in list_orders()]
