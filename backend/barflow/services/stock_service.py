# Overview: Service-layer operations for stock; replenishment and the append-only movement log.

from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from ..models import Product, StockMovement
from barflow.time_utils import utcnow
from .atomic import run_atomic
from .catalog_service import get_product
"""
BarFlow Stock Invariants (authoritative)

- Product.stock is the live on-hand quantity.
- Replenishment writes two rows as one unit: the stock increment and a
  StockMovement. Neither exists without the other.
- StockMovement is append-only (no updates/deletes) and is keyed by product
  id only, so it survives product deletion.
- Order placement debits stock directly and does not write movements.
"""


class StockError(Exception):
    """Raised for stock operation errors."""
    pass


def replenish(product_id: int, quantity: int, note: str | None = None) -> StockMovement:
    """
    Add (or, for corrections, remove) stock and record the movement.

    quantity must be a non-zero integer. Returns the new StockMovement.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise StockError("quantity must be an integer")
    if quantity == 0:
        raise StockError("quantity must be non-zero")

    def _op():
        product = get_product(product_id)
        product.stock = product.stock + quantity

        movement = StockMovement(
            product_id=product.id,
            quantity=quantity,
            occurred_at=utcnow(),
            note=note,
        )
        db.session.add(movement)
        db.session.flush()
        return movement

    return run_atomic(_op)


def list_stock_movements(product_id: int, limit: int | None = None) -> list[StockMovement]:
    """
    Movement history for a product id, newest first.

    Works for ids of deleted products.
    """
    query = db.session.query(StockMovement).filter_by(product_id=product_id).order_by(
        StockMovement.occurred_at.desc(),
        StockMovement.id.desc(),
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def movement_total(product_id: int) -> int:
    return int(
        db.session.query(func.coalesce(func.sum(StockMovement.quantity), 0))
        .filter(StockMovement.product_id == product_id)
        .scalar()
        or 0
    )


def stock_from_movements(product_id: int, baseline: int) -> int:
    """Reconstruct on-hand stock from a known baseline plus every recorded movement."""
    return baseline + movement_total(product_id)


def stock_summary(product_id: int) -> dict:
    product = db.session.get(Product, product_id)
    movements = list_stock_movements(product_id, limit=20)
    return {
        "product_id": product_id,
        "product": product.to_dict() if product else None,
        "stock": product.stock if product else None,
        "movement_total": movement_total(product_id),
        "recent_movements": [m.to_dict() for m in movements],
    }
