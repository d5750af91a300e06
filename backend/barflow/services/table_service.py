# Overview: Service-layer operations for tables; occupancy state machine derived from unpaid orders.

from __future__ import annotations

from flask import current_app
from sqlalchemy import select

from ..extensions import db
from ..models import DiningTable, Order
from ..validation import NotFoundError, ConflictError
from .atomic import run_atomic
"""
Table state machine:

    FREE / RESERVED --(order placed)--> OCCUPIED --(last unpaid order settled)--> FREE
    FREE <--(manual toggle, optional note)--> RESERVED

- OCCUPIED is a projection of "an unpaid order exists for this table name";
  it is never set or cleared by hand.
- A reservation does not block seating.
- Orders reference tables by name; a name with no table is tolerated
  (logged, nothing to update).
"""

TABLE_FREE = "FREE"
TABLE_OCCUPIED = "OCCUPIED"
TABLE_RESERVED = "RESERVED"

TABLE_STATUSES = [TABLE_FREE, TABLE_OCCUPIED, TABLE_RESERVED]


class TableError(Exception):
    """Raised for table operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def list_tables(zone: str | None = None) -> list[DiningTable]:
    query = db.session.query(DiningTable)
    if zone:
        query = query.filter(DiningTable.zone == zone)
    return query.order_by(DiningTable.id.asc()).all()


def get_table(table_id: int) -> DiningTable:
    table = db.session.get(DiningTable, table_id)
    if table is None:
        raise NotFoundError(f"Table {table_id} not found")
    return table


def get_table_by_name(name: str) -> DiningTable | None:
    return db.session.query(DiningTable).filter_by(name=name).first()


def create_table(name: str, zone: str | None = None) -> DiningTable:
    name = (name or "").strip()
    if not name:
        raise TableError("Table name is required")

    def _op():
        if get_table_by_name(name) is not None:
            raise ConflictError(f"Table '{name}' already exists")
        table = DiningTable(name=name, zone=(zone or "").strip() or None, status=TABLE_FREE)
        db.session.add(table)
        db.session.flush()
        return table

    return run_atomic(_op)


def delete_table(table_id: int) -> None:
    def _op():
        table = get_table(table_id)
        db.session.delete(table)

    run_atomic(_op)


def set_reservation(table_id: int, reserved: bool, note: str | None = None) -> DiningTable:
    """
    Manual FREE <-> RESERVED toggle.

    Occupied tables cannot be reserved or released by hand; occupancy only
    ends with settlement.
    """
    def _op():
        table = get_table(table_id)
        if table.status == TABLE_OCCUPIED:
            raise TableError(
                "Table is occupied; it is freed by settling its order",
                details={"table": table.name, "status": table.status},
            )
        if reserved:
            table.status = TABLE_RESERVED
            table.reservation_note = (note or "").strip() or None
        else:
            table.status = TABLE_FREE
            table.reservation_note = None
        return table

    return run_atomic(_op)


def has_unpaid_orders(table_name: str, exclude_order_id: int | None = None) -> bool:
    query = db.session.query(Order.id).filter(
        Order.table_name == table_name,
        Order.status != "PAID",
    )
    if exclude_order_id is not None:
        query = query.filter(Order.id != exclude_order_id)
    return query.first() is not None


def mark_occupied(table_name: str) -> DiningTable | None:
    """Order placement transition. Runs inside the caller's unit of work."""
    table = get_table_by_name(table_name)
    if table is None:
        current_app.logger.warning("Order placed for unknown table %r; no occupancy recorded", table_name)
        return None
    table.status = TABLE_OCCUPIED
    return table


def release(table_name: str, *, exclude_order_id: int | None = None) -> DiningTable | None:
    """
    Settlement transition. Runs inside the caller's unit of work.

    The table goes back to FREE only when no other unpaid order remains on it.
    """
    table = get_table_by_name(table_name)
    if table is None:
        current_app.logger.warning("Settled order references unknown table %r", table_name)
        return None
    if table.status == TABLE_OCCUPIED and not has_unpaid_orders(table_name, exclude_order_id):
        table.status = TABLE_FREE
    return table


def reconcile_table_occupancy() -> int:
    """
    Force OCCUPIED on every table that has an unpaid order.

    Recovers from an unclean shutdown; returns the number of tables changed.
    """
    unpaid_names = select(Order.table_name).where(Order.status != "PAID")
    return (
        db.session.query(DiningTable)
        .filter(
            DiningTable.name.in_(unpaid_names),
            DiningTable.status != TABLE_OCCUPIED,
        )
        .update({DiningTable.status: TABLE_OCCUPIED}, synchronize_session=False)
    )
