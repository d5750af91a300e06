# Overview: Store lifecycle; schema creation, additive migrations, seeding, repair and reset.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from flask import current_app
from sqlalchemy.exc import DatabaseError, OperationalError, SQLAlchemyError

from ..extensions import db
from ..models import Category, Product, DiningTable, Order, Client, StaffMember, StockMovement, Setting
from ..seed_catalog import DEFAULT_CATEGORIES, DEFAULT_PRODUCTS, DEFAULT_TABLES, DEFAULT_STAFF
from .atomic import run_atomic
from . import staff_service, table_service
"""
BarFlow Store Invariants (authoritative)

- Opening a store never destroys rows: tables are created only if absent and
  columns are only ever added.
- Every additive migration is applied on its own and is safe to re-run;
  "already applied" failures are logged and ignored.
- A store image that cannot be read at all is moved aside and replaced by a
  fresh seeded store. That is the only path that loses data.
- Table occupancy is repaired on every open: a table with an unpaid order is
  OCCUPIED.
"""


@dataclass(frozen=True)
class AdditiveColumn:
    name: str
    table: str
    column: str
    build: Callable[[], sa.Column]


# Ordered; a Column object can only be attached once, hence the builders.
MIGRATIONS = [
    AdditiveColumn(
        "products_cost_price", "products", "cost_price_cents",
        lambda: sa.Column("cost_price_cents", sa.Integer(), nullable=False, server_default="0"),
    ),
    AdditiveColumn(
        "order_items_cost_price", "order_items", "cost_price_cents",
        lambda: sa.Column("cost_price_cents", sa.Integer(), nullable=False, server_default="0"),
    ),
    AdditiveColumn(
        "tables_status", "tables", "status",
        lambda: sa.Column("status", sa.String(16), nullable=False, server_default="FREE"),
    ),
    AdditiveColumn(
        "tables_reservation_note", "tables", "reservation_note",
        lambda: sa.Column("reservation_note", sa.String(255), nullable=True),
    ),
    AdditiveColumn(
        "clients_balance", "clients", "balance_cents",
        lambda: sa.Column("balance_cents", sa.Integer(), nullable=False, server_default="0"),
    ),
    AdditiveColumn(
        "orders_paid_at", "orders", "paid_at",
        lambda: sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
    ),
]


def _existing_tables() -> set[str]:
    return set(sa.inspect(db.engine).get_table_names())


def _discard_store_image() -> str | None:
    """Move an unreadable SQLite file aside so a fresh one can be created."""
    db.session.remove()
    db.engine.dispose()

    path = db.engine.url.database
    if not path or path == ":memory:" or not os.path.isfile(path):
        return None

    backup = f"{path}.corrupt"
    os.replace(path, backup)
    return backup


def apply_migrations() -> list[str]:
    """
    Apply every pending additive column migration, one transaction each.

    Returns the names of the migrations applied by this call; an empty list
    means the store was already current.
    """
    applied = []
    for migration in MIGRATIONS:
        try:
            with db.engine.begin() as conn:
                columns = {c["name"] for c in sa.inspect(conn).get_columns(migration.table)}
                if migration.column in columns:
                    continue
                Operations(MigrationContext.configure(conn)).add_column(migration.table, migration.build())
        except OperationalError as exc:
            current_app.logger.debug("Migration %s already applied: %s", migration.name, exc.orig)
            continue
        current_app.logger.info("Applied migration %s", migration.name)
        applied.append(migration.name)
    return applied


def seed_defaults(*, demo_data: bool = True) -> None:
    """Seed a brand new store: currency setting, plus default catalog, tables and staff."""
    currency = current_app.config.get("DEFAULT_CURRENCY", "€")

    def _op():
        db.session.merge(Setting(key="currency", value=currency))
        if not demo_data:
            return
        for row in DEFAULT_CATEGORIES:
            db.session.add(Category(**row))
        for row in DEFAULT_PRODUCTS:
            db.session.add(Product(**row))
        for row in DEFAULT_TABLES:
            db.session.add(DiningTable(status=table_service.TABLE_FREE, **row))
        for row in DEFAULT_STAFF:
            db.session.add(
                StaffMember(name=row["name"], role=row["role"], pin_hash=staff_service.hash_pin(row["pin"]))
            )

    run_atomic(_op)


def open_store() -> dict:
    """
    Bring the store to the current schema and a consistent state.

    Steps:
    1. Probe the saved image; an unreadable one is moved aside.
    2. Create missing tables.
    3. Apply additive migrations.
    4. Seed when the store was brand new (seed failures are logged, not raised).
    5. Repair table occupancy from unpaid orders.
    """
    db.session.remove()

    recovered = False
    try:
        existing = _existing_tables()
    except DatabaseError:
        backup = _discard_store_image()
        if backup is None:
            # Nothing on disk to set aside (missing directory, permissions)
            raise
        current_app.logger.exception("Saved store is unreadable; moved to %s and recreating it", backup)
        recovered = True
        existing = _existing_tables()

    created = not existing
    db.create_all()
    applied = apply_migrations()

    if created:
        try:
            seed_defaults(demo_data=current_app.config.get("SEED_DEMO_DATA", True))
            current_app.logger.info("Created new store at %s", db.engine.url)
        except SQLAlchemyError:
            current_app.logger.exception("Seeding the new store failed")

    repaired = run_atomic(table_service.reconcile_table_occupancy)
    if repaired:
        current_app.logger.info("Marked %d table(s) OCCUPIED from unpaid orders", repaired)

    return {
        "created": created,
        "recovered": recovered,
        "migrations_applied": applied,
        "tables_repaired": repaired,
    }


def reset_store() -> dict:
    """Wipe every ledger table and return to the seeded default store."""
    db.session.remove()
    db.drop_all()
    current_app.logger.info("Store wiped; reseeding defaults")
    return open_store()


def check_store_health() -> dict:
    return {
        "products": db.session.query(Product).count(),
        "categories": db.session.query(Category).count(),
        "stock_movements": db.session.query(StockMovement).count(),
        "orders": db.session.query(Order).count(),
        "tables": db.session.query(DiningTable).count(),
        "clients": db.session.query(Client).count(),
        "staff": db.session.query(StaffMember).count(),
    }
