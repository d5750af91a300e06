# Overview: Service-layer operations for reporting; read-only sales aggregates over paid orders.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func

from barflow.extensions import db
from barflow.models import Order, OrderItem
from barflow.time_utils import parse_iso_datetime, to_utc_z
from .order_service import ORDER_PAID


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    try:
        start_dt = parse_iso_datetime(start) if start else None
        end_dt = parse_iso_datetime(end) if end else None
    except ValueError:
        raise ReportError("start/end must be ISO-8601 datetimes")
    if start_dt and end_dt and start_dt > end_dt:
        raise ReportError("start must be before end")
    return start_dt, end_dt


def _apply_range(query, start_dt: datetime | None, end_dt: datetime | None):
    query = query.filter(Order.status == ORDER_PAID)
    if start_dt:
        query = query.filter(Order.created_at >= start_dt)
    if end_dt:
        query = query.filter(Order.created_at <= end_dt)
    return query


def sales_summary(start: str | None = None, end: str | None = None, top: int = 5) -> dict:
    """
    Revenue, cost and profit over paid orders.

    Cost uses the cost-at-sale captured on each line, so catalog cost edits
    never change past margins.
    """
    start_dt, end_dt = _parse_range(start, end)

    totals = _apply_range(
        db.session.query(
            func.count(Order.id).label("order_count"),
            func.coalesce(func.sum(Order.total_cents), 0).label("revenue_cents"),
        ),
        start_dt,
        end_dt,
    ).one()

    cost_cents = _apply_range(
        db.session.query(
            func.coalesce(func.sum(OrderItem.cost_price_cents * OrderItem.quantity), 0)
        ).join(Order, OrderItem.order_id == Order.id),
        start_dt,
        end_dt,
    ).scalar()

    method_rows = _apply_range(
        db.session.query(
            Order.payment_method,
            func.coalesce(func.sum(Order.total_cents), 0).label("revenue_cents"),
            func.count(Order.id).label("order_count"),
        ),
        start_dt,
        end_dt,
    ).group_by(Order.payment_method).order_by(Order.payment_method.asc()).all()

    item_rows = _apply_range(
        db.session.query(
            OrderItem.name,
            func.coalesce(func.sum(OrderItem.quantity), 0).label("quantity"),
            func.coalesce(func.sum(OrderItem.price_cents * OrderItem.quantity), 0).label("revenue_cents"),
            func.coalesce(func.sum(OrderItem.cost_price_cents * OrderItem.quantity), 0).label("cost_cents"),
        ).join(Order, OrderItem.order_id == Order.id),
        start_dt,
        end_dt,
    ).group_by(OrderItem.name).order_by(func.sum(OrderItem.price_cents * OrderItem.quantity).desc()).limit(top).all()

    revenue = int(totals.revenue_cents or 0)
    cost = int(cost_cents or 0)
    profit = revenue - cost

    return {
        "start": to_utc_z(start_dt) if start_dt else None,
        "end": to_utc_z(end_dt) if end_dt else None,
        "order_count": int(totals.order_count or 0),
        "revenue_cents": revenue,
        "cost_cents": cost,
        "profit_cents": profit,
        "margin_pct": round(profit * 100 / revenue, 1) if revenue else None,
        "by_payment_method": {
            row.payment_method: {
                "revenue_cents": int(row.revenue_cents or 0),
                "order_count": int(row.order_count or 0),
            }
            for row in method_rows
        },
        "top_items": [
            {
                "name": row.name,
                "quantity": int(row.quantity or 0),
                "revenue_cents": int(row.revenue_cents or 0),
                "profit_cents": int((row.revenue_cents or 0) - (row.cost_cents or 0)),
            }
            for row in item_rows
        ],
    }


def daily_sales(start: str | None = None, end: str | None = None) -> dict:
    start_dt, end_dt = _parse_range(start, end)

    day_expr = func.strftime("%Y-%m-%d", Order.created_at)
    rows = _apply_range(
        db.session.query(
            day_expr.label("day"),
            func.count(Order.id).label("order_count"),
            func.coalesce(func.sum(Order.total_cents), 0).label("revenue_cents"),
        ),
        start_dt,
        end_dt,
    ).group_by(day_expr).order_by(day_expr).all()

    return {
        "start": to_utc_z(start_dt) if start_dt else None,
        "end": to_utc_z(end_dt) if end_dt else None,
        "rows": [
            {
                "day": row.day,
                "order_count": int(row.order_count or 0),
                "revenue_cents": int(row.revenue_cents or 0),
            }
            for row in rows
        ],
    }
