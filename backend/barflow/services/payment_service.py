# Overview: Service-layer operations for payment; settlement of an order across order, table and client.

"""
Payment Settlement Service

WHY: Settlement is the one operation that touches Order, Table and Client
together. It either applies all of its writes or none of them.

SETTLEMENT EFFECTS (one unit):
1. Order -> PAID, with payment method and paid_at
2. Table released (FREE once no other unpaid order sits on it)
3. Client, when attached:
   - total_spent += total
   - loyalty_points += total // 10.00
   - last visit = now
   - balance -= total, ONLY for TAB (every other method paid the venue in full)
4. No client (none attached, or deleted): client effects are skipped for
   every method, TAB included; the order is still PAID and the table freed.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..models import Order, Client, DiningTable
from ..validation import NotFoundError
from barflow.time_utils import utcnow
from .atomic import run_atomic
from . import client_service, order_service, table_service


class PaymentError(Exception):
    """Raised for payment operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


# =============================================================================
# PAYMENT METHODS (CONSTANTS)
# =============================================================================

PAYMENT_CASH = "CASH"
PAYMENT_CARD = "CARD"
PAYMENT_MOBILE_MONEY = "MOBILE_MONEY"
PAYMENT_TAB = "TAB"

VALID_PAYMENT_METHODS = [
    PAYMENT_CASH,
    PAYMENT_CARD,
    PAYMENT_MOBILE_MONEY,
    PAYMENT_TAB,
]

# One loyalty point per full 10.00 spent
LOYALTY_POINT_STEP_CENTS = 1000


def loyalty_points_for(total_cents: int) -> int:
    """Whole points only: floor(total / 10.00)."""
    if total_cents <= 0:
        return 0
    return total_cents // LOYALTY_POINT_STEP_CENTS


@dataclass
class Settlement:
    order: Order
    table: DiningTable | None
    client: Client | None
    points_awarded: int = 0
    balance_delta_cents: int = 0

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "table": self.table.to_dict() if self.table else None,
            "client": self.client.to_dict() if self.client else None,
            "points_awarded": self.points_awarded,
            "balance_delta_cents": self.balance_delta_cents,
        }


# =============================================================================
# SETTLEMENT
# =============================================================================

def settle(
    order_id: int,
    method: str,
    total_cents: int,
    client_id: int | None = None,
) -> Settlement:
    """
    Finalize payment for an order.

    Args:
        order_id: Order being paid
        method: CASH, CARD, MOBILE_MONEY or TAB
        total_cents: Amount settled (drives spend, points and tab debt)
        client_id: Client to credit; defaults to the client attached to the order

    Returns:
        Settlement record

    Raises:
        PaymentError: invalid method/amount, order already paid
        NotFoundError: order not found
    """
    if method not in VALID_PAYMENT_METHODS:
        raise PaymentError(f"Invalid payment method: {method}. Must be one of {VALID_PAYMENT_METHODS}")
    if isinstance(total_cents, bool) or not isinstance(total_cents, int):
        raise PaymentError("total_cents must be an integer")
    if total_cents < 0:
        raise PaymentError("total_cents must be >= 0")

    def _op():
        order = db.session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")

        if order.status == order_service.ORDER_PAID:
            raise PaymentError(
                "Order is already paid",
                details={"order_id": order.id, "payment_method": order.payment_method},
            )

        effective_client_id = client_id if client_id is not None else order.client_id
        on_tab = method == PAYMENT_TAB

        client = None
        if effective_client_id is not None:
            client = db.session.get(Client, effective_client_id)

        order_service.apply_status_transition(order, order_service.ORDER_PAID)
        order.payment_method = method
        order.paid_at = utcnow()

        table = table_service.release(order.table_name, exclude_order_id=order.id)

        points = 0
        balance_delta = 0
        if client is not None:
            if order.client_id is None:
                order.client_id = client.id
                order.client_name = client.name
            points = loyalty_points_for(total_cents)
            balance_delta = client_service.record_settlement(
                client, total_cents, points=points, on_tab=on_tab
            )
        elif effective_client_id is not None:
            current_app.logger.warning(
                "Order %s settled for deleted client %s; client effects skipped",
                order.id,
                effective_client_id,
            )
        elif on_tab:
            current_app.logger.warning("Order %s settled on TAB with no client; no debt recorded", order.id)

        db.session.flush()
        return Settlement(
            order=order,
            table=table,
            client=client,
            points_awarded=points,
            balance_delta_cents=balance_delta,
        )

    return run_atomic(_op)


def get_payment_summary(order_id: int) -> dict:
    order = order_service.get_order(order_id)
    return {
        "order_id": order.id,
        "status": order.status,
        "total_cents": order.total_cents,
        "payment_method": order.payment_method,
        "is_paid": order.is_paid,
        "loyalty_points_value": loyalty_points_for(order.total_cents),
    }
