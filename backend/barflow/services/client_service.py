# Overview: Service-layer operations for clients; contact data, loyalty points and tab balance.

from __future__ import annotations

from ..extensions import db
from ..models import Client
from ..validation import NotFoundError
from barflow.time_utils import utcnow
from .atomic import run_atomic
"""
Client ledger rules:

- balance_cents < 0 is debt (the tab), > 0 is prepaid credit.
- Balance moves only through a TAB settlement (minus the order total) or an
  explicit adjust_balance call.
- total_spent_cents never decreases; loyalty_points never go negative.
- Contact updates never touch balance, spend or points.
- Deleting a client leaves the id/name snapshots on past orders as they are.
"""

CLIENT_MUTABLE_FIELDS = {"name", "phone", "email", "notes"}


class ClientError(Exception):
    """Raised for client operation errors."""
    pass


def apply_client_patch(client: Client, patch: dict) -> None:
    for k, v in patch.items():
        if k not in CLIENT_MUTABLE_FIELDS:
            continue
        setattr(client, k, v)


def list_clients() -> list[Client]:
    """Most recently active first."""
    return (
        db.session.query(Client)
        .order_by(Client.last_visit_at.desc().nullslast(), Client.id.desc())
        .all()
    )


def list_clients_with_debt() -> list[Client]:
    """Open tabs, largest debt first."""
    return (
        db.session.query(Client)
        .filter(Client.balance_cents < 0)
        .order_by(Client.balance_cents.asc(), Client.id.asc())
        .all()
    )


def get_client(client_id: int) -> Client:
    client = db.session.get(Client, client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")
    return client


def create_client(patch: dict) -> Client:
    if not (patch.get("name") or "").strip():
        raise ClientError("Client name is required")

    def _op():
        client = Client(
            loyalty_points=0,
            total_spent_cents=0,
            balance_cents=0,
            last_visit_at=utcnow(),
        )
        apply_client_patch(client, patch)
        db.session.add(client)
        db.session.flush()
        return client

    return run_atomic(_op)


def update_client(client_id: int, patch: dict) -> Client:
    """Identity/contact fields only; aggregates in the patch are ignored."""
    if "name" in patch and not (patch["name"] or "").strip():
        raise ClientError("Client name cannot be blank")

    def _op():
        client = get_client(client_id)
        apply_client_patch(client, patch)
        return client

    return run_atomic(_op)


def delete_client(client_id: int) -> None:
    def _op():
        client = get_client(client_id)
        db.session.delete(client)

    run_atomic(_op)


def adjust_balance(client_id: int, amount_cents: int) -> Client:
    """
    Manual credit grant or debt repayment.

    Positive amounts move the balance up (repay debt / add credit), negative
    amounts move it down. Zero is rejected.
    """
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise ClientError("amount_cents must be an integer")
    if amount_cents == 0:
        raise ClientError("amount_cents must be non-zero")

    def _op():
        client = get_client(client_id)
        client.balance_cents = client.balance_cents + amount_cents
        client.last_visit_at = utcnow()
        return client

    return run_atomic(_op)


def record_settlement(client: Client, total_cents: int, *, points: int, on_tab: bool) -> int:
    """
    Apply a settled order to a client. Runs inside the caller's unit of work.

    Returns the balance change (negative for a tab, otherwise 0).
    """
    client.total_spent_cents = client.total_spent_cents + total_cents
    client.loyalty_points = client.loyalty_points + points
    client.last_visit_at = utcnow()

    balance_delta = -total_cents if on_tab else 0
    if balance_delta:
        client.balance_cents = client.balance_cents + balance_delta
    return balance_delta
