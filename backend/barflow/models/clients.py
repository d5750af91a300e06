from __future__ import annotations

from ..extensions import db
from barflow.time_utils import to_utc_z


class Client(db.Model):
    """
    Regular customer with loyalty points and a running tab.

    balance_cents is signed: negative is debt owed to the venue (the tab),
    positive is prepaid credit. Aggregates are only moved by settlement or
    by an explicit balance adjustment, never by a contact-details update.
    """
    __tablename__ = "clients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Denormalized aggregates (updated when orders are settled)
    loyalty_points = db.Column(db.Integer, nullable=False, default=0)
    total_spent_cents = db.Column(db.Integer, nullable=False, default=0)
    balance_cents = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    last_visit_at = db.Column("last_visit", db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def has_debt(self) -> bool:
        return self.balance_cents < 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "notes": self.notes,
            "loyalty_points": self.loyalty_points,
            "total_spent_cents": self.total_spent_cents,
            "balance_cents": self.balance_cents,
            "has_debt": self.has_debt,
            "last_visit_at": to_utc_z(self.last_visit_at) if self.last_visit_at else None,
            "created_at": to_utc_z(self.created_at),
        }
