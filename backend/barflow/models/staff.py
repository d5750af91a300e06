from __future__ import annotations

from ..extensions import db


class StaffMember(db.Model):
    """
    Venue staff member who unlocks the till with a PIN.

    WHY: Orders and settlements are taken by named people; the PIN is stored
    as a bcrypt hash and never serialized.
    """
    __tablename__ = "staff"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(16), nullable=False, default="SERVER")  # ADMIN, BARTENDER, SERVER
    pin_hash = db.Column(db.String(255), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "has_pin": bool(self.pin_hash),
        }
