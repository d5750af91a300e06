from __future__ import annotations

from ..extensions import db


class DiningTable(db.Model):
    """
    Seating position (table, bar stool group, terrace spot).

    STATUS:
    - FREE: initial state
    - OCCUPIED: an unpaid order exists for this table name
    - RESERVED: manual toggle, independent of orders
    """
    __tablename__ = "tables"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_tables_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    zone = db.Column(db.String(64), nullable=True, index=True)
    status = db.Column(db.String(16), nullable=False, default="FREE", server_default="FREE")
    reservation_note = db.Column(db.String(255), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "zone": self.zone,
            "status": self.status,
            "reservation_note": self.reservation_note,
        }
