from __future__ import annotations

from ..extensions import db


class Setting(db.Model):
    """Venue-wide key-value setting (currency symbol, display preferences)."""
    __tablename__ = "settings"

    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "key": self.key,
            "value": self.value,
        }
