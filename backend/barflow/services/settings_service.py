from __future__ import annotations

from ..extensions import db
from ..models import Setting
from .atomic import run_atomic

SETTING_CURRENCY = "currency"

MAX_KEY_LENGTH = 128


class SettingsError(ValueError):
    pass


def get_setting(key: str, default: str = "") -> str:
    row = db.session.get(Setting, key)
    if row is None or row.value is None:
        return default
    return row.value


def save_setting(key: str, value: str) -> Setting:
    """Insert or replace a setting value."""
    key = (key or "").strip()
    if not key:
        raise SettingsError("Setting key is required")
    if len(key) > MAX_KEY_LENGTH:
        raise SettingsError(f"Setting key exceeds max length {MAX_KEY_LENGTH}")

    def _op():
        return db.session.merge(Setting(key=key, value=None if value is None else str(value)))

    return run_atomic(_op)


def list_settings() -> dict[str, str | None]:
    rows = db.session.query(Setting).order_by(Setting.key.asc()).all()
    return {row.key: row.value for row in rows}
