# Overview: Service-layer operations for staff; PIN hashing and staff directory maintenance.

"""
Staff directory

SECURITY NOTES:
- PINs are 4 to 6 digits, hashed with bcrypt (cost from PIN_HASH_ROUNDS)
- The hash is never serialized
- verify_pin() is timing-safe via bcrypt.checkpw()
"""

import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import StaffMember
from ..validation import NotFoundError
from .atomic import run_atomic

ROLE_ADMIN = "ADMIN"
ROLE_BARTENDER = "BARTENDER"
ROLE_SERVER = "SERVER"

VALID_ROLES = [ROLE_ADMIN, ROLE_BARTENDER, ROLE_SERVER]

PIN_RE = re.compile(r"^\d{4,6}$")


class StaffError(Exception):
    """Raised for staff operation errors."""
    pass


def validate_pin(pin: str) -> None:
    if not isinstance(pin, str) or not PIN_RE.match(pin):
        raise StaffError("PIN must be 4 to 6 digits")


def hash_pin(pin: str) -> str:
    validate_pin(pin)
    rounds = current_app.config.get("PIN_HASH_ROUNDS", 12)
    hashed = bcrypt.hashpw(pin.encode('utf-8'), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def _validate_role(role: str) -> None:
    if role not in VALID_ROLES:
        raise StaffError(f"Invalid role: {role}. Must be one of {VALID_ROLES}")


def list_staff() -> list[StaffMember]:
    return db.session.query(StaffMember).order_by(StaffMember.id.asc()).all()


def get_staff(staff_id: int) -> StaffMember:
    member = db.session.get(StaffMember, staff_id)
    if member is None:
        raise NotFoundError(f"Staff member {staff_id} not found")
    return member


def create_staff(name: str, role: str, pin: str) -> StaffMember:
    name = (name or "").strip()
    if not name:
        raise StaffError("Staff name is required")
    _validate_role(role)
    pin_hash = hash_pin(pin)

    def _op():
        member = StaffMember(name=name, role=role, pin_hash=pin_hash)
        db.session.add(member)
        db.session.flush()
        return member

    return run_atomic(_op)


def update_staff(staff_id: int, patch: dict) -> StaffMember:
    """Update name, role and/or PIN."""
    if "name" in patch and not (patch["name"] or "").strip():
        raise StaffError("Staff name cannot be blank")
    if "role" in patch:
        _validate_role(patch["role"])
    pin_hash = hash_pin(patch["pin"]) if patch.get("pin") is not None else None

    def _op():
        member = get_staff(staff_id)
        if "name" in patch:
            member.name = patch["name"].strip()
        if "role" in patch:
            member.role = patch["role"]
        if pin_hash is not None:
            member.pin_hash = pin_hash
        return member

    return run_atomic(_op)


def delete_staff(staff_id: int) -> None:
    def _op():
        member = get_staff(staff_id)
        db.session.delete(member)

    run_atomic(_op)


def verify_pin(staff_id: int, pin: str) -> bool:
    member = get_staff(staff_id)
    if not member.pin_hash or not isinstance(pin, str):
        return False
    try:
        return bcrypt.checkpw(pin.encode('utf-8'), member.pin_hash.encode('utf-8'))
    except ValueError:
        current_app.logger.warning("Staff member %s has an unreadable PIN hash", staff_id)
        return False
