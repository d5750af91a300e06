# Overview: Flask API routes for staff operations; directory maintenance and PIN checks.

# backend/barflow/routes/staff.py
"""
Staff directory routes

SECURITY: PIN hashes never leave the service layer; responses only report
whether a PIN is set.
"""

from flask import Blueprint, request

from ..services import staff_service
from ..services.staff_service import StaffError
from ..validation import NotFoundError

staff_bp = Blueprint("staff", __name__, url_prefix="/api/staff")

STAFF_PATCH_FIELDS = {"name", "role", "pin"}


@staff_bp.get("")
def list_staff():
    return {"items": [m.to_dict() for m in staff_service.list_staff()]}


@staff_bp.post("")
def create_staff():
    """
    Request body:
    {
        "name": "Barman",
        "role": "BARTENDER",
        "pin": "1234"
    }
    """
    payload = request.get_json(silent=True) or {}
    missing = sorted(f for f in ("name", "role", "pin") if not payload.get(f))
    if missing:
        return {"error": f"Missing required fields: {', '.join(missing)}"}, 400

    try:
        member = staff_service.create_staff(payload["name"], payload["role"], str(payload["pin"]))
    except StaffError as e:
        return {"error": str(e)}, 400
    return member.to_dict(), 201


@staff_bp.patch("/<int:staff_id>")
def update_staff(staff_id: int):
    payload = request.get_json(silent=True) or {}
    unknown = sorted(set(payload) - STAFF_PATCH_FIELDS)
    if unknown:
        return {"error": f"Field not allowed: {unknown[0]}"}, 400
    if payload.get("pin") is not None:
        payload["pin"] = str(payload["pin"])

    try:
        member = staff_service.update_staff(staff_id, payload)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StaffError as e:
        return {"error": str(e)}, 400
    return member.to_dict()


@staff_bp.delete("/<int:staff_id>")
def delete_staff(staff_id: int):
    try:
        staff_service.delete_staff(staff_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"deleted": staff_id}


@staff_bp.post("/<int:staff_id>/verify-pin")
def verify_pin(staff_id: int):
    payload = request.get_json(silent=True) or {}
    pin = payload.get("pin")
    if pin is None:
        return {"error": "pin is required"}, 400

    try:
        valid = staff_service.verify_pin(staff_id, str(pin))
    except NotFoundError as e:
        return {"error": str(e)}, 404
    if not valid:
        return {"valid": False}, 401
    return {"valid": True, "staff": staff_service.get_staff(staff_id).to_dict()}
