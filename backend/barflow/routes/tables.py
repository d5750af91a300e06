# Overview: Flask API routes for tables operations; floor plan and reservations.

from flask import Blueprint, request

from ..services import table_service
from ..services.table_service import TableError
from ..validation import NotFoundError, ConflictError

tables_bp = Blueprint("tables", __name__, url_prefix="/api/tables")


@tables_bp.get("")
def list_tables():
    zone = request.args.get("zone")
    return {"items": [t.to_dict() for t in table_service.list_tables(zone=zone)]}


@tables_bp.post("")
def create_table():
    payload = request.get_json(silent=True) or {}
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        return {"error": "name is required"}, 400

    try:
        table = table_service.create_table(name, payload.get("zone"))
    except ConflictError as e:
        return {"error": str(e)}, 409
    except TableError as e:
        return {"error": str(e)}, 400
    return table.to_dict(), 201


@tables_bp.delete("/<int:table_id>")
def delete_table(table_id: int):
    try:
        table_service.delete_table(table_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"deleted": table_id}


@tables_bp.post("/<int:table_id>/reservation")
def set_reservation(table_id: int):
    """
    Toggle a reservation.

    Request body:
    {
        "reserved": true,
        "note": "Dupont, 21h"  (optional)
    }
    """
    payload = request.get_json(silent=True) or {}
    reserved = payload.get("reserved")
    if not isinstance(reserved, bool):
        return {"error": "reserved must be true or false"}, 400

    try:
        table = table_service.set_reservation(table_id, reserved, payload.get("note"))
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except TableError as e:
        return {"error": str(e), "details": e.details}, 409
    return table.to_dict()
