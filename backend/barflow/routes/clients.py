# Overview: Flask API routes for clients operations; contacts, loyalty and tab balance.

from flask import Blueprint, request, current_app

from ..models import Client
from ..services import client_service
from ..services.client_service import ClientError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    parse_amount_cents,
    ValidationError,
    NotFoundError,
)

CLIENT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "email", "notes"},
    required_on_create={"name"},
)

clients_bp = Blueprint("clients", __name__, url_prefix="/api/clients")


@clients_bp.get("")
def list_clients():
    """?debt=1 lists only clients with an open tab."""
    if request.args.get("debt") in ("1", "true"):
        clients = client_service.list_clients_with_debt()
    else:
        clients = client_service.list_clients()
    return {"items": [c.to_dict() for c in clients]}


@clients_bp.get("/<int:client_id>")
def get_client(client_id: int):
    try:
        return client_service.get_client(client_id).to_dict()
    except NotFoundError as e:
        return {"error": str(e)}, 404


@clients_bp.post("")
def create_client():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Client, payload=payload, policy=CLIENT_POLICY, partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        client = client_service.create_client(patch)
    except ClientError as e:
        return {"error": str(e)}, 400
    return client.to_dict(), 201


@clients_bp.patch("/<int:client_id>")
def update_client(client_id: int):
    """Contact fields only; balance, points and spend are not writable here."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Client, payload=payload, policy=CLIENT_POLICY, partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        client = client_service.update_client(client_id, patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ClientError as e:
        return {"error": str(e)}, 400
    return client.to_dict()


@clients_bp.delete("/<int:client_id>")
def delete_client(client_id: int):
    try:
        client_service.delete_client(client_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"deleted": client_id}


@clients_bp.post("/<int:client_id>/balance")
def adjust_balance(client_id: int):
    """
    Repay debt (positive) or record a manual charge (negative).

    Request body:
    {
        "amount_cents": 2500
    }
    """
    payload = request.get_json(silent=True) or {}

    try:
        amount = parse_amount_cents(payload.get("amount_cents"), "amount_cents", allow_negative=True, allow_zero=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        client = client_service.adjust_balance(client_id, amount)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ClientError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to adjust client balance")
        return {"error": "Internal server error"}, 500
    return client.to_dict()
