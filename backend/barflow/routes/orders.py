# Overview: Flask API routes for orders operations; parses input and returns JSON responses.

# backend/barflow/routes/orders.py
"""
Order placement and preparation routes

The cart is validated here (non-empty, positive integer quantities, integer
amounts) before the order service is called.
"""

from flask import Blueprint, request, current_app

from ..services import order_service
from ..services.order_service import OrderError
from ..validation import parse_cart_items, coerce_int, ValidationError, NotFoundError

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
def list_orders():
    """
    Query params:
    - status: PENDING | READY | SERVED | PAID (optional)
    - table: table name (optional)
    """
    status = request.args.get("status")
    if status and status not in order_service.ORDER_STATUS_FLOW:
        return {"error": f"Invalid status: {status}"}, 400
    orders = order_service.list_orders(status=status, table_name=request.args.get("table"))
    return {"items": [o.to_dict() for o in orders]}


@orders_bp.get("/<int:order_id>")
def get_order(order_id: int):
    try:
        order = order_service.get_order(order_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return order.to_dict()


@orders_bp.post("")
def place_order():
    """
    Place an order for a table.

    Request body:
    {
        "table_name": "T1",
        "client_id": 4,  (optional)
        "items": [
            {"name": "Mojito", "quantity": 2, "price_cents": 1000, "product_id": 1}
        ]
    }

    Returns:
        201: order plus per-line stock outcome
        400: empty cart, bad quantity or amount, line without a price
        404: unknown client
    """
    payload = request.get_json(silent=True) or {}

    try:
        items = parse_cart_items(payload.get("items"))
        table_name = str(payload.get("table_name") or "").strip()
        if not table_name:
            raise ValidationError("table_name is required")
        client_id = payload.get("client_id")
        if client_id is not None:
            client_id = coerce_int(client_id, "client_id")
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        placement = order_service.place_order(items, table_name, client_id=client_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except OrderError as e:
        return {"error": str(e), "details": e.details}, 400
    except Exception:
        current_app.logger.exception("Failed to place order")
        return {"error": "Internal server error"}, 500

    return placement.to_dict(), 201


@orders_bp.post("/<int:order_id>/status")
def advance_status(order_id: int):
    """
    Move an order forward (PENDING -> READY -> SERVED).

    Request body:
    {
        "status": "READY"
    }
    """
    payload = request.get_json(silent=True) or {}
    new_status = payload.get("status")
    if not isinstance(new_status, str) or not new_status:
        return {"error": "status is required"}, 400
    if new_status not in order_service.ORDER_STATUS_FLOW:
        return {"error": f"Invalid status: {new_status}. Must be one of {order_service.ORDER_STATUS_FLOW}"}, 400

    try:
        order = order_service.advance_status(order_id, new_status)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except OrderError as e:
        return {"error": str(e), "details": e.details}, 409
    return order.to_dict()
