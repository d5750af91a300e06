# Overview: Flask API routes for payments operations; parses input and returns JSON responses.

# backend/barflow/routes/payments.py
"""
Payment Settlement API Routes

WHY: Settling closes an order together with its table and client effects in one
step. A failure leaves the order, table and client untouched.

PAYMENT METHODS:
- CASH, CARD, MOBILE_MONEY: paid in full at the till
- TAB: added to the client's debt (skipped with a warning when no client)
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import payment_service, order_service
from ..services.payment_service import PaymentError
from ..validation import parse_amount_cents, coerce_int, ValidationError, NotFoundError


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


@payments_bp.post("/settle")
def settle_route():
    """
    Settle an order.

    Request body:
    {
        "order_id": 12,
        "method": "TAB",
        "total_cents": 2500,  (optional, defaults to the order total)
        "client_id": 4  (optional, defaults to the order's client)
    }

    Returns:
        200: settlement with updated order, table and client
        400: invalid method or amount
        404: unknown order
        409: order already paid
    """
    data = request.get_json(silent=True) or {}

    try:
        if data.get("order_id") is None:
            raise ValidationError("order_id is required")
        order_id = coerce_int(data["order_id"], "order_id")
        method = data.get("method")
        if method not in payment_service.VALID_PAYMENT_METHODS:
            raise ValidationError(f"method must be one of {payment_service.VALID_PAYMENT_METHODS}")
        total_cents = None
        if data.get("total_cents") is not None:
            total_cents = parse_amount_cents(data["total_cents"], "total_cents")
        client_id = None
        if data.get("client_id") is not None:
            client_id = coerce_int(data["client_id"], "client_id")
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        if total_cents is None:
            total_cents = order_service.get_order(order_id).total_cents
        settlement = payment_service.settle(order_id, method, total_cents, client_id=client_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PaymentError as e:
        status = 409 if "order_id" in e.details else 400
        return jsonify({"error": str(e), "details": e.details}), status
    except Exception:
        current_app.logger.exception("Failed to settle order")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(settlement.to_dict())


@payments_bp.get("/orders/<int:order_id>")
def payment_summary_route(order_id: int):
    try:
        return jsonify(payment_service.get_payment_summary(order_id))
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
