# Overview: Flask API routes for stock operations; replenishment and movement history.

# backend/barflow/routes/stock.py
"""
Stock replenishment routes

WHY: Replenishment is the only stock change that leaves a trace in the
movement log. Zero or unparsable quantities are rejected here, before the
service is called.
"""

from flask import Blueprint, request, current_app

from ..services import stock_service
from ..services.stock_service import StockError
from ..validation import enforce_rules_replenish, coerce_int, ValidationError, NotFoundError

stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")


@stock_bp.post("/<int:product_id>/replenish")
def replenish_route(product_id: int):
    """
    Add stock to a product.

    Request body:
    {
        "quantity": 24,
        "note": "Delivery"  (optional)
    }

    Returns:
        201: movement and updated product
        400: invalid quantity
        404: unknown product
    """
    payload = request.get_json(silent=True)

    try:
        quantity, note = enforce_rules_replenish(payload)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        movement = stock_service.replenish(product_id, quantity, note=note)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except StockError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to replenish stock")
        return {"error": "Internal server error"}, 500

    summary = stock_service.stock_summary(product_id)
    return {"movement": movement.to_dict(), "product": summary["product"]}, 201


@stock_bp.get("/<int:product_id>/movements")
def list_movements(product_id: int):
    """Newest first; also answers for deleted products."""
    limit = request.args.get("limit")
    try:
        limit = coerce_int(limit, "limit") if limit is not None else None
    except ValidationError as e:
        return {"error": str(e)}, 400
    if limit is not None and limit <= 0:
        return {"error": "limit must be > 0"}, 400

    movements = stock_service.list_stock_movements(product_id, limit=limit)
    return {
        "product_id": product_id,
        "movement_total": stock_service.movement_total(product_id),
        "items": [m.to_dict() for m in movements],
    }
