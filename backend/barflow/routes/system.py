# Overview: Flask API routes for system operations; health, store reset, retry and order export.

# backend/barflow/routes/system.py
"""
System health and store maintenance endpoints.

/api/health and /api/system/retry-init stay reachable while the store is
unavailable; everything else answers 503 until initialization succeeds.
"""

import time

from flask import Blueprint, current_app, request
from sqlalchemy.exc import SQLAlchemyError

from ..services import schema_service, order_service

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.get("/health")
def health():
    """Store readiness plus row counts when the store is open."""
    if not current_app.config.get("STORE_READY"):
        return {
            "status": "unavailable",
            "error": current_app.config.get("STORE_INIT_ERROR"),
            "retry": True,
        }, 503

    start_time = time.time()
    try:
        counts = schema_service.check_store_health()
    except SQLAlchemyError:
        current_app.logger.exception("Database health check failed")
        return {"status": "unhealthy", "error": "Database error"}, 503

    return {
        "status": "healthy",
        "latency_ms": round((time.time() - start_time) * 1000, 2),
        "details": counts,
    }


@system_bp.post("/system/retry-init")
def retry_init():
    """Re-attempt store initialization after a failed start."""
    from .. import init_store

    if init_store(current_app._get_current_object()):
        return {"status": "ready"}
    return {
        "status": "unavailable",
        "error": current_app.config.get("STORE_INIT_ERROR"),
        "retry": True,
    }, 503


@system_bp.post("/system/reset")
def reset_store():
    """
    Wipe every ledger table and reseed the defaults.

    Request body:
    {
        "confirm": true
    }
    """
    payload = request.get_json(silent=True) or {}
    if payload.get("confirm") is not True:
        return {"error": "Reset requires {\"confirm\": true}"}, 400

    try:
        summary = schema_service.reset_store()
    except Exception:
        current_app.logger.exception("Store reset failed")
        return {"error": "Internal server error"}, 500

    return {"status": "reset", "store": summary}


@system_bp.get("/system/export/orders")
def export_orders():
    """Read-only dump of every order with its lines."""
    orders = order_service.export_orders()
    return {"orders": orders, "count": len(orders)}
