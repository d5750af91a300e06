# Overview: Flask API routes for reports operations; read-only sales aggregates.

from flask import Blueprint, request

from ..services import reporting_service
from ..services.reporting_service import ReportError
from ..validation import coerce_int, ValidationError

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/sales")
def sales_summary():
    """
    Query params:
    - start, end: ISO-8601 datetimes (optional)
    - top: number of best sellers (default 5)
    """
    try:
        top = coerce_int(request.args.get("top", "5"), "top")
    except ValidationError as e:
        return {"error": str(e)}, 400
    if top <= 0:
        return {"error": "top must be > 0"}, 400

    try:
        return reporting_service.sales_summary(
            start=request.args.get("start"),
            end=request.args.get("end"),
            top=top,
        )
    except ReportError as e:
        return {"error": str(e)}, 400


@reports_bp.get("/daily")
def daily_sales():
    try:
        return reporting_service.daily_sales(
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
    except ReportError as e:
        return {"error": str(e)}, 400
