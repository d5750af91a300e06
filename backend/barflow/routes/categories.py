# Overview: Flask API routes for categories operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import catalog_service
from ..services.catalog_service import CatalogError
from ..validation import NotFoundError

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories():
    return {"items": [c.to_dict() for c in catalog_service.list_categories()]}


@categories_bp.post("")
def create_category():
    payload = request.get_json(silent=True) or {}
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        return {"error": "name is required"}, 400

    try:
        category = catalog_service.create_category(name, payload.get("icon"))
    except CatalogError as e:
        return {"error": str(e)}, 400
    return category.to_dict(), 201


@categories_bp.delete("/<int:category_id>")
def delete_category(category_id: int):
    """Products keep their category name; nothing cascades."""
    try:
        catalog_service.delete_category(category_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"deleted": category_id}
