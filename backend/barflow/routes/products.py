# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/barflow/routes/products.py
from flask import Blueprint, request, current_app

from ..models import Product
from ..services import catalog_service
from ..services.catalog_service import CatalogError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    NotFoundError,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "price_cents",
        "cost_price_cents",
        "stock",
        "alert_threshold",
        "category",
        "image",
        "description",
        "is_available",
    },
    required_on_create={"name", "price_cents"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List the catalog.

    Query params:
    - category: str (optional) - exact category name
    - available: "1" to hide unavailable products
    """
    category = request.args.get("category")
    available_only = request.args.get("available") in ("1", "true")
    products = catalog_service.list_products(category=category, available_only=available_only)
    return {"items": [p.to_dict() for p in products]}


@products_bp.get("/low-stock")
def low_stock():
    products = catalog_service.list_low_stock_products()
    return {"items": [p.to_dict() for p in products]}


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        product = catalog_service.get_product(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return product.to_dict()


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = catalog_service.create_product(patch)
    except CatalogError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created.to_dict(), 201


@products_bp.patch("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = catalog_service.update_product(product_id, patch)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except CatalogError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return updated.to_dict()


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    """Delete a product. Its stock movement history is kept."""
    try:
        catalog_service.delete_product(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {"deleted": product_id}
