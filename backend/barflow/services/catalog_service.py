# backend/barflow/services/catalog_service.py
"""
Catalog Service

Products and categories are plain lookup data for the till. Categories are
referenced by name only: deleting one never touches products, which keep the
now-orphan category name.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Category, Product
from ..validation import NotFoundError
from .atomic import run_atomic

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "price_cents",
    "cost_price_cents",
    "stock",
    "alert_threshold",
    "category",
    "image",
    "description",
    "is_available",
}


class CatalogError(Exception):
    """Raised for catalog operation errors."""
    pass


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products(category: str | None = None, available_only: bool = False) -> list[Product]:
    query = db.session.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if available_only:
        query = query.filter(Product.is_available.is_(True))
    return query.order_by(Product.name.asc(), Product.id.asc()).all()


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def list_low_stock_products() -> list[Product]:
    """Products at or below their alert threshold, emptiest first."""
    return (
        db.session.query(Product)
        .filter(Product.stock <= Product.alert_threshold)
        .order_by(Product.stock.asc(), Product.name.asc())
        .all()
    )


def create_product(patch: dict) -> Product:
    """Create product from a validated patch dict."""
    if not (patch.get("name") or "").strip():
        raise CatalogError("Product name is required")

    def _op():
        p = Product(
            price_cents=0,
            cost_price_cents=0,
            stock=0,
            alert_threshold=5,
            is_available=True,
        )
        apply_product_patch(p, patch)
        db.session.add(p)
        db.session.flush()
        return p

    return run_atomic(_op)


def update_product(product_id: int, patch: dict) -> Product:
    """Admin edit; any catalog field including stock may change."""
    if "name" in patch and not (patch["name"] or "").strip():
        raise CatalogError("Product name cannot be blank")

    def _op():
        p = get_product(product_id)
        apply_product_patch(p, patch)
        db.session.flush()
        return p

    return run_atomic(_op)


def delete_product(product_id: int) -> None:
    """Delete a product; its stock movements stay in the history."""
    def _op():
        p = get_product(product_id)
        db.session.delete(p)

    run_atomic(_op)


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.id.asc()).all()


def create_category(name: str, icon: str | None = None) -> Category:
    name = (name or "").strip()
    if not name:
        raise CatalogError("Category name is required")

    def _op():
        category = Category(name=name, icon=(icon or "").strip() or None)
        db.session.add(category)
        db.session.flush()
        return category

    return run_atomic(_op)


def delete_category(category_id: int) -> None:
    def _op():
        category = db.session.get(Category, category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        db.session.delete(category)

    run_atomic(_op)
