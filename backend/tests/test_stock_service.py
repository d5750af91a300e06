import pytest

from barflow.models import Product, StockMovement
from barflow.services import stock_service, catalog_service, order_service
from barflow.services.stock_service import StockError
from barflow.validation import NotFoundError


def test_replenish_increments_stock_and_records_movement(db_session, mojito):
    movement = stock_service.replenish(mojito.id, 20, note="delivery")

    assert db_session.get(Product, mojito.id).stock == 70
    assert movement.id is not None
    assert movement.product_id == mojito.id
    assert movement.quantity == 20
    assert movement.note == "delivery"


def test_replenish_sequence_matches_movement_sum(db_session, mojito):
    initial = mojito.stock
    quantities = [12, 5, -3, 30]
    for qty in quantities:
        stock_service.replenish(mojito.id, qty)

    product = db_session.get(Product, mojito.id)
    movements = stock_service.list_stock_movements(mojito.id)

    assert product.stock == initial + sum(quantities)
    assert len(movements) == len(quantities)
    assert [m.quantity for m in movements] == list(reversed(quantities))
    assert stock_service.stock_from_movements(mojito.id, initial) == product.stock


def test_replenish_rejects_zero_and_non_integers(db_session, mojito):
    with pytest.raises(StockError):
        stock_service.replenish(mojito.id, 0)
    with pytest.raises(StockError):
        stock_service.replenish(mojito.id, 2.5)
    with pytest.raises(StockError):
        stock_service.replenish(mojito.id, True)

    assert db_session.query(StockMovement).count() == 0
    assert db_session.get(Product, mojito.id).stock == 50


def test_replenish_unknown_product(db_session):
    with pytest.raises(NotFoundError):
        stock_service.replenish(9999, 5)
    assert db_session.query(StockMovement).count() == 0


def test_replenish_failure_leaves_no_movement(db_session, mojito, monkeypatch):
    def broken_movement(**kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(stock_service, "StockMovement", broken_movement)
    with pytest.raises(RuntimeError):
        stock_service.replenish(mojito.id, 10, note="lost")

    assert db_session.get(Product, mojito.id).stock == 50
    assert db_session.query(StockMovement).count() == 0


def test_movements_survive_product_deletion(db_session, nachos):
    stock_service.replenish(nachos.id, 6, note="crate")
    product_id = nachos.id

    catalog_service.delete_product(product_id)

    assert db_session.get(Product, product_id) is None
    history = stock_service.list_stock_movements(product_id)
    assert [m.note for m in history] == ["crate"]

    summary = stock_service.stock_summary(product_id)
    assert summary["product"] is None
    assert summary["movement_total"] == 6


def test_mojito_low_stock_scenario(db_session, mojito):
    order_service.place_order([{"name": "Mojito", "quantity": 45}], "S2")

    product = db_session.get(Product, mojito.id)
    assert product.stock == 5
    assert product.is_low_stock is True
    assert mojito.id in [p.id for p in catalog_service.list_low_stock_products()]

    stock_service.replenish(mojito.id, 20, note="delivery")

    product = db_session.get(Product, mojito.id)
    assert product.stock == 25
    assert product.is_low_stock is False

    movements = stock_service.list_stock_movements(mojito.id)
    assert len(movements) == 1
    assert movements[0].note == "delivery"
    assert movements[0].quantity == 20


def test_list_movements_limit(db_session, mojito):
    for qty in (1, 2, 3):
        stock_service.replenish(mojito.id, qty)

    latest = stock_service.list_stock_movements(mojito.id, limit=2)
    assert [m.quantity for m in latest] == [3, 2]
