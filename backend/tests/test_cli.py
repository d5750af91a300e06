import json

from barflow.extensions import db
from barflow.models import Product, Order
from barflow.services import order_service


def test_system_init_is_idempotent(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["system", "init"])

    assert result.exit_code == 0
    assert "Using existing store" in result.output
    assert "Schema is current" in result.output

    with app.app_context():
        assert db.session.query(Product).count() == 10


def test_system_reset_requires_confirmation(app):
    with app.app_context():
        order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1")

    runner = app.test_cli_runner()
    result = runner.invoke(args=["system", "reset"], input="n\n")
    assert result.exit_code != 0
    with app.app_context():
        assert db.session.query(Order).count() == 1

    result = runner.invoke(args=["system", "reset", "--yes"])
    assert result.exit_code == 0
    with app.app_context():
        assert db.session.query(Order).count() == 0


def test_orders_export_to_file(app, tmp_path):
    with app.app_context():
        order_service.place_order([{"name": "Coca Cola", "quantity": 2}], "Bar 1")

    output = tmp_path / "orders.json"
    result = app.test_cli_runner().invoke(args=["orders", "export", "--output", str(output)])

    assert result.exit_code == 0
    assert "Exported 1 order(s)" in result.output
    dump = json.loads(output.read_text(encoding="utf-8"))
    assert dump[0]["total_cents"] == 800
    assert dump[0]["items"][0]["name"] == "Coca Cola"


def test_stock_low_and_replenish(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["stock", "low"])
    assert "No product below its alert threshold" in result.output

    with app.app_context():
        order_service.place_order([{"name": "Nachos", "quantity": 27}], "S1")
        nachos_id = db.session.query(Product).filter_by(name="Nachos").one().id

    result = runner.invoke(args=["stock", "low"])
    assert "Nachos" in result.output

    result = runner.invoke(args=["stock", "replenish", str(nachos_id), "24", "--note", "Delivery"])
    assert result.exit_code == 0
    assert "stock 27" in result.output

    result = runner.invoke(args=["stock", "replenish", str(nachos_id), "0"])
    assert result.exit_code != 0
    assert "non-zero" in result.output
