from barflow.extensions import db
from barflow.services import order_service, payment_service

from conftest import make_app, sqlite_uri


def _close(app):
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


def test_export_survives_reload_from_saved_store(tmp_path):
    uri = sqlite_uri(tmp_path / "barflow.sqlite3")

    first = make_app(SQLALCHEMY_DATABASE_URI=uri)
    with first.app_context():
        paid = order_service.place_order(
            [{"name": "Mojito", "quantity": 2}, {"name": "Craft IPA", "quantity": 1}], "S1"
        ).order
        order_service.place_order([{"name": "Nachos", "quantity": 1}], "T1")
        payment_service.settle(paid.id, "CARD", paid.total_cents)
        before = order_service.export_orders()
    _close(first)

    second = make_app(SQLALCHEMY_DATABASE_URI=uri)
    with second.app_context():
        after = order_service.export_orders()
        table_t1 = order_service.list_unpaid_orders("T1")
    _close(second)

    assert after == before
    assert [o["status"] for o in after] == ["PENDING", "PAID"]
    assert len(table_t1) == 1
