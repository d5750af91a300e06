import pytest

from barflow.models import Client, Order, DiningTable
from barflow.services import payment_service, order_service, client_service
from barflow.services.payment_service import PaymentError
from barflow.validation import NotFoundError


def _order(table="S1", client_id=None, quantity=1, name="Mojito"):
    return order_service.place_order([{"name": name, "quantity": quantity}], table, client_id=client_id).order


def test_cash_settlement_leaves_balance_untouched(db_session, regular):
    regular.balance_cents = -500
    db_session.commit()
    order = _order(quantity=3)

    settlement = payment_service.settle(order.id, "CASH", 3000, client_id=regular.id)

    client = db_session.get(Client, regular.id)
    assert client.balance_cents == -500
    assert client.total_spent_cents == 3000
    assert client.loyalty_points == 3
    assert client.last_visit_at is not None
    assert settlement.balance_delta_cents == 0
    assert settlement.points_awarded == 3


@pytest.mark.parametrize("prior_balance", [0, -1200, 4000])
def test_tab_settlement_decreases_balance_by_total(db_session, regular, prior_balance):
    regular.balance_cents = prior_balance
    db_session.commit()
    order = _order(quantity=2)

    payment_service.settle(order.id, "TAB", 2000, client_id=regular.id)

    assert db_session.get(Client, regular.id).balance_cents == prior_balance - 2000


def test_tab_then_repayment_scenario(db_session, regular):
    order = order_service.place_order(
        [{"name": "Cocktail du jour", "quantity": 1, "price_cents": 2500}],
        "T1",
        client_id=regular.id,
    ).order

    settlement = payment_service.settle(order.id, "TAB", 2500)

    client = db_session.get(Client, regular.id)
    assert client.balance_cents == -2500
    assert client.loyalty_points == 2
    assert settlement.points_awarded == 2
    assert client.has_debt is True

    client_service.adjust_balance(regular.id, 2500)
    assert db_session.get(Client, regular.id).balance_cents == 0


def test_settlement_frees_table_and_marks_paid(db_session, table_s1):
    order = _order()
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"

    settlement = payment_service.settle(order.id, "CARD", order.total_cents)

    paid = db_session.get(Order, order.id)
    assert paid.status == "PAID"
    assert paid.payment_method == "CARD"
    assert paid.paid_at is not None
    assert db_session.get(DiningTable, table_s1.id).status == "FREE"
    assert settlement.client is None
    assert settlement.points_awarded == 0


def test_settlement_without_client_skips_client_effects(db_session, regular):
    order = _order()
    payment_service.settle(order.id, "MOBILE_MONEY", 1000)

    client = db_session.get(Client, regular.id)
    assert client.total_spent_cents == 0
    assert client.loyalty_points == 0


def test_client_given_at_settlement_is_snapshotted(db_session, regular):
    order = _order()
    payment_service.settle(order.id, "CASH", 1000, client_id=regular.id)

    paid = db_session.get(Order, order.id)
    assert paid.client_id == regular.id
    assert paid.client_name == "Marie Dupont"


def test_double_settlement_rejected(db_session, regular):
    order = _order()
    payment_service.settle(order.id, "TAB", 1000, client_id=regular.id)

    with pytest.raises(PaymentError):
        payment_service.settle(order.id, "TAB", 1000, client_id=regular.id)

    client = db_session.get(Client, regular.id)
    assert client.balance_cents == -1000
    assert client.total_spent_cents == 1000


def test_tab_without_client_still_settles(db_session, table_s1):
    order = _order()

    settlement = payment_service.settle(order.id, "TAB", 1000)

    paid = db_session.get(Order, order.id)
    assert paid.status == "PAID"
    assert paid.payment_method == "TAB"
    assert paid.client_id is None
    assert db_session.get(DiningTable, table_s1.id).status == "FREE"
    assert settlement.client is None
    assert settlement.balance_delta_cents == 0


def test_tab_for_deleted_client_skips_debt(db_session, regular, table_s1):
    order = _order(client_id=regular.id)
    client_service.delete_client(regular.id)

    settlement = payment_service.settle(order.id, "TAB", 1000)

    assert db_session.get(Order, order.id).status == "PAID"
    assert db_session.get(DiningTable, table_s1.id).status == "FREE"
    assert settlement.client is None


def test_invalid_method_and_amount(db_session):
    order = _order()
    with pytest.raises(PaymentError):
        payment_service.settle(order.id, "CHEQUE", 1000)
    with pytest.raises(PaymentError):
        payment_service.settle(order.id, "CASH", -1)
    with pytest.raises(PaymentError):
        payment_service.settle(order.id, "CASH", 10.5)


def test_unknown_order(db_session):
    with pytest.raises(NotFoundError):
        payment_service.settle(4242, "CASH", 1000)


def test_deleted_client_is_skipped_for_cash(db_session, regular):
    order = _order(client_id=regular.id)
    client_service.delete_client(regular.id)

    settlement = payment_service.settle(order.id, "CASH", 1000)

    assert settlement.client is None
    assert db_session.get(Order, order.id).status == "PAID"
    assert db_session.get(Order, order.id).client_name == "Marie Dupont"


def test_settlement_is_all_or_nothing(db_session, regular, table_s1, monkeypatch):
    order = _order()

    def boom(*args, **kwargs):
        raise RuntimeError("client ledger unavailable")

    monkeypatch.setattr(client_service, "record_settlement", boom)

    with pytest.raises(RuntimeError):
        payment_service.settle(order.id, "TAB", 1000, client_id=regular.id)

    assert db_session.get(Order, order.id).status == "PENDING"
    assert db_session.get(Order, order.id).payment_method is None
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"
    assert db_session.get(Client, regular.id).balance_cents == 0


def test_loyalty_points_floor():
    assert payment_service.loyalty_points_for(0) == 0
    assert payment_service.loyalty_points_for(999) == 0
    assert payment_service.loyalty_points_for(1000) == 1
    assert payment_service.loyalty_points_for(2599) == 2


def test_payment_summary(db_session):
    order = _order(quantity=2)
    summary = payment_service.get_payment_summary(order.id)

    assert summary["is_paid"] is False
    assert summary["total_cents"] == 2000
    assert summary["loyalty_points_value"] == 2
