import pytest

from barflow.models import Client, Order
from barflow.services import client_service, order_service
from barflow.services.client_service import ClientError
from barflow.validation import NotFoundError


def test_create_client_starts_with_zeroed_ledger(db_session):
    client = client_service.create_client({"name": "Jean Martin", "email": "jean@example.com"})

    assert client.balance_cents == 0
    assert client.loyalty_points == 0
    assert client.total_spent_cents == 0
    assert client.last_visit_at is not None


def test_create_client_requires_name(db_session):
    with pytest.raises(ClientError):
        client_service.create_client({"name": "   "})
    with pytest.raises(ClientError):
        client_service.create_client({"phone": "0600000000"})
    assert db_session.query(Client).count() == 0


def test_update_client_never_touches_ledger_fields(db_session, regular):
    client_service.update_client(
        regular.id,
        {"phone": "0700000000", "balance_cents": 99999, "loyalty_points": 50, "total_spent_cents": 1},
    )

    client = db_session.get(Client, regular.id)
    assert client.phone == "0700000000"
    assert client.balance_cents == 0
    assert client.loyalty_points == 0
    assert client.total_spent_cents == 0


def test_update_client_rejects_blank_name(db_session, regular):
    with pytest.raises(ClientError):
        client_service.update_client(regular.id, {"name": ""})


def test_adjust_balance(db_session, regular):
    client_service.adjust_balance(regular.id, -1500)
    assert db_session.get(Client, regular.id).balance_cents == -1500
    assert [c.id for c in client_service.list_clients_with_debt()] == [regular.id]

    client_service.adjust_balance(regular.id, 2000)
    assert db_session.get(Client, regular.id).balance_cents == 500
    assert client_service.list_clients_with_debt() == []


def test_adjust_balance_rejects_zero(db_session, regular):
    with pytest.raises(ClientError):
        client_service.adjust_balance(regular.id, 0)
    with pytest.raises(ClientError):
        client_service.adjust_balance(regular.id, "10")


def test_adjust_balance_unknown_client(db_session):
    with pytest.raises(NotFoundError):
        client_service.adjust_balance(31337, 100)


def test_delete_client_keeps_order_snapshot(db_session, regular):
    order = order_service.place_order(
        [{"name": "Mojito", "quantity": 1}], "S1", client_id=regular.id
    ).order
    client_service.delete_client(regular.id)

    assert db_session.get(Client, regular.id) is None
    kept = db_session.get(Order, order.id)
    assert kept.client_id == regular.id
    assert kept.client_name == "Marie Dupont"


def test_list_clients_most_recent_first(db_session, regular):
    newer = client_service.create_client({"name": "Paul"})
    assert [c.id for c in client_service.list_clients()][0] == newer.id
