import pytest

from barflow.extensions import db
from barflow.models import DiningTable
from barflow.services import table_service, order_service, payment_service
from barflow.services.table_service import TableError
from barflow.validation import ConflictError, NotFoundError


def test_seeded_tables_are_free(db_session):
    tables = table_service.list_tables()
    assert [t.name for t in tables] == ["S1", "S2", "T1", "Bar 1", "VIP A"]
    assert {t.status for t in tables} == {"FREE"}
    assert [t.name for t in table_service.list_tables(zone="Salle")] == ["S1", "S2"]


def test_create_and_delete_table(db_session):
    table = table_service.create_table("T2", "Terrasse")
    assert table.status == "FREE"

    with pytest.raises(ConflictError):
        table_service.create_table("T2", "Terrasse")
    with pytest.raises(TableError):
        table_service.create_table("   ")

    table_service.delete_table(table.id)
    assert table_service.get_table_by_name("T2") is None
    with pytest.raises(NotFoundError):
        table_service.delete_table(table.id)


def test_full_cycle_free_occupied_free(db_session, table_s1):
    order = order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1").order
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"

    payment_service.settle(order.id, "CARD", order.total_cents)
    assert db_session.get(DiningTable, table_s1.id).status == "FREE"


def test_reservation_toggle(db_session, table_s1):
    table = table_service.set_reservation(table_s1.id, True, "Dupont, 21h")
    assert table.status == "RESERVED"
    assert table.reservation_note == "Dupont, 21h"

    table = table_service.set_reservation(table_s1.id, False)
    assert table.status == "FREE"
    assert table.reservation_note is None


def test_reservation_does_not_block_seating(db_session, table_s1):
    table_service.set_reservation(table_s1.id, True, "Birthday")
    order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1")

    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"


def test_occupied_table_cannot_be_toggled(db_session, table_s1):
    order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1")

    with pytest.raises(TableError):
        table_service.set_reservation(table_s1.id, True)
    with pytest.raises(TableError):
        table_service.set_reservation(table_s1.id, False)
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"


def test_table_stays_occupied_while_another_order_is_unpaid(db_session, table_s1):
    first = order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1").order
    second = order_service.place_order([{"name": "Nachos", "quantity": 1}], "S1").order

    payment_service.settle(first.id, "CASH", first.total_cents)
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"

    payment_service.settle(second.id, "CASH", second.total_cents)
    assert db_session.get(DiningTable, table_s1.id).status == "FREE"


def test_reconcile_repairs_occupancy(db_session, table_s1):
    order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1")
    table_s1.status = "FREE"
    db_session.commit()

    changed = table_service.reconcile_table_occupancy()
    db.session.commit()

    assert changed == 1
    db_session.expire_all()
    assert db_session.get(DiningTable, table_s1.id).status == "OCCUPIED"
    assert db_session.query(DiningTable).filter_by(status="OCCUPIED").count() == 1


def test_reconcile_is_a_no_op_when_consistent(db_session):
    order_service.place_order([{"name": "Mojito", "quantity": 1}], "S1")
    assert table_service.reconcile_table_occupancy() == 0
