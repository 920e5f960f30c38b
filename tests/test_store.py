import pytest
from sqlalchemy import select

from conftest import TEST_SETTINGS, config_with
from voute.app import create_app
from voute.errors import StorageError
from voute.extensions import db
from voute.models import Document
from voute.schemas import Status
from voute.store import InMemoryStore, SqlDocumentStore


@pytest.fixture
def sql_app():
    app = create_app(TEST_SETTINGS)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def test_sql_store_round_trips_reservations(sql_app, make_reservation):
    store = SqlDocumentStore()
    first = store.insert_reservation(make_reservation(table_id=1, table_name="Table 1"))
    second = store.insert_reservation(make_reservation(time="12:00"))

    assert [r.id for r in store.all_reservations()] == [first.id, second.id]
    assert store.get_reservation(first.id).to_json() == first.to_json()
    assert store.get_reservation("missing") is None

    changed = first.model_copy(update={"status": Status.CONFIRMED})
    assert store.update_reservation(changed) is True
    assert store.get_reservation(first.id).status is Status.CONFIRMED

    assert store.delete_reservation(second.id) is True
    assert store.delete_reservation(second.id) is False
    assert [r.id for r in store.all_reservations()] == [first.id]


def test_sql_store_keeps_whole_documents(sql_app, make_reservation):
    store = SqlDocumentStore()
    reservation = store.insert_reservation(make_reservation(table_id=4, table_name="Table 4"))
    store.set_config(config_with(2, 4))

    rows = {d.key: d.body for d in db.session.scalars(select(Document))}

    assert set(rows) == {"reservations", "config"}
    stored = rows["reservations"]["reservations"][0]
    assert stored["id"] == reservation.id
    assert stored["date"] == "2026-10-24"
    assert stored["tableId"] == 4
    assert stored["status"] == "pending"
    assert [t["capacity"] for t in rows["config"]["tables"]] == [2, 4]


def test_sql_store_returns_none_before_first_write(sql_app):
    store = SqlDocumentStore()
    assert store.get_config() is None
    assert store.all_reservations() == []


def test_update_of_missing_record_reports_false(sql_app, make_reservation):
    store = SqlDocumentStore()
    assert store.update_reservation(make_reservation()) is False


def test_sql_store_wraps_database_errors():
    app = create_app(TEST_SETTINGS)
    with app.app_context():
        store = SqlDocumentStore()
        with pytest.raises(StorageError):
            store.all_reservations()


def test_in_memory_store_copies_documents(make_reservation):
    store = InMemoryStore()
    reservation = store.insert_reservation(make_reservation())

    loaded = store.all_reservations()
    loaded[0].name = "Someone Else"

    assert store.get_reservation(reservation.id).name == "Camille Martin"
