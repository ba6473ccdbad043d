"""Tests for SqlAlchemyContactStore on SQLite. Checks rows directly where it matters."""

import threading
import time
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from leadbook.application import ContactInput, ContactUpdate, ImageUpload, StorageError
from leadbook.domain import ContactType, ImageLimitExceeded
from leadbook.infrastructure import (
    SqlAlchemyContactStore,
    create_session_factory,
    create_store_engine,
    create_tables,
)
from leadbook.infrastructure.persistence import sqlalchemy_store
from leadbook.infrastructure.persistence.sql_models import ContactImageRow

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_store_engine("sqlite://")
    create_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(engine) -> SqlAlchemyContactStore:
    return SqlAlchemyContactStore(create_session_factory(engine))


def _image_rows(engine, contact_id: int | None = None) -> int:
    stmt = select(func.count(ContactImageRow.id))
    if contact_id is not None:
        stmt = stmt.where(ContactImageRow.contact_id == contact_id)
    with engine.connect() as conn:
        return conn.execute(stmt).scalar_one()


def _add(store, name="Alice", type_=ContactType.CUSTOMER):
    return store.add_contact(ContactInput(name=name, type=type_))


def _uploads(n: int) -> list[ImageUpload]:
    return [ImageUpload(image_data=PNG_B64, file_name=f"{i}.png") for i in range(n)]


def test_add_get_list(store):
    alice = store.add_contact(
        ContactInput(name="Alice", email="a@example.com", phone="+1202555", type=ContactType.LEAD)
    )
    bob = _add(store, "Bob")
    assert alice.id != bob.id

    found = store.get_contact(alice.id)
    assert found.name == "Alice"
    assert found.email == "a@example.com"
    assert found.type is ContactType.LEAD
    assert found.image_count == 0

    assert [c.name for c in store.list_contacts()] == ["Alice", "Bob"]
    assert store.get_contact(999) is None


def test_list_contacts_counts_images_per_contact(store, engine):
    alice = _add(store, "Alice")
    bob = _add(store, "Bob")
    _add(store, "Carol")
    store.add_images(alice.id, _uploads(3), uploaded_at=T0, max_images=10)
    store.add_images(bob.id, _uploads(1), uploaded_at=T0, max_images=10)

    for contact in store.list_contacts():
        assert contact.image_count == _image_rows(engine, contact.id)


def test_update_contact_keeps_type(store):
    contact = _add(store, "Alice", ContactType.LEAD)
    updated = store.update_contact(contact.id, ContactUpdate(name="Alicia", email=None, phone="+39"))
    assert updated.name == "Alicia"
    assert updated.phone == "+39"
    assert updated.type is ContactType.LEAD
    assert store.update_contact(999, ContactUpdate(name="X")) is None


def test_delete_contact_leaves_no_orphan_images(store, engine):
    alice = _add(store, "Alice")
    bob = _add(store, "Bob")
    store.add_images(alice.id, _uploads(4), uploaded_at=T0, max_images=10)
    store.add_images(bob.id, _uploads(2), uploaded_at=T0, max_images=10)

    assert store.delete_contact(alice.id) is True
    assert _image_rows(engine, alice.id) == 0
    assert _image_rows(engine) == 2
    assert store.delete_contact(alice.id) is False


def test_add_images_over_cap_inserts_nothing(store, engine):
    contact = _add(store)
    store.add_images(contact.id, _uploads(9), uploaded_at=T0, max_images=10)

    with pytest.raises(ImageLimitExceeded) as excinfo:
        store.add_images(contact.id, _uploads(2), uploaded_at=T0, max_images=10)
    assert excinfo.value.current == 9
    assert excinfo.value.remaining == 1
    assert _image_rows(engine, contact.id) == 9

    created = store.add_images(contact.id, _uploads(1), uploaded_at=T0, max_images=10)
    assert len(created) == 1
    assert _image_rows(engine, contact.id) == 10


def test_add_images_missing_contact_returns_none(store, engine):
    assert store.add_images(5, _uploads(1), uploaded_at=T0, max_images=10) is None
    assert _image_rows(engine) == 0


def test_images_round_trip_and_order(store):
    contact = _add(store)
    later = store.add_images(
        contact.id,
        [ImageUpload(image_data=PNG_B64, file_name="later.png", content_type="image/png")],
        uploaded_at=T0 + timedelta(minutes=5),
        max_images=10,
    )[0]
    store.add_images(contact.id, _uploads(2), uploaded_at=T0, max_images=10)

    listed = store.list_images(contact.id)
    assert [i.file_name for i in listed] == ["0.png", "1.png", "later.png"]

    fetched = store.get_image(contact.id, later.id)
    assert fetched.image_data == PNG_B64
    assert fetched.content_type == "image/png"
    assert fetched.uploaded_at == T0 + timedelta(minutes=5)
    assert fetched.uploaded_at.tzinfo is not None


def test_get_and_delete_image_require_owner(store):
    alice = _add(store, "Alice")
    bob = _add(store, "Bob")
    image = store.add_images(alice.id, _uploads(1), uploaded_at=T0, max_images=10)[0]

    assert store.get_image(bob.id, image.id) is None
    assert store.delete_image(bob.id, image.id) is False
    assert store.delete_image(alice.id, image.id) is True
    assert store.count_images(alice.id) == 0


def test_driver_errors_become_storage_error(engine, store):
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE contact_images")
    with pytest.raises(StorageError):
        store.count_images(1)


def test_concurrent_uploads_cannot_exceed_cap(tmp_path, monkeypatch):
    """Second writer must wait for the first to commit before counting."""
    engine = create_store_engine(f"sqlite:///{tmp_path / 'leadbook.db'}")
    create_tables(engine)
    store = SqlAlchemyContactStore(create_session_factory(engine))
    contact = _add(store)
    store.add_images(contact.id, _uploads(9), uploaded_at=T0, max_images=10)

    first_counted = threading.Event()
    real_count = sqlalchemy_store._count_images

    def slow_count(session, contact_id):
        count = real_count(session, contact_id)
        if not first_counted.is_set():
            first_counted.set()
            time.sleep(0.5)
        return count

    monkeypatch.setattr(sqlalchemy_store, "_count_images", slow_count)

    outcomes = []

    def upload():
        try:
            store.add_images(contact.id, _uploads(1), uploaded_at=T0, max_images=10)
        except ImageLimitExceeded:
            outcomes.append("limit")
        else:
            outcomes.append("ok")

    first = threading.Thread(target=upload)
    first.start()
    try:
        assert first_counted.wait(timeout=5)
        second = threading.Thread(target=upload)
        second.start()
        second.join(timeout=10)
    finally:
        first.join(timeout=10)

    try:
        assert sorted(outcomes) == ["limit", "ok"]
        assert _image_rows(engine, contact.id) == 10
    finally:
        engine.dispose()
