import pytest

from core.db import StorageError, SubmissionStore


def test_create_all_makes_data_dir(tmp_path):
    path = tmp_path / "nested" / "app.db"
    s = SubmissionStore(f"sqlite:///{path}")
    s.create_all()
    assert path.exists()
    s.engine.dispose()


def test_inserts_return_increasing_ids(store):
    first = store.insert_registration("Ana", "ana@example.com", None, "123")
    second = store.insert_registration("Bia", "bia@example.com", "Rua 1", "456")
    assert second == first + 1

    rows = store.recent("registrations")
    assert [r["name"] for r in rows] == ["Bia", "Ana"]
    assert rows[1]["address"] == ""
    assert rows[0]["receivedAt"].endswith("Z")


def test_recent_orders_by_received_at_and_limits(store):
    store.insert_contact("A", "a@x.com", "old message", received_at="2024-01-01T00:00:00.000Z")
    store.insert_contact("B", "b@x.com", "new message", received_at="2024-06-01T00:00:00.000Z")
    store.insert_contact("C", "c@x.com", "mid message", received_at="2024-03-01T00:00:00.000Z")

    rows = store.recent("contacts", limit=2)
    assert [r["name"] for r in rows] == ["B", "C"]


def test_score_details_optional(store):
    sid = store.insert_score(3.25)
    row = store.recent("scores")[0]
    assert row["id"] == sid
    assert row["score"] == 3.25
    assert row["details"] is None


def test_mail_status_moves_once(store):
    mail_id = store.insert_mail("a@b.com", "Hi", "Body")
    assert store.recent("mails")[0]["status"] == "pending"

    store.mark_mail(mail_id, "sent", sent_at="2024-01-01T00:00:00.000Z")
    row = store.recent("mails")[0]
    assert row["status"] == "sent"
    assert row["sentAt"] == "2024-01-01T00:00:00.000Z"

    with pytest.raises(StorageError):
        store.mark_mail(mail_id, "failed", error="late")
    assert store.recent("mails")[0]["status"] == "sent"


def test_mark_mail_rejects_unknown_status(store):
    mail_id = store.insert_mail("a@b.com", "Hi", "Body")
    with pytest.raises(ValueError):
        store.mark_mail(mail_id, "pending")


def test_mails_ordered_by_id(store):
    ids = [store.insert_mail("a@b.com", f"s{i}", "b") for i in range(3)]
    assert [r["id"] for r in store.recent("mails")] == list(reversed(ids))


def test_counts(store):
    store.insert_score(1.0)
    store.insert_score(2.0)
    store.insert_contact("A", "a@x.com", "hello there")
    assert store.counts() == {"registrations": 0, "contacts": 1, "scores": 2, "mails": 0}


def test_storage_error_when_tables_missing(tmp_path):
    s = SubmissionStore(f"sqlite:///{tmp_path / 'empty.db'}")
    with pytest.raises(StorageError):
        s.insert_score(1.0)
    s.engine.dispose()
