"""Tests for the TransactionStore: mutations, persistence and recovery."""

import json

import pytest

from budget_tracker.errors import ValidationError
from budget_tracker.models.audit import AuditEventType
from budget_tracker.models.transaction import TransactionDraft
from budget_tracker.services.storage import InMemoryStorage, StorageReadError
from budget_tracker.store import DEFAULT_STORAGE_KEY, TransactionStore


def _draft(**overrides) -> dict:
    draft = {
        "amount": "12.50",
        "type": "expense",
        "category": "food",
        "description": "Lunch",
        "date": "2024-06-15",
    }
    draft.update(overrides)
    return draft


def _event_types(store: TransactionStore) -> list:
    return [event.event_type for event in store.audit_logger.events]


class UnreadableStorage(InMemoryStorage):
    def read(self, key):
        raise StorageReadError("permission denied")


class TestAdd:
    """Tests for TransactionStore.add."""

    def test_add_appends_one_matching_record(self, store):
        """A valid draft adds exactly one record with the submitted fields."""
        before = len(store.list())
        t = store.add(_draft())
        records = store.list()
        assert len(records) == before + 1
        assert records[0] == t
        assert t.amount == 12.5
        assert t.type.value == "expense"
        assert t.category == "food"
        assert t.description == "Lunch"
        assert t.date == "2024-06-15"

    def test_add_accepts_long_description(self, store):
        t = store.add(_draft(description="x" * 201))
        assert len(t.description) == 201
        assert store.list() == [t]

    def test_add_assigns_id_and_created_at(self, store):
        t = store.add(_draft())
        assert t.id == "tx-1"
        assert t.created_at is not None

    def test_newest_first(self, store):
        """New records are prepended."""
        first = store.add(_draft(description="First"))
        second = store.add(_draft(description="Second"))
        assert [t.id for t in store.list()] == [second.id, first.id]

    def test_add_accepts_a_draft_model(self, store):
        draft = TransactionDraft(amount=5, description="Bus", category="transport", date="2024-06-03")
        t = store.add(draft)
        assert t.category == "transport"

    def test_add_persists(self, store, storage):
        store.add(_draft())
        stored = json.loads(storage.read(DEFAULT_STORAGE_KEY))
        assert [record["id"] for record in stored] == ["tx-1"]
        assert stored[0]["amount"] == 12.5

    @pytest.mark.parametrize("overrides, field", [
        ({"amount": ""}, "amount"),
        ({"amount": "abc"}, "amount"),
        ({"amount": "-4"}, "amount"),
        ({"description": ""}, "description"),
        ({"description": "   "}, "description"),
        ({"date": "2024-02-30"}, "date"),
        ({"type": "transfer"}, "type"),
    ])
    def test_invalid_draft_raises_and_changes_nothing(self, store, storage, overrides, field):
        """Rejected drafts leave both memory and storage untouched."""
        store.add(_draft())
        writes_before = storage.write_count
        snapshot = store.list()

        with pytest.raises(ValidationError) as exc_info:
            store.add(_draft(**overrides))

        assert field in exc_info.value.fields
        assert store.list() == snapshot
        assert storage.write_count == writes_before
        assert AuditEventType.VALIDATION_FAILED in _event_types(store)

    def test_missing_fields_are_all_reported(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add({"type": "expense", "category": "food"})
        assert set(exc_info.value.fields) == {"amount", "description", "date"}
        assert "Amount is required" in str(exc_info.value)

    def test_category_mismatch_is_not_an_error(self, store):
        """An income category on an expense is stored anyway."""
        t = store.add(_draft(category="salary"))
        assert t.category == "salary"

    def test_generated_id_collisions_are_skipped(self, storage):
        ids = iter(["same", "same", "other"])
        store = TransactionStore(storage, id_factory=lambda: next(ids))
        first = store.add(_draft())
        second = store.add(_draft())
        assert (first.id, second.id) == ("same", "other")


class TestRemove:
    """Tests for TransactionStore.remove."""

    def test_remove_restores_previous_state(self, store):
        """Add then delete returns to the pre-add list."""
        store.add(_draft(description="A"))
        store.add(_draft(description="B"))
        before = store.list()
        added = store.add(_draft(description="C"))
        store.remove(added.id)
        assert store.list() == before

    def test_remove_preserves_relative_order(self, store):
        a = store.add(_draft(description="A"))
        b = store.add(_draft(description="B"))
        c = store.add(_draft(description="C"))
        store.remove(b.id)
        assert [t.id for t in store.list()] == [c.id, a.id]

    def test_remove_unknown_id_is_a_noop(self, store, storage):
        store.add(_draft())
        writes_before = storage.write_count
        store.remove("does-not-exist")
        assert len(store) == 1
        assert storage.write_count == writes_before

    def test_remove_persists(self, store, storage):
        a = store.add(_draft(description="A"))
        store.add(_draft(description="B"))
        store.remove(a.id)
        stored = json.loads(storage.read(DEFAULT_STORAGE_KEY))
        assert [record["description"] for record in stored] == ["B"]
        assert AuditEventType.TRANSACTION_DELETED in _event_types(store)

    def test_removing_last_record_skips_persist(self, store, storage):
        """An empty collection is never written; the previous value stays."""
        a = store.add(_draft())
        writes_before = storage.write_count
        store.remove(a.id)
        assert storage.write_count == writes_before
        assert storage.read(DEFAULT_STORAGE_KEY) is not None
        assert AuditEventType.PERSIST_SKIPPED in _event_types(store)


class TestPersist:
    """Tests for TransactionStore.persist."""

    def test_persist_empty_collection_is_skipped(self, store, storage):
        assert store.persist() is False
        assert DEFAULT_STORAGE_KEY not in storage

    def test_write_failure_is_swallowed(self, clock):
        """A failing write is logged but the mutation still succeeds."""
        storage = InMemoryStorage(fail_writes=True)
        store = TransactionStore(storage, clock=clock)
        t = store.add(_draft())
        assert store.list() == [t]
        assert store.persist() is False
        assert AuditEventType.PERSIST_FAILED in _event_types(store)

    def test_custom_key(self, storage):
        store = TransactionStore(storage, key="myBudget")
        store.add(_draft())
        assert "myBudget" in storage
        assert DEFAULT_STORAGE_KEY not in storage


class TestLoad:
    """Tests for TransactionStore.load_from_persistence."""

    def test_round_trip_reproduces_collection(self, store, storage):
        """Serializing then loading gives an identical ordered collection."""
        store.add(_draft(description="A", amount="1000", type="income", category="salary"))
        store.add(_draft(description="B", amount="250.50"))
        store.add(_draft(description="C", amount="0.1", date="2023-12-31"))

        reloaded = TransactionStore(storage)
        assert reloaded.load_from_persistence() == 3
        assert reloaded.list() == store.list()

    def test_loads_matches_dumps(self, store):
        store.add(_draft())
        store.add(_draft(description="Other"))
        assert TransactionStore.loads(store.dumps()) == store.list()

    def test_absent_key_loads_empty(self, storage):
        store = TransactionStore(storage)
        assert store.load_from_persistence() == 0
        assert store.list() == []

    @pytest.mark.parametrize("raw", [
        "not json",
        "",
        "null",
        '{"id": "1"}',
        '"text"',
        '[1, 2, 3]',
        '[{"amount": 5}]',
        '[{"id": ""}]',
    ])
    def test_corrupt_data_is_discarded(self, raw):
        """Corrupt values load as an empty store and are removed from storage."""
        storage = InMemoryStorage({DEFAULT_STORAGE_KEY: raw})
        store = TransactionStore(storage)
        assert store.load_from_persistence() == 0
        assert store.list() == []
        assert DEFAULT_STORAGE_KEY not in storage
        assert AuditEventType.CORRUPT_DATA_DISCARDED in _event_types(store)

    def test_malformed_fields_are_tolerated(self):
        """Well-shaped records with bad fields are kept with neutral values."""
        raw = json.dumps([
            {"id": "1", "amount": "abc", "type": "expense", "category": "food",
             "description": "x", "date": "bad"},
            {"id": "2", "amount": 10, "type": "income", "category": "salary",
             "description": "y", "date": "2024-06-01"},
        ])
        store = TransactionStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))
        assert store.load_from_persistence() == 2
        first, second = store.list()
        assert first.amount is None and first.date is None
        assert second.amount == 10.0

    def test_duplicate_ids_keep_first(self):
        raw = json.dumps([
            {"id": "1", "amount": 1, "type": "expense", "date": "2024-06-01"},
            {"id": "1", "amount": 2, "type": "expense", "date": "2024-06-01"},
        ])
        store = TransactionStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))
        assert store.load_from_persistence() == 1
        assert store.get("1").amount == 1.0

    def test_original_app_data_loads(self):
        """Data written by the browser version of the app is accepted as-is."""
        raw = json.dumps([{
            "id": "1717236000000",
            "amount": 42.5,
            "type": "expense",
            "category": "entertainment",
            "description": "Cinema",
            "date": "2024-06-01",
            "timestamp": "2024-06-01T10:00:00.000Z",
        }])
        store = TransactionStore(InMemoryStorage({DEFAULT_STORAGE_KEY: raw}))
        assert store.load_from_persistence() == 1
        assert store.get("1717236000000").description == "Cinema"

    def test_unreadable_storage_starts_empty(self):
        store = TransactionStore(UnreadableStorage())
        assert store.load_from_persistence() == 0
        assert AuditEventType.STORAGE_READ_FAILED in _event_types(store)


class TestReads:
    def test_list_returns_a_copy(self, store):
        store.add(_draft())
        listing = store.list()
        listing.clear()
        assert len(store) == 1

    def test_get_and_contains(self, store):
        t = store.add(_draft())
        assert store.get(t.id) == t
        assert store.get("nope") is None
        assert t.id in store
