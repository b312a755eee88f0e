"""Tests for importing exported sessions into the store."""

from datetime import datetime, timezone
from io import BytesIO
import json

import pytest

from gymtracker.load.legacy import load_sessions_from_file
from gymtracker.models import SessionCategory
from gymtracker.store.sessions import SESSIONS_KEY, SessionStore
from tests._factories import LegacySessionFactory, SequentialIds, SessionFactory


@pytest.fixture
def existing(store: SessionStore, session_factory: SessionFactory) -> SessionStore:
    """A store holding one completed session with ID "existing"."""
    session = session_factory.make(
        {
            "id": "existing",
            "notes": "original",
            "start_time": datetime(2024, 2, 1, 12, tzinfo=timezone.utc),
        }
    )
    store.import_sessions([session.to_json_dict()])
    return store


def current_record(session_id: str, start: str, **kwargs) -> dict:
    return {
        "id": session_id,
        "startTime": start,
        "endTime": start,
        "exercises": [],
        **kwargs,
    }


class TestCurrentFormat:
    def test_adds_new_sessions(self, existing: SessionStore):
        added = existing.import_sessions(
            [
                current_record("new-1", "2024-03-01T10:00:00Z", sessionType="legs"),
                current_record("new-2", "2024-01-01T10:00:00Z"),
            ]
        )
        assert added == 2
        assert [s.id for s in existing.sessions] == ["new-1", "existing", "new-2"]
        assert existing.get_session_by_id("new-1").category is SessionCategory.LEGS

    def test_duplicate_id_is_dropped(self, existing: SessionStore):
        added = existing.import_sessions(
            [current_record("existing", "2030-01-01T00:00:00Z", notes="imported")]
        )
        assert added == 0
        assert existing.total_sessions == 1
        kept = existing.get_session_by_id("existing")
        assert kept.notes == "original"
        assert kept.start_time == datetime(2024, 2, 1, 12, tzinfo=timezone.utc)

    def test_duplicates_within_batch_keep_first(self, store: SessionStore):
        added = store.import_sessions(
            [
                current_record("dup", "2024-03-01T10:00:00Z", notes="first"),
                current_record("dup", "2024-03-02T10:00:00Z", notes="second"),
            ]
        )
        assert added == 1
        assert store.get_session_by_id("dup").notes == "first"

    def test_persists_sorted_collection(self, existing: SessionStore, storage):
        existing.import_sessions([current_record("newest", "2025-01-01T00:00:00Z")])
        stored = json.loads(storage.items[SESSIONS_KEY])
        assert [s["id"] for s in stored] == ["newest", "existing"]

    def test_missing_exercise_ids_are_normalized(self, store: SessionStore):
        store.import_sessions(
            [
                current_record(
                    "s",
                    "2024-03-01T10:00:00Z",
                    exercises=[
                        {"name": "Squat", "sets": []},
                        {"id": 7, "name": "Sled Push", "sets": []},
                        {"id": "", "name": "Plank", "sets": []},
                        {"id": "kept_id", "name": "Anything", "sets": []},
                    ],
                )
            ]
        )
        exercise_ids = [e.id for e in store.get_session_by_id("s").exercises]
        assert exercise_ids == ["squat", "generated-1", "plank", "kept_id"]

    def test_numeric_session_id_becomes_string(self, store: SessionStore):
        store.import_sessions([current_record(5, "2024-03-01T10:00:00Z")])
        assert store.get_session_by_id("5") is not None

    def test_missing_session_id_is_generated(self, store: SessionStore):
        record = current_record("x", "2024-03-01T10:00:00Z")
        del record["id"]
        store.import_sessions([record])
        assert [s.id for s in store.sessions] == ["generated-1"]

    def test_invalid_items_are_skipped(self, store: SessionStore, caplog):
        added = store.import_sessions(
            [
                current_record("good", "2024-03-01T10:00:00Z"),
                {"id": "no-start"},
                "not an object",
                current_record("bad-time", "someday"),
            ]
        )
        assert added == 1
        assert [s.id for s in store.sessions] == ["good"]
        assert "Skipping imported" in caplog.text

    def test_unknown_category_becomes_absent(self, store: SessionStore):
        store.import_sessions(
            [current_record("s", "2024-03-01T10:00:00Z", sessionType="pilates")]
        )
        assert store.get_session_by_id("s").category is None

    def test_accepts_session_models(self, store: SessionStore, session_factory):
        session = session_factory.make({"id": "model"})
        store.import_sessions([session])
        assert store.get_session_by_id("model") == session
        assert store.get_session_by_id("model") is not session

    def test_empty_list(self, existing: SessionStore):
        assert existing.import_sessions([]) == 0
        assert existing.total_sessions == 1


class TestLegacyFormat:
    def test_converts_and_adds(self, store: SessionStore):
        factory = LegacySessionFactory()
        records = [
            factory.make({"StartTime": "2023-06-01T17:00:00Z", "SessionType": 3}),
            factory.make({"StartTime": "2023-06-03T17:00:00Z", "SessionType": 0}),
        ]
        added = store.import_sessions(records)
        assert added == 2
        newest, oldest = store.sessions
        assert newest.id == "generated-2"
        assert newest.category is None
        assert oldest.id == "generated-1"
        assert oldest.category is SessionCategory.LEGS
        assert len(oldest.exercises[0].sets) == 3

    def test_uses_import_id_generator(self, store: SessionStore):
        ids = SequentialIds("legacy")
        store.import_sessions([LegacySessionFactory().make()], id_generator=ids)
        assert store.sessions[0].id == "legacy-1"
        assert ids.calls == 1

    def test_conflicting_generated_id_is_dropped(self, existing: SessionStore):
        added = existing.import_sessions(
            [LegacySessionFactory().make()], id_generator=lambda: "existing"
        )
        assert added == 0
        assert existing.get_session_by_id("existing").notes == "original"

    def test_malformed_legacy_records_are_kept(self, store: SessionStore):
        factory = LegacySessionFactory()
        records = [
            factory.make(),
            factory.make({"Exercises": "lots"}),
            factory.make(
                {"Exercises": [{"Name": "Squat", "Sets": 3, "Reps": 10.5, "Weight": 50}]}
            ),
            factory.make({"Exercises": [{"Name": 42, "Sets": 1}]}),
        ]
        assert store.import_sessions(records) == 4
        assert store.total_sessions == 4

    def test_non_object_legacy_item_skipped(self, store: SessionStore):
        factory = LegacySessionFactory()
        records = [factory.make(), "not a session", factory.make()]
        assert store.import_sessions(records) == 2

    def test_uncatalogued_exercise_uses_store_generator(self, store: SessionStore):
        record = LegacySessionFactory().make(
            {"Exercises": [{"Name": "Sled Push", "Sets": 2, "Reps": 8}]}
        )
        store.import_sessions([record], id_generator=SequentialIds("legacy"))
        session = store.sessions[0]
        assert session.id == "legacy-1"
        assert session.exercises[0].id == "generated-1"

    def test_import_from_file(self, store: SessionStore):
        factory = LegacySessionFactory()
        payload = json.dumps([factory.make() for _ in range(4)]).encode("utf-8")
        data = load_sessions_from_file(BytesIO(payload))
        assert store.import_sessions(data) == 4


class TestInvalidInput:
    @pytest.mark.parametrize(
        "data", [None, {"sessions": []}, "[]", 42, ("a", "b")]
    )
    def test_non_list_raises(self, store: SessionStore, data):
        with pytest.raises(ValueError, match="Invalid import format"):
            store.import_sessions(data)
        assert store.total_sessions == 0
