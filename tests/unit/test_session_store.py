"""Tests for SessionStore over memory and file backends."""

from __future__ import annotations

from pathlib import Path

import pytest

from consult_ai.core.config import PersistenceConfig
from consult_ai.exceptions import PersistenceError, ValidationError
from consult_ai.models import StructuredReport
from consult_ai.persistence import FilePersistenceBackend, MemoryPersistenceBackend
from consult_ai.services.session_store import SessionStore
from tests.fakes.fake_persistence import FailingPersistenceBackend, FakePersistenceBackend


class TestCreateAndRead:
    def test_create_session_assigns_uuid(self, session_store: SessionStore) -> None:
        record = session_store.create_session("headache", {"id": 1, "specialist": "General Physician"}, "a@b.c")
        assert len(record.session_id) == 36
        assert record.created_on

        loaded = session_store.read_session(record.session_id)
        assert loaded is not None
        assert loaded.notes == "headache"
        assert loaded.selected_doctor["specialist"] == "General Physician"
        assert loaded.created_by == "a@b.c"
        assert loaded.report is None

    def test_read_missing_returns_none(self, session_store: SessionStore) -> None:
        assert session_store.read_session("does-not-exist") is None

    def test_invalid_id_rejected(self, session_store: SessionStore) -> None:
        with pytest.raises(ValidationError):
            session_store.read_session("a/b")

    def test_corrupt_record_is_persistence_error(self) -> None:
        backend = FakePersistenceBackend()
        backend.save("sessions/bad", "{not json")
        with pytest.raises(PersistenceError, match="Corrupt"):
            SessionStore(backend).read_session("bad")


class TestUpdateReport:
    def test_attaches_report_and_conversation(self, session_store: SessionStore) -> None:
        record = session_store.create_session("cough")
        report = StructuredReport(session_id=record.session_id, chief_complaint="cough")
        conversation = [{"role": "user", "text": "I cough"}]

        session_store.update_report(record.session_id, report, conversation)

        loaded = session_store.read_session(record.session_id)
        assert loaded is not None
        assert loaded.report == report
        assert loaded.conversation == conversation
        assert loaded.notes == "cough"

    def test_one_row_per_session(self, session_store: SessionStore) -> None:
        record = session_store.create_session("cough")
        for complaint in ("cough", "worse cough"):
            session_store.update_report(
                record.session_id, StructuredReport(chief_complaint=complaint), conversation=None
            )
        sessions = session_store.list_sessions()
        assert len(sessions) == 1
        assert sessions[0].report is not None
        assert sessions[0].report.chief_complaint == "worse cough"

    def test_unknown_session_created(self, session_store: SessionStore) -> None:
        session_store.update_report("new-session", StructuredReport(), conversation=[])
        loaded = session_store.read_session("new-session")
        assert loaded is not None
        assert loaded.conversation == []

    def test_write_failure_raises(self) -> None:
        store = SessionStore(FailingPersistenceBackend())
        with pytest.raises(PersistenceError):
            store.update_report("sess-1", StructuredReport(), conversation=[])


class TestListSessions:
    def test_newest_first_and_filtered(self, session_store: SessionStore) -> None:
        first = session_store.create_session("one", created_by="alice")
        second = session_store.create_session("two", created_by="bob")
        third = session_store.create_session("three", created_by="alice")

        sessions = session_store.list_sessions()
        stamps = [r.created_on for r in sessions]
        assert stamps == sorted(stamps, reverse=True)
        assert {r.session_id for r in sessions} == {first.session_id, second.session_id, third.session_id}

        alice = session_store.list_sessions(created_by="alice")
        assert {r.session_id for r in alice} == {first.session_id, third.session_id}


class TestFromConfig:
    def test_memory_backend(self) -> None:
        store = SessionStore.from_config(PersistenceConfig(backend="memory"))
        assert isinstance(store._backend, MemoryPersistenceBackend)

    def test_file_backend_round_trip(self, tmp_path: Path) -> None:
        store = SessionStore.from_config(PersistenceConfig(backend="file", store_path=tmp_path))
        assert isinstance(store._backend, FilePersistenceBackend)

        record = store.create_session("fever")
        assert (tmp_path / f"sessions%2F{record.session_id}.json").is_file()

        reopened = SessionStore(FilePersistenceBackend(tmp_path))
        assert [r.session_id for r in reopened.list_sessions()] == [record.session_id]

    def test_file_backend_lists_ids_with_double_underscore(self, tmp_path: Path) -> None:
        store = SessionStore(FilePersistenceBackend(tmp_path))
        store.update_report("visit__42", StructuredReport(), conversation=[])

        assert [r.session_id for r in store.list_sessions()] == ["visit__42"]
        assert store.read_session("visit__42") is not None
