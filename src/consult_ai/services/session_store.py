"""Session store: consultation sessions and their reports over a persistence backend."""

from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from consult_ai.core.config import PersistenceConfig
from consult_ai.exceptions import PersistenceError, ValidationError
from consult_ai.models import SessionRecord, StructuredReport
from consult_ai.persistence import FilePersistenceBackend, MemoryPersistenceBackend
from consult_ai.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)

_KEY_PREFIX = "sessions/"
_SESSION_ID = re.compile(r"^[\w\-]{1,128}$")


class SessionStore:
    """Reads and writes ``SessionRecord`` rows, at most one per session id.

    Every backend failure is re-raised as ``PersistenceError`` so callers
    never mistake a lost write for success.
    """

    def __init__(self, backend: IPersistenceBackend) -> None:
        self._backend = backend

    @classmethod
    def from_config(cls, config: PersistenceConfig) -> SessionStore:
        backend: IPersistenceBackend
        if config.backend == "file":
            backend = FilePersistenceBackend(base_path=config.store_path)
        else:
            backend = MemoryPersistenceBackend()
        return cls(backend)

    @staticmethod
    def validate_session_id(session_id: str) -> None:
        """Reject ids that cannot be used as storage keys."""
        if not _SESSION_ID.match(session_id or ""):
            raise ValidationError(f"Invalid session id: {session_id!r}")

    @classmethod
    def _key(cls, session_id: str) -> str:
        cls.validate_session_id(session_id)
        return f"{_KEY_PREFIX}{session_id}"

    def _write(self, record: SessionRecord) -> None:
        key = self._key(record.session_id)
        try:
            self._backend.save(key, record.model_dump_json(by_alias=True))
        except Exception as e:
            log.error("Session write failed", extra={"session_id": record.session_id, "error": str(e)})
            raise PersistenceError(f"Failed to persist session {record.session_id}") from e

    def create_session(
        self,
        notes: str,
        selected_doctor: dict[str, Any] | None = None,
        created_by: str = "unknown",
    ) -> SessionRecord:
        """Open a new consultation session with a fresh id."""
        record = SessionRecord(
            session_id=str(uuid.uuid4()),
            notes=notes,
            selected_doctor=selected_doctor or {},
            created_by=created_by,
            created_on=datetime.now(timezone.utc).isoformat(),
        )
        self._write(record)
        log.info("Session created", extra={"session_id": record.session_id})
        return record

    def read_session(self, session_id: str) -> Optional[SessionRecord]:
        """Return the session, or ``None`` when it does not exist."""
        key = self._key(session_id)
        try:
            raw = self._backend.load(key)
        except KeyError:
            return None
        except Exception as e:
            raise PersistenceError(f"Failed to read session {session_id}") from e

        try:
            return SessionRecord.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise PersistenceError(f"Corrupt session record {session_id}") from e

    def update_report(
        self,
        session_id: str,
        report: StructuredReport,
        conversation: Sequence[dict[str, Any]] | None,
    ) -> SessionRecord:
        """Attach a report and transcript to a session, creating the row if missing."""
        record = self.read_session(session_id)
        if record is None:
            log.warning("Report for unknown session; creating it", extra={"session_id": session_id})
            record = SessionRecord(
                session_id=session_id,
                created_on=datetime.now(timezone.utc).isoformat(),
            )
        record.report = report
        record.conversation = [dict(turn) for turn in conversation] if conversation is not None else None
        self._write(record)
        return record

    def list_sessions(self, created_by: str | None = None) -> list[SessionRecord]:
        """All sessions, newest first, optionally filtered by creator."""
        try:
            keys = self._backend.list_keys(_KEY_PREFIX)
        except Exception as e:
            raise PersistenceError("Failed to list sessions") from e

        records: list[SessionRecord] = []
        for key in keys:
            record = self.read_session(key[len(_KEY_PREFIX):])
            if record is None:
                continue
            if created_by is not None and record.created_by != created_by:
                continue
            records.append(record)
        return sorted(records, key=lambda r: r.created_on, reverse=True)
