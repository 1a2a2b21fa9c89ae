"""Pluggable key/value persistence backends for session records."""

from __future__ import annotations

from consult_ai.persistence.file_backend import FilePersistenceBackend
from consult_ai.persistence.memory_backend import MemoryPersistenceBackend
from consult_ai.persistence.protocols import IPersistenceBackend

__all__ = ["IPersistenceBackend", "FilePersistenceBackend", "MemoryPersistenceBackend"]
