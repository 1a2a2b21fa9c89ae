"""AI specialist catalog and symptom-based suggestion."""

from __future__ import annotations

from consult_ai.doctors.catalog import DOCTOR_AGENTS, DoctorAgent, get_agent, list_agents
from consult_ai.doctors.suggest import DoctorSuggester

__all__ = ["DOCTOR_AGENTS", "DoctorAgent", "DoctorSuggester", "get_agent", "list_agents"]
