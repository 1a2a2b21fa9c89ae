"""Suggests catalog specialists for a free-text symptom description."""

from __future__ import annotations

import json
import logging

from consult_ai.doctors.catalog import DoctorAgent, get_agent, list_agents
from consult_ai.exceptions import ValidationError
from consult_ai.prompts import get_prompt
from consult_ai.providers.json_parser import extract_json_array
from consult_ai.providers.llm import LLMClient

log = logging.getLogger(__name__)

MIN_NOTES_CHARS = 3


class DoctorSuggester:
    """Asks the chat model to pick specialists, keeping only catalog entries."""

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    async def suggest(self, notes: str) -> list[DoctorAgent]:
        """Return matching catalog agents in the order the model ranked them.

        Raises:
            ValidationError: ``notes`` is too short to act on.
            ChatProviderError: The chat model could not be reached.
            JSONParseError: The model did not return a JSON array.
        """
        notes = (notes or "").strip()
        if len(notes) < MIN_NOTES_CHARS:
            raise ValidationError("notes too short")

        catalog = json.dumps(
            [a.model_dump(by_alias=True, include={"id", "specialist", "description"}) for a in list_agents()]
        )
        raw = await self._client.complete(
            get_prompt("report", "doctors", "SUGGEST_USER_PROMPT").format(notes=notes),
            system_prompt=get_prompt("report", "doctors", "SUGGEST_SYSTEM_PROMPT").format(catalog=catalog),
        )

        suggested: list[DoctorAgent] = []
        seen: set[int] = set()
        for item in extract_json_array(raw):
            agent_id = item.get("id") if isinstance(item, dict) else item
            try:
                agent = get_agent(int(agent_id))
            except (TypeError, ValueError):
                agent = None
            if agent is None or agent.id in seen:
                log.debug("Dropping suggestion outside the catalog: %r", item)
                continue
            seen.add(agent.id)
            suggested.append(agent)
        return suggested
