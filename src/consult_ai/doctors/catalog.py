"""Static catalog of AI specialist agents available for voice consultations."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import ConfigDict

from consult_ai.models import CamelModel


class DoctorAgent(CamelModel):
    """One AI specialist the user can consult."""

    model_config = ConfigDict(frozen=True)

    id: int
    specialist: str
    description: str
    image: str
    agent_prompt: str
    voice_id: str
    subscription_required: bool = False


_AGENTS: tuple[DoctorAgent, ...] = (
    DoctorAgent(
        id=1,
        specialist="General Physician",
        description="Helps with everyday health concerns and common symptoms.",
        image="/doctor1.png",
        agent_prompt="You are a friendly General Physician AI. Greet the user and quickly ask "
        "about their symptoms. Give brief, clear advice in one or two sentences.",
        voice_id="will",
    ),
    DoctorAgent(
        id=2,
        specialist="Pediatrician",
        description="Expert in children's health, from babies to teens.",
        image="/doctor2.png",
        agent_prompt="You are a kind Pediatrician AI. Ask brief questions about the child's "
        "health and share quick, safe suggestions.",
        voice_id="chris",
        subscription_required=True,
    ),
    DoctorAgent(
        id=3,
        specialist="Dermatologist",
        description="Handles skin issues like rashes, acne, or infections.",
        image="/doctor3.png",
        agent_prompt="You are a knowledgeable Dermatologist AI. Ask short questions about the "
        "skin issue and give simple, clear advice.",
        voice_id="sarge",
        subscription_required=True,
    ),
    DoctorAgent(
        id=4,
        specialist="Psychologist",
        description="Supports mental health and emotional well-being.",
        image="/doctor4.png",
        agent_prompt="You are a caring Psychologist AI. Ask how the user is feeling emotionally "
        "and give short, supportive tips.",
        voice_id="susan",
        subscription_required=True,
    ),
    DoctorAgent(
        id=5,
        specialist="Pulmonologist",
        description="Treats cough, breathlessness, and other respiratory conditions.",
        image="/doctor5.png",
        agent_prompt="You are a calm Pulmonologist AI. Ask about cough, breathing and chest "
        "tightness and give short, practical advice.",
        voice_id="eileen",
        subscription_required=True,
    ),
    DoctorAgent(
        id=6,
        specialist="Cardiologist",
        description="Focuses on heart health and blood pressure issues.",
        image="/doctor6.png",
        agent_prompt="You are a calm Cardiologist AI. Ask about heart symptoms and offer brief, "
        "helpful advice.",
        voice_id="charlotte",
        subscription_required=True,
    ),
    DoctorAgent(
        id=7,
        specialist="Gastroenterologist",
        description="Handles digestion, nausea, diarrhea and stomach pain.",
        image="/doctor7.png",
        agent_prompt="You are a practical Gastroenterologist AI. Ask about digestive symptoms "
        "and give short, clear suggestions.",
        voice_id="ayla",
        subscription_required=True,
    ),
    DoctorAgent(
        id=8,
        specialist="Endocrinologist",
        description="Specializes in diabetes, thyroid and hormone-related conditions.",
        image="/doctor8.png",
        agent_prompt="You are a precise Endocrinologist AI. Ask about blood sugar, weight and "
        "energy levels and give brief guidance.",
        voice_id="aaliyah",
        subscription_required=True,
    ),
)

DOCTOR_AGENTS: Mapping[int, DoctorAgent] = MappingProxyType({a.id: a for a in _AGENTS})


def list_agents() -> list[DoctorAgent]:
    """All agents in catalog order."""
    return list(_AGENTS)


def get_agent(agent_id: int) -> DoctorAgent | None:
    return DOCTOR_AGENTS.get(agent_id)
