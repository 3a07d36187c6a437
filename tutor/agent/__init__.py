"""Agno agent logic for the generative backend.

Responsibilities:
    - Agent initialization with Gemini or OpenAI-compatible models
    - Subject-specific instructions
    - Multimodal (text + image) requests
    - Streaming token generation for the SSE endpoint
"""

from tutor.agent.chat_agent import AgentService, get_agent_service
from tutor.agent.config import AgentConfig, get_agent_config
from tutor.agent.subjects import SUBJECTS, SubjectConfig, get_subject_config

__all__ = [
    "SUBJECTS",
    "AgentConfig",
    "AgentService",
    "SubjectConfig",
    "get_agent_config",
    "get_agent_service",
    "get_subject_config",
]
