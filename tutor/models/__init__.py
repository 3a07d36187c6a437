"""Pydantic models shared by the session, the API and the UI.

Models:
    - Subject: Closed set of academic subjects
    - Message: Immutable transcript entry
    - ChatRequest / ChatResponse: Chat endpoint payloads
    - StreamChunk: One Server-Sent Events data frame
"""

from tutor.models.schemas import (
    ChatRequest,
    ChatResponse,
    Message,
    Role,
    StreamChunk,
    StreamStatus,
    Subject,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Message",
    "Role",
    "StreamChunk",
    "StreamStatus",
    "Subject",
]
