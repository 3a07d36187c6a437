"""Conversational session state machine.

Responsibilities:
    - Immutable session state and the reducer that transitions it
    - Store exposing the legal operations and notifying listeners
    - Gateway contract for the generative backend

Two states: idle and awaiting a reply. Only submit() moves to awaiting and
only the gateway outcome moves back.
"""

from tutor.session.gateway import ApiGateway, Gateway, GatewayError
from tutor.session.state import (
    FALLBACK_ERROR_MESSAGE,
    SessionState,
    StagedImage,
    initial_state,
    reduce,
)
from tutor.session.store import SessionStore

__all__ = [
    "FALLBACK_ERROR_MESSAGE",
    "ApiGateway",
    "Gateway",
    "GatewayError",
    "SessionState",
    "SessionStore",
    "StagedImage",
    "initial_state",
    "reduce",
]
