"""Pytest fixtures and shared test configuration.

Fixtures:
    - gateway: Scriptable in-process gateway for the session store
    - store: SessionStore over that gateway, starting with an empty transcript
    - agent_service: Stub replacing the Agno service behind the API
    - api_app: FastAPI app with the agent service dependency overridden
    - async_client: HTTPX client bound to api_app
"""

import asyncio
from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tutor.agent.chat_agent import get_agent_service
from tutor.api import app
from tutor.models.schemas import Subject
from tutor.session.state import initial_state
from tutor.session.store import SessionStore


class StubGateway:
    """Gateway returning a fixed reply, an error, or blocking until released."""

    def __init__(self) -> None:
        self.reply = "4"
        self.error: Exception | None = None
        self.release: asyncio.Event | None = None
        self.calls: list[tuple[str, Subject, str | None]] = []

    async def generate(self, text: str, subject: Subject, image: str | None = None) -> str:
        self.calls.append((text, subject, image))
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.reply


class StubAgentService:
    """Stands in for AgentService behind the API routes."""

    def __init__(self) -> None:
        self.chunks = ["Step 1. ", "x = 4"]
        self.error: Exception | None = None
        self.calls: list[tuple[str, Subject, str | None]] = []

    async def generate(self, text: str, subject: Subject, image: str | None = None) -> str:
        self.calls.append((text, subject, image))
        if self.error is not None:
            raise self.error
        return "".join(self.chunks)

    async def stream_response(
        self, text: str, subject: Subject, image: str | None = None
    ) -> AsyncGenerator[str]:
        self.calls.append((text, subject, image))
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def store(gateway: StubGateway) -> SessionStore:
    """Store with no welcome message so transcript counts start at zero."""
    return SessionStore(gateway, state=initial_state(welcome=False))


@pytest.fixture
def agent_service() -> StubAgentService:
    return StubAgentService()


@pytest.fixture
def api_app(agent_service: StubAgentService) -> Generator[FastAPI]:
    """Return the app with the Agno service replaced by the stub."""
    app.dependency_overrides[get_agent_service] = lambda: agent_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(api_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
