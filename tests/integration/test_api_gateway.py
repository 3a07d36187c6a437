"""Integration tests for ApiGateway against the real app and broken servers."""

import os
from unittest.mock import patch

import httpx
import pytest
import pytest_check as check
from fastapi import FastAPI
from httpx import ASGITransport

from tutor.models.schemas import Role, Subject
from tutor.session.gateway import ApiGateway, GatewayError, default_api_base_url
from tutor.session.state import FALLBACK_ERROR_MESSAGE, initial_state
from tutor.session.store import SessionStore


def _sse_transport(body: str, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code, text=body, headers={"content-type": "text/event-stream"}
        )

    return httpx.MockTransport(handler)


class TestDefaultApiBaseUrl:
    """Tests for the API address used when none is configured."""

    def test_follows_port(self) -> None:
        with patch.dict(os.environ, {"PORT": "9000"}, clear=True):
            assert default_api_base_url() == "http://localhost:9000"

    def test_defaults_to_8000(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert default_api_base_url() == "http://localhost:8000"

    def test_explicit_url_wins(self) -> None:
        env = {"PORT": "9000", "API_BASE_URL": "http://api.internal:8000"}
        with patch.dict(os.environ, env, clear=True):
            assert default_api_base_url() == "http://api.internal:8000"


class TestApiGatewayWithApp:
    """ApiGateway talking to the FastAPI app in-process."""

    @pytest.fixture
    def gateway(self, api_app: FastAPI) -> ApiGateway:
        return ApiGateway("http://test", transport=ASGITransport(app=api_app))

    async def test_reassembles_streamed_answer(self, gateway: ApiGateway, agent_service) -> None:
        received: list[str] = []
        gateway.on_chunk = received.append

        answer = await gateway.generate("2x = 8", Subject.ALGEBRA)

        check.equal(answer, "Step 1. x = 4")
        check.equal(received, ["Step 1. ", "x = 4"])
        check.equal(agent_service.calls, [("2x = 8", Subject.ALGEBRA, None)])

    async def test_error_chunk_raises(self, gateway: ApiGateway, agent_service) -> None:
        agent_service.error = GatewayError("quota exceeded")

        with pytest.raises(GatewayError, match="quota exceeded"):
            await gateway.generate("question", Subject.HISTORY)

    async def test_error_after_partial_answer_becomes_fallback(
        self, gateway: ApiGateway, agent_service
    ) -> None:
        """A failure mid-stream must not be recorded as the partial answer."""
        agent_service.chunks = ["partial "]
        agent_service.error = GatewayError("")
        store = SessionStore(gateway, state=initial_state(welcome=False))
        store.stage_input("question")

        await store.submit()

        check.equal(store.state.transcript[-1].role, Role.MODEL)
        check.equal(store.state.transcript[-1].content, FALLBACK_ERROR_MESSAGE)

    async def test_empty_answer_raises(self, gateway: ApiGateway, agent_service) -> None:
        agent_service.chunks = []

        with pytest.raises(GatewayError, match="empty response"):
            await gateway.generate("question", Subject.ALGEBRA)

    async def test_empty_answer_becomes_fallback(self, gateway: ApiGateway, agent_service) -> None:
        agent_service.chunks = []
        store = SessionStore(gateway, state=initial_state(welcome=False))
        store.stage_input("question")

        await store.submit()

        assert store.state.transcript[-1].content == FALLBACK_ERROR_MESSAGE

    async def test_validation_error_raises(self, gateway: ApiGateway) -> None:
        with pytest.raises(GatewayError, match="HTTP 422"):
            await gateway.generate("", Subject.HISTORY)

    async def test_store_end_to_end(self, gateway: ApiGateway) -> None:
        """Session store submits through HTTP and records the answer."""
        store = SessionStore(gateway, state=initial_state(welcome=False))
        store.stage_input("2x = 8")

        await store.submit()

        transcript = store.state.transcript
        check.equal([m.role for m in transcript], [Role.USER, Role.MODEL])
        check.equal(transcript[-1].content, "Step 1. x = 4")
        check.is_false(store.state.pending)


class TestApiGatewayFailures:
    """ApiGateway against servers that misbehave."""

    async def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = ApiGateway("http://test", transport=httpx.MockTransport(handler))

        with pytest.raises(GatewayError, match="Connection failed"):
            await gateway.generate("question", Subject.ALGEBRA)

    async def test_server_error_raises(self) -> None:
        gateway = ApiGateway("http://test", transport=_sse_transport("", status_code=500))

        with pytest.raises(GatewayError, match="HTTP 500"):
            await gateway.generate("question", Subject.ALGEBRA)

    async def test_stream_without_done_raises(self) -> None:
        body = 'data: {"content": "partial", "done": false}\n\n'
        gateway = ApiGateway("http://test", transport=_sse_transport(body))

        with pytest.raises(GatewayError, match="ended before completion"):
            await gateway.generate("question", Subject.ALGEBRA)

    @pytest.mark.parametrize(
        "final",
        [
            '{"content": "", "done": true, "status": "error"}',
            '{"content": "", "done": true, "error": ""}',
        ],
    )
    async def test_error_chunk_without_text_raises(self, final: str) -> None:
        body = f'data: {{"content": "partial", "done": false}}\n\ndata: {final}\n\n'
        gateway = ApiGateway("http://test", transport=_sse_transport(body))

        with pytest.raises(GatewayError, match="Stream failed"):
            await gateway.generate("question", Subject.ALGEBRA)

    async def test_malformed_chunk_raises(self) -> None:
        gateway = ApiGateway("http://test", transport=_sse_transport("data: not-json\n\n"))

        with pytest.raises(GatewayError, match="Malformed"):
            await gateway.generate("question", Subject.ALGEBRA)

    async def test_store_turns_connection_error_into_fallback(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = ApiGateway("http://test", transport=httpx.MockTransport(handler))
        store = SessionStore(gateway, state=initial_state(welcome=False))
        store.stage_input("question")

        await store.submit()

        assert store.state.transcript[-1].content == FALLBACK_ERROR_MESSAGE
