"""Backend gateway contract and the HTTP client implementation.

The session store only knows the ``Gateway`` protocol: one awaitable call
that turns (text, subject, image) into generated text or raises.
"""

import logging
import os
from collections.abc import Callable
from typing import Protocol

import httpx
from pydantic import ValidationError

from tutor.models.schemas import StreamChunk, StreamStatus, Subject

logger = logging.getLogger(__name__)


def default_api_base_url() -> str:
    """API_BASE_URL if set, else the local server on PORT (default 8000)."""
    return os.getenv("API_BASE_URL") or f"http://localhost:{os.getenv('PORT', '8000')}"


API_BASE_URL = default_api_base_url()


class GatewayError(Exception):
    """Raised when the generative backend fails to produce an answer."""

    pass


class Gateway(Protocol):
    async def generate(self, text: str, subject: Subject, image: str | None = None) -> str:
        """Return generated text for a user submission or raise GatewayError."""
        ...


class ApiGateway:
    """Gateway that calls the tutor API and reassembles the SSE stream.

    Attributes:
        on_chunk: Optional callback invoked with every streamed text chunk,
            used by the UI to render the answer while it is generated.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
        on_chunk: Callable[[str], None] | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self.on_chunk = on_chunk

    async def generate(self, text: str, subject: Subject, image: str | None = None) -> str:
        """Consume SSE stream from /chat/stream and return the full answer."""
        payload = {"message": text, "subject": subject.value, "image": image}
        parts: list[str] = []

        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    "/chat/stream",
                    json=payload,
                    headers={"Accept": "text/event-stream"},
                ) as response:
                    response.raise_for_status()
                    async for line in response.aiter_lines():
                        if not line.startswith("data: "):
                            continue
                        chunk = self._parse_chunk(line[6:])
                        if chunk.status == StreamStatus.ERROR or chunk.error is not None:
                            raise GatewayError(chunk.error or "Stream failed")
                        if chunk.done:
                            if not parts:
                                raise GatewayError("Model returned an empty response")
                            return "".join(parts)
                        if chunk.content:
                            parts.append(chunk.content)
                            if self.on_chunk is not None:
                                self.on_chunk(chunk.content)
            except httpx.HTTPStatusError as e:
                raise GatewayError(f"HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise GatewayError(f"Connection failed: {e}") from e

        raise GatewayError("Stream ended before completion")

    @staticmethod
    def _parse_chunk(data: str) -> StreamChunk:
        try:
            return StreamChunk.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Malformed stream chunk: {data!r}")
            raise GatewayError("Malformed response from server") from e
