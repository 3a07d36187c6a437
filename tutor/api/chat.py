"""Chat endpoints: complete and streamed answers from the tutor agents."""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from tutor.agent.chat_agent import AgentService, get_agent_service
from tutor.models.schemas import ChatRequest, ChatResponse, StreamChunk, StreamStatus
from tutor.session.gateway import GatewayError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: AgentService = Depends(get_agent_service),
) -> ChatResponse:
    """Answer a question in one response.

    Raises:
        422: Neither message nor image, unknown subject, or invalid image.
        502: The model provider failed.
    """
    try:
        answer = await service.generate(request.message, request.subject, request.image)
    except GatewayError as e:
        logger.warning(f"Chat request failed for {request.subject.value}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The tutor could not answer right now",
        ) from e

    return ChatResponse(response=answer, subject=request.subject)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    service: AgentService = Depends(get_agent_service),
) -> StreamingResponse:
    """Stream an answer as Server-Sent Events.

    Every event is a StreamChunk. The last one has done=true and either
    status=complete or status=error with the error text.
    """

    async def event_stream() -> AsyncGenerator[str]:
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.GENERATING))
        try:
            async for content in service.stream_response(
                request.message, request.subject, request.image
            ):
                yield _sse(StreamChunk(content=content, done=False))
        except GatewayError as e:
            logger.warning(f"Stream failed for {request.subject.value}: {e}")
            yield _sse(
                StreamChunk(
                    content="",
                    done=True,
                    status=StreamStatus.ERROR,
                    error=str(e) or type(e).__name__,
                )
            )
            return
        yield _sse(StreamChunk(content="", done=True, status=StreamStatus.COMPLETE))

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
