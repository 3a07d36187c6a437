"""Agno agent service implementing the tutor gateway.

One agent per subject, each carrying that subject's instructions. Requests
are stateless: no history or storage is attached, every call sees only the
current question and image.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.media import Image
from agno.models.base import Model
from agno.models.google import Gemini
from agno.models.openai import OpenAIChat

from tutor.agent.config import AgentConfig, get_agent_config
from tutor.agent.subjects import IMAGE_ONLY_PROMPT, get_subject_config
from tutor.models.schemas import Subject
from tutor.parsing.image_encoder import ImageEncodingError, decode_image
from tutor.session.gateway import GatewayError

logger = logging.getLogger(__name__)


class AgentService:
    """Service for managing the Agno tutor agents.

    Wraps Agno's Agent with:
    - Lazily created, cached agent per subject
    - Image attachment from base64 payloads
    - Clean streaming interface for SSE endpoints
    - Provider errors normalized to GatewayError
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._agents: dict[Subject, Agent] = {}

    def _create_model(self) -> Model:
        if self._config.provider == "openai":
            return OpenAIChat(
                id=self._config.model_name,
                api_key=self._config.api_key,
                base_url=self._config.base_url,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        return Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_tokens,
        )

    def _create_agent(self, subject: Subject) -> Agent:
        """Create the Agno agent for a subject.

        Returns:
            Agent with the configured model and the subject's instructions.
        """
        subject_config = get_subject_config(subject)
        return Agent(
            name=f"{subject_config.name} tutor",
            model=self._create_model(),
            description=f"A patient {subject_config.name.lower()} tutor for school students.",
            instructions=subject_config.system_instruction,
            # Output as markdown for rich formatting in UI
            markdown=True,
        )

    def get_agent(self, subject: Subject) -> Agent:
        if subject not in self._agents:
            self._agents[subject] = self._create_agent(subject)
            logger.info(f"Created agent for subject: {subject.value}")
        return self._agents[subject]

    @staticmethod
    def _prepare(text: str, image: str | None) -> tuple[str, list[Image] | None]:
        prompt = text if text.strip() else IMAGE_ONLY_PROMPT
        if image is None:
            return prompt, None
        try:
            return prompt, [Image(content=decode_image(image))]
        except ImageEncodingError as e:
            raise GatewayError(f"Invalid image: {e}") from e

    async def generate(self, text: str, subject: Subject, image: str | None = None) -> str:
        """Get the complete answer for a submission.

        Args:
            text: The user's question, may be empty if an image is given.
            subject: Subject whose agent should answer.
            image: Optional base64-encoded image.

        Returns:
            Generated answer text.

        Raises:
            GatewayError: If the model call fails or returns no content.
        """
        prompt, images = self._prepare(text, image)
        agent = self.get_agent(subject)

        try:
            response = await agent.arun(prompt, images=images)
        except Exception as e:
            logger.error(f"Model call failed for {subject.value}: {e}")
            raise GatewayError(str(e)) from e

        if not response.content:
            raise GatewayError("Model returned an empty response")
        return str(response.content)

    async def stream_response(
        self,
        text: str,
        subject: Subject,
        image: str | None = None,
    ) -> AsyncGenerator[str]:
        """Stream answer chunks for a submission.

        Yields:
            Response text chunks as they arrive.

        Raises:
            GatewayError: If the model call fails mid-stream.
        """
        prompt, images = self._prepare(text, image)
        agent = self.get_agent(subject)

        try:
            response_stream = agent.arun(prompt, images=images, stream=True)
            async for chunk in response_stream:
                if getattr(chunk, "content", None):
                    yield chunk.content
        except Exception as e:
            logger.error(f"Model stream failed for {subject.value}: {e}")
            raise GatewayError(str(e)) from e


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
