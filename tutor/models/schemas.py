import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tutor.parsing.image_encoder import ImageEncodingError, decode_image


class Subject(str, Enum):
    """Academic subjects a question can be asked about."""

    ALGEBRA = "Algebra"
    HISTORY = "History"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"


class Role(str, Enum):
    """Author of a transcript message."""

    USER = "user"
    MODEL = "model"


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Message(BaseModel):
    """A single transcript entry.

    Attributes:
        id: Unique message identifier.
        role: Who wrote the message.
        content: Message text, empty for image-only submissions.
        image: Base64-encoded image attached by the user.
        image_type: MIME type of the attached image.
        timestamp: Creation time (UTC).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str = ""
    image: str | None = None
    image_type: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_user(
        cls, content: str, image: str | None = None, image_type: str | None = None
    ) -> "Message":
        return cls(role=Role.USER, content=content, image=image, image_type=image_type)

    @property
    def image_data_url(self) -> str | None:
        if self.image is None:
            return None
        return f"data:{self.image_type or 'image/png'};base64,{self.image}"

    @classmethod
    def from_model(cls, content: str) -> "Message":
        return cls(role=Role.MODEL, content=content)


class ChatRequest(BaseModel):
    """Request payload for the chat endpoints.

    Attributes:
        message: The user's question, may be empty when an image is attached.
        subject: Subject the question belongs to.
        image: Optional base64-encoded image.
    """

    message: str = ""
    subject: Subject
    image: str | None = None

    @field_validator("image")
    @classmethod
    def validate_image(cls, v: str | None) -> str | None:
        """Reject image payloads that are not valid base64."""
        if v is None:
            return v
        try:
            decode_image(v)
        except ImageEncodingError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def require_message_or_image(self) -> "ChatRequest":
        if not self.message.strip() and self.image is None:
            raise ValueError("Either a message or an image is required")
        return self


class ChatResponse(BaseModel):
    """Complete (non-streamed) answer from the tutor."""

    response: str
    subject: Subject


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status (generating, complete, error).
        error: Error message if something went wrong.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    error: str | None = None
