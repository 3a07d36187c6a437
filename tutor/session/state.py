"""Session state and its pure transition function.

Every change to a chat session is an action passed through ``reduce``.
The reducer never performs I/O and never mutates its input, so the store
stays the single place where side effects (gateway calls) happen.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from tutor.models.schemas import Message, Subject

FALLBACK_ERROR_MESSAGE = "Something went wrong. Please try again."

WELCOME_MESSAGE = """Hi! I'm your **Subject Tutor**.

Pick a subject on the left, send a photo of the task or type the question.

I'll write a step-by-step solution you can copy straight into your notebook,
or put together a clear summary of the topic."""


class StagedImage(BaseModel):
    """Image picked by the user but not yet submitted.

    Attributes:
        filename: Original name of the selected file.
        data: Raw file bytes.
        content_type: MIME type reported by the browser, if any.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    data: bytes
    content_type: str | None = None


class SessionState(BaseModel):
    """Complete state of the single chat session.

    Attributes:
        session_id: Identifier shown in the header.
        transcript: Messages in display order.
        active_subject: Subject passed to the backend on the next submit.
        pending: True while a gateway request is outstanding.
        staged_text: Text typed but not yet submitted.
        staged_image: Image selected but not yet submitted.
        sidebar_open: Whether the subject sidebar is shown on small screens.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    transcript: tuple[Message, ...] = ()
    active_subject: Subject = Subject.ALGEBRA
    pending: bool = False
    staged_text: str = ""
    staged_image: StagedImage | None = None
    sidebar_open: bool = False

    @property
    def has_staged_input(self) -> bool:
        return bool(self.staged_text.strip()) or self.staged_image is not None

    @property
    def can_submit(self) -> bool:
        """Whether submit() would start a request right now."""
        return not self.pending and self.has_staged_input


# === Actions ===


class SelectSubject(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: Subject


class StageInput(BaseModel):
    """Update staged text; replace the staged image only when one is given."""

    model_config = ConfigDict(frozen=True)

    text: str
    image: StagedImage | None = None


class ClearStagedImage(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetSidebarOpen(BaseModel):
    model_config = ConfigDict(frozen=True)

    open: bool


class SubmissionStarted(BaseModel):
    """User message accepted; request about to be sent."""

    model_config = ConfigDict(frozen=True)

    message: Message


class ReplyReceived(BaseModel):
    """Gateway finished, successfully or not; message carries the outcome."""

    model_config = ConfigDict(frozen=True)

    message: Message


Action = (
    SelectSubject
    | StageInput
    | ClearStagedImage
    | SetSidebarOpen
    | SubmissionStarted
    | ReplyReceived
)


def initial_state(*, welcome: bool = True) -> SessionState:
    """Create a fresh session, optionally greeted by the model."""
    if not welcome:
        return SessionState()
    return SessionState(transcript=(Message.from_model(WELCOME_MESSAGE),))


def _append(transcript: tuple[Message, ...], message: Message) -> tuple[Message, ...]:
    # Keep timestamps non-decreasing even if the clock moved backwards.
    if transcript and message.timestamp < transcript[-1].timestamp:
        message = message.model_copy(update={"timestamp": transcript[-1].timestamp})
    return (*transcript, message)


def reduce(state: SessionState, action: Action) -> SessionState:
    """Apply an action and return the resulting state.

    Illegal transitions (a submission while pending or without input, a reply
    while idle) leave the state unchanged.
    """
    if isinstance(action, SelectSubject):
        return state.model_copy(
            update={"active_subject": action.subject, "sidebar_open": False}
        )

    if isinstance(action, StageInput):
        image = action.image if action.image is not None else state.staged_image
        return state.model_copy(update={"staged_text": action.text, "staged_image": image})

    if isinstance(action, ClearStagedImage):
        return state.model_copy(update={"staged_image": None})

    if isinstance(action, SetSidebarOpen):
        return state.model_copy(update={"sidebar_open": action.open})

    if isinstance(action, SubmissionStarted):
        if not state.can_submit:
            return state
        return state.model_copy(
            update={
                "transcript": _append(state.transcript, action.message),
                "staged_text": "",
                "staged_image": None,
                "pending": True,
            }
        )

    if isinstance(action, ReplyReceived):
        if not state.pending:
            return state
        return state.model_copy(
            update={
                "transcript": _append(state.transcript, action.message),
                "pending": False,
            }
        )

    raise TypeError(f"Unknown action: {type(action).__name__}")
