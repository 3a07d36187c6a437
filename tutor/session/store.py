"""Session store: the only place where the chat session changes.

Wraps the pure reducer with listener notification and the single
asynchronous side effect of the app, the gateway call made by ``submit``.
"""

import asyncio
import logging
from collections.abc import Callable

from tutor.models.schemas import Message, Subject
from tutor.parsing.image_encoder import ImageEncodingError, encode_image
from tutor.session.gateway import Gateway
from tutor.session.state import (
    FALLBACK_ERROR_MESSAGE,
    Action,
    ClearStagedImage,
    ReplyReceived,
    SelectSubject,
    SessionState,
    SetSidebarOpen,
    StagedImage,
    StageInput,
    SubmissionStarted,
    initial_state,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class SessionStore:
    """Holds the authoritative session state and exposes its transitions.

    At most one gateway request is outstanding at a time: ``submit`` checks
    the pending flag and records the user message without yielding to the
    event loop, so a second call made while awaiting is rejected.
    """

    def __init__(
        self,
        gateway: Gateway,
        *,
        state: SessionState | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            gateway: Backend used to generate answers.
            state: Starting state. A fresh session with a welcome message
                is created if not provided.
            timeout: Seconds to wait for the gateway before treating the
                request as failed. None waits indefinitely.
        """
        self._gateway = gateway
        self._state = state if state is not None else initial_state()
        self._timeout = timeout
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> SessionState:
        new_state = reduce(self._state, action)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def select_subject(self, subject: Subject) -> None:
        self.dispatch(SelectSubject(subject=subject))

    def stage_input(self, text: str, image: StagedImage | None = None) -> None:
        self.dispatch(StageInput(text=text, image=image))

    def clear_staged_image(self) -> None:
        self.dispatch(ClearStagedImage())

    def set_sidebar_open(self, open: bool) -> None:
        self.dispatch(SetSidebarOpen(open=open))

    def toggle_sidebar(self) -> None:
        self.set_sidebar_open(not self._state.sidebar_open)

    async def submit(self) -> bool:
        """Send the staged input to the gateway and record the outcome.

        Gateway failures never propagate: they become a model message with
        the fallback error text.

        Returns:
            True if a request was made, False if the call was a no-op
            (pending, nothing staged, or the image could not be encoded).
        """
        state = self._state
        if not state.can_submit:
            logger.debug("Ignoring submit: pending or nothing staged")
            return False

        encoded_image: str | None = None
        image_type: str | None = None
        if state.staged_image is not None:
            try:
                encoded_image = encode_image(state.staged_image.data)
            except ImageEncodingError:
                logger.exception(f"Error processing image {state.staged_image.filename}")
                return False
            image_type = state.staged_image.content_type

        text = state.staged_text
        subject = state.active_subject
        message = Message.from_user(text, encoded_image, image_type)
        self.dispatch(SubmissionStarted(message=message))

        try:
            reply = await asyncio.wait_for(
                self._gateway.generate(text, subject, encoded_image),
                timeout=self._timeout,
            )
        except Exception:
            logger.exception(f"Gateway request failed for subject {subject.value}")
            reply = FALLBACK_ERROR_MESSAGE

        self.dispatch(ReplyReceived(message=Message.from_model(reply)))
        return True
