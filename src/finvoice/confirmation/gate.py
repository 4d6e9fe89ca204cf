"""Confirmation gate for destructive and data-creating actions.

A single-slot state machine: the gate is either Idle or holding exactly
one PendingConfirmation. A new request supersedes the previous one, which
is resolved through its cancel path. Every request resolves exactly once,
by confirm, cancel, supersede or timeout.
"""

import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from ..router.normalize import normalize_text
from .prompts import (
    CANCEL_PATTERNS,
    CONFIRM_PATTERNS,
    MESSAGES,
    ConfirmableAction,
    build_prompt,
)

logger = logging.getLogger(__name__)

# Timing constants
CONFIRMATION_TIMEOUT_S: float = 30.0  # Auto-cancel after this long

_RESPONSE_PUNCTUATION = str.maketrans("", "", ".,!?¿¡")


class GateState(Enum):
    """States of the confirmation gate."""

    IDLE = auto()
    AWAITING_CONFIRMATION = auto()


@dataclass
class PendingConfirmation:
    """A request waiting for the user's yes or no.

    Attributes:
        id: Unique request identifier.
        action: Kind of action being confirmed.
        prompt_text: Prompt spoken to the user.
        on_confirm: Called once if the user confirms.
        on_cancel: Called once on cancel, supersede or timeout.
        data: Caller data shown with the request.
        command: Action to execute when confirmed.
        expires_at: Monotonic deadline for the timeout.
    """

    id: str
    action: ConfirmableAction
    prompt_text: str
    on_confirm: Callable[[], None] | None = None
    on_cancel: Callable[[], None] | None = None
    data: dict[str, Any] | None = None
    command: Any = None
    expires_at: float = 0.0


@dataclass
class ConfirmationResponse:
    """Result of matching text against the confirm/cancel vocabularies."""

    is_response: bool
    confirmed: bool | None = None
    message: str | None = None


@dataclass
class ConfirmationResult:
    """Outcome of resolving (or trying to resolve) the gate.

    Attributes:
        message: Informational text for the user.
        confirmed: True if the request was confirmed.
        resolved: False when there was no pending request (no-op).
        action: Kind of the resolved request.
        command: Command object to execute when confirmed.
        data: Caller data attached to the request.
        timed_out: True when resolved by the timeout.
    """

    message: str
    confirmed: bool = False
    resolved: bool = False
    action: ConfirmableAction | None = None
    command: Any = None
    data: dict[str, Any] | None = field(default=None)
    timed_out: bool = False


class ConfirmationGate:
    """Holds at most one action awaiting explicit user consent."""

    def __init__(
        self,
        timeout_seconds: float = CONFIRMATION_TIMEOUT_S,
        language: str = "es",
        on_timeout: Callable[[ConfirmationResult], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the confirmation gate.

        Args:
            timeout_seconds: Seconds before a pending request auto-cancels
            language: Language for prompts and messages ("es" or "en")
            on_timeout: Optional callback receiving the timeout result
            clock: Monotonic time source
        """
        self._timeout = timeout_seconds
        self.language = language
        self.on_timeout = on_timeout
        self._clock = clock
        self._pending: PendingConfirmation | None = None
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> GateState:
        """Current gate state."""
        with self._lock:
            return GateState.IDLE if self._pending is None else GateState.AWAITING_CONFIRMATION

    @property
    def is_waiting_for_confirmation(self) -> bool:
        """Return True if a request is pending."""
        with self._lock:
            return self._pending is not None

    @property
    def pending(self) -> PendingConfirmation | None:
        """The pending request, if any."""
        with self._lock:
            return self._pending

    def request_confirmation(
        self,
        action: ConfirmableAction,
        on_confirm: Callable[[], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
        custom_prompt: str | dict[str, str] | None = None,
        data: dict[str, Any] | None = None,
        command: Any = None,
        language: str | None = None,
    ) -> str:
        """Open the gate for an action and arm the timeout.

        Any previously pending request is superseded and resolved through
        its cancel path.

        Returns:
            The prompt to speak to the user.
        """
        lang = language or self.language
        prompt = build_prompt(action, lang, custom_prompt)
        confirmation = PendingConfirmation(
            id=f"confirm_{uuid.uuid4().hex[:12]}",
            action=action,
            prompt_text=prompt,
            on_confirm=on_confirm,
            on_cancel=on_cancel,
            data=data,
            command=command,
            expires_at=self._clock() + self._timeout,
        )

        with self._lock:
            self._cancel_timer_unsafe()
            superseded = self._pending
            self._pending = confirmation
            self._timer = threading.Timer(
                self._timeout, self._handle_timeout, args=(confirmation.id,)
            )
            self._timer.daemon = True
            self._timer.start()

        logger.info(f"Awaiting confirmation for {action.value} ({confirmation.id})")

        if superseded is not None:
            logger.info(f"Confirmation {superseded.id} superseded by {confirmation.id}")
            if superseded.on_cancel is not None:
                superseded.on_cancel()

        return prompt

    def check_confirmation_response(self, text: str) -> ConfirmationResponse:
        """Match text against the confirm and cancel vocabularies.

        Text matching neither leaves the gate untouched.
        """
        with self._lock:
            has_pending = self._pending is not None
        if not has_pending:
            return ConfirmationResponse(is_response=False)

        normalized = normalize_text(text).translate(_RESPONSE_PUNCTUATION)

        if _matches_any(normalized, CONFIRM_PATTERNS):
            return ConfirmationResponse(
                is_response=True, confirmed=True, message=MESSAGES["confirmed"][self.language]
            )
        if _matches_any(normalized, CANCEL_PATTERNS):
            return ConfirmationResponse(
                is_response=True, confirmed=False, message=MESSAGES["cancelled"][self.language]
            )
        return ConfirmationResponse(is_response=False)

    def confirm_action(self) -> ConfirmationResult:
        """Confirm the pending request and invoke its on_confirm.

        Safe to call with nothing pending.
        """
        pending = self._take_pending()
        if pending is None:
            return ConfirmationResult(message=MESSAGES["no_pending"][self.language])

        logger.info(f"Confirmed {pending.action.value} ({pending.id})")
        if pending.on_confirm is not None:
            pending.on_confirm()

        return ConfirmationResult(
            message=MESSAGES["executed"][self.language],
            confirmed=True,
            resolved=True,
            action=pending.action,
            command=pending.command,
            data=pending.data,
        )

    def cancel_confirmation(self) -> ConfirmationResult:
        """Cancel the pending request and invoke its on_cancel.

        Safe to call with nothing pending.
        """
        pending = self._take_pending()
        if pending is None:
            return ConfirmationResult(message=MESSAGES["nothing_to_cancel"][self.language])

        logger.info(f"Cancelled {pending.action.value} ({pending.id})")
        if pending.on_cancel is not None:
            pending.on_cancel()

        return ConfirmationResult(
            message=MESSAGES["cancelled"][self.language],
            resolved=True,
            action=pending.action,
            command=pending.command,
            data=pending.data,
        )

    def process_confirmation_voice(self, text: str) -> ConfirmationResult | None:
        """Check text and resolve the gate if it is a yes or no.

        Returns:
            The resolution, or None if the text was not a response.
        """
        response = self.check_confirmation_response(text)
        if not response.is_response:
            return None
        if response.confirmed:
            return self.confirm_action()
        return self.cancel_confirmation()

    def timeout_remaining(self) -> float:
        """Seconds left before the pending request times out (0 when idle)."""
        with self._lock:
            if self._pending is None:
                return 0.0
            return max(0.0, self._pending.expires_at - self._clock())

    def close(self) -> None:
        """Tear down the gate, cancelling any pending request."""
        if self.is_waiting_for_confirmation:
            self.cancel_confirmation()
        with self._lock:
            self._cancel_timer_unsafe()

    def _take_pending(self) -> PendingConfirmation | None:
        """Atomically clear the pending request and its timer."""
        with self._lock:
            pending = self._pending
            self._pending = None
            self._cancel_timer_unsafe()
            return pending

    def _cancel_timer_unsafe(self) -> None:
        """Cancel timer without lock (must hold lock when calling)."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _handle_timeout(self, confirmation_id: str) -> None:
        """Resolve an expired request through the cancel path."""
        with self._lock:
            pending = self._pending
            if pending is None or pending.id != confirmation_id:
                return
            self._pending = None
            self._timer = None

        logger.info(f"Confirmation {pending.id} timed out")
        if pending.on_cancel is not None:
            pending.on_cancel()

        if self.on_timeout is not None:
            self.on_timeout(
                ConfirmationResult(
                    message=MESSAGES["timed_out"][self.language],
                    resolved=True,
                    action=pending.action,
                    command=pending.command,
                    data=pending.data,
                    timed_out=True,
                )
            )


def _matches_any(text: str, patterns: list[str]) -> bool:
    return any(text == p or text.startswith(p + " ") for p in patterns)


__all__ = [
    "CONFIRMATION_TIMEOUT_S",
    "ConfirmationGate",
    "ConfirmationResponse",
    "ConfirmationResult",
    "GateState",
    "PendingConfirmation",
]
