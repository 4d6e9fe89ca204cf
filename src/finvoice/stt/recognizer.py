"""Speech recognition engine protocol and result events.

A recognizer streams ``(result_index, results)`` events to its listener,
where each result carries one or more alternative transcripts and a
final flag. Errors arrive as string codes from a small vocabulary and
every session ends with an end event, including after an error.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class CaptureErrorKind(Enum):
    """Capture failures surfaced to the caller."""

    PERMISSION_DENIED = "permission_denied"
    NO_SPEECH = "no_speech"
    NETWORK = "network"
    UNKNOWN = "unknown"


ERROR_CODES: dict[str, CaptureErrorKind] = {
    "not-allowed": CaptureErrorKind.PERMISSION_DENIED,
    "service-not-allowed": CaptureErrorKind.PERMISSION_DENIED,
    "no-speech": CaptureErrorKind.NO_SPEECH,
    "network": CaptureErrorKind.NETWORK,
}

ERROR_MESSAGES: dict[CaptureErrorKind, dict[str, str]] = {
    CaptureErrorKind.PERMISSION_DENIED: {
        "es": "Permiso de micrófono denegado. Actívalo para usar la voz.",
        "en": "Microphone permission denied. Enable it to use voice.",
    },
    CaptureErrorKind.NO_SPEECH: {
        "es": "No se detectó voz. Intenta de nuevo.",
        "en": "No speech detected. Please try again.",
    },
    CaptureErrorKind.NETWORK: {
        "es": "Error de red en el reconocimiento de voz.",
        "en": "Network error during speech recognition.",
    },
    CaptureErrorKind.UNKNOWN: {
        "es": "Error en el reconocimiento de voz.",
        "en": "Speech recognition error.",
    },
}


def map_error_code(code: str) -> CaptureErrorKind:
    """Map an engine error code to a capture error kind."""
    return ERROR_CODES.get(code, CaptureErrorKind.UNKNOWN)


def error_message(kind: CaptureErrorKind, language: str = "es") -> str:
    """User-facing text for a capture error."""
    messages = ERROR_MESSAGES[kind]
    return messages.get(language, messages["en"])


@dataclass
class RecognitionResult:
    """One recognition result.

    Attributes:
        alternatives: Candidate transcripts, best first
        is_final: True once the engine will not revise this result
        confidence: Confidence of the best alternative (0.0-1.0)
    """

    alternatives: list[str] = field(default_factory=list)
    is_final: bool = False
    confidence: float = 0.0

    @property
    def transcript(self) -> str:
        """Best alternative, or empty string."""
        return self.alternatives[0] if self.alternatives else ""


class RecognitionListener(Protocol):
    """Receiver of recognizer events."""

    def on_results(self, result_index: int, results: list[RecognitionResult]) -> None:
        """Results changed from ``result_index`` onward."""
        ...

    def on_error(self, code: str) -> None:
        """The engine reported an error code."""
        ...

    def on_end(self) -> None:
        """The engine stopped, on request or on its own."""
        ...


class Recognizer(Protocol):
    """Interface for speech recognition engines.

    Engines are unreliable: they may end a session on their own after a
    period of silence even while the caller still wants to listen.
    """

    def set_listener(self, listener: RecognitionListener | None) -> None:
        """Register the event receiver."""
        ...

    def set_language(self, language: str) -> None:
        """Set the two-letter recognition language."""
        ...

    def start(self) -> None:
        """Begin a recognition session.

        Raises:
            EngineError: If the session cannot be started
        """
        ...

    def stop(self) -> None:
        """Request the session to end; an end event follows."""
        ...

    @property
    def is_active(self) -> bool:
        """Return True while a session is running."""
        ...


__all__ = [
    "ERROR_CODES",
    "ERROR_MESSAGES",
    "CaptureErrorKind",
    "RecognitionListener",
    "RecognitionResult",
    "Recognizer",
    "error_message",
    "map_error_code",
]
