"""Short-term conversational memory.

Keeps the last few exchanges of a session, the last topic and intent,
and a lexical follow-up heuristic. A background watcher discards the
whole memory once the session is older than the timeout; exchanges are
never pruned one by one.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .suggestions import Suggestion, follow_up_suggestions

logger = logging.getLogger(__name__)

MAX_EXCHANGES = 10
SESSION_TIMEOUT_S = 30 * 60.0
CHECK_INTERVAL_S = 60.0

# Keyword table for topic extraction, checked in order
TOPIC_KEYWORDS: list[tuple[str, re.Pattern[str]]] = [
    ("expenses", re.compile(r"gast|expense|spend", re.IGNORECASE)),
    ("income", re.compile(r"ingres|income|earn", re.IGNORECASE)),
    ("clients", re.compile(r"client", re.IGNORECASE)),
    ("projects", re.compile(r"proyect|project", re.IGNORECASE)),
    ("taxes", re.compile(r"tax|impuesto|\birs\b|\bcra\b|\bsii\b", re.IGNORECASE)),
    ("net_worth", re.compile(r"net worth|patrimonio|assets|activos", re.IGNORECASE)),
    ("investments", re.compile(r"invest|inversi[oó]n|portfolio", re.IGNORECASE)),
    ("savings", re.compile(r"saving|ahorro|\bfire\b|retir", re.IGNORECASE)),
]

FOLLOW_UP_PATTERNS: list[re.Pattern[str]] = [
    # Continuations
    re.compile(r"^(y|and|but|pero|también|also|más|more|qué más|what else)\b", re.IGNORECASE),
    # Acknowledgements
    re.compile(r"^(ok|okay|bueno|bien|sí|yes|entiendo|i see)\b", re.IGNORECASE),
    # Demonstratives
    re.compile(r"^(eso|that|this|esto|ahí|there|aquí|here)\b", re.IGNORECASE),
    # Short WH-questions
    re.compile(r"^(cuánto|how much|cuándo|when|dónde|where|quién|who)\b", re.IGNORECASE),
]


@dataclass(frozen=True)
class ConversationExchange:
    """One user utterance and the assistant's reply."""

    id: str
    user_message: str
    assistant_response: str
    intent: str | None = None
    action: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class MemoryState:
    """Everything that belongs to one session; replaced as a whole on expiry."""

    exchanges: deque[ConversationExchange]
    session_start: float
    last_intent: str | None = None
    last_topic: str | None = None


def extract_topic(message: str, intent: str | None = None) -> str | None:
    """Map a user message to a topic, falling back to the intent."""
    for topic, pattern in TOPIC_KEYWORDS:
        if pattern.search(message):
            return topic
    return intent


class ConversationMemory:
    """Session-scoped memory of recent exchanges.

    Example:
        memory = ConversationMemory()
        memory.add_exchange("cuánto gasté", "Gastaste $120", intent="query")
        memory.is_follow_up("y el mes pasado")  # True
    """

    def __init__(
        self,
        max_exchanges: int = MAX_EXCHANGES,
        session_timeout_seconds: float = SESSION_TIMEOUT_S,
        check_interval_seconds: float = CHECK_INTERVAL_S,
        summary_exchanges: int = 3,
        summary_response_chars: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize conversation memory.

        Args:
            max_exchanges: Capacity of the exchange window
            session_timeout_seconds: Session lifetime before the memory is replaced
            check_interval_seconds: Period of the background session check
            summary_exchanges: Exchanges included in the context summary
            summary_response_chars: Assistant text kept per summary line
            clock: Monotonic time source
        """
        self._max_exchanges = max_exchanges
        self._session_timeout = session_timeout_seconds
        self._check_interval = check_interval_seconds
        self._summary_exchanges = summary_exchanges
        self._summary_chars = summary_response_chars
        self._clock = clock
        self._lock = threading.Lock()
        self._counter = 0
        self._state = self._new_state()
        self._watcher: threading.Thread | None = None
        self._stop_event = threading.Event()

    def _new_state(self) -> MemoryState:
        return MemoryState(
            exchanges=deque(maxlen=self._max_exchanges),
            session_start=self._clock(),
        )

    @property
    def exchanges(self) -> list[ConversationExchange]:
        """Stored exchanges, oldest first."""
        with self._lock:
            return list(self._state.exchanges)

    @property
    def last_intent(self) -> str | None:
        with self._lock:
            return self._state.last_intent

    @property
    def last_topic(self) -> str | None:
        with self._lock:
            return self._state.last_topic

    @property
    def session_start(self) -> float:
        with self._lock:
            return self._state.session_start

    def add_exchange(
        self,
        user_message: str,
        assistant_response: str,
        intent: str | None = None,
        action: Any = None,
    ) -> str:
        """Record an exchange, evicting the oldest when the window is full.

        Returns:
            The new exchange id.
        """
        with self._lock:
            state = self._state
            self._counter += 1
            exchange = ConversationExchange(
                id=f"exchange-{self._counter}",
                user_message=user_message,
                assistant_response=assistant_response,
                intent=intent,
                action=action,
            )
            state.exchanges.append(exchange)
            state.last_intent = intent or state.last_intent
            state.last_topic = extract_topic(user_message, intent) or state.last_topic

        logger.debug(f"Stored {exchange.id} (intent={intent}, topic={state.last_topic})")
        return exchange.id

    def get_context_summary(self) -> str:
        """Summarize recent history for a downstream conversational model."""
        with self._lock:
            recent = list(self._state.exchanges)[-self._summary_exchanges :]
            last_topic = self._state.last_topic
            last_intent = self._state.last_intent

        if not recent:
            return ""

        lines = ["RECENT HISTORY:"]
        for exchange in recent:
            reply = exchange.assistant_response
            if len(reply) > self._summary_chars:
                reply = reply[: self._summary_chars] + "..."
            lines.append(f'User: "{exchange.user_message}" -> Assistant: "{reply}"')
        if last_topic:
            lines.append(f"Last topic: {last_topic}")
        if last_intent:
            lines.append(f"Last intent: {last_intent}")
        return "\n".join(lines)

    def is_follow_up(self, text: str) -> bool:
        """Guess whether text continues the previous exchange."""
        with self._lock:
            if not self._state.exchanges:
                return False
        stripped = text.strip()
        return any(pattern.search(stripped) for pattern in FOLLOW_UP_PATTERNS)

    def get_last_action(self) -> dict[str, Any] | None:
        """Return the most recent exchange that carried an action.

        Returns:
            ``{"action": ..., "message": user_message}`` or None.
        """
        with self._lock:
            for exchange in reversed(self._state.exchanges):
                if exchange.action is not None:
                    return {"action": exchange.action, "message": exchange.user_message}
        return None

    def clear_memory(self) -> None:
        """Discard all exchanges and start a new session."""
        with self._lock:
            self._state = self._new_state()
        logger.info("Conversation memory cleared")

    def check_session(self) -> bool:
        """Replace the memory if the session has outlived its timeout.

        Returns:
            True if the memory was replaced.
        """
        with self._lock:
            age = self._clock() - self._state.session_start
            if age < self._session_timeout:
                return False
            self._state = self._new_state()
        logger.info(f"Conversation session expired after {age:.0f}s, memory reset")
        return True

    def suggestions(self, language: str = "es") -> list[Suggestion]:
        """Follow-up suggestions based on the last intent, action and topic."""
        last = self.get_last_action()
        action = last["action"] if last else None
        action_kind = getattr(action, "kind", None)
        target = getattr(action, "target", None)
        if not isinstance(target, str):
            target = self.last_topic
        return follow_up_suggestions(self.last_intent, action_kind, target, language)

    def start_session_watcher(self) -> None:
        """Start the background session check. Idempotent."""
        if self._watcher is not None and self._watcher.is_alive():
            return
        self._stop_event.clear()
        self._watcher = threading.Thread(
            target=self._watch_loop,
            daemon=True,
            name="finvoice-session-watcher",
        )
        self._watcher.start()
        logger.debug("Session watcher started")

    def stop_session_watcher(self) -> None:
        """Stop the background session check. Idempotent."""
        self._stop_event.set()
        if self._watcher is not None:
            self._watcher.join(timeout=2.0)
            self._watcher = None
            logger.debug("Session watcher stopped")

    def _watch_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._check_interval):
            self.check_session()

    def __len__(self) -> int:
        with self._lock:
            return len(self._state.exchanges)


__all__ = [
    "CHECK_INTERVAL_S",
    "FOLLOW_UP_PATTERNS",
    "MAX_EXCHANGES",
    "SESSION_TIMEOUT_S",
    "TOPIC_KEYWORDS",
    "ConversationExchange",
    "ConversationMemory",
    "MemoryState",
    "extract_topic",
]
