"""Command pipeline orchestrator.

Coordinates one interaction:
Utterance → Confirmation gate → ActionParser → Policy → Executor → Memory → Speech

Execution failures are caught here and turned into a spoken failure
message; nothing in the pipeline leaves the gate or capture in an
inconsistent state.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..confirmation import ConfirmationGate, ConfirmationResult, requires_confirmation
from ..errors import ExecutionError
from ..memory import ConversationMemory, Suggestion
from ..stt.recognizer import CaptureErrorKind, error_message
from .actions import Conversational, CreateExpense, CreateIncome, ParsedAction, Query
from .executor import ActionExecutor, ExecutionOutcome, InMemoryExecutor, execute_action
from .parser import ActionParser
from .responses import (
    CONVERSATIONAL_FALLBACK,
    FAILURE_MESSAGE,
    action_response,
    confirmation_description,
    query_response,
)

if TYPE_CHECKING:
    from ..config import FinvoiceConfig
    from ..stt.capture import UtteranceCapture
    from ..tts.playback import ResponseSpeech

logger = logging.getLogger(__name__)


@dataclass
class InteractionResult:
    """Outcome of processing one utterance.

    Attributes:
        text: The utterance as received
        response: Reply spoken to the user
        action: Parsed (or confirmed/cancelled) action, if any
        intent: Intent recorded in memory (action kind, "confirm", "cancel", "error")
        awaiting_confirmation: True when the reply is a confirmation prompt
        executed: True when an action ran successfully
        value: Value returned by the executor
        error: Failure description when execution failed
        exchange_id: Id of the exchange stored in memory
        latency_ms: Processing time in milliseconds
    """

    text: str
    response: str
    action: ParsedAction | None = None
    intent: str | None = None
    awaiting_confirmation: bool = False
    executed: bool = False
    value: Any = None
    error: str | None = None
    exchange_id: str | None = None
    latency_ms: int = 0


class Orchestrator:
    """Runs utterances through the command pipeline.

    Example:
        orchestrator = Orchestrator(executor=InMemoryExecutor(), language="en")
        orchestrator.process("delete last expense")  # asks for confirmation
        orchestrator.process("yes")                  # executes the delete
    """

    def __init__(
        self,
        parser: ActionParser | None = None,
        memory: ConversationMemory | None = None,
        gate: ConfirmationGate | None = None,
        speech: "ResponseSpeech | None" = None,
        executor: ActionExecutor | None = None,
        language: str = "es",
        confirm_creations: bool = True,
        currency_symbol: str = "$",
    ) -> None:
        """Initialize orchestrator with components.

        Args:
            parser: Action parser
            memory: Conversation memory
            gate: Confirmation gate
            speech: Response playback; replies are not spoken when None
            executor: Application-layer executor
            language: Two-letter language for replies
            confirm_creations: Hold data-creating actions for confirmation
            currency_symbol: Symbol used in spoken amounts
        """
        self._parser = parser or ActionParser()
        self._memory = memory or ConversationMemory()
        self._gate = gate or ConfirmationGate(language=language)
        self._speech = speech
        self._executor: ActionExecutor = executor or InMemoryExecutor()
        self._language = language
        self._confirm_creations = confirm_creations
        self._symbol = currency_symbol
        self._capture: UtteranceCapture | None = None
        self._process_lock = threading.RLock()

        if self._gate.on_timeout is None:
            self._gate.on_timeout = self._handle_confirmation_timeout

    @property
    def language(self) -> str:
        return self._language

    @property
    def memory(self) -> ConversationMemory:
        return self._memory

    @property
    def gate(self) -> ConfirmationGate:
        return self._gate

    @property
    def speech(self) -> "ResponseSpeech | None":
        return self._speech

    def set_language(self, language: str) -> None:
        """Switch the language for replies, prompts, capture and synthesis."""
        self._language = language
        self._gate.language = language
        if self._speech is not None:
            self._speech.language = language
        if self._capture is not None:
            self._capture.set_language(language)

    def process(self, text: str) -> InteractionResult:
        """Process one utterance and speak the reply.

        Args:
            text: Final utterance text (spoken or typed)

        Returns:
            InteractionResult describing what happened
        """
        start_time = time.time()
        utterance = text.strip()
        if not utterance:
            return InteractionResult(text=text, response="")

        with self._process_lock:
            logger.debug(f"Processing utterance: {utterance}")
            result = self._handle_gate(utterance)
            if result is None:
                result = self._handle_action(utterance)

            result.exchange_id = self._memory.add_exchange(
                utterance,
                result.response,
                intent=result.intent,
                action=result.action,
            )

        result.latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Interaction handled: intent={result.intent} "
            f"executed={result.executed} in {result.latency_ms}ms"
        )
        self._speak(result.response)
        return result

    def suggestions(self) -> list[Suggestion]:
        """Follow-up suggestions for the next utterance."""
        return self._memory.suggestions(self._language)

    def attach_capture(self, capture: "UtteranceCapture") -> None:
        """Feed final capture results into the pipeline."""
        self._capture = capture
        capture.on_result = self._on_capture_result
        capture.on_error = self._on_capture_error
        capture.set_language(self._language)

    def close(self) -> None:
        """Stop capture and speech, cancel any pending confirmation."""
        if self._capture is not None:
            self._capture.close()
        if self._speech is not None:
            self._speech.close()
        self._gate.close()
        self._memory.stop_session_watcher()
        logger.info("Orchestrator closed")

    # Pipeline steps

    def _handle_gate(self, text: str) -> InteractionResult | None:
        """Try the utterance as a yes/no answer to a pending confirmation."""
        if not self._gate.is_waiting_for_confirmation:
            return None

        resolution = self._gate.process_confirmation_voice(text)
        if resolution is None:
            logger.info("Utterance is not a confirmation response, parsing it")
            return None

        if not resolution.confirmed:
            return InteractionResult(
                text=text,
                response=resolution.message,
                action=resolution.command,
                intent="cancel",
            )

        if resolution.command is None:
            return InteractionResult(text=text, response=resolution.message, intent="confirm")
        return self._execute(text, resolution.command)

    def _handle_action(self, text: str) -> InteractionResult:
        action = self._parser.parse(text)
        if isinstance(action, Conversational) and self._memory.is_follow_up(text):
            action = self._resolve_follow_up(text, action)
        logger.info(f"Parsed action: {action.kind}")

        kind = requires_confirmation(action, self._confirm_creations)
        if kind is not None:
            prompt = self._gate.request_confirmation(
                kind,
                custom_prompt=confirmation_description(action, self._language, self._symbol),
                data={"utterance": text, "kind": action.kind},
                command=action,
                language=self._language,
            )
            return InteractionResult(
                text=text,
                response=prompt,
                action=action,
                intent=action.kind,
                awaiting_confirmation=True,
            )

        return self._execute(text, action)

    def _resolve_follow_up(self, text: str, action: Conversational) -> ParsedAction:
        """Read a follow-up against the last topic and action."""
        last = self._memory.get_last_action()
        topic = self._memory.last_topic
        resolved = self._parser.parse_follow_up(text, last["action"] if last else None, topic)
        if resolved is not None:
            logger.info(f"Follow-up resolved as {resolved.kind} (topic={topic})")
            return resolved
        return Conversational(text=action.text, follow_up=True)

    def _execute(self, text: str, action: ParsedAction) -> InteractionResult:
        context = ""
        if isinstance(action, Conversational):
            context = self._memory.get_context_summary()
            if action.follow_up:
                context += "\nFollow-up: the user is continuing the last topic."
        try:
            outcome = execute_action(self._executor, action, context)
        except ExecutionError as e:
            logger.error(f"Action {action.kind} failed: {e}")
            return self._failure(text, action, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error executing {action.kind}")
            return self._failure(text, action, str(e))

        return InteractionResult(
            text=text,
            response=self._reply_for(outcome),
            action=action,
            intent=action.kind,
            executed=True,
            value=outcome.value,
        )

    def _failure(self, text: str, action: ParsedAction, error: str) -> InteractionResult:
        return InteractionResult(
            text=text,
            response=FAILURE_MESSAGE[self._language],
            action=action,
            intent="error",
            error=error,
        )

    def _reply_for(self, outcome: ExecutionOutcome) -> str:
        action = outcome.action
        if isinstance(action, Query):
            return query_response(action, outcome.value, self._language, self._symbol)
        if isinstance(action, Conversational):
            return outcome.value or CONVERSATIONAL_FALLBACK[self._language]
        if isinstance(action, (CreateExpense, CreateIncome)):
            logger.info(f"Created {outcome.value}")
        return action_response(action, self._language, self._symbol)

    def _speak(self, text: str) -> None:
        if self._speech is not None and text:
            self._speech.play(text)

    # Callbacks

    def _handle_confirmation_timeout(self, result: ConfirmationResult) -> None:
        logger.info(f"Confirmation for {result.action.value if result.action else 'action'} timed out")
        with self._process_lock:
            self._memory.add_exchange(
                "",
                result.message,
                intent="cancel",
                action=result.command,
            )
        self._speak(result.message)

    def _on_capture_result(self, text: str, is_final: bool) -> None:
        if is_final:
            self.process(text)

    def _on_capture_error(self, kind: CaptureErrorKind) -> None:
        self._speak(error_message(kind, self._language))


def create_orchestrator(
    config: "FinvoiceConfig",
    executor: ActionExecutor | None = None,
    use_mock: bool = False,
) -> Orchestrator:
    """Build a fully wired orchestrator from configuration.

    Args:
        config: Application configuration
        executor: Application-layer executor; in-memory if None
        use_mock: Force mock speech engine

    Returns:
        Orchestrator with its session watcher running
    """
    from ..audio import default_resources
    from ..memory import create_memory
    from ..tts import ResponseSpeech, create_speech_engine

    language = config.locale.language
    use_mock = use_mock or config.testing.use_mock_engines

    memory = create_memory(config.memory)
    gate = ConfirmationGate(
        timeout_seconds=config.confirmation.timeout_seconds,
        language=language,
    )
    speech = ResponseSpeech(
        create_speech_engine(config.speech, use_mock=use_mock),
        language=language,
        words_per_minute=config.speech.words_per_minute,
        seek_step_seconds=config.speech.seek_step_seconds,
        progress_interval_seconds=config.speech.progress_interval_seconds,
        voice=config.speech.voice,
        resources=default_resources(),
    )

    orchestrator = Orchestrator(
        memory=memory,
        gate=gate,
        speech=speech,
        executor=executor,
        language=language,
        confirm_creations=config.confirmation.confirm_creations,
        currency_symbol=config.parser.currency_symbol,
    )
    memory.start_session_watcher()
    return orchestrator


__all__ = ["InteractionResult", "Orchestrator", "create_orchestrator"]
