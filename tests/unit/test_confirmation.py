"""Unit tests for the confirmation gate and its policy."""

import time
from collections.abc import Iterator
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finvoice.confirmation import (
    ConfirmableAction,
    ConfirmationGate,
    GateState,
    requires_confirmation,
)
from finvoice.confirmation.prompts import ACTION_DESCRIPTIONS, CONFIRM_HINT, MESSAGES, build_prompt
from finvoice.router.actions import (
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    Navigate,
    Query,
)


@pytest.fixture
def gate() -> Iterator[ConfirmationGate]:
    """Create a gate with a long timeout and close it afterwards."""
    gate = ConfirmationGate(timeout_seconds=30, language="en")
    yield gate
    gate.close()


class TestConfirmationRequest:
    """Tests for opening the gate."""

    def test_starts_idle(self, gate: ConfirmationGate) -> None:
        """Verify a new gate holds nothing."""
        assert gate.state == GateState.IDLE
        assert not gate.is_waiting_for_confirmation
        assert gate.pending is None

    def test_request_returns_prompt(self, gate: ConfirmationGate) -> None:
        """Test the default prompt is the description plus the yes/no hint."""
        prompt = gate.request_confirmation(ConfirmableAction.DELETE_EXPENSE)

        assert prompt == f"{ACTION_DESCRIPTIONS[ConfirmableAction.DELETE_EXPENSE]['en']} {CONFIRM_HINT['en']}"
        assert gate.state == GateState.AWAITING_CONFIRMATION
        assert gate.pending is not None
        assert gate.pending.prompt_text == prompt

    def test_custom_prompt_per_language(self, gate: ConfirmationGate) -> None:
        """Test a custom prompt given per language."""
        prompt = gate.request_confirmation(
            ConfirmableAction.CREATE_EXPENSE,
            custom_prompt={"es": "¿Registro el gasto?", "en": "Record the expense?"},
            language="es",
        )
        assert prompt.startswith("¿Registro el gasto?")
        assert CONFIRM_HINT["es"] in prompt

    def test_build_prompt_falls_back_to_description(self) -> None:
        """Test a custom prompt missing the requested language."""
        prompt = build_prompt(ConfirmableAction.CLEAR_DATA, "en", {"es": "¿Borro todo?"})
        assert prompt.startswith(ACTION_DESCRIPTIONS[ConfirmableAction.CLEAR_DATA]["en"])

    def test_timeout_remaining(self, clock) -> None:
        """Test the remaining time follows the clock."""
        gate = ConfirmationGate(timeout_seconds=30, clock=clock)
        try:
            assert gate.timeout_remaining() == 0.0
            gate.request_confirmation(ConfirmableAction.DELETE_INCOME)
            clock.advance(12)
            assert gate.timeout_remaining() == pytest.approx(18.0)
        finally:
            gate.close()


class TestSupersede:
    """Tests for a new request replacing a pending one."""

    def test_second_request_supersedes_first(self, gate: ConfirmationGate) -> None:
        """Test only the second request's confirm runs, exactly once."""
        first_confirm, first_cancel = MagicMock(), MagicMock()
        second_confirm, second_cancel = MagicMock(), MagicMock()

        gate.request_confirmation(
            ConfirmableAction.DELETE_EXPENSE, on_confirm=first_confirm, on_cancel=first_cancel
        )
        gate.request_confirmation(
            ConfirmableAction.DELETE_CLIENT, on_confirm=second_confirm, on_cancel=second_cancel
        )

        first_cancel.assert_called_once()
        assert gate.pending is not None
        assert gate.pending.action == ConfirmableAction.DELETE_CLIENT

        result = gate.confirm_action()

        assert result.resolved
        assert result.action == ConfirmableAction.DELETE_CLIENT
        second_confirm.assert_called_once()
        first_confirm.assert_not_called()
        second_cancel.assert_not_called()

        # Already resolved: nothing more runs
        again = gate.confirm_action()
        assert not again.resolved
        second_confirm.assert_called_once()


class TestVoiceResponses:
    """Tests for resolving the gate from spoken text."""

    @pytest.mark.parametrize("text", ["yes", "Yes!", "sí, adelante", "go ahead please", "ok"])
    def test_confirm_words(self, gate: ConfirmationGate, text: str) -> None:
        """Test confirm vocabulary in both languages."""
        on_confirm = MagicMock()
        gate.request_confirmation(ConfirmableAction.DELETE_EXPENSE, on_confirm=on_confirm)

        result = gate.process_confirmation_voice(text)

        assert result is not None
        assert result.confirmed
        on_confirm.assert_called_once()
        assert gate.state == GateState.IDLE

    @pytest.mark.parametrize("text", ["no", "No, gracias", "cancel", "olvídalo", "never mind"])
    def test_cancel_words(self, gate: ConfirmationGate, text: str) -> None:
        """Test cancel vocabulary in both languages."""
        on_cancel = MagicMock()
        gate.request_confirmation(ConfirmableAction.DELETE_EXPENSE, on_cancel=on_cancel)

        result = gate.process_confirmation_voice(text)

        assert result is not None
        assert result.resolved
        assert not result.confirmed
        assert result.message == MESSAGES["cancelled"]["en"]
        on_cancel.assert_called_once()
        assert gate.state == GateState.IDLE

    def test_no_without_pending_is_noop(self, gate: ConfirmationGate) -> None:
        """Test 'no' with nothing pending leaves the gate idle."""
        assert gate.process_confirmation_voice("no") is None

        result = gate.cancel_confirmation()
        assert not result.resolved
        assert result.message == MESSAGES["nothing_to_cancel"]["en"]
        assert gate.state == GateState.IDLE

    def test_unrelated_text_keeps_pending(self, gate: ConfirmationGate) -> None:
        """Test text matching neither vocabulary leaves the request pending."""
        gate.request_confirmation(ConfirmableAction.DELETE_EXPENSE)

        assert gate.process_confirmation_voice("show me my expenses") is None
        assert gate.is_waiting_for_confirmation

    def test_result_carries_command_and_data(self, gate: ConfirmationGate) -> None:
        """Test the confirmed command and data are handed back."""
        command = DeleteRequest(entity="expense")
        gate.request_confirmation(
            ConfirmableAction.DELETE_EXPENSE, command=command, data={"utterance": "delete it"}
        )

        result = gate.process_confirmation_voice("yes")

        assert result is not None
        assert result.command == command
        assert result.data == {"utterance": "delete it"}


class TestTimeout:
    """Tests for automatic cancellation."""

    def test_timeout_cancels_exactly_once(self) -> None:
        """Test an expired request resolves through its cancel path once."""
        on_confirm, on_cancel, on_timeout = MagicMock(), MagicMock(), MagicMock()
        gate = ConfirmationGate(timeout_seconds=0.1, language="en", on_timeout=on_timeout)

        gate.request_confirmation(
            ConfirmableAction.DELETE_EXPENSE, on_confirm=on_confirm, on_cancel=on_cancel
        )
        time.sleep(0.4)

        on_cancel.assert_called_once()
        on_confirm.assert_not_called()
        assert gate.state == GateState.IDLE

        on_timeout.assert_called_once()
        result = on_timeout.call_args[0][0]
        assert result.timed_out
        assert result.message == MESSAGES["timed_out"]["en"]

        # A late "yes" has nothing to confirm
        assert gate.process_confirmation_voice("yes") is None
        on_confirm.assert_not_called()
        gate.close()

    def test_confirm_before_timeout_disarms_timer(self) -> None:
        """Test a confirmed request never times out."""
        on_cancel = MagicMock()
        gate = ConfirmationGate(timeout_seconds=0.1)

        gate.request_confirmation(ConfirmableAction.DELETE_PROJECT, on_cancel=on_cancel)
        gate.confirm_action()
        time.sleep(0.3)

        on_cancel.assert_not_called()
        gate.close()

    def test_close_cancels_pending(self) -> None:
        """Test closing the gate resolves a pending request."""
        on_cancel = MagicMock()
        gate = ConfirmationGate(timeout_seconds=30)
        gate.request_confirmation(ConfirmableAction.CLEAR_DATA, on_cancel=on_cancel)

        gate.close()

        on_cancel.assert_called_once()
        assert gate.state == GateState.IDLE


class TestPolicy:
    """Tests for which actions need confirmation."""

    @pytest.mark.parametrize(
        "action,expected",
        [
            (DeleteRequest(entity="expense"), ConfirmableAction.DELETE_EXPENSE),
            (DeleteRequest(entity="income"), ConfirmableAction.DELETE_INCOME),
            (DeleteRequest(entity="client"), ConfirmableAction.DELETE_CLIENT),
            (DeleteRequest(entity="project"), ConfirmableAction.DELETE_PROJECT),
            (DeleteRequest(entity="expense", scope="all"), ConfirmableAction.BULK_ACTION),
            (DeleteRequest(entity="data", scope="all"), ConfirmableAction.CLEAR_DATA),
            (
                CreateExpense(amount=Decimal("20"), category="meals", vendor="Cafe"),
                ConfirmableAction.CREATE_EXPENSE,
            ),
            (
                CreateIncome(amount=Decimal("100"), income_type="gift", source="Ana"),
                ConfirmableAction.CREATE_INCOME,
            ),
            (
                DuplicateRequest(target=DuplicateTarget.LAST_INCOME),
                ConfirmableAction.CREATE_INCOME,
            ),
            (Navigate(target="expenses"), None),
            (Query(target="balance"), None),
        ],
    )
    def test_policy_table(self, action, expected) -> None:
        """Test the confirmation kind for each action."""
        assert requires_confirmation(action) == expected

    def test_creations_without_confirmation(self) -> None:
        """Test creations run immediately when the caller opts out."""
        create = CreateExpense(amount=Decimal("20"), category="meals", vendor="Cafe")
        assert requires_confirmation(create, confirm_creations=False) is None
        # Deletes always need consent
        delete = DeleteRequest(entity="expense")
        assert requires_confirmation(delete, confirm_creations=False) == ConfirmableAction.DELETE_EXPENSE
