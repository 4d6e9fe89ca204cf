"""Outbound execution interface to the application layer.

The application owns storage, navigation and the conversational model.
The pipeline only calls the narrow protocol below; every call may raise
ExecutionError, which the orchestrator turns into a spoken failure.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Protocol

from ..errors import ExecutionError, UnknownActionError
from .actions import (
    Clarify,
    Conversational,
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    Explain,
    ExportRequest,
    Navigate,
    ParsedAction,
    Query,
    Reminder,
    SpendingAlert,
)

logger = logging.getLogger(__name__)


class ActionExecutor(Protocol):
    """Application-layer operations the pipeline can request."""

    def navigate(self, target: str, action: str | None = None) -> None:
        """Open a section of the application."""
        ...

    def query(self, target: str, filters: dict[str, Any]) -> Any:
        """Return the value for a data query, or None if unavailable."""
        ...

    def create_expense(self, fields: dict[str, Any]) -> str:
        """Create an expense and return its id."""
        ...

    def create_income(self, fields: dict[str, Any]) -> str:
        """Create an income entry and return its id."""
        ...

    def delete_entity(self, kind: str, entity_id: str | None) -> int:
        """Delete one entity (or all when entity_id is None) and return the count."""
        ...

    def export_data(self, export_type: str, export_format: str) -> str:
        """Start an export and return a reference to the file."""
        ...

    def set_alert(self, threshold: Decimal, category: str | None = None) -> None:
        """Store a spending alert."""
        ...

    def set_reminder(self, action: str, when: str) -> None:
        """Store a reminder."""
        ...

    def duplicate_last(self, kind: str) -> str:
        """Duplicate the most recent entity of a kind and return the new id."""
        ...

    def converse(self, text: str, context: str) -> str:
        """Produce a free-form reply for an utterance no rule matched."""
        ...


@dataclass
class ExecutionOutcome:
    """What an executed action produced.

    Attributes:
        action: The action that ran.
        value: Value returned by the executor (id, query result, reply text).
    """

    action: ParsedAction
    value: Any = None


def execute_action(executor: ActionExecutor, action: ParsedAction, context: str = "") -> ExecutionOutcome:
    """Dispatch a parsed action to the matching executor operation.

    Clarify and Explain need no application call; they are answered by
    the reply templates.

    Raises:
        ExecutionError: If the executor reports a failure.
        UnknownActionError: If the action has no outbound mapping.
    """
    if isinstance(action, Navigate):
        executor.navigate(action.target, action.action)
        return ExecutionOutcome(action)
    if isinstance(action, Query):
        return ExecutionOutcome(action, executor.query(action.target, dict(action.filters)))
    if isinstance(action, CreateExpense):
        fields = {"amount": action.amount, "category": action.category, "vendor": action.vendor}
        return ExecutionOutcome(action, executor.create_expense(fields))
    if isinstance(action, CreateIncome):
        fields = {"amount": action.amount, "income_type": action.income_type, "source": action.source}
        return ExecutionOutcome(action, executor.create_income(fields))
    if isinstance(action, DeleteRequest):
        entity_id = None if action.scope == "all" else "last"
        return ExecutionOutcome(action, executor.delete_entity(action.entity, entity_id))
    if isinstance(action, ExportRequest):
        return ExecutionOutcome(
            action, executor.export_data(action.export_type.value, action.format.value)
        )
    if isinstance(action, SpendingAlert):
        executor.set_alert(action.threshold, action.category)
        return ExecutionOutcome(action)
    if isinstance(action, Reminder):
        when = f"{action.day_or_date} {action.time}" if action.time else action.day_or_date
        executor.set_reminder(action.action, when)
        return ExecutionOutcome(action)
    if isinstance(action, DuplicateRequest):
        kind = "expense" if action.target == DuplicateTarget.LAST_EXPENSE else "income"
        return ExecutionOutcome(action, executor.duplicate_last(kind))
    if isinstance(action, Conversational):
        return ExecutionOutcome(action, executor.converse(action.text, context))
    if isinstance(action, (Clarify, Explain)):
        return ExecutionOutcome(action)

    raise UnknownActionError(f"No executor mapping for {type(action).__name__}")


@dataclass
class InMemoryExecutor:
    """Executor keeping simple in-memory ledgers.

    Used by the CLI and tests. Every call is recorded in ``calls`` as
    ``(operation, args)``.
    """

    expenses: list[dict[str, Any]] = field(default_factory=list)
    income: list[dict[str, Any]] = field(default_factory=list)
    clients: list[dict[str, Any]] = field(default_factory=list)
    projects: list[dict[str, Any]] = field(default_factory=list)
    alerts: list[dict[str, Any]] = field(default_factory=list)
    reminders: list[dict[str, Any]] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    current_section: str = "dashboard"
    fail_on: set[str] = field(default_factory=set)
    _next_id: int = 0

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.fail_on:
            raise ExecutionError(f"{operation} failed", action=operation)

    def _new_id(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def _ledger(self, kind: str) -> list[dict[str, Any]]:
        ledgers = {
            "expense": self.expenses,
            "income": self.income,
            "client": self.clients,
            "project": self.projects,
        }
        if kind not in ledgers:
            raise ExecutionError(f"Unknown entity kind: {kind}", action="delete_entity")
        return ledgers[kind]

    def navigate(self, target: str, action: str | None = None) -> None:
        self._record("navigate", target, action)
        self.current_section = target

    def query(self, target: str, filters: dict[str, Any]) -> Any:
        self._record("query", target, filters)
        if target.startswith("expenses_"):
            return sum((e["amount"] for e in self.expenses), Decimal("0"))
        if target.startswith("income_"):
            return sum((i["amount"] for i in self.income), Decimal("0"))
        if target == "balance":
            earned = sum((i["amount"] for i in self.income), Decimal("0"))
            spent = sum((e["amount"] for e in self.expenses), Decimal("0"))
            return earned - spent
        if target == "client_count":
            return len(self.clients)
        if target == "project_count":
            return len(self.projects)
        if target == "biggest_expense" and self.expenses:
            return max(e["amount"] for e in self.expenses)
        return None

    def create_expense(self, fields: dict[str, Any]) -> str:
        self._record("create_expense", fields)
        entry = {"id": self._new_id("expense"), **fields}
        self.expenses.append(entry)
        return entry["id"]

    def create_income(self, fields: dict[str, Any]) -> str:
        self._record("create_income", fields)
        entry = {"id": self._new_id("income"), **fields}
        self.income.append(entry)
        return entry["id"]

    def delete_entity(self, kind: str, entity_id: str | None) -> int:
        self._record("delete_entity", kind, entity_id)
        if kind == "data":
            count = sum(len(self._ledger(k)) for k in ("expense", "income", "client", "project"))
            for k in ("expense", "income", "client", "project"):
                self._ledger(k).clear()
            return count
        ledger = self._ledger(kind)
        if entity_id is None:
            count = len(ledger)
            ledger.clear()
            return count
        if not ledger:
            raise ExecutionError(f"No {kind} to delete", action="delete_entity")
        if entity_id == "last":
            ledger.pop()
            return 1
        before = len(ledger)
        ledger[:] = [e for e in ledger if e["id"] != entity_id]
        return before - len(ledger)

    def export_data(self, export_type: str, export_format: str) -> str:
        self._record("export_data", export_type, export_format)
        extension = {"excel": "xlsx", "pdf": "pdf", "csv": "csv"}[export_format]
        name = f"{export_type}-{datetime.now(UTC):%Y%m%d}.{extension}"
        self.exports.append(name)
        return name

    def set_alert(self, threshold: Decimal, category: str | None = None) -> None:
        self._record("set_alert", threshold, category)
        self.alerts.append({"threshold": threshold, "category": category})

    def set_reminder(self, action: str, when: str) -> None:
        self._record("set_reminder", action, when)
        self.reminders.append({"action": action, "when": when})

    def duplicate_last(self, kind: str) -> str:
        self._record("duplicate_last", kind)
        ledger = self._ledger(kind)
        if not ledger:
            raise ExecutionError(f"No {kind} to duplicate", action="duplicate_last")
        copy = {**ledger[-1], "id": self._new_id(kind)}
        ledger.append(copy)
        return copy["id"]

    def converse(self, text: str, context: str) -> str:
        self._record("converse", text, context)
        logger.debug(f"Conversational fallback for: {text}")
        return ""


__all__ = [
    "ActionExecutor",
    "ExecutionOutcome",
    "InMemoryExecutor",
    "execute_action",
]
