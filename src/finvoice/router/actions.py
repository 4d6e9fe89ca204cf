"""Parsed action types.

A parse yields exactly one of the variants below. Each variant is an
immutable dataclass with a ``kind`` tag used for logging, memory records
and the confirmation policy table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar


class DuplicateTarget(Enum):
    """What a duplicate request copies."""

    LAST_EXPENSE = "last_expense"
    LAST_INCOME = "last_income"


class ExportType(Enum):
    """Report kinds an export request can produce."""

    TAX_REPORT = "tax_report"
    REIMBURSEMENT = "reimbursement"
    ALL_EXPENSES = "all_expenses"
    ALL_INCOME = "all_income"
    FULL_REPORT = "full_report"


class ExportFormat(Enum):
    """File formats for exports."""

    EXCEL = "excel"
    PDF = "pdf"
    CSV = "csv"


@dataclass(frozen=True)
class SpendingAlert:
    """Notify when spending passes a threshold."""

    kind: ClassVar[str] = "spending_alert"

    threshold: Decimal
    category: str | None = None


@dataclass(frozen=True)
class Reminder:
    """Remind the user to do something on a day.

    Attributes:
        action: What to be reminded of.
        day_or_date: Canonical day token, or the raw token if unrecognized.
        time: Optional time of day as spoken ("3pm", "10:30").
    """

    kind: ClassVar[str] = "reminder"

    action: str
    day_or_date: str
    time: str | None = None


@dataclass(frozen=True)
class DuplicateRequest:
    """Copy the most recent expense or income entry."""

    kind: ClassVar[str] = "duplicate"

    target: DuplicateTarget


@dataclass(frozen=True)
class ExportRequest:
    """Export data as a report file."""

    kind: ClassVar[str] = "export"

    export_type: ExportType
    format: ExportFormat = ExportFormat.EXCEL


@dataclass(frozen=True)
class CreateExpense:
    """Record a new expense."""

    kind: ClassVar[str] = "create_expense"

    amount: Decimal
    category: str
    vendor: str


@dataclass(frozen=True)
class CreateIncome:
    """Record a new income entry."""

    kind: ClassVar[str] = "create_income"

    amount: Decimal
    income_type: str
    source: str


@dataclass(frozen=True)
class DeleteRequest:
    """Delete entities of a kind.

    Attributes:
        entity: "expense", "income", "client", "project" or "data".
        scope: "last" for the most recent entity, "all" for every one.
    """

    kind: ClassVar[str] = "delete"

    entity: str
    scope: str = "last"


@dataclass(frozen=True)
class Navigate:
    """Open a section of the application."""

    kind: ClassVar[str] = "navigate"

    target: str
    action: str | None = None


@dataclass(frozen=True)
class Query:
    """Ask for a figure or summary from the user's data."""

    kind: ClassVar[str] = "query"

    target: str
    filters: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Clarify:
    """Ask the user which of several interpretations they meant."""

    kind: ClassVar[str] = "clarify"

    options: tuple[str, ...]
    subject: str | None = None


@dataclass(frozen=True)
class Explain:
    """Explain a section or the current page."""

    kind: ClassVar[str] = "explain"

    topic: str


@dataclass(frozen=True)
class Conversational:
    """Free-form utterance handed to the conversational responder.

    ``follow_up`` marks text that continues the previous exchange but
    could not be resolved to a command.
    """

    kind: ClassVar[str] = "conversational"

    text: str
    follow_up: bool = False


AdvancedAction = SpendingAlert | Reminder | DuplicateRequest | ExportRequest

ParsedAction = (
    SpendingAlert
    | Reminder
    | DuplicateRequest
    | ExportRequest
    | CreateExpense
    | CreateIncome
    | DeleteRequest
    | Navigate
    | Query
    | Clarify
    | Explain
    | Conversational
)


__all__ = [
    "AdvancedAction",
    "Clarify",
    "Conversational",
    "CreateExpense",
    "CreateIncome",
    "DeleteRequest",
    "DuplicateRequest",
    "DuplicateTarget",
    "Explain",
    "ExportFormat",
    "ExportRequest",
    "ExportType",
    "Navigate",
    "ParsedAction",
    "Query",
    "Reminder",
    "SpendingAlert",
]
