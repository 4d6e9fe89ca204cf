"""Router module for finvoice.

Turns utterances into typed actions and maps them onto the application
layer. The orchestrator lives in ``finvoice.router.orchestrator``.
"""

from .actions import (
    AdvancedAction,
    Clarify,
    Conversational,
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    Explain,
    ExportFormat,
    ExportRequest,
    ExportType,
    Navigate,
    ParsedAction,
    Query,
    Reminder,
    SpendingAlert,
)
from .executor import ActionExecutor, ExecutionOutcome, InMemoryExecutor, execute_action
from .normalize import fold_accents, normalize_text, parse_amount
from .parser import (
    ActionParser,
    parse_action,
    parse_advanced_action,
    parse_duplicate_request,
    parse_export_request,
    parse_reminder,
    parse_spending_alert,
)
from .vocabulary import CommandVocabulary

__all__ = [
    "ActionExecutor",
    "ActionParser",
    "AdvancedAction",
    "Clarify",
    "CommandVocabulary",
    "Conversational",
    "CreateExpense",
    "CreateIncome",
    "DeleteRequest",
    "DuplicateRequest",
    "DuplicateTarget",
    "ExecutionOutcome",
    "Explain",
    "ExportFormat",
    "ExportRequest",
    "ExportType",
    "InMemoryExecutor",
    "Navigate",
    "ParsedAction",
    "Query",
    "Reminder",
    "SpendingAlert",
    "execute_action",
    "fold_accents",
    "normalize_text",
    "parse_action",
    "parse_advanced_action",
    "parse_duplicate_request",
    "parse_export_request",
    "parse_amount",
    "parse_reminder",
    "parse_spending_alert",
]
