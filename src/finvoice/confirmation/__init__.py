"""Confirmation module for finvoice.

Provides the single-slot confirmation gate, its bilingual vocabularies,
and the policy deciding which actions need consent.
"""

from .gate import (
    ConfirmationGate,
    ConfirmationResponse,
    ConfirmationResult,
    GateState,
    PendingConfirmation,
)
from .policy import requires_confirmation
from .prompts import ConfirmableAction

__all__ = [
    "ConfirmableAction",
    "ConfirmationGate",
    "ConfirmationResponse",
    "ConfirmationResult",
    "GateState",
    "PendingConfirmation",
    "requires_confirmation",
]
