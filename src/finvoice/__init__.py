"""Finvoice - voice command core for a bilingual financial assistant.

Finvoice turns spoken or typed utterances into structured actions:
- Continuous speech capture with restart-on-drop (UtteranceCapture)
- Rule-based bilingual action parsing (ActionParser)
- Short-term conversational memory (ConversationMemory)
- Confirm/cancel gating for destructive actions (ConfirmationGate)
- Spoken replies with estimated progress (ResponseSpeech)

Usage:
    python -m finvoice --profile dev
    python -m finvoice --once "duplicar el último gasto"
"""

__version__ = "0.1.0"

from .config import FinvoiceConfig
from .config.loader import load_config

__all__ = [
    "FinvoiceConfig",
    "__version__",
    "load_config",
]
