"""Conversation memory module for finvoice.

Holds the recent exchanges of a session, follow-up detection and
suggestions for the next utterance.
"""

from ..config import MemoryConfig
from .conversation import ConversationExchange, ConversationMemory, extract_topic
from .suggestions import Suggestion, follow_up_suggestions


def create_memory(config: MemoryConfig | None = None) -> ConversationMemory:
    """Create a conversation memory from configuration."""
    config = config or MemoryConfig()
    return ConversationMemory(
        max_exchanges=config.max_exchanges,
        session_timeout_seconds=config.session_timeout_minutes * 60,
        check_interval_seconds=config.check_interval_seconds,
        summary_exchanges=config.summary_exchanges,
        summary_response_chars=config.summary_response_chars,
    )


__all__ = [
    "ConversationExchange",
    "ConversationMemory",
    "Suggestion",
    "create_memory",
    "extract_topic",
    "follow_up_suggestions",
]
