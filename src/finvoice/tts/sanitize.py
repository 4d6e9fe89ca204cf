"""Text cleanup before synthesis.

Replies are written for a chat window; spoken aloud, markdown and emoji
would be read out literally.
"""

import re

WORDS_PER_MINUTE = 150

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC = re.compile(r"(?<![\w*])([*_])(?!\s)(.+?)(?<!\s)\1(?![\w*])")
_HEADING = re.compile(r"^\s*#{1,6}\s+", re.MULTILINE)
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_BULLET = re.compile(r"^\s*[-*+•◦▪▸►]\s+", re.MULTILINE)
_NUMBERED = re.compile(r"^\s*\d+[.)]\s+", re.MULTILINE)
_EMOJI = re.compile(
    "["
    "\U0001f300-\U0001f5ff"  # symbols and pictographs
    "\U0001f600-\U0001f64f"  # emoticons
    "\U0001f680-\U0001f6ff"  # transport and map
    "\U0001f1e0-\U0001f1ff"  # flags
    "\U0001f900-\U0001f9ff"
    "\U0001fa00-\U0001faff"
    "\u2600-\u26ff"  # miscellaneous symbols
    "\u2700-\u27bf"  # dingbats
    "\ufe0f\u200d"  # variation selector, zero-width joiner
    "]+"
)
_SYMBOLS = re.compile(r"[*#~`>|\[\]{}\\^<]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_for_speech(text: str) -> str:
    """Strip formatting that should not be spoken.

    Steps, in order: markdown markup (keeping link text), list markers,
    emoji, leftover symbols, whitespace.
    """
    cleaned = _CODE_BLOCK.sub("", text)
    cleaned = _INLINE_CODE.sub(r"\1", cleaned)
    cleaned = _LINK.sub(r"\1", cleaned)
    cleaned = _BOLD.sub(r"\2", cleaned)
    cleaned = _ITALIC.sub(r"\2", cleaned)
    cleaned = _HEADING.sub("", cleaned)

    cleaned = _BULLET.sub("", cleaned)
    cleaned = _NUMBERED.sub("", cleaned)

    cleaned = _EMOJI.sub("", cleaned)

    cleaned = _SYMBOLS.sub("", cleaned)
    cleaned = cleaned.replace("_", " ")

    return _WHITESPACE.sub(" ", cleaned).strip()


def estimate_duration(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> float:
    """Estimated speaking time in seconds.

    Synthesis engines report no timeline, so this is the only duration
    available; it is an approximation.
    """
    words = len(text.split())
    return max(1, words) / words_per_minute * 60


__all__ = ["WORDS_PER_MINUTE", "estimate_duration", "sanitize_for_speech"]
