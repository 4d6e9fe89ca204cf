"""Text normalization helpers shared by the parser rule tables."""

import re
import unicodedata
from decimal import Decimal, InvalidOperation

_EDGE_PUNCTUATION = ".,;:!?¿¡\"'“”‘’"
_WHITESPACE = re.compile(r"\s+")
_TABLE_PUNCTUATION = re.compile(r"[¿?¡!.,;:\"“”'‘’]")


def normalize_text(text: str) -> str:
    """Lowercase, trim, collapse whitespace and strip edge punctuation.

    Punctuation inside the utterance is kept so amounts like "12.50"
    and phrases like "recordatorio: pagar" survive.
    """
    text = _WHITESPACE.sub(" ", text.lower()).strip()
    return text.strip(_EDGE_PUNCTUATION).strip()


def fold_accents(text: str) -> str:
    """Normalize text for table lookups: no accents, no punctuation.

    "Muéstrame mis gastos!" and "muestrame mis gastos" fold to the same key.
    """
    text = _TABLE_PUNCTUATION.sub("", text.lower())
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    return _WHITESPACE.sub(" ", stripped).strip()


def parse_amount(raw: str) -> Decimal | None:
    """Parse a spoken amount with either comma or period as decimal separator.

    Returns:
        The amount, or None if the text is not a number.
    """
    try:
        return Decimal(raw.replace(",", "."))
    except InvalidOperation:
        return None


__all__ = ["fold_accents", "normalize_text", "parse_amount"]
