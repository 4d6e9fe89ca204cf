"""Unit tests for speech text cleanup."""

import pytest

from finvoice.tts.sanitize import estimate_duration, sanitize_for_speech


class TestSanitizeForSpeech:
    """Tests for sanitize_for_speech."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("**Total:** $1,200 😀", "Total: $1,200"),
            ("Revisa [tus gastos](/expenses) hoy", "Revisa tus gastos hoy"),
            ("## Resumen\nTodo bien", "Resumen Todo bien"),
            ("- uno\n- dos\n* tres", "uno dos tres"),
            ("1. primero\n2) segundo", "primero segundo"),
            ("Es *muy* importante", "Es muy importante"),
            ("Usa `net_worth` para eso", "Usa net worth para eso"),
            ("Antes ```print(1)``` después", "Antes después"),
        ],
    )
    def test_markup_is_removed(self, text: str, expected: str) -> None:
        """Test each kind of markup is stripped, keeping the words."""
        assert sanitize_for_speech(text) == expected

    def test_plain_text_unchanged(self) -> None:
        """Test ordinary text passes through."""
        assert sanitize_for_speech("Te llevo a Gastos.") == "Te llevo a Gastos."

    def test_whitespace_collapsed(self) -> None:
        """Test runs of whitespace become single spaces."""
        assert sanitize_for_speech("  hola \n\n  mundo  ") == "hola mundo"

    def test_only_emoji(self) -> None:
        """Test text made of emoji sanitizes to nothing."""
        assert sanitize_for_speech("🎉🔥") == ""


class TestEstimateDuration:
    """Tests for estimate_duration."""

    def test_words_per_minute(self) -> None:
        """Test the estimate follows the speaking rate."""
        assert estimate_duration("uno dos tres", 150) == pytest.approx(1.2)
        assert estimate_duration("uno dos tres", 180) == pytest.approx(1.0)

    def test_minimum_one_word(self) -> None:
        """Test empty text still has a positive duration."""
        assert estimate_duration("", 150) == pytest.approx(0.4)
