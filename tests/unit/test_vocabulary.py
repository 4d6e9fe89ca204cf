"""Unit tests for text normalization and the command vocabulary tables."""

from decimal import Decimal

import pytest

from finvoice.router.actions import Clarify, Explain, Navigate, Query
from finvoice.router.normalize import fold_accents, normalize_text, parse_amount
from finvoice.router.vocabulary import QUERY_TABLE, SECTION_NOUNS, CommandVocabulary


class TestNormalize:
    """Tests for normalization helpers."""

    def test_normalize_text(self) -> None:
        """Test lowercasing, whitespace collapse and edge punctuation."""
        assert normalize_text("  ¿Cuánto   GASTÉ?  ") == "cuánto gasté"

    def test_normalize_keeps_inner_punctuation(self) -> None:
        """Test that amounts and colons inside the text survive."""
        assert normalize_text("Recordatorio: pagar 12.50!") == "recordatorio: pagar 12.50"

    def test_fold_accents(self) -> None:
        """Test that accented and plain spellings fold to the same key."""
        assert fold_accents("Muéstrame mis gastos!") == "muestrame mis gastos"
        assert fold_accents("¿Cuánto gané este año?") == "cuanto gane este ano"

    @pytest.mark.parametrize(
        "raw,expected",
        [("50", Decimal("50")), ("12,50", Decimal("12.50")), ("12.50", Decimal("12.50"))],
    )
    def test_parse_amount(self, raw: str, expected: Decimal) -> None:
        """Test both decimal separators."""
        assert parse_amount(raw) == expected

    def test_parse_amount_invalid(self) -> None:
        """Test that non-numbers return None."""
        assert parse_amount("cincuenta") is None


class TestCommandVocabulary:
    """Tests for CommandVocabulary lookups."""

    @pytest.fixture
    def vocabulary(self) -> CommandVocabulary:
        """Create a vocabulary with the built-in tables."""
        return CommandVocabulary()

    def test_every_section_has_nouns(self) -> None:
        """Verify the section table has no empty entries."""
        assert all(nouns for nouns in SECTION_NOUNS.values())

    def test_navigation_with_verb(self, vocabulary: CommandVocabulary) -> None:
        """Test navigation verbs in both languages."""
        assert vocabulary.match_navigation("llévame a clientes") == Navigate(target="clients")
        assert vocabulary.match_navigation("go to the mileage page") == Navigate(target="mileage")

    def test_navigation_bare_noun_only_when_alone(self, vocabulary: CommandVocabulary) -> None:
        """Test that a bare section noun must be the whole utterance."""
        assert vocabulary.match_navigation("proyectos") == Navigate(target="projects")
        assert vocabulary.match_navigation("proyectos nuevos del mes") is None

    def test_quick_add_scan_receipt(self, vocabulary: CommandVocabulary) -> None:
        """Test the receipt scanning shortcut."""
        action = vocabulary.match_navigation("escanear recibo")
        assert action == Navigate(target="capture", action="scan_receipt")

    def test_query_first_entry_wins(self, vocabulary: CommandVocabulary) -> None:
        """Test that queries are matched in table order."""
        assert vocabulary.match_query("cual es mi balance") == Query(target="balance")
        assert vocabulary.match_query("how many clients do i have") == Query(target="client_count")

    def test_query_year_period(self, vocabulary: CommandVocabulary) -> None:
        """Test the period filter of yearly queries."""
        action = vocabulary.match_query("¿cuánto gané este año?")
        assert action == Query(target="income_year", filters={"period": "year"})

    def test_query_table_targets_are_unique(self) -> None:
        """Verify no query type is listed twice."""
        targets = [target for target, _, _ in QUERY_TABLE]
        assert len(targets) == len(set(targets))

    def test_clarify_concept(self, vocabulary: CommandVocabulary) -> None:
        """Test a help request about a concept."""
        action = vocabulary.match_clarify("help me with fire")
        assert isinstance(action, Clarify)
        assert action.subject == "fire"

    def test_explain_section(self, vocabulary: CommandVocabulary) -> None:
        """Test explaining a section."""
        assert vocabulary.match_explain("qué es el patrimonio") == Explain(topic="net_worth")

    def test_explain_no_match(self, vocabulary: CommandVocabulary) -> None:
        """Test that unrelated text is not an explanation request."""
        assert vocabulary.match_explain("pagar la renta") is None

    def test_is_section(self, vocabulary: CommandVocabulary) -> None:
        """Test section and concept topics are distinguished."""
        assert vocabulary.is_section("expenses")
        assert not vocabulary.is_section("deductions")

    def test_custom_tables(self) -> None:
        """Test that callers can supply their own query table."""
        vocabulary = CommandVocabulary(queries=[("runway", None, ["cuántos meses me quedan"])])
        assert vocabulary.match_query("cuantos meses me quedan") == Query(target="runway")
        assert vocabulary.match_query("mi balance") is None
