"""Navigation, query, clarification and explanation tables.

All matching runs on accent-folded text (see ``fold_accents``) so that
"muéstrame" and "muestrame" hit the same entry.
"""

import re
from dataclasses import dataclass, field

from .actions import Clarify, Explain, Navigate, Query
from .normalize import fold_accents

# Section id -> nouns that name it; longer phrases first
SECTION_NOUNS: dict[str, list[str]] = {
    "dashboard": ["pagina principal", "pantalla principal", "main page", "dashboard",
                  "inicio", "panel", "home"],
    "expenses": ["gastos", "expenses"],
    "income": ["ingresos", "income"],
    "clients": ["clientes", "clients"],
    "projects": ["proyectos", "projects"],
    "contracts": ["contratos", "contracts"],
    "mileage": ["viajes de trabajo", "kilometraje", "kilometros", "millas", "mileage",
                "work trips"],
    "net_worth": ["patrimonio neto", "patrimonio", "net worth", "mis activos", "assets"],
    "banking": ["transacciones bancarias", "estados de cuenta", "banca", "banco",
                "banking", "bank"],
    "settings": ["configuracion", "ajustes", "preferencias", "settings", "preferences"],
    "capture": ["captura rapida", "quick capture", "capturar", "capture"],
    "tax_calendar": ["calendario fiscal", "tax calendar"],
}

NAVIGATION_VERBS: list[str] = [
    # Spanish (accent-folded)
    "quiero ver", "quiero ir a", "llevame a", "vamos a", "ir a", "ve a", "abreme",
    "abre", "abrir", "muestrame", "muestra", "mostrar", "ensename", "ensena", "ver",
    # English
    "take me to", "navigate to", "bring up", "go to", "show me", "show", "open", "view",
]

# (section, action, pattern) for quick-add navigation
QUICK_ADD_PATTERNS: list[tuple[str, str, str]] = [
    ("expenses", "add_expense",
     r"\b(?:agregar|agrega|anadir|anade|nuevo|registrar|registra|crear|crea|add|new|create|record)"
     r"\s+(?:un\s+|an\s+|a\s+)?(?:nuevo\s+)?(?:gasto|expense)$"),
    ("income", "add_income",
     r"\b(?:agregar|agrega|anadir|anade|nuevo|registrar|registra|crear|crea|add|new|create|record)"
     r"\s+(?:un\s+|an\s+|a\s+)?(?:nuevo\s+)?(?:ingreso|income)$"),
    ("clients", "add_client",
     r"\b(?:agregar|agrega|anadir|anade|nuevo|registrar|registra|crear|crea|add|new|create|register)"
     r"\s+(?:un\s+|a\s+)?(?:nuevo\s+)?(?:cliente|client)$"),
    ("capture", "scan_receipt",
     r"\b(?:escanear|escanea|fotografiar|tomar\s+foto\s+de|scan|photograph)\s+"
     r"(?:un\s+|el\s+|a\s+|the\s+)?(?:recibo|receipt)\b"),
]

# (query type, period filter, phrases); first matching entry wins
QUERY_TABLE: list[tuple[str, str | None, list[str]]] = [
    ("expenses_month", "month", [
        "cuanto gaste este mes", "gastos del mes", "gastos este mes",
        "cuanto he gastado este mes", "how much did i spend this month",
        "monthly expenses", "expenses this month", "spending this month"]),
    ("expenses_year", "year", [
        "cuanto gaste este ano", "gastos del ano", "gastos este ano",
        "cuanto he gastado este ano", "how much did i spend this year",
        "yearly expenses", "expenses this year", "spending this year"]),
    ("income_month", "month", [
        "cuanto gane este mes", "ingresos del mes", "ingresos este mes",
        "how much did i earn this month", "monthly income", "income this month"]),
    ("income_year", "year", [
        "cuanto gane este ano", "ingresos del ano", "ingresos este ano",
        "how much did i earn this year", "yearly income", "income this year"]),
    ("balance", None, [
        "mostrar balance", "cual es mi balance", "mi balance", "balance actual",
        "como estoy financieramente", "show balance", "what is my balance",
        "my balance", "current balance", "how am i doing financially"]),
    ("client_count", None, [
        "cuantos clientes tengo", "numero de clientes", "total de clientes",
        "how many clients do i have", "number of clients", "total clients"]),
    ("project_count", None, [
        "cuantos proyectos tengo", "numero de proyectos", "total de proyectos",
        "how many projects do i have", "number of projects", "total projects"]),
    ("pending_receipts", None, [
        "recibos pendientes", "pendientes de revisar", "pending receipts",
        "receipts to review"]),
    ("biggest_expense", None, [
        "cual es mi mayor gasto", "mayor gasto", "gasto mas grande", "gasto mas alto",
        "what is my biggest expense", "biggest expense", "largest expense",
        "highest expense"]),
    ("top_category", None, [
        "en que gasto mas", "categoria mas alta", "donde gasto mas",
        "principal categoria", "what do i spend most on", "top category",
        "where do i spend most", "main category"]),
    ("tax_summary", None, [
        "resumen de impuestos", "resumen fiscal", "mis impuestos", "situacion fiscal",
        "tax summary", "my taxes", "tax situation", "fiscal summary"]),
    ("tax_owed", None, [
        "cuanto debo a hacienda", "cuanto debo de impuestos", "impuestos por pagar",
        "deuda fiscal", "how much do i owe in taxes", "taxes owed", "tax debt",
        "tax liability"]),
    ("deductible_total", None, [
        "gastos deducibles", "cuanto puedo deducir", "total deducible", "deducciones",
        "deductible expenses", "how much can i deduct", "total deductions",
        "tax deductions"]),
    ("billable_total", None, [
        "gastos facturables", "cuanto puedo facturar", "reembolsables",
        "por facturar a clientes", "billable expenses", "reimbursable expenses",
        "client billable", "to bill clients"]),
    ("month_comparison", None, [
        "comparar este mes", "comparar mes anterior", "diferencia con mes pasado",
        "como voy vs mes anterior", "comparacion mensual", "compare this month",
        "compare to last month", "difference from last month", "monthly comparison"]),
    ("subscriptions_list", None, [
        "mis suscripciones", "mostrar suscripciones", "cuanto pago en suscripciones",
        "pagos recurrentes", "my subscriptions", "show subscriptions",
        "how much do i pay in subscriptions", "recurring payments"]),
    ("expense_by_category", None, [
        "gastos por categoria", "desglose de gastos", "distribucion de gastos",
        "expenses by category", "expense breakdown", "expense distribution"]),
    ("income_by_source", None, [
        "ingresos por fuente", "desglose de ingresos", "de donde viene mi dinero",
        "income by source", "income breakdown", "where does my money come from"]),
    ("net_worth_summary", None, [
        "mi patrimonio", "cuanto tengo en total", "activos menos pasivos",
        "my net worth", "net worth summary", "total assets", "assets minus liabilities"]),
    ("fire_progress", None, [
        "progreso fire", "cuanto falta para fire", "como voy con fire",
        "fire progress", "how far from fire", "financial freedom progress"]),
    ("mileage_summary", None, [
        "resumen de kilometraje", "kilometros recorridos", "deduccion por auto",
        "mileage summary", "kilometers driven", "car deduction"]),
]

PAGE_CONTEXT_PHRASES: list[str] = [
    "que es esto", "donde estoy", "que pagina es esta", "explicame esta pagina",
    "que puedo hacer aqui", "como funciona esto", "ayudame con esta pagina", "guiame",
    "tutorial", "ayuda aqui",
    "what is this", "where am i", "what page is this", "explain this page",
    "what can i do here", "how does this work", "help me with this page", "guide me",
    "help here",
]

# Finance concepts that can be explained without being a section
CONCEPT_NOUNS: dict[str, list[str]] = {
    "deductions": ["deducciones", "deducibles", "deductions", "deductible expenses"],
    "reimbursements": ["reembolsos", "gastos facturables", "reimbursements",
                       "billable expenses"],
    "fire": ["libertad financiera", "financial independence", "fire"],
}

CLARIFY_OPTIONS: tuple[str, ...] = ("navigate", "explain", "both", "cancel")

_ARTICLES = r"(?:(?:el|la|los|las|mi|mis|the|my|a|an)\s+)?"
_SECTION_WORD = r"(?:(?:seccion|section|pagina|page)\s+(?:de\s+|of\s+)?)?"


def _alternation(phrases: list[str]) -> str:
    ordered = sorted(phrases, key=len, reverse=True)
    return "|".join(re.escape(p).replace(r"\ ", r"\s+") for p in ordered)


@dataclass
class CommandVocabulary:
    """Bilingual lookup tables for the caller-level categories.

    Attributes:
        sections: Section id to naming nouns.
        queries: Ordered query table.
        page_context: Phrases asking about the current page.
        concepts: Explainable finance concepts.
    """

    sections: dict[str, list[str]] = field(default_factory=lambda: dict(SECTION_NOUNS))
    queries: list[tuple[str, str | None, list[str]]] = field(
        default_factory=lambda: list(QUERY_TABLE)
    )
    page_context: list[str] = field(default_factory=lambda: list(PAGE_CONTEXT_PHRASES))
    concepts: dict[str, list[str]] = field(default_factory=lambda: dict(CONCEPT_NOUNS))

    def __post_init__(self) -> None:
        verbs = _alternation(NAVIGATION_VERBS)
        self._quick_add = [
            (section, action, re.compile(pattern)) for section, action, pattern in QUICK_ADD_PATTERNS
        ]
        self._navigation: list[tuple[str, re.Pattern[str], re.Pattern[str]]] = []
        for section, nouns in self.sections.items():
            nouns_alt = _alternation(nouns)
            with_verb = re.compile(
                rf"\b(?:{verbs})\s+(?:a\s+)?{_ARTICLES}{_SECTION_WORD}{_ARTICLES}(?:{nouns_alt})\b"
            )
            bare = re.compile(rf"^{_ARTICLES}{_SECTION_WORD}(?:{nouns_alt})$")
            self._navigation.append((section, with_verb, bare))

        self._queries = [
            (query_type, period, [fold_accents(p) for p in phrases])
            for query_type, period, phrases in self.queries
        ]
        self._page_context = [fold_accents(p) for p in self.page_context]

        topics = {**self.sections, **self.concepts}
        topic_alt = "|".join(
            f"(?P<t{i}>{_alternation(nouns)})" for i, nouns in enumerate(topics.values())
        )
        self._topic_ids = list(topics.keys())
        self._section_ids = set(self.sections.keys())
        self._clarify = re.compile(
            r"^(?:ayudame|ayuda|help\s+me|help|i\s+need\s+help|necesito\s+ayuda)\s+"
            rf"(?:con|with)\s+{_ARTICLES}{_SECTION_WORD}(?:{topic_alt})$"
        )
        self._explain = re.compile(
            r"^(?:que\s+es|que\s+son|explicame|explica|hablame\s+de|"
            r"what\s+is|what\s+are|explain|tell\s+me\s+about)\s+"
            rf"{_ARTICLES}{_SECTION_WORD}(?:{topic_alt})$"
        )

    def match_navigation(self, text: str) -> Navigate | None:
        """Match a request to open a section.

        A bare section noun only navigates when it is the whole utterance,
        so "expenses this month" stays a query.
        """
        folded = fold_accents(text)
        for section, action, pattern in self._quick_add:
            if pattern.search(folded):
                return Navigate(target=section, action=action)
        for section, with_verb, bare in self._navigation:
            if with_verb.search(folded) or bare.match(folded):
                return Navigate(target=section)
        return None

    def match_query(self, text: str) -> Query | None:
        """Match a data question against the query table."""
        folded = fold_accents(text)
        for query_type, period, phrases in self._queries:
            if any(phrase in folded for phrase in phrases):
                filters = {"period": period} if period else {}
                return Query(target=query_type, filters=filters)
        return None

    def match_clarify(self, text: str) -> Clarify | None:
        """Match an ambiguous help request about a section or concept."""
        match = self._clarify.match(fold_accents(text))
        if not match:
            return None
        return Clarify(options=CLARIFY_OPTIONS, subject=self._matched_topic(match))

    def match_explain(self, text: str) -> Explain | None:
        """Match a request to explain the current page, a section or a concept."""
        folded = fold_accents(text)
        if any(phrase in folded for phrase in self._page_context):
            return Explain(topic="current_page")
        if match := self._explain.match(folded):
            return Explain(topic=self._matched_topic(match))
        return None

    def is_section(self, topic: str) -> bool:
        """Check whether a topic id names a navigable section."""
        return topic in self._section_ids

    def _matched_topic(self, match: re.Match[str]) -> str:
        for i, topic in enumerate(self._topic_ids):
            if match.group(f"t{i}"):
                return topic
        return self._topic_ids[0]


__all__ = [
    "CLARIFY_OPTIONS",
    "NAVIGATION_VERBS",
    "QUERY_TABLE",
    "SECTION_NOUNS",
    "CommandVocabulary",
]
