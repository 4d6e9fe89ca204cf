"""Rule-based action parser for voice and text commands.

Maps a normalized utterance to exactly one ParsedAction. Rules are
bilingual (Spanish and English surface forms map to the same action)
and no language tag is needed from the caller.

Category precedence is an explicit ordered dispatch list:

    spending_alert -> reminder -> duplicate -> export
    -> create_expense -> create_income -> delete
    -> navigate -> query -> clarify -> explain
    -> conversational fallback

Within a category the first matching rule wins.
"""

import logging
import re
from collections.abc import Callable

from .actions import (
    AdvancedAction,
    Conversational,
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    ExportFormat,
    ExportRequest,
    ExportType,
    ParsedAction,
    Query,
    Reminder,
    SpendingAlert,
)
from .normalize import fold_accents, normalize_text, parse_amount
from .vocabulary import CommandVocabulary

logger = logging.getLogger(__name__)

# Amount with optional currency sign and currency word
_AMOUNT = (
    r"\$?\s*(?P<amount>\d+(?:[.,]\d+)?)\s*"
    r"(?:(?:dólares|dolares|dólar|dolar|pesos|peso|dollars|dollar|bucks)\b\s*)?"
)

# Day token: two-word forms first so "pasado mañana" is not split
_DAY = r"(?P<day>pasado\s+mañana|pasado\s+manana|day\s+after\s+tomorrow|\w+)"

_KNOWN_DAY = (
    r"(?P<day>pasado\s+mañana|pasado\s+manana|day\s+after\s+tomorrow|"
    r"lunes|martes|miércoles|miercoles|jueves|viernes|sábado|sabado|domingo|"
    r"mañana|manana|hoy|monday|tuesday|wednesday|thursday|friday|saturday|"
    r"sunday|tomorrow|today)"
)

_TIME_ES = r"(?:\s+a\s+las?\s+(?P<time>\d{1,2}(?::\d{2})?))?"
_TIME_EN = r"(?:\s+at\s+(?P<time>\d{1,2}(?::\d{2})?(?:\s*[ap]\.?m\.?)?))?"

DAY_MAPPINGS: dict[str, str] = {
    # Spanish
    "lunes": "monday",
    "martes": "tuesday",
    "miércoles": "wednesday",
    "miercoles": "wednesday",
    "jueves": "thursday",
    "viernes": "friday",
    "sábado": "saturday",
    "sabado": "saturday",
    "domingo": "sunday",
    "mañana": "tomorrow",
    "manana": "tomorrow",
    "hoy": "today",
    "pasado mañana": "day_after_tomorrow",
    "pasado manana": "day_after_tomorrow",
    # English
    "monday": "monday",
    "tuesday": "tuesday",
    "wednesday": "wednesday",
    "thursday": "thursday",
    "friday": "friday",
    "saturday": "saturday",
    "sunday": "sunday",
    "tomorrow": "tomorrow",
    "today": "today",
    "day after tomorrow": "day_after_tomorrow",
}

EXPENSE_CATEGORY_KEYWORDS: list[tuple[str, list[str]]] = [
    ("meals", ["restaurante", "restaurant", "comida", "food", "almuerzo", "lunch",
               "cena", "dinner", "desayuno", "breakfast", "cafe", "coffee"]),
    ("travel", ["viaje", "travel", "vuelo", "flight", "hotel", "hospedaje", "avion",
                "airplane", "tren", "train", "bus", "taxi", "uber", "transporte",
                "transport"]),
    ("equipment", ["equipo", "equipment", "computadora", "computer", "laptop",
                   "telefono", "phone", "tablet", "monitor", "teclado", "keyboard",
                   "herramienta", "tool"]),
    ("software", ["software", "licencia", "license", "suscripcion", "subscription",
                  "app", "aplicacion", "programa"]),
    ("fuel", ["gasolina", "gas", "fuel", "combustible", "diesel", "nafta", "bencina"]),
    ("office_supplies", ["oficina", "office", "papeleria", "stationery", "papel",
                         "paper", "tinta", "ink", "material"]),
    ("utilities", ["servicios", "utilities", "luz", "electricity", "agua", "water",
                   "internet", "landline"]),
    ("professional_services", ["servicio", "service", "consultoria", "consulting",
                               "abogado", "lawyer", "contador", "accountant",
                               "profesional"]),
]

INCOME_TYPE_KEYWORDS: list[tuple[str, list[str]]] = [
    ("client_payment", ["cliente", "client", "factura", "invoice"]),
    ("salary", ["salario", "salary", "sueldo", "nomina", "payroll", "wage"]),
    ("bonus", ["bono", "bonus", "aguinaldo", "prima"]),
    ("freelance", ["freelance", "proyecto", "project", "independiente"]),
    ("investment_stocks", ["dividendos", "dividends", "inversion", "investment",
                           "acciones", "stocks", "bolsa"]),
    ("investment_crypto", ["crypto", "cripto", "bitcoin", "ethereum"]),
    ("passive_rental", ["alquiler", "renta", "rental", "arrendamiento", "rent"]),
    ("passive_royalties", ["regalias", "royalties", "royalty", "derechos de autor"]),
    ("gift", ["regalo", "gift", "donacion", "donation"]),
    ("refund", ["reembolso", "refund", "devolucion", "return"]),
    ("online_business", ["online", "ecommerce", "tienda online"]),
]

ENTITY_NAMES: dict[str, str] = {
    "gasto": "expense",
    "gastos": "expense",
    "expense": "expense",
    "expenses": "expense",
    "ingreso": "income",
    "ingresos": "income",
    "income": "income",
    "incomes": "income",
    "cliente": "client",
    "clientes": "client",
    "client": "client",
    "clients": "client",
    "proyecto": "project",
    "proyectos": "project",
    "project": "project",
    "projects": "project",
}

# Memory topic -> nouns prepended when re-reading a follow-up
TOPIC_NOUNS: dict[str, tuple[str, ...]] = {
    "expenses": ("gastos", "expenses"),
    "income": ("ingresos", "income"),
    "clients": ("clientes", "clients"),
    "projects": ("proyectos", "projects"),
    "taxes": ("impuestos", "taxes"),
    "net_worth": ("patrimonio", "net worth"),
}

# Checked against accent-folded text, in order
FOLLOW_UP_PERIODS: list[tuple[str, str]] = [
    ("last_month", r"\b(?:last|previous) month\b|\bmes (?:pasado|anterior)\b"),
    ("last_year", r"\b(?:last|previous) year\b|\bano (?:pasado|anterior)\b"),
    ("last_week", r"\b(?:last|previous) week\b|\bsemana (?:pasada|anterior)\b"),
    ("month", r"\bthis month\b|\beste mes\b"),
    ("year", r"\bthis year\b|\beste ano\b"),
    ("week", r"\bthis week\b|\besta semana\b"),
    ("today", r"\btoday\b|\bhoy\b"),
]

_FOLLOW_UP_LEAD = re.compile(
    r"^(?:y|and|but|pero|tambien|also|what about|how about|y que tal|que tal|y en|and in)\s+"
)


class ActionParser:
    """Rule-based bilingual action parser.

    Pattern tables are compiled once per instance. Every parse method is
    pure: the same text always yields the same action.
    """

    # Spending alert patterns
    SPENDING_ALERT_PATTERNS = [
        # "alerta cuando gaste más de 1000", "avísame si gasto más de 200 en restaurantes"
        r"(?:alerta|avísame|avisame|notifícame|notificame)\s+(?:cuando|si)\s+"
        r"(?:gaste|gasto)\s+(?:más|mas)\s+de\s*" + _AMOUNT + r"(?:en\s+(?P<category>.+))?",
        # "pon una alerta de gasto mayor a 500 en viajes"
        r"(?:pon|configura|crea)\s+(?:una\s+)?alerta\s+(?:de\s+)?(?:gasto\s+)?"
        r"(?:mayor\s+a|de)\s*" + _AMOUNT + r"(?:en\s+(?P<category>.+))?",
        # "alert me when I spend more than 500 on restaurants"
        r"(?:alert|notify|warn)\s+(?:me\s+)?(?:when|if)\s+(?:i\s+)?(?:spend|spending)\s+"
        r"(?:more\s+than|over|above)\s*" + _AMOUNT + r"(?:on\s+(?P<category>.+))?",
        # "set a spending alert for 300 on travel"
        r"(?:set|create)\s+(?:a\s+|an\s+)?(?:spending\s+)?alert\s+(?:for\s+|of\s+)?"
        + _AMOUNT + r"(?:on\s+(?P<category>.+))?",
    ]

    # Reminder patterns; day-first forms only accept known day tokens
    REMINDER_PATTERNS = [
        # "pon un recordatorio para pagar la renta el lunes"
        r"(?:pon|configura|crea)\s+(?:un\s+)?recordatorio\s+(?:para\s+)?(?P<action>.+?)\s+"
        r"(?:el\s+)?" + _DAY + _TIME_ES + r"$",
        # "recuérdame mañana pagar la renta"
        r"(?:recuérdame|recuerdame|hazme\s+acordar)\s+(?:el\s+)?" + _KNOWN_DAY + _TIME_ES
        + r"\s+(?:de\s+|que\s+)?(?P<action>.+)$",
        # "recuérdame revisar gastos el viernes", "recordatorio: revisar facturas mañana"
        r"(?:recuérdame|recuerdame|recordatorio:?|hazme\s+acordar)\s+(?:de\s+|que\s+)?"
        r"(?P<action>.+?)\s+(?:el\s+)?" + _DAY + _TIME_ES + r"$",
        # "set a reminder to send invoices on monday"
        r"(?:set|create)\s+(?:a\s+)?reminder\s+(?:to\s+)?(?P<action>.+?)\s+(?:on\s+)?"
        + _DAY + _TIME_EN + r"$",
        # "remind me tomorrow to pay rent"
        r"remind\s+me\s+(?:on\s+)?" + _KNOWN_DAY + _TIME_EN + r"\s+to\s+(?P<action>.+)$",
        # "remind me to check expenses on friday at 3pm"
        r"(?:remind\s+me|reminder:?)\s+(?:to\s+)?(?P<action>.+?)\s+(?:on\s+)?"
        + _DAY + _TIME_EN + r"$",
    ]

    _DUPLICATE_VERB = (
        r"(?:duplicar?|duplica|duplicate|copiar?|copy|repetir|repite|repeat)\s+"
        r"(?:el\s+|the\s+|my\s+|mi\s+)?"
    )

    DUPLICATE_EXPENSE_PATTERNS = [
        _DUPLICATE_VERB + r"(?:último|ultimo|last|anterior|previous)\s+(?:gasto|expense)\b",
        _DUPLICATE_VERB + r"(?:gasto|expense)\s+(?:anterior|previous)\b",
        r"(?:otro|another)\s+(?:gasto|expense)\s+(?:igual|like\s+that|the\s+same|same)",
    ]

    DUPLICATE_INCOME_PATTERNS = [
        _DUPLICATE_VERB + r"(?:último|ultimo|last|anterior|previous)\s+(?:ingreso|income)\b",
        _DUPLICATE_VERB + r"(?:ingreso|income)\s+(?:anterior|previous)\b",
        r"(?:otro|another)\s+(?:ingreso|income)\s+(?:igual|like\s+that|the\s+same|same)",
    ]

    # Export type keywords, strongest first
    EXPORT_TYPE_PATTERNS = [
        (r"impuesto|\btax(?:es)?\b|fiscal|t2125|declaración|declaracion", ExportType.TAX_REPORT),
        (r"reembolso|reimbursement|facturar|billing|\bclientes?\b|\bclients?\b",
         ExportType.REIMBURSEMENT),
        (r"todos?\s+(?:los\s+|mis\s+)?gastos|all\s+(?:my\s+|the\s+)?expenses|gastos\s+completos",
         ExportType.ALL_EXPENSES),
        (r"todos?\s+(?:los\s+|mis\s+)?ingresos|all\s+(?:my\s+|the\s+)?income|ingresos\s+completos",
         ExportType.ALL_INCOME),
        (r"\bgastos\b|\bexpenses\b", ExportType.ALL_EXPENSES),
        (r"\bingresos\b|\bincome\b", ExportType.ALL_INCOME),
    ]

    EXPORT_FORMAT_PATTERNS = [
        (r"\bpdf\b|\bdocumento\b", ExportFormat.PDF),
        (r"\bcsv\b|\btexto\b|\btext\b", ExportFormat.CSV),
    ]

    EXPORT_TRIGGER_PATTERNS = [
        r"(?:exportar?|export|descargar?|download|generar?|generate|crear?|create)\s+"
        r"(?:para|for|un|una|a|an|el|the)?\s*(?:mi\s+|my\s+)?"
        r"(?:contador|accountant|reporte|report|informe)",
        r"(?:exportar?|export|descargar?|download)\s+(?:mis\s+|my\s+|los\s+|the\s+)?"
        r"(?:gastos|ingresos|expenses|income|reembolsos|reimbursements|impuestos|taxes)",
        r"(?:reporte|report|informe)\s+(?:de\s+)?(?:impuestos|taxes|reembolsos?|"
        r"reimbursements?|gastos|expenses|ingresos|income)",
        r"(?:dame|give\s+me|quiero|i\s+want)\s+(?:el\s+|un\s+|the\s+|a\s+)?"
        r"(?:reporte|report|archivo|file|informe)",
    ]

    CREATE_EXPENSE_PATTERNS = [
        # "gasto de 50 en restaurante", "i spent 12,50 on coffee"
        r"^(?:gasto\s+de|expense\s+of|gasté|gaste|spent|i\s+spent)\s*" + _AMOUNT
        + r"(?:en|at|de|on)\s+(?P<vendor>.+)$",
        # "50 dólares en gasolina"
        r"^" + _AMOUNT + r"(?:en|at)\s+(?P<vendor>.+)$",
        # "gasto taxi por 20"
        r"^(?:gasto|expense|gasté|gaste)\s+(?P<vendor>.+?)\s+(?:por|for)\s*"
        r"\$?\s*(?P<amount>\d+(?:[.,]\d+)?)",
    ]

    CREATE_INCOME_PATTERNS = [
        # "ingreso de 2000 de cliente acme", "recibí pago de 300 por proyecto"
        r"^(?:ingreso\s+de|income\s+of|recibí|recibi|gané|gane|received|i\s+received|"
        r"earned|i\s+earned)\s*(?:un\s+)?(?:pago\s+de\s+)?" + _AMOUNT
        + r"(?:de|from|por|by|for)\s+(?P<source>.+)$",
        # "me pagaron 100 de alquiler"
        r"^(?:me\s+pagaron|pago\s+de|got\s+paid|i\s+got\s+paid)\s*" + _AMOUNT
        + r"(?:de|por|from|for)\s+(?P<source>.+)$",
        # "3000 de sueldo"
        r"^" + _AMOUNT + r"(?:de\s+ingreso|de\s+sueldo|de\s+salario|of\s+income|in\s+income)"
        r"\s*(?:(?:de|por|from)\s+)?(?P<source>.+)?$",
    ]

    _DELETE_VERB = r"(?:borra|borrar|bórrame|borrame|elimina|eliminar|delete|remove|erase)"

    DELETE_DATA_PATTERNS = [
        r"(?:borra|borrar|elimina|eliminar|delete|clear|wipe|erase)\s+"
        r"(?:todos\s+)?(?:los\s+|mis\s+|all\s+)?(?:of\s+)?(?:my\s+|the\s+)?(?:datos|data)\b",
    ]

    DELETE_ALL_PATTERNS = [
        _DELETE_VERB + r"\s+(?:todos\s+(?:los\s+|mis\s+)?|all\s+(?:(?:of\s+)?(?:my|the)\s+)?)"
        r"(?P<entity>gastos|ingresos|clientes|proyectos|expenses|incomes|income|clients|projects)\b",
    ]

    DELETE_LAST_PATTERNS = [
        _DELETE_VERB + r"\s+(?:el\s+|la\s+|este\s+|esta\s+|ese\s+|the\s+|this\s+|that\s+|"
        r"my\s+|mi\s+)?(?:(?:último|ultimo|last|previous|anterior)\s+)?"
        r"(?P<entity>gasto|ingreso|cliente|proyecto|expense|income|client|project)\b",
    ]

    def __init__(self, vocabulary: CommandVocabulary | None = None) -> None:
        """Compile pattern tables and build the dispatch order.

        Args:
            vocabulary: Navigation/query/explain tables. Defaults to the
                built-in bilingual tables.
        """
        flags = re.IGNORECASE
        self._spending_alert = [re.compile(p, flags) for p in self.SPENDING_ALERT_PATTERNS]
        self._reminder = [re.compile(p, flags) for p in self.REMINDER_PATTERNS]
        self._duplicate = [
            (re.compile(p, flags), DuplicateTarget.LAST_EXPENSE)
            for p in self.DUPLICATE_EXPENSE_PATTERNS
        ] + [
            (re.compile(p, flags), DuplicateTarget.LAST_INCOME)
            for p in self.DUPLICATE_INCOME_PATTERNS
        ]
        self._export_type = [(re.compile(p, flags), t) for p, t in self.EXPORT_TYPE_PATTERNS]
        self._export_format = [(re.compile(p, flags), f) for p, f in self.EXPORT_FORMAT_PATTERNS]
        self._export_trigger = [re.compile(p, flags) for p in self.EXPORT_TRIGGER_PATTERNS]
        self._create_expense = [re.compile(p, flags) for p in self.CREATE_EXPENSE_PATTERNS]
        self._create_income = [re.compile(p, flags) for p in self.CREATE_INCOME_PATTERNS]
        self._delete_data = [re.compile(p, flags) for p in self.DELETE_DATA_PATTERNS]
        self._delete_all = [re.compile(p, flags) for p in self.DELETE_ALL_PATTERNS]
        self._delete_last = [re.compile(p, flags) for p in self.DELETE_LAST_PATTERNS]

        self._vocabulary = vocabulary or CommandVocabulary()

        self._advanced_dispatch: list[tuple[str, Callable[[str], AdvancedAction | None]]] = [
            ("spending_alert", self._try_spending_alert),
            ("reminder", self._try_reminder),
            ("duplicate", self._try_duplicate),
            ("export", self._try_export),
        ]
        self._dispatch: list[tuple[str, Callable[[str], ParsedAction | None]]] = [
            *self._advanced_dispatch,
            ("create_expense", self._try_create_expense),
            ("create_income", self._try_create_income),
            ("delete", self._try_delete),
            ("navigate", self._vocabulary.match_navigation),
            ("query", self._vocabulary.match_query),
            ("clarify", self._vocabulary.match_clarify),
            ("explain", self._vocabulary.match_explain),
        ]

    @property
    def categories(self) -> list[str]:
        """Category names in precedence order, excluding the fallback."""
        return [name for name, _ in self._dispatch]

    def parse(self, text: str) -> ParsedAction:
        """Parse an utterance into an action.

        Never fails: text matching no rule becomes Conversational.

        Args:
            text: Raw utterance text

        Returns:
            The first matching action in category precedence order
        """
        normalized = normalize_text(text)
        if normalized:
            for name, rule in self._dispatch:
                if action := rule(normalized):
                    logger.debug(f"Parsed '{normalized}' as {name}")
                    return action

        logger.debug(f"No rule matched '{normalized}', using conversational fallback")
        return Conversational(text=text.strip())

    def parse_advanced(self, text: str) -> AdvancedAction | None:
        """Parse only the advanced categories (alert, reminder, duplicate, export).

        Returns:
            The matching action, or None so the caller can fall through to
            its own navigation/query handling.
        """
        normalized = normalize_text(text)
        if not normalized:
            return None
        for _, rule in self._advanced_dispatch:
            if action := rule(normalized):
                return action
        return None

    def parse_follow_up(
        self, text: str, previous: ParsedAction | None, topic: str | None
    ) -> ParsedAction | None:
        """Resolve an elliptical follow-up against the previous exchange.

        "y este año" after a question about expenses is read again as
        "gastos este año". Failing that, a previous query is repeated with
        the period named in the text ("and last month").

        Args:
            text: Utterance already known to continue the previous exchange
            previous: Action of the previous exchange, if any
            topic: Topic of the previous exchange, if any

        Returns:
            The resolved action, or None when the text stays conversational
        """
        rest = _FOLLOW_UP_LEAD.sub("", fold_accents(text), count=1)
        if not rest:
            return None

        for noun in TOPIC_NOUNS.get(topic or "", ()):
            action = self.parse(f"{noun} {rest}")
            if not isinstance(action, Conversational):
                logger.debug(f"Follow-up '{text}' resolved through topic {topic}")
                return action

        if isinstance(previous, Query):
            for period, pattern in FOLLOW_UP_PERIODS:
                if re.search(pattern, rest):
                    logger.debug(f"Follow-up '{text}' repeats {previous.target} for {period}")
                    return Query(target=previous.target, filters={**previous.filters, "period": period})
        return None

    def parse_spending_alert(self, text: str) -> SpendingAlert | None:
        """Parse a spending alert command."""
        return self._try_spending_alert(normalize_text(text))

    def parse_reminder(self, text: str) -> Reminder | None:
        """Parse a reminder command."""
        return self._try_reminder(normalize_text(text))

    def parse_duplicate_request(self, text: str) -> DuplicateRequest | None:
        """Parse a duplicate-last-entry command."""
        return self._try_duplicate(normalize_text(text))

    def parse_export_request(self, text: str) -> ExportRequest | None:
        """Parse an export command."""
        return self._try_export(normalize_text(text))

    def _try_spending_alert(self, text: str) -> SpendingAlert | None:
        for pattern in self._spending_alert:
            match = pattern.search(text)
            if not match:
                continue
            threshold = parse_amount(match.group("amount"))
            if threshold is None or threshold <= 0:
                continue
            category = (match.group("category") or "").strip() or None
            return SpendingAlert(threshold=threshold, category=category)
        return None

    def _try_reminder(self, text: str) -> Reminder | None:
        for pattern in self._reminder:
            match = pattern.search(text)
            if not match:
                continue
            action = match.group("action").strip()
            day_raw = re.sub(r"\s+", " ", match.group("day").strip())
            if not action or not day_raw:
                continue
            # Unknown day tokens pass through verbatim
            day = DAY_MAPPINGS.get(day_raw, day_raw)
            time = match.group("time")
            return Reminder(
                action=action,
                day_or_date=day,
                time=time.strip() if time else None,
            )
        return None

    def _try_duplicate(self, text: str) -> DuplicateRequest | None:
        for pattern, target in self._duplicate:
            if pattern.search(text):
                return DuplicateRequest(target=target)
        return None

    def _try_export(self, text: str) -> ExportRequest | None:
        """Two-pass export parse: type and format first, then the trigger check."""
        export_type = ExportType.FULL_REPORT
        for pattern, candidate in self._export_type:
            if pattern.search(text):
                export_type = candidate
                break

        export_format = ExportFormat.EXCEL
        for pattern, candidate_format in self._export_format:
            if pattern.search(text):
                export_format = candidate_format
                break

        if any(p.search(text) for p in self._export_trigger):
            return ExportRequest(export_type=export_type, format=export_format)
        return None

    def _try_create_expense(self, text: str) -> CreateExpense | None:
        for pattern in self._create_expense:
            match = pattern.search(text)
            if not match:
                continue
            amount = parse_amount(match.group("amount"))
            vendor = match.group("vendor").strip()
            if amount is None or amount <= 0 or not vendor:
                continue
            return CreateExpense(
                amount=amount,
                category=_classify(vendor, EXPENSE_CATEGORY_KEYWORDS),
                vendor=_capitalize(vendor),
            )
        return None

    def _try_create_income(self, text: str) -> CreateIncome | None:
        for pattern in self._create_income:
            match = pattern.search(text)
            if not match:
                continue
            amount = parse_amount(match.group("amount"))
            if amount is None or amount <= 0:
                continue
            source = (match.group("source") or "").strip()
            return CreateIncome(
                amount=amount,
                income_type=_classify(f"{text} {source}", INCOME_TYPE_KEYWORDS),
                source=_capitalize(source),
            )
        return None

    def _try_delete(self, text: str) -> DeleteRequest | None:
        if any(p.search(text) for p in self._delete_data):
            return DeleteRequest(entity="data", scope="all")

        for pattern in self._delete_all:
            if match := pattern.search(text):
                return DeleteRequest(entity=ENTITY_NAMES[match.group("entity")], scope="all")

        for pattern in self._delete_last:
            if match := pattern.search(text):
                return DeleteRequest(entity=ENTITY_NAMES[match.group("entity")], scope="last")

        return None


def _classify(text: str, table: list[tuple[str, list[str]]]) -> str:
    """Return the first label whose keyword starts a word in text, else 'other'."""
    folded = fold_accents(text)
    for label, keywords in table:
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}", folded):
                return label
    return "other"


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


_default_parser: ActionParser | None = None


def _get_default_parser() -> ActionParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = ActionParser()
    return _default_parser


def parse_action(text: str) -> ParsedAction:
    """Parse text with the shared default parser."""
    return _get_default_parser().parse(text)


def parse_spending_alert(text: str) -> SpendingAlert | None:
    """Parse a spending alert with the shared default parser."""
    return _get_default_parser().parse_spending_alert(text)


def parse_reminder(text: str) -> Reminder | None:
    """Parse a reminder with the shared default parser."""
    return _get_default_parser().parse_reminder(text)


def parse_duplicate_request(text: str) -> DuplicateRequest | None:
    """Parse a duplicate request with the shared default parser."""
    return _get_default_parser().parse_duplicate_request(text)


def parse_export_request(text: str) -> ExportRequest | None:
    """Parse an export request with the shared default parser."""
    return _get_default_parser().parse_export_request(text)


def parse_advanced_action(text: str) -> AdvancedAction | None:
    """Parse alert/reminder/duplicate/export with the shared default parser."""
    return _get_default_parser().parse_advanced(text)


__all__ = [
    "DAY_MAPPINGS",
    "FOLLOW_UP_PERIODS",
    "TOPIC_NOUNS",
    "ActionParser",
    "parse_action",
    "parse_advanced_action",
    "parse_duplicate_request",
    "parse_export_request",
    "parse_reminder",
    "parse_spending_alert",
]
