"""Follow-up suggestions offered after an exchange."""

from dataclasses import dataclass

MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class Suggestion:
    """A suggested next utterance.

    Attributes:
        text: Label shown to the user.
        query: Utterance submitted when the suggestion is chosen.
    """

    text: str
    query: str


def _s(text: str, query: str | None = None) -> Suggestion:
    return Suggestion(text=text, query=query or text)


ACTION_FOLLOW_UPS: dict[str, dict[str, list[Suggestion]]] = {
    "create_expense": {
        "es": [_s("Agregar otro gasto", "agregar gasto"), _s("¿Cuánto gasté este mes?")],
        "en": [_s("Add another expense", "add expense"), _s("How much did I spend this month?")],
    },
    "create_income": {
        "es": [_s("Registrar otro ingreso", "agregar ingreso"), _s("¿Cuánto gané este mes?")],
        "en": [_s("Record another income", "add income"), _s("How much did I earn this month?")],
    },
    "export": {
        "es": [_s("Exportar en PDF", "exportar reporte en pdf"), _s("¿Cuál es mi balance?")],
        "en": [_s("Export as PDF", "export report as pdf"), _s("What's my balance?")],
    },
    "spending_alert": {
        "es": [_s("¿Cuánto gasté este mes?"), _s("¿En qué gasto más?")],
        "en": [_s("How much did I spend this month?"), _s("What do I spend most on?")],
    },
    "reminder": {
        "es": [_s("Ver calendario fiscal", "ir a calendario fiscal"), _s("¿Tengo algo pendiente?")],
        "en": [_s("See tax calendar", "go to tax calendar"), _s("Do I have anything pending?")],
    },
    "navigate": {
        "es": [_s("Explícame esta página"), _s("Volver al dashboard", "ir al dashboard")],
        "en": [_s("Explain this page"), _s("Back to dashboard", "go to dashboard")],
    },
    "query": {
        "es": [_s("¿Cómo voy vs mes anterior?"), _s("¿Puedo exportar esto?")],
        "en": [_s("Compare to last month"), _s("Can I export this?")],
    },
    "clarify": {
        "es": [_s("Ninguna, gracias", "cancelar"), _s("Necesito más ayuda")],
        "en": [_s("None, thanks", "cancel"), _s("I need more help")],
    },
    "explain": {
        "es": [_s("Dame un ejemplo"), _s("¿Qué debería hacer?")],
        "en": [_s("Give me an example"), _s("What should I do?")],
    },
}

TARGET_FOLLOW_UPS: dict[str, dict[str, list[Suggestion]]] = {
    "dashboard": {
        "es": [_s("¿Cuál es mi balance?")],
        "en": [_s("What's my balance?")],
    },
    "expenses": {
        "es": [_s("Agregar un gasto", "agregar gasto")],
        "en": [_s("Add an expense", "add expense")],
    },
    "income": {
        "es": [_s("Registrar un ingreso", "agregar ingreso")],
        "en": [_s("Record an income", "add income")],
    },
    "clients": {
        "es": [_s("Agregar cliente", "agregar cliente")],
        "en": [_s("Add client", "add client")],
    },
    "projects": {
        "es": [_s("¿Cuántos proyectos tengo?")],
        "en": [_s("How many projects do I have?")],
    },
    "net_worth": {
        "es": [_s("¿Cuál es mi patrimonio?")],
        "en": [_s("What's my net worth?")],
    },
    "mileage": {
        "es": [_s("Resumen de kilometraje")],
        "en": [_s("Mileage summary")],
    },
    "banking": {
        "es": [_s("¿Cuál es mi balance?")],
        "en": [_s("What's my balance?")],
    },
    "taxes": {
        "es": [_s("¿Cuánto debo de impuestos?")],
        "en": [_s("How much do I owe in taxes?")],
    },
}

QUERY_FOLLOW_UPS: dict[str, dict[str, list[Suggestion]]] = {
    "balance": {
        "es": [_s("¿Cuánto gasté este mes?")],
        "en": [_s("How much did I spend this month?")],
    },
    "expenses_month": {
        "es": [_s("¿Cuál fue mi mayor gasto?")],
        "en": [_s("What was my biggest expense?")],
    },
    "income_month": {
        "es": [_s("¿Cuál es mi balance?")],
        "en": [_s("What's my balance?")],
    },
    "biggest_expense": {
        "es": [_s("¿En qué gasto más?")],
        "en": [_s("What do I spend most on?")],
    },
    "tax_summary": {
        "es": [_s("¿Cuánto debo de impuestos?")],
        "en": [_s("How much do I owe in taxes?")],
    },
}

DEFAULT_FOLLOW_UPS: dict[str, list[Suggestion]] = {
    "es": [
        _s("Muéstrame mis datos", "ir al dashboard"),
        _s("¿Cuál es mi balance?"),
        _s("¿Cuánto gasté este mes?"),
    ],
    "en": [
        _s("Show me my data", "go to dashboard"),
        _s("What's my balance?"),
        _s("How much did I spend this month?"),
    ],
}


def follow_up_suggestions(
    last_intent: str | None,
    last_action: str | None,
    last_target: str | None,
    language: str = "es",
) -> list[Suggestion]:
    """Pick up to three suggestions for the next utterance.

    Action suggestions come first, then target, then query, then defaults.
    """
    candidates: list[Suggestion] = []

    action_key = last_action or last_intent
    if action_key in ACTION_FOLLOW_UPS:
        candidates.extend(ACTION_FOLLOW_UPS[action_key][language][:2])
    if last_target in TARGET_FOLLOW_UPS:
        candidates.extend(TARGET_FOLLOW_UPS[last_target][language][:1])
    if last_target in QUERY_FOLLOW_UPS:
        candidates.extend(QUERY_FOLLOW_UPS[last_target][language][:1])
    candidates.extend(DEFAULT_FOLLOW_UPS[language])

    result: list[Suggestion] = []
    seen: set[str] = set()
    for suggestion in candidates:
        if suggestion.query in seen:
            continue
        seen.add(suggestion.query)
        result.append(suggestion)
        if len(result) == MAX_SUGGESTIONS:
            break
    return result


__all__ = [
    "ACTION_FOLLOW_UPS",
    "DEFAULT_FOLLOW_UPS",
    "MAX_SUGGESTIONS",
    "QUERY_FOLLOW_UPS",
    "TARGET_FOLLOW_UPS",
    "Suggestion",
    "follow_up_suggestions",
]
