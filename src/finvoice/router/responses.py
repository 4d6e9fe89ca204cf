"""Bilingual spoken reply templates for parsed actions."""

from decimal import Decimal

from .actions import (
    Clarify,
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    Explain,
    ExportRequest,
    Navigate,
    ParsedAction,
    Query,
    Reminder,
    SpendingAlert,
)

SECTION_NAMES: dict[str, dict[str, str]] = {
    "dashboard": {"es": "el inicio", "en": "the dashboard"},
    "expenses": {"es": "Gastos", "en": "Expenses"},
    "income": {"es": "Ingresos", "en": "Income"},
    "clients": {"es": "Clientes", "en": "Clients"},
    "projects": {"es": "Proyectos", "en": "Projects"},
    "contracts": {"es": "Contratos", "en": "Contracts"},
    "mileage": {"es": "Kilometraje", "en": "Mileage"},
    "net_worth": {"es": "Patrimonio", "en": "Net Worth"},
    "banking": {"es": "Banca", "en": "Banking"},
    "settings": {"es": "Configuración", "en": "Settings"},
    "capture": {"es": "Captura rápida", "en": "Quick Capture"},
    "tax_calendar": {"es": "Calendario Fiscal", "en": "Tax Calendar"},
}

EXPORT_TYPE_NAMES: dict[str, dict[str, str]] = {
    "tax_report": {"es": "reporte fiscal", "en": "tax report"},
    "reimbursement": {"es": "reporte de reembolsos", "en": "reimbursement report"},
    "all_expenses": {"es": "todos los gastos", "en": "all expenses"},
    "all_income": {"es": "todos los ingresos", "en": "all income"},
    "full_report": {"es": "reporte completo", "en": "full report"},
}

ENTITY_NAMES: dict[str, dict[str, str]] = {
    "expense": {"es": "gasto", "en": "expense"},
    "income": {"es": "ingreso", "en": "income"},
    "client": {"es": "cliente", "en": "client"},
    "project": {"es": "proyecto", "en": "project"},
    "data": {"es": "datos", "en": "data"},
}

CONCEPT_NAMES: dict[str, dict[str, str]] = {
    "deductions": {"es": "las deducciones", "en": "deductions"},
    "reimbursements": {"es": "los reembolsos", "en": "reimbursements"},
    "fire": {"es": "la libertad financiera (FIRE)", "en": "financial independence (FIRE)"},
}

QUERY_NAMES: dict[str, dict[str, str]] = {
    "expenses_month": {"es": "Gastos del mes", "en": "Expenses this month"},
    "expenses_year": {"es": "Gastos del año", "en": "Expenses this year"},
    "income_month": {"es": "Ingresos del mes", "en": "Income this month"},
    "income_year": {"es": "Ingresos del año", "en": "Income this year"},
    "balance": {"es": "Balance", "en": "Balance"},
    "client_count": {"es": "Clientes", "en": "Clients"},
    "project_count": {"es": "Proyectos", "en": "Projects"},
    "pending_receipts": {"es": "Recibos pendientes", "en": "Pending receipts"},
    "biggest_expense": {"es": "Mayor gasto", "en": "Biggest expense"},
    "top_category": {"es": "Categoría principal", "en": "Top category"},
    "tax_summary": {"es": "Resumen fiscal", "en": "Tax summary"},
    "tax_owed": {"es": "Impuestos por pagar", "en": "Taxes owed"},
    "deductible_total": {"es": "Total deducible", "en": "Deductible total"},
    "billable_total": {"es": "Total facturable", "en": "Billable total"},
    "month_comparison": {"es": "Comparación mensual", "en": "Monthly comparison"},
    "subscriptions_list": {"es": "Suscripciones", "en": "Subscriptions"},
    "expense_by_category": {"es": "Gastos por categoría", "en": "Expenses by category"},
    "income_by_source": {"es": "Ingresos por fuente", "en": "Income by source"},
    "net_worth_summary": {"es": "Patrimonio", "en": "Net worth"},
    "fire_progress": {"es": "Progreso FIRE", "en": "FIRE progress"},
    "mileage_summary": {"es": "Kilometraje", "en": "Mileage"},
}

# Subjects of the per-period queries ("expenses_month", "income_year")
QUERY_SUBJECTS: dict[str, dict[str, str]] = {
    "expenses": {"es": "Gastos", "en": "Expenses"},
    "income": {"es": "Ingresos", "en": "Income"},
}

PERIOD_NAMES: dict[str, dict[str, str]] = {
    "today": {"es": "de hoy", "en": "today"},
    "week": {"es": "de esta semana", "en": "this week"},
    "month": {"es": "del mes", "en": "this month"},
    "year": {"es": "del año", "en": "this year"},
    "last_week": {"es": "de la semana pasada", "en": "last week"},
    "last_month": {"es": "del mes pasado", "en": "last month"},
    "last_year": {"es": "del año pasado", "en": "last year"},
}

FAILURE_MESSAGE = {
    "es": "Lo siento, no pude completar la acción.",
    "en": "Sorry, I couldn't complete that action.",
}

# Spoken when the conversational backend has nothing to say
CONVERSATIONAL_FALLBACK = {
    "es": "No estoy seguro de cómo ayudarte con eso. Prueba con \"¿cuánto gasté este mes?\" "
    "o \"ir a gastos\".",
    "en": "I'm not sure how to help with that. Try \"how much did I spend this month?\" "
    "or \"go to expenses\".",
}


def format_money(amount: Decimal | float, symbol: str = "$") -> str:
    """Format an amount for speech, dropping a zero fractional part."""
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        return f"{symbol}{value.to_integral_value():,}"
    return f"{symbol}{value.quantize(Decimal('0.01')):,}"


def section_name(target: str, language: str) -> str:
    names = SECTION_NAMES.get(target) or CONCEPT_NAMES.get(target)
    return names[language] if names else target


def action_response(action: ParsedAction, language: str, symbol: str = "$") -> str:
    """Build the reply spoken after an action executes successfully."""
    es = language == "es"

    if isinstance(action, SpendingAlert):
        amount = format_money(action.threshold, symbol)
        category = ""
        if action.category:
            category = f" en {action.category}" if es else f" on {action.category}"
        if es:
            return f"¡Alerta configurada! Te avisaré cuando gastes más de {amount}{category}."
        return f"Alert set! I'll notify you when you spend more than {amount}{category}."

    if isinstance(action, Reminder):
        if es:
            at = f" a las {action.time}" if action.time else ""
            return f'¡Recordatorio guardado! Te recordaré "{action.action}" el {action.day_or_date}{at}.'
        at = f" at {action.time}" if action.time else ""
        return f'Reminder saved! I\'ll remind you to "{action.action}" on {action.day_or_date}{at}.'

    if isinstance(action, DuplicateRequest):
        if action.target == DuplicateTarget.LAST_EXPENSE:
            return "Listo, dupliqué el último gasto." if es else "Done, I duplicated the last expense."
        return "Listo, dupliqué el último ingreso." if es else "Done, I duplicated the last income."

    if isinstance(action, ExportRequest):
        type_name = EXPORT_TYPE_NAMES[action.export_type.value][language]
        fmt = action.format.value.upper()
        if es:
            return f"Preparando {type_name} en formato {fmt}. Te lo descargo en un momento."
        return f"Preparing {type_name} in {fmt} format. Downloading shortly."

    if isinstance(action, CreateExpense):
        amount = format_money(action.amount, symbol)
        if es:
            return f"Gasto de {amount} en {action.vendor} registrado."
        return f"Expense of {amount} at {action.vendor} recorded."

    if isinstance(action, CreateIncome):
        amount = format_money(action.amount, symbol)
        source = action.source or ("sin fuente" if es else "no source")
        if es:
            return f"Ingreso de {amount} de {source} registrado."
        return f"Income of {amount} from {source} recorded."

    if isinstance(action, DeleteRequest):
        entity = ENTITY_NAMES.get(action.entity, {}).get(language, action.entity)
        if action.entity == "data":
            return "Se borraron todos los datos." if es else "All data has been cleared."
        if action.scope == "all":
            return f"Eliminé todos los registros de {entity}." if es else f"Deleted every {entity}."
        return f"Eliminé el último {entity}." if es else f"Deleted the last {entity}."

    if isinstance(action, Navigate):
        name = section_name(action.target, language)
        return f"Te llevo a {name}." if es else f"Taking you to {name}."

    if isinstance(action, Clarify):
        name = section_name(action.subject or "", language)
        if es:
            return (
                f"¿Qué necesitas con {name}? Puedo llevarte ahí, explicártelo, "
                "hacer ambas cosas o cancelar."
            )
        return (
            f"What do you need with {name}? I can take you there, explain it, "
            "do both, or cancel."
        )

    if isinstance(action, Explain):
        if action.topic == "current_page":
            if es:
                return "Estás en la aplicación de finanzas. Pregúntame por gastos, ingresos o impuestos."
            return "You're in the finance app. Ask me about expenses, income or taxes."
        name = section_name(action.topic, language)
        return f"Te explico {name}." if es else f"Here's how {name} works."

    return "Procesando tu solicitud..." if es else "Processing your request..."


def query_response(query: Query, result: object, language: str, symbol: str = "$") -> str:
    """Turn a query result from the application layer into a spoken reply."""
    if result is None:
        return "No pude obtener esa información." if language == "es" else "I couldn't get that information."
    if isinstance(result, Decimal):
        result = format_money(result, symbol)
    return f"{query_label(query, language)}: {result}."


def query_label(query: Query, language: str) -> str:
    """Spoken name of a query, following the period filter when it has one."""
    subject = query.target.rpartition("_")[0]
    period = query.filters.get("period")
    if subject in QUERY_SUBJECTS and period in PERIOD_NAMES:
        return f"{QUERY_SUBJECTS[subject][language]} {PERIOD_NAMES[period][language]}"
    names = QUERY_NAMES.get(query.target)
    if names is None:
        return query.target.replace("_", " ").capitalize()
    return names[language]


def confirmation_description(action: ParsedAction, language: str, symbol: str = "$") -> str | None:
    """Describe a data-creating action for its confirmation prompt.

    Returns None for actions that use the generic prompt.
    """
    es = language == "es"
    if isinstance(action, CreateExpense):
        amount = format_money(action.amount, symbol)
        if es:
            return f"¿Registro un gasto de {amount} en {action.vendor} ({action.category})?"
        return f"Should I record an expense of {amount} at {action.vendor} ({action.category})?"
    if isinstance(action, CreateIncome):
        amount = format_money(action.amount, symbol)
        source = action.source or ("sin fuente" if es else "no source")
        if es:
            return f"¿Registro un ingreso de {amount} de {source}?"
        return f"Should I record an income of {amount} from {source}?"
    return None


__all__ = [
    "CONVERSATIONAL_FALLBACK",
    "confirmation_description",
    "EXPORT_TYPE_NAMES",
    "FAILURE_MESSAGE",
    "PERIOD_NAMES",
    "QUERY_NAMES",
    "QUERY_SUBJECTS",
    "SECTION_NAMES",
    "action_response",
    "format_money",
    "query_label",
    "query_response",
    "section_name",
]
