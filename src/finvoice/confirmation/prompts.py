"""Confirmation vocabularies and bilingual prompt text."""

from enum import Enum


class ConfirmableAction(Enum):
    """Actions that may be held behind the confirmation gate."""

    DELETE_EXPENSE = "delete_expense"
    DELETE_INCOME = "delete_income"
    DELETE_CLIENT = "delete_client"
    DELETE_PROJECT = "delete_project"
    CLEAR_DATA = "clear_data"
    BULK_ACTION = "bulk_action"
    CREATE_EXPENSE = "create_expense"
    CREATE_INCOME = "create_income"


ACTION_DESCRIPTIONS: dict[ConfirmableAction, dict[str, str]] = {
    ConfirmableAction.DELETE_EXPENSE: {
        "es": "¿Estás seguro de que quieres eliminar este gasto?",
        "en": "Are you sure you want to delete this expense?",
    },
    ConfirmableAction.DELETE_INCOME: {
        "es": "¿Estás seguro de que quieres eliminar este ingreso?",
        "en": "Are you sure you want to delete this income?",
    },
    ConfirmableAction.DELETE_CLIENT: {
        "es": "¿Estás seguro de que quieres eliminar este cliente? "
        "También se eliminarán los proyectos asociados.",
        "en": "Are you sure you want to delete this client? "
        "Associated projects will also be deleted.",
    },
    ConfirmableAction.DELETE_PROJECT: {
        "es": "¿Estás seguro de que quieres eliminar este proyecto?",
        "en": "Are you sure you want to delete this project?",
    },
    ConfirmableAction.CLEAR_DATA: {
        "es": "¿Estás seguro de que quieres borrar todos los datos? "
        "Esta acción no se puede deshacer.",
        "en": "Are you sure you want to clear all data? This action cannot be undone.",
    },
    ConfirmableAction.BULK_ACTION: {
        "es": "¿Confirmas la acción en múltiples elementos?",
        "en": "Do you confirm the action on multiple items?",
    },
    ConfirmableAction.CREATE_EXPENSE: {
        "es": "¿Confirmas la creación de este gasto?",
        "en": "Do you confirm creating this expense?",
    },
    ConfirmableAction.CREATE_INCOME: {
        "es": "¿Confirmas el registro de este ingreso?",
        "en": "Do you confirm recording this income?",
    },
}

CONFIRM_HINT = {
    "es": 'Di "sí" para confirmar o "no" para cancelar.',
    "en": 'Say "yes" to confirm or "no" to cancel.',
}

# Exact-or-prefix matched against normalized text; confirm is checked first
CONFIRM_PATTERNS: list[str] = [
    # Spanish
    "sí", "si", "confirmo", "confirmar", "adelante", "hazlo", "procede", "ok", "okay",
    "vale", "claro", "por supuesto", "afirmativo",
    # English
    "yes", "confirm", "go ahead", "do it", "proceed", "sure", "of course",
    "affirmative", "yep", "yeah",
]

CANCEL_PATTERNS: list[str] = [
    # Spanish
    "no", "cancelar", "cancela", "parar", "para", "detener", "deten", "olvídalo",
    "olvidalo", "dejarlo", "mejor no",
    # English
    "cancel", "stop", "abort", "forget it", "never mind", "don't", "nope",
]

MESSAGES: dict[str, dict[str, str]] = {
    "confirmed": {"es": "Acción confirmada.", "en": "Action confirmed."},
    "cancelled": {"es": "Acción cancelada.", "en": "Action cancelled."},
    "executed": {"es": "Listo, acción ejecutada.", "en": "Done, action executed."},
    "no_pending": {"es": "No hay acción pendiente.", "en": "No pending action."},
    "nothing_to_cancel": {"es": "No hay nada que cancelar.", "en": "Nothing to cancel."},
    "timed_out": {
        "es": "Se agotó el tiempo de confirmación. Acción cancelada.",
        "en": "Confirmation timed out. Action cancelled.",
    },
}


def build_prompt(
    action: ConfirmableAction,
    language: str,
    custom_prompt: str | dict[str, str] | None = None,
) -> str:
    """Build the spoken confirmation prompt: description plus yes/no hint."""
    if isinstance(custom_prompt, dict):
        description = custom_prompt.get(language) or ACTION_DESCRIPTIONS[action][language]
    elif custom_prompt:
        description = custom_prompt
    else:
        description = ACTION_DESCRIPTIONS[action][language]
    return f"{description} {CONFIRM_HINT[language]}"


__all__ = [
    "ACTION_DESCRIPTIONS",
    "CANCEL_PATTERNS",
    "CONFIRM_HINT",
    "CONFIRM_PATTERNS",
    "MESSAGES",
    "ConfirmableAction",
    "build_prompt",
]
