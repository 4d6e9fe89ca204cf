"""Which parsed actions must pass through the confirmation gate.

Deletes and bulk operations always need consent. Data-creating actions
need it when the caller asks for confirmation of creations. Everything
else executes immediately.
"""

from ..router.actions import (
    CreateExpense,
    CreateIncome,
    DeleteRequest,
    DuplicateRequest,
    DuplicateTarget,
    ParsedAction,
)
from .prompts import ConfirmableAction

DELETE_KINDS: dict[str, ConfirmableAction] = {
    "expense": ConfirmableAction.DELETE_EXPENSE,
    "income": ConfirmableAction.DELETE_INCOME,
    "client": ConfirmableAction.DELETE_CLIENT,
    "project": ConfirmableAction.DELETE_PROJECT,
}


def requires_confirmation(
    action: ParsedAction, confirm_creations: bool = True
) -> ConfirmableAction | None:
    """Look up the confirmation kind for an action.

    Args:
        action: Parsed action about to execute
        confirm_creations: Whether data-creating actions need consent

    Returns:
        The confirmable kind, or None if the action runs immediately
    """
    if isinstance(action, DeleteRequest):
        if action.entity == "data":
            return ConfirmableAction.CLEAR_DATA
        if action.scope == "all":
            return ConfirmableAction.BULK_ACTION
        return DELETE_KINDS.get(action.entity, ConfirmableAction.BULK_ACTION)

    if not confirm_creations:
        return None

    if isinstance(action, CreateExpense):
        return ConfirmableAction.CREATE_EXPENSE
    if isinstance(action, CreateIncome):
        return ConfirmableAction.CREATE_INCOME
    if isinstance(action, DuplicateRequest):
        if action.target == DuplicateTarget.LAST_EXPENSE:
            return ConfirmableAction.CREATE_EXPENSE
        return ConfirmableAction.CREATE_INCOME
    return None


__all__ = ["DELETE_KINDS", "requires_confirmation"]
