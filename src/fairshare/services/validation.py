from __future__ import annotations

from typing import Sequence

from fairshare.db.models import EXPENSE_CATEGORIES, Expense, Participant


class ExpenseValidationError(ValueError):
    def __init__(self, problems: Sequence[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = list(problems)


def validate_expense(expense: Expense, participants: Sequence[Participant]) -> Expense:
    """Check an expense against the add-expense form rules before it is stored.

    The balance calculator accepts anything; this is the caller-side gate that
    keeps bad rows out of the ledger. All problems are reported at once.
    """
    roster = {participant.id for participant in participants}
    problems: list[str] = []

    if not expense.description.strip():
        problems.append("description must not be blank")
    if not expense.amount > 0:
        problems.append("amount must be positive")
    if expense.payer_id not in roster:
        problems.append(f"payer {expense.payer_id!r} is not a trip participant")
    if not expense.split_between:
        problems.append("expense must be split between at least one participant")
    if expense.category not in EXPENSE_CATEGORIES:
        problems.append(f"unknown category {expense.category!r}")

    unknown = [pid for pid in expense.split_between if pid not in roster]
    if unknown:
        problems.append(f"split references unknown participants: {', '.join(unknown)}")

    if problems:
        raise ExpenseValidationError(problems)
    return expense
