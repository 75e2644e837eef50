from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from fairshare.db.models import Expense, Participant


@dataclass(slots=True)
class BalanceSheet:
    paid: dict[str, float] = field(default_factory=dict)
    owed: dict[str, float] = field(default_factory=dict)
    balance: dict[str, float] = field(default_factory=dict)
    total: float = 0.0

    @property
    def imbalance(self) -> float:
        """Sum of all balances; non-zero only when an empty split orphaned a credit."""
        return sum(self.balance.values())


def equal_share(amount: float, count: int) -> float:
    if count <= 0:
        return 0.0
    return amount / count


def _ensure(book: dict[str, float], participant_id: str) -> None:
    if participant_id not in book:
        book[participant_id] = 0.0


def compute_balances(expenses: Iterable[Expense], participants: Sequence[Participant]) -> BalanceSheet:
    sheet = BalanceSheet()
    for participant in participants:
        sheet.paid[participant.id] = 0.0
        sheet.owed[participant.id] = 0.0

    for expense in expenses:
        _ensure(sheet.paid, expense.payer_id)
        _ensure(sheet.owed, expense.payer_id)
        sheet.paid[expense.payer_id] += expense.amount
        sheet.total += expense.amount

        # an empty split credits the payer and charges nobody
        share = equal_share(expense.amount, len(expense.split_between))
        for participant_id in expense.split_between:
            _ensure(sheet.paid, participant_id)
            _ensure(sheet.owed, participant_id)
            sheet.owed[participant_id] += share

    for participant_id, paid in sheet.paid.items():
        sheet.balance[participant_id] = paid - sheet.owed[participant_id]
    return sheet
