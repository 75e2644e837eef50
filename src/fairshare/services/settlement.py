from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, Mapping, Sequence

from fairshare.db.models import Expense, Participant, SettlementStatus
from fairshare.services.balances import compute_balances


SETTLED_EPSILON = 0.01


class SettlementError(ValueError):
    pass


class InvalidStatusTransitionError(SettlementError):
    pass


@dataclass(slots=True, frozen=True)
class Settlement:
    from_id: str
    to_id: str
    amount: float
    status: SettlementStatus = SettlementStatus.PENDING

    @property
    def key(self) -> tuple[str, str]:
        return (self.from_id, self.to_id)

    @property
    def id(self) -> str:
        return f"{self.from_id}:{self.to_id}"


def to_cents(amount: float) -> Decimal:
    value = Decimal(str(amount))
    with localcontext() as ctx:
        # enough digits for every integer place plus the two cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def round_amount(amount: float) -> float:
    return float(to_cents(amount))


def compute_settlements(balance: Mapping[str, float], epsilon: float = SETTLED_EPSILON) -> List[Settlement]:
    creditors: list[tuple[str, float]] = []
    debtors: list[tuple[str, float]] = []

    for participant_id, amount in balance.items():
        if amount > epsilon:
            creditors.append((participant_id, amount))
        elif amount < -epsilon:
            debtors.append((participant_id, -amount))

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    settlements: list[Settlement] = []
    i, j = 0, 0

    while i < len(debtors) and j < len(creditors):
        debt_id, debt_amount = debtors[i]
        cred_id, cred_amount = creditors[j]

        transfer_amount = min(debt_amount, cred_amount)
        if transfer_amount > epsilon:
            settlements.append(Settlement(from_id=debt_id, to_id=cred_id, amount=round_amount(transfer_amount)))

        debt_amount -= transfer_amount
        cred_amount -= transfer_amount
        debtors[i] = (debt_id, debt_amount)
        creditors[j] = (cred_id, cred_amount)

        if debt_amount < epsilon:
            i += 1
        if cred_amount < epsilon:
            j += 1

    return settlements


def settle_expenses(expenses: Iterable[Expense], participants: Sequence[Participant]) -> List[Settlement]:
    return compute_settlements(compute_balances(expenses, participants).balance)


def transition(settlement: Settlement, status: SettlementStatus) -> Settlement:
    if settlement.status == status:
        return settlement
    if settlement.status == SettlementStatus.SETTLED:
        raise InvalidStatusTransitionError(
            f"settlement {settlement.id} is already settled and cannot go back to {status.value}"
        )
    return replace(settlement, status=status)


def mark_settled(settlement: Settlement) -> Settlement:
    return transition(settlement, SettlementStatus.SETTLED)
