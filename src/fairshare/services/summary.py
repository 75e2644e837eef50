from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from fairshare.db.models import Expense, Participant, SettlementStatus
from fairshare.services.balances import compute_balances
from fairshare.services.reconcile import reconcile_settlements
from fairshare.services.settlement import SETTLED_EPSILON, Settlement, compute_settlements, to_cents


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}


BALANCE_LABELS = {
    1: "gets back",
    -1: "owes",
    0: "even",
}


@dataclass(slots=True)
class ParticipantLine:
    participant_id: str
    name: str
    paid: float
    owed: float
    balance: float

    @property
    def label(self) -> str:
        return humanize_balance(self.balance)


@dataclass(slots=True)
class TripSummary:
    total: float
    currency: str
    lines: list[ParticipantLine] = field(default_factory=list)
    settlements: list[Settlement] = field(default_factory=list)
    category_totals: dict[str, float] = field(default_factory=dict)

    @property
    def pending_settlements(self) -> list[Settlement]:
        return [s for s in self.settlements if s.status == SettlementStatus.PENDING]

    @property
    def all_settled(self) -> bool:
        return not self.pending_settlements


def humanize_balance(balance: float) -> str:
    if balance > SETTLED_EPSILON:
        return BALANCE_LABELS[1]
    if balance < -SETTLED_EPSILON:
        return BALANCE_LABELS[-1]
    return BALANCE_LABELS[0]


def format_money(amount: float, currency: str = "USD") -> str:
    value = to_cents(amount)
    sign = "-" if value < 0 else ""
    body = f"{value.copy_abs():,.2f}"
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{body} {code}"


def category_totals(expenses: Iterable[Expense]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def build_trip_summary(
    expenses: Iterable[Expense],
    participants: Sequence[Participant],
    stored: Iterable[Settlement] = (),
    currency: str = "USD",
) -> TripSummary:
    expenses = list(expenses)
    sheet = compute_balances(expenses, participants)
    names = {participant.id: participant.name for participant in participants}

    lines = [
        ParticipantLine(
            participant_id=participant_id,
            name=names.get(participant_id, participant_id),
            paid=sheet.paid[participant_id],
            owed=sheet.owed[participant_id],
            balance=balance,
        )
        for participant_id, balance in sheet.balance.items()
    ]
    settlements = reconcile_settlements(compute_settlements(sheet.balance), stored)

    return TripSummary(
        total=sheet.total,
        currency=currency,
        lines=lines,
        settlements=settlements,
        category_totals=category_totals(expenses),
    )


def format_trip_summary(summary: TripSummary) -> str:
    cur = summary.currency
    names = {line.participant_id: line.name for line in summary.lines}

    out = [f"Total expenses: {format_money(summary.total, cur)}"]
    if summary.category_totals:
        out.append("")
        out.append("By category:")
        for category, amount in summary.category_totals.items():
            out.append(f"  {category}: {format_money(amount, cur)}")

    out.append("")
    out.append("Balances:")
    for line in summary.lines:
        sign = "+" if line.balance > SETTLED_EPSILON else ""
        out.append(f"  {line.name}: {sign}{format_money(line.balance, cur)} ({line.label})")

    out.append("")
    if not summary.settlements:
        out.append("All settled up!")
        return "\n".join(out)

    out.append("Settlements:")
    for settlement in summary.settlements:
        payer = names.get(settlement.from_id, settlement.from_id)
        receiver = names.get(settlement.to_id, settlement.to_id)
        mark = " [settled]" if settlement.status == SettlementStatus.SETTLED else ""
        out.append(f"  {payer} pays {receiver}: {format_money(settlement.amount, cur)}{mark}")
    return "\n".join(out)
