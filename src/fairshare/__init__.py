"""FairShare: trip expense splitting and settlement.

The pure core works out balances and settlements from a trip snapshot:
- ``compute_balances``: paid / owed / net per participant
- ``compute_settlements``: greedy largest-first debtor to creditor transfers
- ``reconcile_settlements``: keep user-marked status across recomputation
"""

from .db.models import (
    EXPENSE_CATEGORIES,
    Expense,
    Participant,
    ParticipantStatus,
    SettlementStatus,
)
from .services.balances import BalanceSheet, compute_balances, equal_share
from .services.reconcile import reconcile_settlements
from .services.settlement import (
    SETTLED_EPSILON,
    InvalidStatusTransitionError,
    Settlement,
    SettlementError,
    compute_settlements,
    mark_settled,
    settle_expenses,
)
from .services.summary import TripSummary, build_trip_summary, format_trip_summary

__all__ = [
    "EXPENSE_CATEGORIES",
    "Expense",
    "Participant",
    "ParticipantStatus",
    "SettlementStatus",
    "BalanceSheet",
    "compute_balances",
    "equal_share",
    "reconcile_settlements",
    "SETTLED_EPSILON",
    "InvalidStatusTransitionError",
    "Settlement",
    "SettlementError",
    "compute_settlements",
    "mark_settled",
    "settle_expenses",
    "TripSummary",
    "build_trip_summary",
    "format_trip_summary",
]
