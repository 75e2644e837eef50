from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence


EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Accommodation",
    "Entertainment",
    "Shopping",
    "Utilities",
    "Other",
)


class ParticipantStatus(str, Enum):
    ACTIVE = "active"
    INVITED = "invited"


class SettlementStatus(str, Enum):
    PENDING = "pending"
    SETTLED = "settled"


@dataclass(slots=True)
class Participant:
    id: str
    name: str
    email: Optional[str] = None
    status: Optional[ParticipantStatus] = None


@dataclass(slots=True)
class Expense:
    id: str
    trip_id: str
    description: str
    amount: float
    payer_id: str
    split_between: Sequence[str]
    category: str = "Other"
    created_at: Optional[datetime] = None
