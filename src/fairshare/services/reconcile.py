from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from fairshare.db.models import SettlementStatus
from fairshare.services.settlement import Settlement


def reconcile_settlements(computed: Iterable[Settlement], stored: Iterable[Settlement]) -> List[Settlement]:
    """Carry user-marked status from stored settlements onto freshly computed ones.

    Settlements are matched on their ``(from_id, to_id)`` key. Amounts always come
    from ``computed``; stored pairs that no longer appear are dropped, since the
    ledger no longer has a debt between them.
    """
    status_by_key = {settlement.key: settlement.status for settlement in stored}

    result: list[Settlement] = []
    for settlement in computed:
        status = status_by_key.get(settlement.key, SettlementStatus.PENDING)
        result.append(replace(settlement, status=status))
    return result
