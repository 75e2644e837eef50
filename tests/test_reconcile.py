from fairshare.db.models import SettlementStatus
from fairshare.services.reconcile import reconcile_settlements
from fairshare.services.settlement import Settlement


def test_status_survives_amount_change():
    stored = [Settlement(from_id="B", to_id="A", amount=30.0, status=SettlementStatus.SETTLED)]
    computed = [Settlement(from_id="B", to_id="A", amount=35.0)]

    result = reconcile_settlements(computed, stored)

    assert result == [Settlement(from_id="B", to_id="A", amount=35.0, status=SettlementStatus.SETTLED)]


def test_new_pairs_start_pending_and_vanished_pairs_are_dropped():
    stored = [
        Settlement(from_id="B", to_id="A", amount=30.0, status=SettlementStatus.SETTLED),
        Settlement(from_id="C", to_id="A", amount=10.0, status=SettlementStatus.SETTLED),
    ]
    computed = [
        Settlement(from_id="D", to_id="A", amount=12.0),
        Settlement(from_id="B", to_id="A", amount=30.0),
    ]

    result = reconcile_settlements(computed, stored)

    assert [s.key for s in result] == [("D", "A"), ("B", "A")]
    assert [s.status for s in result] == [SettlementStatus.PENDING, SettlementStatus.SETTLED]


def test_direction_matters_for_identity():
    stored = [Settlement(from_id="A", to_id="B", amount=5.0, status=SettlementStatus.SETTLED)]
    computed = [Settlement(from_id="B", to_id="A", amount=5.0)]

    result = reconcile_settlements(computed, stored)

    assert result[0].status == SettlementStatus.PENDING


def test_nothing_stored():
    computed = [Settlement(from_id="B", to_id="A", amount=30.0)]

    assert reconcile_settlements(computed, []) == computed
    assert reconcile_settlements([], computed) == []
