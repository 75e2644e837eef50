from fairshare.db.models import Expense, Participant
from fairshare.services.balances import compute_balances, equal_share


def _people(*ids: str) -> list[Participant]:
    return [Participant(id=pid, name=pid) for pid in ids]


def _expense(eid: str, amount: float, payer: str, split: list[str]) -> Expense:
    return Expense(id=eid, trip_id="t1", description=f"expense {eid}", amount=amount, payer_id=payer, split_between=split)


def test_single_payer_three_way_split():
    sheet = compute_balances([_expense("e1", 90, "A", ["A", "B", "C"])], _people("A", "B", "C"))

    assert sheet.paid == {"A": 90, "B": 0, "C": 0}
    assert sheet.owed == {"A": 30, "B": 30, "C": 30}
    assert sheet.balance == {"A": 60, "B": -30, "C": -30}
    assert sheet.total == 90


def test_payer_is_only_consumer():
    sheet = compute_balances([_expense("e1", 50, "A", ["A"])], _people("A"))

    assert sheet.paid == {"A": 50}
    assert sheet.owed == {"A": 50}
    assert sheet.balance == {"A": 0}


def test_two_expenses_net_out():
    expenses = [
        _expense("e1", 100, "A", ["A", "B"]),
        _expense("e2", 40, "B", ["A", "B"]),
    ]

    sheet = compute_balances(expenses, _people("A", "B"))

    assert sheet.paid == {"A": 100, "B": 40}
    assert sheet.owed == {"A": 70, "B": 70}
    assert sheet.balance == {"A": 30, "B": -30}
    assert sheet.total == 140


def test_no_expenses_yields_zeroes():
    sheet = compute_balances([], _people("A", "B"))

    assert sheet.balance == {"A": 0, "B": 0}
    assert sheet.total == 0


def test_empty_split_credits_payer_only():
    sheet = compute_balances([_expense("e1", 20, "A", [])], _people("A", "B"))

    assert sheet.paid == {"A": 20, "B": 0}
    assert sheet.owed == {"A": 0, "B": 0}
    assert sheet.balance == {"A": 20, "B": 0}
    assert sheet.imbalance == 20


def test_unknown_participant_is_initialised_on_first_sight():
    sheet = compute_balances([_expense("e1", 10, "Z", ["A", "Z"])], _people("A"))

    assert list(sheet.balance) == ["A", "Z"]
    assert sheet.paid == {"A": 0, "Z": 10}
    assert sheet.balance == {"A": -5, "Z": 5}


def test_balances_conserve_to_zero():
    expenses = [
        _expense("e1", 100, "A", ["A", "B", "C"]),
        _expense("e2", 33.33, "B", ["B", "C"]),
        _expense("e3", 7, "C", ["A", "B", "C"]),
        _expense("e4", 0.1, "A", ["A", "B", "C"]),
    ]

    sheet = compute_balances(expenses, _people("A", "B", "C"))

    assert abs(sheet.imbalance) < 1e-6


def test_compute_balances_is_idempotent():
    expenses = [_expense("e1", 100, "A", ["A", "B", "C"]), _expense("e2", 12.5, "C", ["A", "C"])]
    people = _people("A", "B", "C")

    assert compute_balances(expenses, people) == compute_balances(expenses, people)


def test_equal_share_guards_empty_split():
    assert equal_share(10, 0) == 0.0
    assert equal_share(9, 3) == 3.0
