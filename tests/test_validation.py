import pytest

from fairshare.db.models import Expense, Participant
from fairshare.services.validation import ExpenseValidationError, validate_expense


PEOPLE = [Participant(id="a", name="Alice"), Participant(id="b", name="Bob")]


def test_valid_expense_passes():
    expense = Expense(id="e1", trip_id="t1", description="Hotel", amount=200, payer_id="a", split_between=["a", "b"])

    assert validate_expense(expense, PEOPLE) is expense


def test_all_problems_are_reported():
    expense = Expense(id="e1", trip_id="t1", description="  ", amount=0, payer_id="x", split_between=[])

    with pytest.raises(ExpenseValidationError) as exc_info:
        validate_expense(expense, PEOPLE)

    assert len(exc_info.value.problems) == 4
    assert "amount must be positive" in exc_info.value.problems


def test_split_with_unknown_participant():
    expense = Expense(id="e1", trip_id="t1", description="Museum", amount=30, payer_id="a", split_between=["a", "q"])

    with pytest.raises(ValueError, match="unknown participants: q"):
        validate_expense(expense, PEOPLE)


def test_category_must_come_from_the_fixed_list():
    expense = Expense(
        id="e1", trip_id="t1", description="Souvenirs", amount=25, payer_id="b", split_between=["b"], category="Gifts"
    )

    with pytest.raises(ExpenseValidationError) as exc_info:
        validate_expense(expense, PEOPLE)

    assert exc_info.value.problems == ["unknown category 'Gifts'"]
    expense.category = "Shopping"
    assert validate_expense(expense, PEOPLE) is expense
