from datetime import date, datetime

from models.recurrence_rule import Annual, Biweekly, Monthly, Single, Weekly

TODAY = date(2024, 3, 1)


def test_rolls_past_dates_to_first_occurrence_on_or_after_today(rollover, expenses):
    monthly = expenses.create("Rent", 900, Monthly(5), today=TODAY)
    weekly = expenses.create("Groceries", 80, Weekly(5), today=TODAY)
    annual = expenses.create("Insurance", 400, Annual(3, 20), today=TODAY)

    assert rollover.roll_forward(datetime(2024, 5, 20, 8, 0)) == 3

    assert expenses.get_by_id(monthly.id).next_date == date(2024, 6, 5)
    # 2024-05-24 is a Friday.
    assert expenses.get_by_id(weekly.id).next_date == date(2024, 5, 24)
    assert expenses.get_by_id(annual.id).next_date == date(2025, 3, 20)


def test_date_falling_today_is_kept(rollover, expenses):
    expense = expenses.create("Rent", 900, Monthly(5), today=TODAY)
    assert rollover.roll_forward(datetime(2024, 3, 5, 8, 0)) == 0
    assert expenses.get_by_id(expense.id).next_date == date(2024, 3, 5)


def test_biweekly_keeps_its_fortnight(rollover, expenses):
    expense = expenses.create("Cleaner", 60, Biweekly(5), due_date=date(2024, 3, 1), today=TODAY)
    rollover.roll_forward(datetime(2024, 3, 9, 8, 0))
    assert expenses.get_by_id(expense.id).next_date == date(2024, 3, 15)


def test_rolled_expense_starts_unpaid(rollover, expenses):
    expense = expenses.create("Rent", 900, Monthly(5), today=TODAY)
    expenses.mark_paid(expense.id, datetime(2024, 3, 5, 10, 0))

    rollover.roll_forward(datetime(2024, 3, 6, 8, 0))

    rolled = expenses.get_by_id(expense.id)
    assert rolled.next_date == date(2024, 4, 5)
    assert rolled.status == "unpaid"
    assert rolled.paid_at is None
    assert rolled.first_date == date(2024, 3, 5)


def test_single_and_inactive_expenses_are_left_alone(rollover, expenses, expense_dao):
    single = expenses.create("Repair", 150, Single(), due_date=date(2024, 2, 1))
    paused = expenses.create("Gym", 50, Monthly(5), today=TODAY)
    expense_dao.update_fields(paused.id, is_active=False)

    assert rollover.roll_forward(datetime(2024, 4, 1, 8, 0)) == 0
    assert expenses.get_by_id(single.id).next_date == date(2024, 2, 1)
    assert expenses.get_by_id(paused.id).next_date == date(2024, 3, 5)


def test_income_rolls_and_retires_after_end_date(rollover, incomes):
    salary = incomes.create("Salary", 3000, Monthly(5), start_date=date(2024, 1, 1), today=TODAY)
    contract = incomes.create("Contract", 500, Monthly(5), start_date=date(2024, 1, 1),
                              end_date=date(2024, 3, 31), today=TODAY)

    assert rollover.roll_forward(datetime(2024, 3, 6, 8, 0)) == 2
    assert incomes.get_by_id(salary.id).next_date == date(2024, 4, 5)

    ended = incomes.get_by_id(contract.id)
    assert ended.next_date is None
    assert not ended.is_active
