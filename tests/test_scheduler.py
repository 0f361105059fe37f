import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from models.recurrence_rule import Monthly, Single
from services.scheduler import Scheduler
from utils.errors import StorageError

TODAY = date(2024, 3, 1)


@pytest.fixture
def card_with_expense(cards, expenses):
    card = cards.create("Visa", 1000, closing_day=10, payment_day=20)
    expenses.create("Groceries", 300, Monthly(5), payment_method="card",
                    card_id=card.id, today=TODAY)
    return card


def test_tick_builds_invoice_and_card_usage(scheduler, card_with_expense, invoice_dao, dashboard):
    result = scheduler.run_tick()

    assert result.completed
    assert result.started_at == datetime(2024, 3, 1, 9, 0, 0)
    assert result.invoices_created == 1
    assert result.invoice_totals_changed == 1
    # Groceries (Mar 5) only; the invoice is due Mar 20, outside the horizon.
    assert result.notifications_queued == 1
    assert scheduler.last_result is result

    invoice = invoice_dao.get_for_period(card_with_expense.id, 2024, 3)
    assert invoice.total_amount == Decimal("300.00")
    usage = dashboard.compute().cards_usage[0]
    assert usage.used == Decimal("300.00")
    assert usage.available == Decimal("700.00")


def test_repeated_ticks_are_idempotent(scheduler, card_with_expense, invoice_dao, notification_dao):
    scheduler.run_tick()
    invoices_before = invoice_dao.count()
    notifications_before = notification_dao.count()

    second = scheduler.run_tick()
    third = scheduler.run_tick(datetime(2024, 3, 15, 9, 0, 0))

    assert second.invoices_created == third.invoices_created == 0
    assert second.notifications_queued == 0
    assert second.invoice_totals_changed == 0
    assert invoice_dao.count() == invoices_before
    # Mar 15 rolls Groceries on to Apr 5 and brings the invoice (due Mar 20)
    # into the horizon.
    assert third.dates_rolled == 1
    assert third.notifications_queued == 1
    assert notification_dao.count() == notifications_before + 1


def test_tick_settles_due_single_expenses(scheduler, expenses, now):
    expense = expenses.create("Repair", 150, Single(), due_date=date(2024, 2, 28))
    result = scheduler.run_tick()
    assert result.expenses_settled == 1
    assert expenses.get_by_id(expense.id).paid_at == now


def test_overlapping_tick_is_skipped(scheduler, card_with_expense, invoice_dao):
    scheduler._tick_lock.acquire()
    try:
        assert scheduler.run_tick() is None
    finally:
        scheduler._tick_lock.release()
    assert invoice_dao.count() == 0
    assert scheduler.run_tick() is not None


class _BrokenInvoices:
    def ensure_current_invoices(self, ref):
        raise StorageError("disk I/O error")

    def refresh_totals(self):
        raise AssertionError("should not be reached")


def test_storage_error_aborts_remaining_steps(
    notifications, settlement, rollover, settings, expenses, now
):
    expense = expenses.create("Repair", 150, Single(), due_date=date(2024, 2, 28))
    scheduler = Scheduler(_BrokenInvoices(), notifications, settlement, rollover, settings,
                          clock=lambda: now)

    result = scheduler.run_tick()

    assert result is not None
    assert not result.completed
    assert result.expenses_settled == 0
    assert expenses.get_by_id(expense.id).paid_at is None
    # The lock is released so the next tick can run.
    assert scheduler._tick_lock.acquire(blocking=False)
    scheduler._tick_lock.release()


def test_deliver_pending(scheduler, expenses, settings, channel):
    expenses.create("Repair", 150, Single(), due_date=date(2024, 3, 3))
    scheduler.run_tick()

    settings.set("notifications_enabled", False)
    assert scheduler.deliver_pending() == 0
    assert channel.shown == []

    settings.set("notifications_enabled", True)
    assert scheduler.deliver_pending() == 1
    assert channel.shown == [("Repair", "Due 2024-03-03")]
    assert scheduler.deliver_pending() == 0


def test_income_reminders_follow_setting(scheduler, incomes, settings, notification_dao):
    incomes.create("Salary", 3000, Monthly(5), start_date=date(2024, 1, 1), today=TODAY)
    assert scheduler.run_tick().notifications_queued == 0
    settings.set("income_reminders", True)
    assert scheduler.run_tick().notifications_queued == 1


def test_horizon_setting(scheduler, expenses, settings):
    expenses.create("Course", 300, Single(), due_date=date(2024, 3, 5))
    settings.set("notification_horizon_days", 3)
    assert scheduler.run_tick().notifications_queued == 0
    settings.set("notification_horizon_days", 4)
    assert scheduler.run_tick().notifications_queued == 1


def test_start_runs_a_tick_and_stop_joins(scheduler, card_with_expense, channel):
    seen = []
    scheduler.set_on_tick(seen.append)

    scheduler.start()
    assert scheduler.running
    deadline = time.monotonic() + 5
    while not seen and time.monotonic() < deadline:
        time.sleep(0.01)
    scheduler.stop()

    assert not scheduler.running
    assert len(seen) == 1
    assert seen[0].completed
    assert channel.shown == [("Groceries", "Due 2024-03-05")]


def test_recurring_expense_is_reminded_every_month(scheduler, expenses, notification_dao):
    rent = expenses.create("Rent", 900, Monthly(5), today=TODAY)

    scheduler.run_tick(datetime(2024, 3, 2, 9, 0))
    result = scheduler.run_tick(datetime(2024, 4, 2, 9, 0))

    assert result.dates_rolled == 1
    assert expenses.get_by_id(rent.id).next_date == date(2024, 4, 5)
    assert notification_dao.find("expense", rent.id, date(2024, 3, 5)) is not None
    assert notification_dao.find("expense", rent.id, date(2024, 4, 5)) is not None


def test_recurring_card_expense_is_billed_on_every_invoice(
    scheduler, cards, expenses, invoice_dao
):
    card = cards.create("Visa", 1000, closing_day=10, payment_day=20)
    expenses.create("Streaming", 50, Monthly(5), payment_method="card",
                    card_id=card.id, today=TODAY)

    scheduler.run_tick(datetime(2024, 3, 2, 9, 0))
    scheduler.run_tick(datetime(2024, 3, 15, 9, 0))
    scheduler.run_tick(datetime(2024, 4, 2, 9, 0))

    # March keeps its charge after the expense has rolled on to April.
    assert invoice_dao.get_for_period(card.id, 2024, 3).total_amount == Decimal("50.00")
    assert invoice_dao.get_for_period(card.id, 2024, 4).total_amount == Decimal("50.00")


def test_paid_occurrence_does_not_carry_over(scheduler, expenses, notification_dao):
    rent = expenses.create("Rent", 900, Monthly(5), today=TODAY)
    expenses.mark_paid(rent.id, datetime(2024, 3, 4, 12, 0))

    scheduler.run_tick(datetime(2024, 3, 2, 9, 0))
    assert notification_dao.count() == 0

    scheduler.run_tick(datetime(2024, 4, 1, 9, 0))
    rolled = expenses.get_by_id(rent.id)
    assert rolled.status == "unpaid"
    assert rolled.paid_at is None
    assert notification_dao.find("expense", rent.id, date(2024, 4, 5)) is not None


def test_wake_runs_an_extra_tick(scheduler):
    seen = []
    scheduler.set_on_tick(seen.append)
    assert not scheduler.wake()

    scheduler.start()
    try:
        deadline = time.monotonic() + 5
        while not seen and time.monotonic() < deadline:
            time.sleep(0.01)
        assert scheduler.wake()
        while len(seen) < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        scheduler.stop()

    assert len(seen) == 2
