from datetime import date, datetime

import pytest

from models.recurrence_rule import Monthly, Single, Weekly
from utils.errors import DeliveryError
from conftest import RecordingChannel

NOW = datetime(2024, 3, 1, 9, 0, 0)
TODAY = NOW.date()


def test_queues_expenses_due_within_horizon(notifications, notification_dao, expenses):
    soon = expenses.create("Internet", 60, Monthly(5), today=TODAY)
    expenses.create("Insurance", 90, Monthly(20), today=TODAY)
    expenses.create("Old bill", 10, Single(), due_date=date(2024, 2, 20))

    assert notifications.queue_upcoming(NOW, horizon_days=7) == 1

    record = notification_dao.find("expense", soon.id, date(2024, 3, 5))
    assert record is not None
    assert record.title == "Internet"
    assert record.created_at == "2024-03-01T09:00:00"
    assert not record.is_read


def test_horizon_bounds_are_inclusive(notifications, notification_dao, expenses):
    expenses.create("Today", 1, Single(), due_date=TODAY)
    expenses.create("Edge", 1, Single(), due_date=date(2024, 3, 4))
    expenses.create("Beyond", 1, Single(), due_date=date(2024, 3, 5))
    assert notifications.queue_upcoming(NOW, horizon_days=3) == 2


def test_dedup_on_kind_ref_and_due_date(notifications, notification_dao, expenses):
    expense = expenses.create("Internet", 60, Monthly(5), today=TODAY)
    notifications.queue_upcoming(NOW, 7)
    assert notifications.queue_upcoming(NOW, 7) == 0
    assert notification_dao.count() == 1

    # A read record still blocks re-creation for the same due date.
    notification_dao.mark_read(notification_dao.find("expense", expense.id, date(2024, 3, 5)).id)
    assert notifications.queue_upcoming(datetime(2024, 3, 2, 9, 0), 7) == 0
    assert notification_dao.count() == 1


def test_paid_and_inactive_expenses_are_skipped(notifications, expenses, expense_dao):
    paid = expenses.create("Paid", 1, Weekly(5), today=TODAY)
    expenses.mark_paid(paid.id, NOW)
    inactive = expenses.create("Off", 1, Weekly(5), today=TODAY)
    expense_dao.update_fields(inactive.id, is_active=False)
    assert notifications.queue_upcoming(NOW, 7) == 0


def test_unpaid_invoices_are_queued_by_due_date(notifications, notification_dao, invoices, invoice_dao, cards):
    card = cards.create("Visa", 1000, closing_day=1, payment_day=4)
    invoices.ensure_current_invoices(TODAY)
    invoice = invoice_dao.get_for_period(card.id, 2024, 3)

    assert notifications.queue_upcoming(NOW, 7) == 1
    record = notification_dao.find("invoice", invoice.id, date(2024, 3, 4))
    assert record.title == "Card invoice · Visa"

    invoices.pay_invoice(invoice.id, NOW)
    notification_dao.mark_all_read()
    assert notifications.queue_upcoming(datetime(2024, 3, 2), 7) == 0


def test_incomes_only_when_enabled(notifications, notification_dao, incomes):
    income = incomes.create("Salary", 3000, Monthly(5), start_date=date(2024, 1, 1), today=TODAY)
    assert notifications.queue_upcoming(NOW, 7) == 0
    assert notifications.queue_upcoming(NOW, 7, include_incomes=True) == 1
    assert notification_dao.find("income", income.id, date(2024, 3, 5)) is not None


def test_flush_delivers_newest_first_and_marks_read(notifications, notification_dao, expenses, channel):
    expenses.create("First", 1, Single(), due_date=date(2024, 3, 3))
    notifications.queue_upcoming(NOW, 7)
    expenses.create("Second", 1, Single(), due_date=date(2024, 3, 4))
    notifications.queue_upcoming(datetime(2024, 3, 1, 10, 0), 7)

    assert notifications.flush(limit=10) == 2
    assert channel.shown == [("Second", "Due 2024-03-04"), ("First", "Due 2024-03-03")]
    assert notifications.unread_count() == 0
    assert notifications.flush(limit=10) == 0


def test_flush_respects_limit(notifications, expenses, channel):
    for day in (2, 3, 4):
        expenses.create(f"Bill {day}", 1, Single(), due_date=date(2024, 3, day))
    notifications.queue_upcoming(NOW, 7)
    assert notifications.flush(limit=2) == 2
    assert notifications.unread_count() == 1


@pytest.mark.parametrize("error", [DeliveryError("no display"), RuntimeError("boom")])
def test_failed_delivery_still_consumes_record(notifications, expenses, error, caplog):
    notifications.channel = RecordingChannel(error=error)
    expenses.create("Bill", 1, Single(), due_date=date(2024, 3, 2))
    notifications.queue_upcoming(NOW, 7)

    assert notifications.flush(limit=10) == 1
    assert notifications.unread_count() == 0
    assert any(r.levelname == "WARNING" for r in caplog.records)
