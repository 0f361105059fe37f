from datetime import datetime

import pytest

from database.db_manager import DatabaseManager
from database.card_dao import CardDAO
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.invoice_dao import InvoiceDAO
from database.notification_dao import NotificationDAO
from services.card_service import CardService
from services.dashboard_service import DashboardService
from services.expense_service import ExpenseService
from services.income_service import IncomeService
from services.invoice_service import InvoiceService
from services.notification_service import NotificationService
from services.rollover_service import RolloverService
from services.scheduler import Scheduler
from services.settings_service import SettingsService
from services.settlement_service import SettlementService


class RecordingChannel:
    """Delivery channel that remembers what it was asked to show."""

    def __init__(self, error: Exception | None = None):
        self.shown: list[tuple[str, str]] = []
        self.error = error

    def show(self, title: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.shown.append((title, body))


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def card_dao(db):
    return CardDAO(db)


@pytest.fixture
def expense_dao(db):
    return ExpenseDAO(db)


@pytest.fixture
def income_dao(db):
    return IncomeDAO(db)


@pytest.fixture
def invoice_dao(db):
    return InvoiceDAO(db)


@pytest.fixture
def notification_dao(db):
    return NotificationDAO(db)


@pytest.fixture
def settings(db):
    return SettingsService(db)


@pytest.fixture
def cards(card_dao):
    return CardService(card_dao)


@pytest.fixture
def expenses(expense_dao, card_dao):
    return ExpenseService(expense_dao, card_dao)


@pytest.fixture
def incomes(income_dao):
    return IncomeService(income_dao)


@pytest.fixture
def invoices(invoice_dao, card_dao, expense_dao):
    return InvoiceService(invoice_dao, card_dao, expense_dao)


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def notifications(notification_dao, expense_dao, invoice_dao, income_dao, channel):
    return NotificationService(notification_dao, expense_dao, invoice_dao, income_dao, channel)


@pytest.fixture
def settlement(expense_dao):
    return SettlementService(expense_dao)


@pytest.fixture
def rollover(expense_dao, income_dao):
    return RolloverService(expense_dao, income_dao)


@pytest.fixture
def dashboard(income_dao, expense_dao, card_dao, invoice_dao):
    return DashboardService(income_dao, expense_dao, card_dao, invoice_dao)


@pytest.fixture
def now():
    return datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
def scheduler(invoices, notifications, settlement, rollover, settings, now):
    return Scheduler(invoices, notifications, settlement, rollover, settings, clock=lambda: now)
