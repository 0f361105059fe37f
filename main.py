import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

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

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.logger import init_logging, get_logger


def main():
    # ── Bootstrap: read DB folder and log level from pre-DB config ───────────
    init_logging(get_log_level())
    logger = get_logger("main")
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    income_dao = IncomeDAO(db)
    expense_dao = ExpenseDAO(db)
    card_dao = CardDAO(db)
    invoice_dao = InvoiceDAO(db)
    notification_dao = NotificationDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    settings = SettingsService(db)
    income_svc = IncomeService(income_dao)
    expense_svc = ExpenseService(expense_dao, card_dao)
    card_svc = CardService(card_dao)
    invoice_svc = InvoiceService(invoice_dao, card_dao, expense_dao)
    notification_svc = NotificationService(notification_dao, expense_dao, invoice_dao, income_dao)
    settlement_svc = SettlementService(expense_dao)
    rollover_svc = RolloverService(expense_dao, income_dao)
    dashboard_svc = DashboardService(income_dao, expense_dao, card_dao, invoice_dao)
    scheduler = Scheduler(
        invoice_svc, notification_svc, settlement_svc, rollover_svc, settings
    )

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(settings.appearance_mode)
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        dashboard_service=dashboard_svc,
        income_service=income_svc,
        expense_service=expense_svc,
        card_service=card_svc,
        invoice_service=invoice_svc,
        notification_service=notification_svc,
        settings=settings,
        scheduler=scheduler,
    )
    scheduler.set_on_tick(app.on_tick)
    scheduler.start()

    def on_close():
        scheduler.stop()
        db.close()
        app.destroy()
        logger.info("Closed")

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
