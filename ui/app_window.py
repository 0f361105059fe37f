import customtkinter as ctk
from services.card_service import CardService
from services.dashboard_service import DashboardService
from services.expense_service import ExpenseService
from services.income_service import IncomeService
from services.invoice_service import InvoiceService
from services.notification_service import NotificationService
from services.scheduler import Scheduler, TickResult
from services.settings_service import SettingsService
from ui.banner_channel import BannerChannel
from ui.tabs.cards_tab import CardsTab
from ui.tabs.dashboard_tab import DashboardTab
from ui.tabs.expenses_tab import ExpensesTab
from ui.tabs.incomes_tab import IncomesTab
from ui.tabs.invoices_tab import InvoicesTab
from ui.tabs.notifications_tab import NotificationsTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT


_ALL_TABS = {"dashboard", "incomes", "expenses", "cards", "invoices", "notifications", "settings"}

_REFRESH_SCOPES: dict[str, set[str]] = {
    "income":       {"dashboard", "incomes", "notifications"},
    "expense":      {"dashboard", "expenses", "invoices", "notifications"},
    "card":         {"dashboard", "cards", "expenses", "invoices", "notifications"},
    "invoice":      {"dashboard", "invoices", "notifications"},
    "notification": {"notifications"},
    "settings":     {"settings"},
    "tick":         _ALL_TABS - {"settings"},
    "full":         _ALL_TABS,
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        dashboard_service: DashboardService,
        income_service: IncomeService,
        expense_service: ExpenseService,
        card_service: CardService,
        invoice_service: InvoiceService,
        notification_service: NotificationService,
        settings: SettingsService,
        scheduler: Scheduler,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._dashboard_svc = dashboard_service
        self._income_svc = income_service
        self._expense_svc = expense_service
        self._card_svc = card_service
        self._invoice_svc = invoice_service
        self._notification_svc = notification_service
        self._settings = settings
        self._scheduler = scheduler

        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_status_bar()
        self._build_banner_area()
        self._build_tabs()
        self._show_user_name(settings.user_name)

        # Notifications flushed by the scheduler land in the banner area.
        self._notification_svc.channel = BannerChannel(self._banner_frame)

    # ── Layout ───────────────────────────────────────────────────────────────
    def _build_status_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray85", "gray15"), corner_radius=0, height=40)
        bar.grid(row=0, column=0, sticky="ew")
        bar.grid_propagate(False)
        self._greeting = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(size=14, weight="bold"))
        self._greeting.pack(side="left", padx=12, pady=6)
        ctk.CTkButton(
            bar, text="Run now", width=90, command=self._run_tick_now,
        ).pack(side="right", padx=8)
        self._status_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._status_label.pack(side="right", padx=8)

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=1, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Dashboard", "Incomes", "Expenses", "Cards",
                         "Invoices", "Notifications", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        date_format = self._settings.date_format
        symbol = self._settings.currency_symbol

        self._dashboard_tab = DashboardTab(
            self._tabview.tab("Dashboard"),
            dashboard_service=self._dashboard_svc,
            currency_symbol=symbol,
        )
        self._incomes_tab = IncomesTab(
            self._tabview.tab("Incomes"),
            income_service=self._income_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=date_format,
            currency_symbol=symbol,
        )
        self._expenses_tab = ExpensesTab(
            self._tabview.tab("Expenses"),
            expense_service=self._expense_svc,
            card_service=self._card_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=date_format,
            currency_symbol=symbol,
        )
        self._cards_tab = CardsTab(
            self._tabview.tab("Cards"),
            card_service=self._card_svc,
            notify_refresh=self.notify_tabs_refresh,
            currency_symbol=symbol,
        )
        self._invoices_tab = InvoicesTab(
            self._tabview.tab("Invoices"),
            invoice_service=self._invoice_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=date_format,
            currency_symbol=symbol,
        )
        self._notifications_tab = NotificationsTab(
            self._tabview.tab("Notifications"),
            notification_service=self._notification_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=date_format,
        )
        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            settings=self._settings,
            notify_refresh=self.notify_tabs_refresh,
            on_name_change=self._show_user_name,
        )
        for tab in self._tabs().values():
            tab.grid(row=0, column=0, sticky="nsew")

    def _tabs(self) -> dict:
        return {
            "dashboard": self._dashboard_tab,
            "incomes": self._incomes_tab,
            "expenses": self._expenses_tab,
            "cards": self._cards_tab,
            "invoices": self._invoices_tab,
            "notifications": self._notifications_tab,
            "settings": self._settings_tab,
        }

    def _show_user_name(self, name: str):
        self.title(f"{APP_NAME} · {name}")
        self._greeting.configure(text=f"Hello, {name}")

    # ── Scheduler hooks ──────────────────────────────────────────────────────
    def on_tick(self, result: TickResult):
        """Called from the scheduler thread after each tick."""
        self.after(0, lambda: self._apply_tick(result))

    def _apply_tick(self, result: TickResult):
        state = "" if result.completed else " (incomplete)"
        self._status_label.configure(
            text=f"Last check {result.started_at:%H:%M}{state}"
        )
        self.notify_tabs_refresh("tick")

    def _run_tick_now(self):
        # The tick runs on the scheduler thread; on_tick reports back here.
        if self._scheduler.wake():
            self._status_label.configure(text="Checking…")
        else:
            self._status_label.configure(text="Scheduler is not running")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        names = _REFRESH_SCOPES.get(scope, _ALL_TABS)
        for name, tab in self._tabs().items():
            if name in names:
                tab.refresh()
