import customtkinter as ctk
from models.recurrence_rule import describe
from services.card_service import CardService
from services.expense_service import ExpenseService
from ui.components.expense_form import ExpenseForm
from utils.constants import RECURRENCE_COLORS
from utils.currency import format_currency
from utils.date_helpers import format_date, format_display_date
from utils.errors import AppError

_COLUMNS = [
    ("Name", 150), ("Amount", 90), ("Frequency", 150),
    ("Payment", 110), ("Next Due", 100), ("Status", 70), ("Actions", 120),
]


class ExpensesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        expense_service: ExpenseService,
        card_service: CardService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = expense_service
        self._card_svc = card_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Expenses",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Expense", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        self._error_label = ctk.CTkLabel(bar, text="", text_color="#F44336")
        self._error_label.pack(side="right", padx=12)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        expenses = self._svc.get_all()
        if not expenses:
            ctk.CTkLabel(
                self._scroll,
                text="No expenses yet. Click '+ Add Expense' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate(_COLUMNS):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        card_names = {c.id: c.name for c in self._card_svc.get_all()}
        for idx, expense in enumerate(expenses, start=1):
            self._add_row(idx, expense, card_names)

    def _add_row(self, idx, expense, card_names):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        payment = expense.payment_method
        if expense.is_card:
            payment = card_names.get(expense.card_id, "card")
        next_due = format_display_date(format_date(expense.next_date), self._date_format) or "-"

        cells = [
            (expense.name, None),
            (format_currency(expense.amount, self._symbol), None),
            (describe(expense.rule), RECURRENCE_COLORS.get(expense.rule.kind)),
            (payment, None),
            (next_due, None),
        ]
        for i, (text, color) in enumerate(cells):
            ctk.CTkLabel(
                row, text=text, width=_COLUMNS[i][1], anchor="w", text_color=color,
            ).grid(row=0, column=i, padx=4, pady=4)

        ctk.CTkLabel(
            row, text=expense.status.title(), width=70, anchor="w",
            text_color="#4CAF50" if expense.is_paid else "#FF9800",
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda e=expense: self._open_edit(e),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Unpaid" if expense.is_paid else "Paid", width=64, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda e=expense: self._toggle_paid(e),
        ).pack(side="left")

    def _open_add(self):
        form = ExpenseForm(
            self.winfo_toplevel(), self._svc, self._card_svc,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("expense")

    def _open_edit(self, expense):
        form = ExpenseForm(
            self.winfo_toplevel(), self._svc, self._card_svc,
            expense=expense, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("expense")

    def _toggle_paid(self, expense):
        try:
            if expense.is_paid:
                self._svc.mark_unpaid(expense.id)
            else:
                self._svc.mark_paid(expense.id)
            self._error_label.configure(text="")
        except AppError as e:
            self._error_label.configure(text=str(e))
        self._notify_refresh("expense")
