import customtkinter as ctk
from models.recurrence_rule import describe
from services.income_service import IncomeService
from ui.components.income_form import IncomeForm
from utils.currency import format_currency
from utils.date_helpers import format_date, format_display_date
from utils.errors import AppError

_COLUMNS = [
    ("Name", 150), ("Company", 120), ("Amount", 90), ("Frequency", 150),
    ("Next", 100), ("Status", 80), ("Actions", 130),
]


class IncomesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        income_service: IncomeService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = income_service
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
            bar, text="Incomes",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Income", command=self._open_add).pack(
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

        incomes = self._svc.get_all()
        if not incomes:
            ctk.CTkLabel(
                self._scroll,
                text="No incomes yet. Click '+ Add Income' to create one.",
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

        for idx, income in enumerate(incomes, start=1):
            self._add_row(idx, income)

    def _add_row(self, idx, income):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        if income.is_active:
            next_text = format_display_date(format_date(income.next_date), self._date_format) or "-"
        else:
            next_text = "Ended"
        data = [
            income.name,
            income.company or "",
            format_currency(income.amount, self._symbol),
            describe(income.rule),
            next_text,
        ]
        for i, text in enumerate(data):
            ctk.CTkLabel(row, text=text, width=_COLUMNS[i][1], anchor="w").grid(
                row=0, column=i, padx=4, pady=4
            )

        ctk.CTkLabel(
            row, text=income.status.title(), width=80, anchor="w",
            text_color="#4CAF50" if income.is_confirmed else "gray60",
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda i=income: self._open_edit(i),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pending" if income.is_confirmed else "Confirm", width=70, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda i=income: self._toggle_status(i),
        ).pack(side="left")

    def _open_add(self):
        form = IncomeForm(self.winfo_toplevel(), self._svc, date_format=self._date_format)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("income")

    def _open_edit(self, income):
        form = IncomeForm(
            self.winfo_toplevel(), self._svc, income=income, date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("income")

    def _toggle_status(self, income):
        try:
            self._svc.set_status(income.id, "pending" if income.is_confirmed else "confirmed")
            self._error_label.configure(text="")
        except AppError as e:
            self._error_label.configure(text=str(e))
        self._notify_refresh("income")
