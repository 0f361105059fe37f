import customtkinter as ctk
from services.invoice_service import InvoiceService
from ui.components.pay_invoice_dialog import PayInvoiceDialog
from utils.currency import format_currency
from utils.date_helpers import friendly_month, format_display_date
from utils.errors import AppError


class InvoicesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        invoice_service: InvoiceService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = invoice_service
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
            bar, text="Card Invoices",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        self._error_label = ctk.CTkLabel(bar, text="", text_color="#F44336")
        self._error_label.pack(side="right", padx=12)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        invoices = self._svc.list_invoices()
        if not invoices:
            ctk.CTkLabel(
                self._scroll, text="No invoices yet. They open automatically for each card.",
                text_color="gray60",
            ).pack(pady=20)
            return

        for idx, inv in enumerate(invoices):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
            row.pack(fill="x", pady=1)
            row.grid_columnconfigure(1, weight=1)

            ctk.CTkLabel(row, text=inv.card_name, width=140, anchor="w").grid(
                row=0, column=0, padx=8, pady=4
            )
            ctk.CTkLabel(
                row,
                text=f"{friendly_month(inv.year, inv.month)} · closes "
                     f"{format_display_date(inv.closing_date.isoformat(), self._date_format)} · due "
                     f"{format_display_date(inv.due_date.isoformat(), self._date_format)}",
                anchor="w", text_color="gray60",
            ).grid(row=0, column=1, sticky="ew")
            ctk.CTkLabel(
                row, text=format_currency(inv.total_amount, self._symbol),
                width=100, anchor="e",
            ).grid(row=0, column=2, padx=6)

            if inv.is_paid:
                ctk.CTkLabel(row, text="Paid", text_color="#4CAF50", width=70).grid(
                    row=0, column=3, padx=8
                )
            else:
                ctk.CTkButton(
                    row, text="Pay", width=70,
                    command=lambda i=inv: self._pay(i),
                ).grid(row=0, column=3, padx=8, pady=3)

    def _pay(self, invoice):
        dlg = PayInvoiceDialog(
            self.winfo_toplevel(), invoice,
            currency_symbol=self._symbol, date_format=self._date_format,
        )
        if not dlg.confirmed:
            return
        try:
            self._svc.pay_invoice(invoice.id)
            self._error_label.configure(text="")
        except AppError as e:
            self._error_label.configure(text=str(e))
        self._notify_refresh("invoice")
