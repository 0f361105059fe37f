import customtkinter as ctk
from models.invoice import Invoice
from utils.currency import format_currency
from utils.date_helpers import friendly_month, format_display_date


class PayInvoiceDialog(ctk.CTkToplevel):
    """Modal summary of an invoice before it is marked paid.

    `.confirmed` is True once the user presses Pay.
    """

    def __init__(self, master, invoice: Invoice, currency_symbol: str = "$",
                 date_format: str = "MM/DD/YYYY", **kwargs):
        super().__init__(master, **kwargs)
        self.title(f"Pay {invoice.card_name} invoice")
        self.confirmed = False
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        fields = [
            ("Card", invoice.card_name),
            ("Period", friendly_month(invoice.year, invoice.month)),
            ("Closed on", format_display_date(invoice.closing_date.isoformat(), date_format)),
            ("Due on", format_display_date(invoice.due_date.isoformat(), date_format)),
            ("Total", format_currency(invoice.total_amount, currency_symbol)),
        ]
        for row, (label, value) in enumerate(fields):
            ctk.CTkLabel(self, text=label, text_color="gray60", anchor="w").grid(
                row=row, column=0, sticky="w", padx=(20, 12), pady=(12 if row == 0 else 2, 2)
            )
            ctk.CTkLabel(
                self, text=value, anchor="e",
                font=ctk.CTkFont(weight="bold") if label == "Total" else None,
            ).grid(row=row, column=1, sticky="e", padx=(0, 20), pady=(12 if row == 0 else 2, 2))

        ctk.CTkLabel(
            self, text="Card expenses keep their own paid status.",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=len(fields), column=0, columnspan=2, padx=20, pady=(8, 4))

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=len(fields) + 1, column=0, columnspan=2, sticky="e", padx=20, pady=(4, 16))
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left", padx=(0, 8))
        ctk.CTkButton(
            buttons, text="Pay", width=90,
            fg_color="#4CAF50", hover_color="#388E3C",
            command=self._on_pay,
        ).pack(side="left")

        self.transient(master)
        self.grab_set()
        self._place_over(master)
        self.wait_window()

    def _place_over(self, master):
        self.update_idletasks()
        x = master.winfo_x() + (master.winfo_width() - self.winfo_width()) // 2
        y = master.winfo_y() + (master.winfo_height() - self.winfo_height()) // 3
        self.geometry(f"+{x}+{y}")

    def _on_pay(self):
        self.confirmed = True
        self.destroy()
