from tkinter import messagebox

import customtkinter as ctk
from services.card_service import CardService
from ui.components.card_form import CardForm
from utils.currency import format_currency
from utils.errors import AppError, ConstraintViolation

_COLUMNS = [("Name", 160), ("Limit", 110), ("Closes", 80), ("Due", 80), ("Actions", 120)]


class CardsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        card_service: CardService,
        notify_refresh,
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = card_service
        self._notify_refresh = notify_refresh
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Credit Cards",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Card", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        self._error_label = ctk.CTkLabel(bar, text="", text_color="#F44336")
        self._error_label.pack(side="right", padx=12)

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        cards = self._svc.get_all()
        if not cards:
            ctk.CTkLabel(
                self._scroll,
                text="No cards yet. Card expenses are billed on monthly invoices.",
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

        for idx, card in enumerate(cards, start=1):
            bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
            row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
            row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
            data = [
                card.name,
                format_currency(card.limit_amount, self._symbol),
                f"day {card.closing_day}",
                f"day {card.payment_day}",
            ]
            for i, text in enumerate(data):
                ctk.CTkLabel(row, text=text, width=_COLUMNS[i][1], anchor="w").grid(
                    row=0, column=i, padx=4, pady=4
                )
            acts = ctk.CTkFrame(row, fg_color="transparent")
            acts.grid(row=0, column=4, padx=(4, 6))
            ctk.CTkButton(
                acts, text="Edit", width=40, height=24,
                command=lambda c=card: self._open_form(c),
            ).pack(side="left", padx=2)
            ctk.CTkButton(
                acts, text="Delete", width=60, height=24,
                fg_color="#F44336", hover_color="#D32F2F",
                command=lambda c=card: self._delete(c),
            ).pack(side="left")

    def _open_add(self):
        self._open_form(None)

    def _open_form(self, card):
        form = CardForm(self.winfo_toplevel(), self._svc, card=card)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("card")

    def _delete(self, card):
        if not messagebox.askyesno(
            "Delete Card", f"Delete '{card.name}' with all its invoices?", parent=self
        ):
            return
        try:
            try:
                self._svc.delete(card.id)
            except ConstraintViolation:
                if not messagebox.askyesno(
                    "Linked Expenses",
                    f"Expenses are still charged to '{card.name}'.\n"
                    "Switch them to manual payment and delete the card?",
                    parent=self,
                ):
                    return
                self._svc.delete(card.id, detach_expenses=True)
            self._error_label.configure(text="")
        except AppError as e:
            self._error_label.configure(text=str(e))
        self._notify_refresh("card")
