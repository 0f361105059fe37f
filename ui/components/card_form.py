import customtkinter as ctk
from models.card import Card
from services.card_service import CardService
from utils.errors import AppError

_DAYS = [str(d) for d in range(1, 32)]


class CardForm(ctk.CTkToplevel):
    """Add or edit a credit card. Deletion lives in the cards tab."""

    def __init__(self, master, card_service: CardService, card: Card | None = None, **kwargs):
        super().__init__(master, **kwargs)
        self._svc = card_service
        self._card = card
        self.saved = False

        self.title("Edit Card" if card else "New Card")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._add_label("Name:", 0)
        self._name_var = ctk.StringVar(value=card.name if card else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=200).grid(
            row=0, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        self._add_label("Limit:", 1)
        self._limit_var = ctk.StringVar(value=str(card.limit_amount) if card else "")
        ctk.CTkEntry(self, textvariable=self._limit_var, width=200).grid(
            row=1, column=1, padx=(0, 16), pady=4, sticky="ew"
        )

        self._add_label("Closing Day:", 2)
        self._closing_var = ctk.StringVar(value=str(card.closing_day) if card else "1")
        ctk.CTkComboBox(
            self, values=_DAYS, variable=self._closing_var, width=80, state="readonly",
        ).grid(row=2, column=1, padx=(0, 16), pady=4, sticky="w")

        self._add_label("Payment Day:", 3)
        self._payment_var = ctk.StringVar(value=str(card.payment_day) if card else "10")
        ctk.CTkComboBox(
            self, values=_DAYS, variable=self._payment_var, width=80, state="readonly",
        ).grid(row=3, column=1, padx=(0, 16), pady=4, sticky="w")

        ctk.CTkLabel(
            self, text="The payment day must come after the closing day.",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=4, column=0, columnspan=2, padx=16, sticky="w")

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=5, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=6, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_save(self):
        args = (
            self._name_var.get(),
            self._limit_var.get().strip(),
            int(self._closing_var.get()),
            int(self._payment_var.get()),
        )
        try:
            if self._card:
                self._svc.update(self._card.id, *args)
            else:
                self._svc.create(*args)
            self.saved = True
            self.destroy()
        except (ValueError, AppError) as e:
            self._error_var.set(str(e))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
