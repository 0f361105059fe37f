import customtkinter as ctk
from models.expense import Expense
from services.card_service import CardService
from services.expense_service import ExpenseService
from ui.components.date_picker import DatePickerWidget
from ui.components.rule_picker import RulePicker
from utils.constants import PAYMENT_METHODS
from utils.errors import AppError


class ExpenseForm(ctk.CTkToplevel):
    """Add or edit an expense."""

    def __init__(
        self,
        master,
        expense_service: ExpenseService,
        card_service: CardService,
        expense: Expense | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = expense_service
        self._expense = expense
        self.saved = False

        self.title("Edit Expense" if expense else "New Expense")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._cards = card_service.get_all()
        card_names = [c.name for c in self._cards]

        r = 0
        self._add_label("Name:", r)
        self._name_var = ctk.StringVar(value=expense.name if expense else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=str(expense.amount) if expense else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar(value=expense.description if expense else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Frequency:", r)
        self._rule_picker = RulePicker(self, rule=expense.rule if expense else None)
        self._rule_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("Due Date:", r)
        self._due_picker = DatePickerWidget(
            self,
            initial=(expense.first_date or expense.next_date) if expense else None,
            date_format=date_format,
        )
        self._due_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        ctk.CTkLabel(
            self, text="(first occurrence; required for one-time)",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=r + 1, column=1, padx=(0, 16), sticky="w")
        r += 2

        self._add_label("Payment:", r)
        self._method_var = ctk.StringVar(value=expense.payment_method if expense else "manual")
        ctk.CTkComboBox(
            self, values=list(PAYMENT_METHODS), variable=self._method_var,
            width=240, state="readonly", command=self._on_method_change,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._add_label("Card:", r)
        current_card = ""
        if expense and expense.card_id:
            current_card = next((c.name for c in self._cards if c.id == expense.card_id), "")
        elif card_names:
            current_card = card_names[0]
        self._card_var = ctk.StringVar(value=current_card)
        self._card_combo = ctk.CTkComboBox(
            self, values=card_names, variable=self._card_var,
            width=240, state="readonly",
        )
        self._card_combo.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1
        self._on_method_change()

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if expense:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _on_method_change(self, _value=None):
        state = "readonly" if self._method_var.get() == "card" else "disabled"
        self._card_combo.configure(state=state)

    def _on_save(self):
        if not self._due_picker.is_empty() and not self._due_picker.is_valid():
            self._error_var.set("Invalid due date.")
            return
        if self._rule_picker.kind == "single" and self._due_picker.is_empty():
            self._error_var.set("One-time expenses need a due date.")
            return

        method = self._method_var.get()
        card_id = None
        if method == "card":
            card = next((c for c in self._cards if c.name == self._card_var.get()), None)
            if card is None:
                self._error_var.set("Add a card first, then pick it here.")
                return
            card_id = card.id

        try:
            rule = self._rule_picker.get()
            kwargs = dict(
                name=self._name_var.get(),
                amount=self._amount_var.get().strip(),
                rule=rule,
                payment_method=method,
                card_id=card_id,
                due_date=self._due_picker.get(),
                description=self._desc_var.get(),
            )
            if self._expense:
                self._svc.update(self._expense.id, **kwargs)
            else:
                self._svc.create(**kwargs)
            self.saved = True
            self.destroy()
        except (ValueError, AppError) as e:
            self._error_var.set(str(e))

    def _on_delete(self):
        self._svc.delete(self._expense.id)
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
