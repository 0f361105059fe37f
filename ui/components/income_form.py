import customtkinter as ctk
from models.income import Income
from services.income_service import IncomeService
from ui.components.date_picker import DatePickerWidget
from ui.components.rule_picker import RulePicker
from utils.date_helpers import today
from utils.errors import AppError


class IncomeForm(ctk.CTkToplevel):
    """Add or edit an income."""

    def __init__(
        self,
        master,
        income_service: IncomeService,
        income: Income | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = income_service
        self._income = income
        self.saved = False

        self.title("Edit Income" if income else "New Income")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._add_label("Name:", r)
        self._name_var = ctk.StringVar(value=income.name if income else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Company:", r)
        self._company_var = ctk.StringVar(value=(income.company or "") if income else "")
        ctk.CTkEntry(self, textvariable=self._company_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar(value=str(income.amount) if income else "")
        ctk.CTkEntry(self, textvariable=self._amount_var, width=240).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._add_label("Frequency:", r)
        self._rule_picker = RulePicker(self, rule=income.rule if income else None)
        self._rule_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("Start Date:", r)
        self._start_picker = DatePickerWidget(
            self, initial=income.start_date if income else today(), date_format=date_format,
        )
        self._start_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("End Date:", r)
        self._end_picker = DatePickerWidget(
            self, initial=income.end_date if income else None, date_format=date_format,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        ctk.CTkLabel(self, text="(optional)", text_color="gray60", font=ctk.CTkFont(size=11)).grid(
            row=r, column=1, padx=(160, 0), pady=4, sticky="w"
        )
        r += 1

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
        if income:
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

    def _on_save(self):
        if not self._start_picker.is_valid():
            self._error_var.set("Invalid start date.")
            return
        end_date = None
        if not self._end_picker.is_empty():
            if not self._end_picker.is_valid():
                self._error_var.set("Invalid end date.")
                return
            end_date = self._end_picker.get()

        try:
            kwargs = dict(
                name=self._name_var.get(),
                amount=self._amount_var.get().strip(),
                rule=self._rule_picker.get(),
                start_date=self._start_picker.get(),
                company=self._company_var.get(),
                end_date=end_date,
            )
            if self._income:
                self._svc.update(self._income.id, is_active=self._income.is_active, **kwargs)
            else:
                self._svc.create(**kwargs)
            self.saved = True
            self.destroy()
        except (ValueError, AppError) as e:
            self._error_var.set(str(e))

    def _on_delete(self):
        self._svc.delete(self._income.id)
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
