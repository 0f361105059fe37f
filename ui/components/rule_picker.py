import calendar

import customtkinter as ctk

from models.recurrence_rule import (
    RecurrenceRule, Single, Weekly, Biweekly, Monthly, Annual, rule_from_columns,
)
from utils.constants import DAYS_OF_WEEK
from utils.errors import ValidationError

_KIND_LABELS = {
    "single": "One-time",
    "weekly": "Weekly",
    "biweekly": "Every 2 weeks",
    "monthly": "Monthly",
    "annual": "Yearly",
}
_LABEL_KINDS = {label: kind for kind, label in _KIND_LABELS.items()}
_DAYS = [str(d) for d in range(1, 32)]
_MONTHS = list(calendar.month_abbr)[1:]


class RulePicker(ctk.CTkFrame):
    """Frequency combobox plus the fields that rule kind needs.

    get() builds the rule and raises ValidationError on a bad combination
    (e.g. 30 Feb).
    """

    def __init__(self, master, rule: RecurrenceRule | None = None, on_change=None, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        rule = rule or Monthly(1)
        self._on_change = on_change

        self._kind_var = ctk.StringVar(value=_KIND_LABELS[rule.kind])
        ctk.CTkComboBox(
            self, values=list(_KIND_LABELS.values()), variable=self._kind_var,
            width=150, state="readonly", command=self._on_kind_change,
        ).grid(row=0, column=0, sticky="w")

        weekday = rule.weekday if isinstance(rule, (Weekly, Biweekly)) else 1
        day = rule.day if isinstance(rule, (Monthly, Annual)) else 1
        month = rule.month if isinstance(rule, Annual) else 1
        self._weekday_var = ctk.StringVar(value=DAYS_OF_WEEK[weekday - 1])
        self._day_var = ctk.StringVar(value=str(day))
        self._month_var = ctk.StringVar(value=_MONTHS[month - 1])

        self._fields = ctk.CTkFrame(self, fg_color="transparent")
        self._fields.grid(row=0, column=1, padx=(8, 0), sticky="w")
        self._refresh_fields()

    @property
    def kind(self) -> str:
        return _LABEL_KINDS[self._kind_var.get()]

    def get(self) -> RecurrenceRule:
        kind = self.kind
        if kind == "single":
            return Single()
        try:
            day = int(self._day_var.get())
        except ValueError:
            raise ValidationError("Day must be a number.") from None
        return rule_from_columns(
            kind,
            weekday=DAYS_OF_WEEK.index(self._weekday_var.get()) + 1,
            day=day,
            month=_MONTHS.index(self._month_var.get()) + 1,
        )

    def _on_kind_change(self, _value=None):
        self._refresh_fields()
        if self._on_change:
            self._on_change(self.kind)

    def _refresh_fields(self):
        for w in self._fields.winfo_children():
            w.destroy()

        kind = self.kind
        if kind in ("weekly", "biweekly"):
            ctk.CTkLabel(self._fields, text="on").pack(side="left", padx=(0, 4))
            ctk.CTkComboBox(
                self._fields, values=DAYS_OF_WEEK, variable=self._weekday_var,
                width=80, state="readonly",
            ).pack(side="left")
        elif kind == "annual":
            ctk.CTkLabel(self._fields, text="on").pack(side="left", padx=(0, 4))
            ctk.CTkComboBox(
                self._fields, values=_MONTHS, variable=self._month_var,
                width=80, state="readonly",
            ).pack(side="left")
            ctk.CTkComboBox(
                self._fields, values=_DAYS, variable=self._day_var,
                width=64, state="readonly",
            ).pack(side="left", padx=(4, 0))
        elif kind == "monthly":
            ctk.CTkLabel(self._fields, text="on day").pack(side="left", padx=(0, 4))
            ctk.CTkComboBox(
                self._fields, values=_DAYS, variable=self._day_var,
                width=64, state="readonly",
            ).pack(side="left")
