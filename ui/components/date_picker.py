import tkinter as tk
from datetime import date
from tkinter import ttk

import customtkinter as ctk
from tkcalendar import Calendar

from utils.date_helpers import today, format_date, format_display_date, parse_display_date


class DatePickerWidget(ctk.CTkFrame):
    """Date entry in the user's display format with a calendar popup.

    get() returns a date, or None when the entry is empty or unreadable.
    """

    def __init__(
        self,
        master,
        initial: date | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar()
        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._normalize)
        self._entry.bind("<Return>", self._normalize)

        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0)
        )
        self.set(initial)

    def get(self) -> date | None:
        return parse_display_date(self._var.get(), self._date_format)

    def set(self, value: date | None):
        self._var.set(format_display_date(format_date(value), self._date_format))
        self._entry.configure(border_color=("gray65", "gray35"))

    def is_empty(self) -> bool:
        return not self._var.get().strip()

    def is_valid(self) -> bool:
        return self.get() is not None

    def _normalize(self, _event=None):
        if self.is_empty():
            self.set(None)
        elif self.is_valid():
            self.set(self.get())
        else:
            self._entry.configure(border_color="#F44336")

    def _toggle_popup(self):
        if self._popup is not None and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        self._popup = popup

        dark = ctk.get_appearance_mode() == "Dark"
        bg, fg = ("#2b2b2b", "#ffffff") if dark else ("#ffffff", "#000000")
        ttk.Style(popup).theme_use("default")

        current = self.get() or today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year, month=current.month, day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg, foreground=fg,
            headersbackground=bg, headersforeground=fg,
            weekendbackground=bg, weekendforeground=fg,
            selectbackground="#1f6aa5",
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda _e: self._on_pick(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

    def _on_pick(self, cal: Calendar):
        self.set(cal.selection_get())
        self._close_popup()

    def _close_popup(self):
        if self._popup is not None:
            self._popup.destroy()
            self._popup = None
