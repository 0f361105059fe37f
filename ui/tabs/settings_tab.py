import customtkinter as ctk
from tkinter import filedialog

from services.settings_service import SettingsService
from utils.app_config import get_db_folder, set_db_folder
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.errors import AppError

_DEFAULT_FOLDER = "(default: working folder)"
_RESTART_NOTE = "Restart the app for the change to take effect."


class SettingsTab(ctk.CTkFrame):
    """Profile, reminder schedule, database folder and display preferences."""

    def __init__(
        self,
        master,
        settings: SettingsService,
        notify_refresh,
        on_name_change=None,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._settings = settings
        self._notify_refresh = notify_refresh
        self._on_name_change = on_name_change

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_profile_section(scroll)
        self._build_reminders_section(scroll)
        self._build_db_folder_section(scroll)
        self._build_display_section(scroll)

    def refresh(self):
        s = self._settings
        self._name_var.set(s.user_name)
        self._enabled_var.set(s.notifications_enabled)
        self._income_var.set(s.income_reminders)
        self._horizon_var.set(str(s.horizon_days))
        self._flush_var.set(str(s.flush_limit))
        self._interval_var.set(str(int(s.tick_interval_seconds // 60)))
        self._appearance_var.set(s.appearance_mode.title())
        self._currency_var.set(s.currency_symbol)
        if s.date_format in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(s.date_format)

    # ── Profile ──────────────────────────────────────────────────────────────

    def _build_profile_section(self, parent):
        section = self._make_section(parent, "Profile", row=0)
        ctk.CTkLabel(section, text="Your name:", anchor="e", width=140).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        self._name_var = ctk.StringVar(value=self._settings.user_name)
        ctk.CTkEntry(section, textvariable=self._name_var, width=200).grid(
            row=0, column=1, padx=4, pady=6, sticky="w"
        )
        ctk.CTkButton(section, text="Save", width=80, command=self._save_name).grid(
            row=0, column=2, padx=(4, 8)
        )
        self._name_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._name_status.grid(row=1, column=0, columnspan=3, sticky="w", padx=8)

    def _save_name(self):
        try:
            self._settings.set_user_name(self._name_var.get())
        except ValueError as e:
            self._name_status.configure(text=str(e), text_color="#F44336")
            return
        self._name_status.configure(text="Name saved.", text_color="#4CAF50")
        if self._on_name_change:
            self._on_name_change(self._settings.user_name)

    # ── Reminders ────────────────────────────────────────────────────────────

    def _build_reminders_section(self, parent):
        section = self._make_section(parent, "Reminders", row=1)
        s = self._settings

        self._enabled_var = ctk.BooleanVar(value=s.notifications_enabled)
        ctk.CTkSwitch(section, text="Show reminder banners", variable=self._enabled_var).grid(
            row=0, column=0, columnspan=2, padx=8, pady=4, sticky="w"
        )
        self._income_var = ctk.BooleanVar(value=s.income_reminders)
        ctk.CTkSwitch(section, text="Remind me of incomes too", variable=self._income_var).grid(
            row=1, column=0, columnspan=2, padx=8, pady=4, sticky="w"
        )

        self._horizon_var = ctk.StringVar(value=str(s.horizon_days))
        self._flush_var = ctk.StringVar(value=str(s.flush_limit))
        self._interval_var = ctk.StringVar(value=str(int(s.tick_interval_seconds // 60)))
        fields = [
            ("Days ahead:", self._horizon_var),
            ("Banners per check:", self._flush_var),
            ("Check every (min):", self._interval_var),
        ]
        for i, (label, var) in enumerate(fields, start=2):
            ctk.CTkLabel(section, text=label, anchor="e", width=140).grid(
                row=i, column=0, padx=(8, 4), pady=4, sticky="e"
            )
            ctk.CTkEntry(section, textvariable=var, width=60).grid(
                row=i, column=1, padx=4, pady=4, sticky="w"
            )

        ctk.CTkButton(
            section, text="Save Reminders", width=140, command=self._save_reminders,
        ).grid(row=5, column=0, columnspan=2, pady=(8, 4))
        self._reminders_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._reminders_status.grid(row=6, column=0, columnspan=2, pady=(0, 6))

    def _save_reminders(self):
        try:
            self._settings.set_reminders(
                self._enabled_var.get(),
                self._income_var.get(),
                self._horizon_var.get(),
                self._flush_var.get(),
                self._interval_var.get(),
            )
        except AppError as e:
            self._reminders_status.configure(text=str(e), text_color="#F44336")
            return
        self._reminders_status.configure(
            text="Saved. The new interval applies after the next check.",
            text_color="#4CAF50",
        )
        self._notify_refresh("settings")

    # ── Database folder ──────────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=2)
        self._db_folder_var = ctk.StringVar(value=get_db_folder() or _DEFAULT_FOLDER)
        ctk.CTkEntry(
            section, textvariable=self._db_folder_var, state="readonly", width=340,
        ).grid(row=0, column=0, padx=(8, 4), pady=4, sticky="ew")
        ctk.CTkButton(section, text="Browse…", width=90, command=self._browse_db_folder).grid(
            row=0, column=1, padx=4
        )
        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_db_folder,
        ).grid(row=0, column=2, padx=(4, 8))
        self._db_status = ctk.CTkLabel(
            section, text="", text_color="#FF9800", font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_status.grid(row=1, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._store_db_folder(path)

    def _reset_db_folder(self):
        self._store_db_folder(None)

    def _store_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            self._db_status.configure(text=f"Could not save config: {e}")
            return
        self._db_folder_var.set(path or _DEFAULT_FOLDER)
        self._db_status.configure(text=_RESTART_NOTE)

    # ── Display ──────────────────────────────────────────────────────────────

    def _build_display_section(self, parent):
        section = self._make_section(parent, "Display", row=3)
        s = self._settings

        self._appearance_var = ctk.StringVar(value=s.appearance_mode.title())
        self._currency_var = ctk.StringVar(value=s.currency_symbol)
        self._date_fmt_var = ctk.StringVar(value=s.date_format)

        ctk.CTkLabel(section, text="Appearance:", anchor="e", width=140).grid(
            row=0, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        ctk.CTkComboBox(
            section, values=["System", "Light", "Dark"], variable=self._appearance_var,
            width=180, state="readonly",
        ).grid(row=0, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(section, text="Currency Symbol:", anchor="e", width=140).grid(
            row=1, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        ctk.CTkEntry(section, textvariable=self._currency_var, width=60).grid(
            row=1, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkLabel(section, text="Date Format:", anchor="e", width=140).grid(
            row=2, column=0, padx=(8, 4), pady=6, sticky="e"
        )
        ctk.CTkComboBox(
            section, values=DATE_FORMAT_OPTIONS, variable=self._date_fmt_var,
            width=180, state="readonly",
        ).grid(row=2, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(
            section, text="Currency and date format apply on next start.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=3, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(section, text="Save Settings", width=140, command=self._save_display).grid(
            row=4, column=0, columnspan=2, pady=(10, 4)
        )
        self._display_status = ctk.CTkLabel(section, text="", font=ctk.CTkFont(size=11))
        self._display_status.grid(row=5, column=0, columnspan=2, pady=(0, 8))

    def _save_display(self):
        try:
            self._settings.set_display(
                self._appearance_var.get(), self._currency_var.get(), self._date_fmt_var.get(),
            )
        except AppError as e:
            self._display_status.configure(text=str(e), text_color="#F44336")
            return
        ctk.set_appearance_mode(self._settings.appearance_mode)
        self._display_status.configure(text="Settings saved.", text_color="#4CAF50")

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            outer, text=title,
            font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))
        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
