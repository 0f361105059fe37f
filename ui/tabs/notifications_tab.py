import customtkinter as ctk
from services.notification_service import NotificationService
from utils.constants import SEVERITY_COLORS
from utils.date_helpers import format_display_date


class NotificationsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        notification_service: NotificationService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = notification_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        self._title = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(size=14, weight="bold"))
        self._title.pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="Mark all read", command=self._mark_all_read).pack(
            side="right", padx=8, pady=6
        )

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._title.configure(text=f"Notifications ({self._svc.unread_count()} unread)")

        records = self._svc.list_notifications()
        if not records:
            ctk.CTkLabel(self._scroll, text="Nothing due soon.", text_color="gray60").pack(pady=20)
            return
        for rec in records:
            color = SEVERITY_COLORS["info"] if rec.is_read else SEVERITY_COLORS["warning"]
            row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=6)
            row.pack(fill="x", pady=2, padx=2)
            row.grid_columnconfigure(1, weight=1)
            ctk.CTkLabel(row, text=rec.kind.title(), text_color=color, width=70).grid(
                row=0, column=0, padx=(8, 4), pady=6
            )
            ctk.CTkLabel(
                row, text=rec.title, anchor="w",
                font=ctk.CTkFont(size=13, weight="normal" if rec.is_read else "bold"),
            ).grid(row=0, column=1, sticky="ew")
            ctk.CTkLabel(
                row,
                text=f"Due {format_display_date(rec.due_date.isoformat(), self._date_format)}",
                text_color="gray60", width=120, anchor="e",
            ).grid(row=0, column=2, padx=8)

    def _mark_all_read(self):
        self._svc.mark_all_read()
        self._notify_refresh("notification")
