import customtkinter as ctk


class AlertBanner(ctk.CTkFrame):
    """A dismissible colored banner for non-blocking notifications.

    With auto_dismiss_ms set, the banner removes itself after that delay.
    """

    def __init__(self, master, title: str, body: str = "", color: str = "#2196F3",
                 auto_dismiss_ms: int | None = None, **kwargs):
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        text = f"{title}: {body}" if body else title
        ctk.CTkLabel(
            self, text=text, text_color="white",
            anchor="w", padx=10, pady=6
        ).grid(row=0, column=0, sticky="ew")

        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent",
            hover_color="#ffffff",
            text_color="white",
            command=self.destroy,
        ).grid(row=0, column=1, padx=(0, 4))

        if auto_dismiss_ms:
            self.after(auto_dismiss_ms, self._dismiss)

    def _dismiss(self):
        if self.winfo_exists():
            self.destroy()
