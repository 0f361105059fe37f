import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from services.dashboard_service import DashboardService
from utils.constants import RECURRENCE_COLORS
from utils.currency import format_currency, format_signed


class DashboardTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        dashboard_service: DashboardService,
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = dashboard_service
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_summary_cards()
        self._build_health_row()
        self._build_bottom_section()
        self._load()

    def refresh(self):
        self._load()

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 6))
        self._card_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)

    def _build_health_row(self):
        self._health_frame = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        self._health_frame.grid(row=1, column=0, sticky="ew", padx=22, pady=6)
        self._health_frame.grid_columnconfigure((0, 1), weight=1)

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="nsew", padx=16, pady=(6, 12))
        bottom.grid_columnconfigure((0, 1, 2), weight=1)
        bottom.grid_rowconfigure(0, weight=1)

        self._cards_usage_frame = ctk.CTkScrollableFrame(bottom, label_text="Card Usage", height=240)
        self._cards_usage_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8))

        self._suggestions_frame = ctk.CTkScrollableFrame(bottom, label_text="Suggestions", height=240)
        self._suggestions_frame.grid(row=0, column=1, sticky="nsew", padx=8)

        chart_frame = ctk.CTkFrame(bottom)
        chart_frame.grid(row=0, column=2, sticky="nsew", padx=(8, 0))
        ctk.CTkLabel(chart_frame, text="Spending by Recurrence").pack(pady=(6, 0))
        self._pie_fig = Figure(figsize=(3, 2.6), dpi=90)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=chart_frame)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=6, pady=6)

    def _load(self):
        snap = self._svc.compute()

        for w in self._card_frame.winfo_children():
            w.destroy()
        card_data = [
            ("Balance",            snap.balance,            "#4CAF50" if snap.balance >= 0 else "#F44336"),
            ("Monthly Projection", snap.monthly_projection, "#2196F3" if snap.monthly_projection >= 0 else "#FF9800"),
            ("Income",             snap.total_income,       "#4CAF50"),
            ("Open Invoices",      snap.open_invoices_total, "#FF9800"),
        ]
        for i, (label, value, color) in enumerate(card_data):
            self._make_card(self._card_frame, i, label, value, color)

        for w in self._health_frame.winfo_children():
            w.destroy()
        for col, (label, pct, bad) in enumerate([
            ("Saving rate", snap.saving_rate, snap.saving_rate < 20),
            ("Credit use",  snap.credit_use,  snap.credit_use > 50),
        ]):
            f = ctk.CTkFrame(self._health_frame, fg_color="transparent")
            f.grid(row=0, column=col, sticky="ew", padx=12, pady=8)
            ctk.CTkLabel(f, text=f"{label}: {pct}%", anchor="w").pack(fill="x")
            bar = ctk.CTkProgressBar(f, progress_color="#F44336" if bad else "#4CAF50")
            bar.pack(fill="x", pady=2)
            bar.set(pct / 100)

        for w in self._cards_usage_frame.winfo_children():
            w.destroy()
        if not snap.cards_usage:
            ctk.CTkLabel(self._cards_usage_frame, text="No cards yet.", text_color="gray60").pack(pady=20)
        for usage in snap.cards_usage:
            pct = float(usage.used / usage.limit) if usage.limit > 0 else 0.0
            pct = min(pct, 1.0)
            bar_color = "#4CAF50" if pct < 0.5 else ("#FF9800" if pct < 1.0 else "#F44336")
            f = ctk.CTkFrame(self._cards_usage_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            top_row = ctk.CTkFrame(f, fg_color="transparent")
            top_row.pack(fill="x")
            ctk.CTkLabel(top_row, text=usage.name, anchor="w").pack(side="left")
            ctk.CTkLabel(
                top_row,
                text=f"{format_currency(usage.used, self._symbol)} / "
                     f"{format_currency(usage.limit, self._symbol)}",
                anchor="e", text_color="gray60",
            ).pack(side="right")
            bar = ctk.CTkProgressBar(f, progress_color=bar_color)
            bar.pack(fill="x", pady=2)
            bar.set(pct)
            ctk.CTkLabel(
                f, text=f"Available {format_currency(usage.available, self._symbol)}",
                anchor="w", text_color="gray60", font=ctk.CTkFont(size=11),
            ).pack(fill="x")

        for w in self._suggestions_frame.winfo_children():
            w.destroy()
        for text in snap.suggestions:
            ctk.CTkLabel(
                self._suggestions_frame, text=f"• {text}", anchor="w",
                justify="left", wraplength=260,
            ).pack(fill="x", pady=3, padx=4)

        self.after(50, lambda d=snap.distribution: self._draw_pie_chart(d))

    def _draw_pie_chart(self, distribution):
        ax = self._pie_ax
        ax.clear()
        total = sum(float(d.amount) for d in distribution)
        if not distribution or total == 0:
            ax.text(0.5, 0.5, "No expense data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            ax.axis("off")
            self._pie_mpl.draw_idle()
            return
        ax.pie(
            [float(d.amount) for d in distribution],
            labels=[d.kind for d in distribution],
            colors=[RECURRENCE_COLORS.get(d.kind, "#888888") for d in distribution],
            startangle=90,
            textprops={"fontsize": 8},
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

    def _make_card(self, parent, col, label, value, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12),
            text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card,
            text=format_signed(value, self._symbol),
            font=ctk.CTkFont(size=20, weight="bold"),
            text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
