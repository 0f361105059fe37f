import tkinter as tk

from ui.components.alert_banner import AlertBanner
from utils.errors import DeliveryError
from utils.logger import get_logger

logger = get_logger(__name__)

_BANNER_MS = 15000


class BannerChannel:
    """Delivery channel that shows notifications as banners in the main window.

    show() is called from the scheduler thread and only schedules work with
    after(0, ...). Every other widget call runs on the Tk thread.
    """

    def __init__(self, banner_parent, color: str = "#FF9800"):
        self._parent = banner_parent
        self._color = color

    def show(self, title: str, body: str) -> None:
        try:
            self._parent.after(0, lambda: self._add_banner(title, body))
        except (tk.TclError, RuntimeError) as e:
            raise DeliveryError(f"Main window unavailable: {e}") from e

    def _add_banner(self, title: str, body: str):
        if not self._parent.winfo_exists():
            logger.info(f"Window closed, banner dropped: {title}")
            return
        banner = AlertBanner(
            self._parent, title=title, body=body,
            color=self._color, auto_dismiss_ms=_BANNER_MS,
        )
        banner.pack(fill="x", pady=2)
