import pytest

pytest.importorskip("customtkinter")

import tkinter as tk

import ui.banner_channel as banner_channel
from ui.banner_channel import BannerChannel
from utils.errors import DeliveryError


class FakeParent:
    """Stands in for the banner frame; records scheduled callbacks."""

    def __init__(self, exists: bool = True, after_error: Exception | None = None):
        self.exists = exists
        self.after_error = after_error
        self.scheduled = []
        self.exists_checks = 0

    def after(self, ms, callback):
        if self.after_error is not None:
            raise self.after_error
        self.scheduled.append((ms, callback))

    def winfo_exists(self):
        self.exists_checks += 1
        return self.exists


class FakeBanner:
    created = []

    def __init__(self, master, title, body, color, auto_dismiss_ms):
        self.title = title
        self.body = body
        FakeBanner.created.append(self)

    def pack(self, **kwargs):
        pass


@pytest.fixture(autouse=True)
def fake_banner(monkeypatch):
    FakeBanner.created = []
    monkeypatch.setattr(banner_channel, "AlertBanner", FakeBanner)


def test_show_only_schedules_work_on_the_tk_thread():
    parent = FakeParent()
    BannerChannel(parent).show("Rent", "Due 2024-03-05")

    assert len(parent.scheduled) == 1
    assert parent.scheduled[0][0] == 0
    assert parent.exists_checks == 0
    assert FakeBanner.created == []


def test_scheduled_callback_builds_the_banner():
    parent = FakeParent()
    BannerChannel(parent).show("Rent", "Due 2024-03-05")
    parent.scheduled[0][1]()

    assert [(b.title, b.body) for b in FakeBanner.created] == [("Rent", "Due 2024-03-05")]


def test_banner_dropped_when_window_closed_before_callback():
    parent = FakeParent()
    BannerChannel(parent).show("Rent", "Due 2024-03-05")
    parent.exists = False
    parent.scheduled[0][1]()

    assert parent.exists_checks == 1
    assert FakeBanner.created == []


@pytest.mark.parametrize("error", [tk.TclError("application destroyed"),
                                   RuntimeError("main thread is not in main loop")])
def test_scheduling_failure_is_a_delivery_error(error):
    parent = FakeParent(after_error=error)
    with pytest.raises(DeliveryError):
        BannerChannel(parent).show("Rent", "Due 2024-03-05")
