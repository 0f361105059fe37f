from datetime import date, datetime
from decimal import Decimal

import pytest

from utils import app_config
from utils.currency import format_currency, format_signed, has_two_places, to_money
from utils.date_helpers import (
    clamped_date, format_display_date, next_month, parse_date, parse_display_date,
    parse_timestamp,
)
from utils.errors import NotFound, ValidationError
from utils.validation import require_amount, require_day, require_text


class TestCurrency:
    def test_to_money_from_float_keeps_cents(self):
        assert to_money(0.1 + 0.2) == Decimal("0.30")
        assert to_money(None) == Decimal("0.00")

    def test_to_money_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_money("twelve")

    def test_has_two_places(self):
        assert has_two_places("10.5")
        assert has_two_places(Decimal("10.50"))
        assert not has_two_places("10.501")

    def test_formatting(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_signed(-12, "R$") == "-R$12.00"


class TestDates:
    def test_clamped_date(self):
        assert clamped_date(2023, 2, 31) == date(2023, 2, 28)
        assert clamped_date(2024, 2, 31) == date(2024, 2, 29)
        assert clamped_date(2024, 4, 15) == date(2024, 4, 15)

    def test_next_month_wraps_year(self):
        assert next_month(2024, 12) == (2025, 1)
        assert next_month(2024, 1) == (2024, 2)

    def test_parse_helpers(self):
        assert parse_date("2024-03-05") == date(2024, 3, 5)
        assert parse_date("not a date") is None
        assert parse_timestamp("2024-03-05T10:20:30") == datetime(2024, 3, 5, 10, 20, 30)
        assert parse_timestamp("2024-03-05") == datetime(2024, 3, 5)
        assert parse_timestamp(None) is None

    def test_display_format(self):
        assert format_display_date("2024-03-05", "DD/MM/YYYY") == "05/03/2024"
        assert format_display_date(None) == ""

    def test_parse_display_date(self):
        assert parse_display_date("05/03/2024", "DD/MM/YYYY") == date(2024, 3, 5)
        assert parse_display_date("03/05/2024", "MM/DD/YYYY") == date(2024, 3, 5)
        assert parse_display_date("05.03.2024", "DD.MM.YYYY") == date(2024, 3, 5)
        # ISO is always accepted.
        assert parse_display_date("2024-03-05", "DD/MM/YYYY") == date(2024, 3, 5)
        assert parse_display_date("  ", "DD/MM/YYYY") is None
        assert parse_display_date("31/31/2024", "DD/MM/YYYY") is None


class TestValidation:
    def test_require_text_strips(self):
        assert require_text("  Rent ", 10) == "Rent"

    def test_require_amount(self):
        assert require_amount("12.3") == Decimal("12.30")
        assert require_amount(0, allow_zero=True) == Decimal("0.00")
        for bad in (True, None, 0, "-1", "1.001"):
            with pytest.raises(ValidationError):
                require_amount(bad)

    @pytest.mark.parametrize("value", [0, 32, "5", 5.0, True])
    def test_require_day(self, value):
        with pytest.raises(ValidationError):
            require_day(value)

    def test_errors_are_value_and_lookup_errors(self):
        assert isinstance(ValidationError("x"), ValueError)
        err = NotFound("Card", 3)
        assert isinstance(err, LookupError)
        assert str(err) == "Card #3 not found."


class TestAppConfig:
    @pytest.fixture(autouse=True)
    def config_file(self, tmp_path, monkeypatch):
        path = tmp_path / "cfg" / "config.json"
        monkeypatch.setattr(app_config, "CONFIG_FILE", path)
        return path

    def test_missing_file_is_empty(self):
        assert app_config.load_config() == {}
        assert app_config.get_db_folder() is None
        assert app_config.get_log_level() == "INFO"

    def test_round_trip_db_folder(self, config_file):
        app_config.set_db_folder("/data/duebook")
        assert config_file.exists()
        assert app_config.get_db_folder() == "/data/duebook"
        app_config.set_db_folder(None)
        assert app_config.get_db_folder() is None

    def test_corrupt_file_is_ignored(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text("{not json", encoding="utf-8")
        assert app_config.load_config() == {}


class TestSettings:
    def test_seeded_defaults(self, settings):
        assert settings.user_name == "User"
        assert settings.notifications_enabled
        assert not settings.income_reminders
        assert settings.horizon_days == 7
        assert settings.flush_limit == 10
        assert settings.tick_interval_seconds == 30 * 60

    def test_values_round_trip(self, settings):
        settings.set("income_reminders", True)
        settings.set("notification_flush_limit", 0)
        settings.set_user_name("  Ana ")
        assert settings.income_reminders
        assert settings.flush_limit == 1
        assert settings.user_name == "Ana"

    def test_garbage_int_falls_back_to_default(self, settings):
        settings.set("notification_horizon_days", "soon")
        assert settings.horizon_days == 7

    def test_empty_user_name_rejected(self, settings):
        with pytest.raises(ValueError):
            settings.set_user_name("   ")

    def test_set_reminders(self, settings):
        settings.set_reminders(False, True, " 3 ", "5", 15)
        assert not settings.notifications_enabled
        assert settings.income_reminders
        assert settings.horizon_days == 3
        assert settings.flush_limit == 5
        assert settings.tick_interval_seconds == 15 * 60

    @pytest.mark.parametrize("horizon, flush, minutes", [
        ("a week", 10, 30), (-1, 10, 30), (7, 0, 30), (7, 10, 0),
    ])
    def test_bad_reminder_options_leave_settings_alone(self, settings, horizon, flush, minutes):
        with pytest.raises(ValidationError):
            settings.set_reminders(False, True, horizon, flush, minutes)
        assert settings.notifications_enabled
        assert not settings.income_reminders
        assert settings.horizon_days == 7

    def test_set_display(self, settings):
        settings.set_display("Dark", " € ", "DD.MM.YYYY")
        assert settings.appearance_mode == "dark"
        assert settings.currency_symbol == "€"
        assert settings.date_format == "DD.MM.YYYY"
        with pytest.raises(ValidationError):
            settings.set_display("Neon", "$", "DD.MM.YYYY")
        with pytest.raises(ValidationError):
            settings.set_display("Light", "$", "YY/MM")
