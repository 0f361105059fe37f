from database.db_manager import DatabaseManager
from utils.date_helpers import DATE_FORMAT_OPTIONS
from utils.errors import ValidationError
from utils.constants import (
    TICK_INTERVAL_MINUTES, UPCOMING_REMINDER_DAYS, NOTIFICATION_FLUSH_LIMIT,
    APPEARANCE_MODES,
)


class SettingsService:
    """Typed view over the app_settings key/value table."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _get_int(self, key: str, default: int, minimum: int = 0) -> int:
        raw = self._db.get_setting(key, str(default))
        try:
            return max(minimum, int(raw))
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        raw = self._db.get_setting(key, "1" if default else "0")
        return raw.strip().lower() in ("1", "true", "yes", "on")

    @property
    def user_name(self) -> str:
        return self._db.get_setting("user_name", "User")

    def set_user_name(self, name: str):
        name = name.strip()
        if not name:
            raise ValueError("Name cannot be empty.")
        self._db.set_setting("user_name", name[:30])

    @property
    def notifications_enabled(self) -> bool:
        return self._get_bool("notifications_enabled", True)

    @property
    def income_reminders(self) -> bool:
        return self._get_bool("income_reminders", False)

    @property
    def horizon_days(self) -> int:
        return self._get_int("notification_horizon_days", UPCOMING_REMINDER_DAYS)

    @property
    def flush_limit(self) -> int:
        return self._get_int("notification_flush_limit", NOTIFICATION_FLUSH_LIMIT, minimum=1)

    @property
    def tick_interval_seconds(self) -> float:
        return 60.0 * self._get_int("tick_interval_minutes", TICK_INTERVAL_MINUTES, minimum=1)

    @property
    def currency_symbol(self) -> str:
        return self._db.get_setting("currency_symbol", "$")

    @property
    def date_format(self) -> str:
        return self._db.get_setting("date_format", "MM/DD/YYYY")

    @property
    def appearance_mode(self) -> str:
        return self._db.get_setting("appearance_mode", "system")

    def set(self, key: str, value) -> None:
        if isinstance(value, bool):
            value = "1" if value else "0"
        self._db.set_setting(key, str(value))

    def set_reminders(
        self,
        enabled: bool,
        income_reminders: bool,
        horizon_days,
        flush_limit,
        tick_interval_minutes,
    ):
        """Validate and store the scheduler options edited on the settings tab."""
        values = {
            "notification_horizon_days": _whole_number("Reminder horizon", horizon_days, 0, 365),
            "notification_flush_limit": _whole_number("Banners per check", flush_limit, 1, 100),
            "tick_interval_minutes": _whole_number(
                "Check interval", tick_interval_minutes, 1, 24 * 60
            ),
        }
        self.set("notifications_enabled", bool(enabled))
        self.set("income_reminders", bool(income_reminders))
        for key, value in values.items():
            self.set(key, value)

    def set_display(self, appearance_mode: str, currency_symbol: str, date_format: str):
        appearance_mode = appearance_mode.lower()
        if appearance_mode not in APPEARANCE_MODES:
            raise ValidationError(f"Appearance must be one of: {', '.join(APPEARANCE_MODES)}.")
        self.set("appearance_mode", appearance_mode)
        self.set("currency_symbol", currency_symbol.strip()[:3] or "$")
        if date_format not in DATE_FORMAT_OPTIONS:
            raise ValidationError(f"Unknown date format '{date_format}'.")
        self.set("date_format", date_format)


def _whole_number(label: str, value, low: int, high: int) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{label} must be a whole number.") from None
    if not low <= number <= high:
        raise ValidationError(f"{label} must be between {low} and {high}.")
    return number
