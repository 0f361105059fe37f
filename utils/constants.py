APP_NAME = "Duebook"
APP_WIDTH = 1100
APP_HEIGHT = 700
DB_FILE = "duebook.db"

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

TICK_INTERVAL_MINUTES = 30
UPCOMING_REMINDER_DAYS = 7
NOTIFICATION_FLUSH_LIMIT = 10

SAVING_RATE_TARGET = 20
CREDIT_USE_CEILING = 50

PAYMENT_METHODS = ("manual", "auto-debit", "card")
INCOME_STATUSES = ("pending", "confirmed")

MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200
MAX_COMPANY_LENGTH = 50
MAX_CARD_NAME_LENGTH = 30

APPEARANCE_MODES = ("system", "light", "dark")

DAYS_OF_WEEK = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

SUGGESTIONS = {
    "saving_rate": "Increase your saving rate above 20%",
    "credit_use": "Reduce card usage below 50% of the limit",
    "balance": "Avoid new expenses until you reach a positive balance",
    "default": "Keep your current strategy",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

RECURRENCE_COLORS = {
    "single":   "#888888",
    "weekly":   "#2196F3",
    "biweekly": "#00BCD4",
    "monthly":  "#FF9800",
    "annual":   "#9C27B0",
}
