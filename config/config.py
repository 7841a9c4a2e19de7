"""Settings shared by every environment, read from the process environment.

``.env`` is loaded by ``create_app`` through python-dotenv before this module
is imported.
"""
import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_db"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Fallback when an organization has no timezone of its own
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Per-period cutoff; organizations may override it in their time_clock settings
OVERTIME_THRESHOLD_MINUTES = int(os.getenv("OVERTIME_THRESHOLD_MINUTES", "2400"))
