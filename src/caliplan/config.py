"""
Runtime settings, read from the environment (and a local .env file).
"""
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATA_FILE = "caliplan_data.json"
DEFAULT_DAYS_AHEAD = 60
DEFAULT_CALENDAR_DAYS = 35


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_timezone_name() -> str | None:
    """IANA zone name used for day keys; None means the system zone"""
    return os.getenv("CALIPLAN_TIMEZONE") or None


def get_data_file() -> str:
    return os.getenv("CALIPLAN_DATA_FILE", DEFAULT_DATA_FILE)


def get_days_ahead() -> int:
    return _int_env("CALIPLAN_DAYS_AHEAD", DEFAULT_DAYS_AHEAD)


def get_calendar_days() -> int:
    return _int_env("CALIPLAN_CALENDAR_DAYS", DEFAULT_CALENDAR_DAYS)


def get_log_level() -> str:
    return os.getenv("CALIPLAN_LOG_LEVEL", "WARNING").upper()
