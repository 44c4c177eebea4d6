import os

# Business-rule knobs that may be overridden per environment.
# Unset ones fall back to the defaults in core/constants.py.
RULE_NAMES = (
    "LATE_GRACE_MINUTES",
    "EARLY_CHECKIN_MINUTES",
    "LATE_CHECKIN_CUTOFF_MINUTES",
    "ADMIN_LEAD_MINUTES",
    "STAFF_LEAD_HOURS",
    "STAFF_CANCEL_LEAD_HOURS",
    "MAX_SHIFTS_PER_DAY",
    "AUTO_REJECT_WINDOW_MINUTES",
)


def rule_overrides() -> dict:
    return {name: int(os.environ[name]) for name in RULE_NAMES if os.environ.get(name)}


def db_config_from_env(*, default_pool_size: int = 0) -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "shift_attendance_db"),
        # 0 opens one connection per repository call.
        "pool_size": int(os.getenv("DB_POOL_SIZE", str(default_pool_size))),
    }
