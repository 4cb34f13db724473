"""Settings shared by every environment, read from the process environment."""

import os


def _db_config() -> dict:
    return {
        "dsn": os.getenv("DATABASE_URL", "").strip() or None,
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "5432")),
        "user": os.getenv("DB_USER", "postgres"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "postgres"),
        "sslmode": os.getenv("DB_SSLMODE", "").strip() or None,
    }


DB_CONFIG = _db_config()

AUTH_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
AUTH_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
AUTH_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
AUTH_TIMEOUT = float(os.getenv("AUTH_TIMEOUT", "10"))

ADMIN_EMAILS = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()]

CHECKIN_CODE_SECRET = os.getenv("CHECKIN_CODE_SECRET") or os.getenv("CHECKIN_CODE_PEPPER") or ""
CRON_SECRET = os.getenv("CRON_SECRET", "")

VAPID_PUBLIC_KEY = os.getenv("VAPID_PUBLIC_KEY", "")
VAPID_PRIVATE_KEY = os.getenv("VAPID_PRIVATE_KEY", "")
VAPID_SUBJECT = os.getenv("VAPID_SUBJECT", "mailto:admin@example.com")

TIMEZONE = os.getenv("TIMEZONE", "Europe/Paris")

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
