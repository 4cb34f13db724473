from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ADMIN_EMAILS = ["boss@example.com"]
CHECKIN_CODE_SECRET = "test-pepper"
CRON_SECRET = "test-cron"
