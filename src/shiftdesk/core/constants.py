"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from __future__ import annotations

from datetime import time

DEFAULT_TIMEZONE = "Europe/Paris"

REASON_MAX_LENGTH = 200
PASSWORD_MIN_LENGTH = 6
TEAM_EVENTS_DEFAULT_DAYS = 730

# Check-in window around the planned shift start.
CHECKIN_OPENS_BEFORE_MINUTES = 30
CHECKIN_CLOSES_AFTER_MINUTES = 120
MAX_LATE_MINUTES = 120
MAX_EARLY_MINUTES = 30
MISSING_CHECKIN_AFTER_MINUTES = 60
CHECKIN_CODE_DIGITS = 6

ADMIN_FORCED_ABSENCE_REASON = "Absence non déclarée (admin)"

PUSH_DEFAULT_ROLE = "admin"
PUSH_DEFAULT_TITLE = "Nouvelle demande"
PUSH_DEFAULT_URL = "/admin?tab=absences"
PUSH_DEFAULT_BADGE = 1

SHIFT_SORT_ORDER = {"MORNING": 1, "MIDDAY": 2, "SUNDAY_EXTRA": 3, "EVENING": 4}

SHIFT_HOURS = {"MORNING": 7.0, "MIDDAY": 6.0, "EVENING": 7.0, "SUNDAY_EXTRA": 4.5}

SHIFT_PLANNED_START = {
    "MORNING": time(6, 30),
    "MIDDAY": time(6, 30),
    "EVENING": time(13, 30),
    "SUNDAY_EXTRA": time(9, 0),
}

SHIFT_LABELS = {
    "MORNING": "Matin 6h30-13h30",
    "MIDDAY": "Midi 7h-13h",
    "EVENING": "Soir 13h30-20h30",
    "SUNDAY_EXTRA": "Dimanche 9h-13h30",
}
