"""shiftdesk package.

Staff scheduling and HR administration API for a small retail team, organized
by feature modules (shifts, absences, replacements, leaves, checkins, ...)
with a thin Flask controller layer over service/repository layers.
"""

__version__ = "0.1.0"
