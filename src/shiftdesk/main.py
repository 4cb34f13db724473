from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .absences.controller import register as register_absences
from .auth.controller import register as register_auth
from .checkins.controller import register as register_checkins
from .common.datetime_utils import set_timezone
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .hours.controller import register as register_hours
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .replacements.controller import register as register_replacements
from .shifts.controller import register as register_shifts
from .team.controller import register as register_team
from .users.controller import register as register_users

log = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    set_timezone(getattr(settings, "TIMEZONE", "Europe/Paris"))
    db_config = DBConfig.from_dict(getattr(settings, "DB_CONFIG", {}))
    log.info("settings=%s db=%s", settings_module, db_config.describe())

    if container is None:
        container = build_container(settings=settings)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(db_config)
            apply_schema(conn)
            log.info("schema ready (tables=%s)", len(list_tables(conn)))

    register_error_handlers(app)
    register_auth(app, container)
    register_users(app, container)
    register_shifts(app, container)
    register_absences(app, container)
    register_replacements(app, container)
    register_leaves(app, container)
    register_team(app, container)
    register_checkins(app, container)
    register_hours(app, container)
    register_notifications(app, container)

    return app
