from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_date_arg
from ..common.http import json_ok


def register(app: Flask, container) -> None:
    guards = container.guards
    team = container.team_events_service

    @app.route("/api/team/events", methods=["GET"], endpoint="team_events")
    @guards.login_required
    def team_events():
        start = parse_date_arg(request.args["from"], "from") if request.args.get("from") else None
        end = parse_date_arg(request.args["to"], "to") if request.args.get("to") else None
        return json_ok(**team.upcoming(start=start, end=end))
