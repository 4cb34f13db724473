from __future__ import annotations

import csv
import io

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import month_start, parse_date_arg, today_local
from ..common.http import bearer_token, json_body, json_ok
from .service import CSV_FIELDS


def register(app: Flask, container) -> None:
    guards = container.guards
    hours = container.monthly_hours_service

    def _write_csv(*, rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/cron/monthly-hours", methods=["GET", "POST"], endpoint="cron_monthly_hours")
    def cron_monthly_hours():
        hours.check_cron_token(bearer_token(required=False))
        raw = request.args.get("month")
        months = [parse_date_arg(raw, "month")] if raw else hours.default_months()
        results, all_ok = hours.run(months=months)
        return (
            jsonify({"ok": all_ok, "months": [month_start(m).isoformat() for m in months], "results": results}),
            200 if all_ok else 207,
        )

    @app.route("/api/hours/my", methods=["GET"], endpoint="my_monthly_hours")
    @guards.seller_required
    def my_monthly_hours():
        raw = request.args.get("month")
        month = parse_date_arg(raw, "month") if raw else None
        return json_ok(attestations=hours.list_mine(seller_id=g.caller.user_id, month=month))

    @app.route("/api/hours/<int:attestation_id>/respond", methods=["POST"], endpoint="respond_monthly_hours")
    @guards.seller_required
    def respond_monthly_hours(attestation_id: int):
        body = json_body()
        hours.respond(
            current_role=g.caller.role,
            seller_id=g.caller.user_id,
            attestation_id=attestation_id,
            decision=body.get("decision", ""),
            correction_hours=body.get("correction_hours"),
            comment=body.get("comment"),
        )
        return json_ok()

    @app.route("/api/admin/hours/monthly", methods=["GET"], endpoint="admin_monthly_hours")
    @guards.admin_required
    def admin_monthly_hours():
        month = parse_date_arg(request.args.get("month"), "month", default=today_local())
        return json_ok(attestations=hours.list_month(current_role=g.caller.role, month=month))

    @app.route("/api/admin/hours/<int:attestation_id>/decide", methods=["POST"], endpoint="admin_decide_monthly_hours")
    @guards.admin_required
    def admin_decide_monthly_hours(attestation_id: int):
        body = json_body()
        result = hours.decide(
            current_role=g.caller.role,
            attestation_id=attestation_id,
            decision=body.get("decision", ""),
            comment=body.get("comment"),
        )
        return json_ok(**result)

    @app.route("/api/admin/hours/monthly.csv", methods=["GET"], endpoint="admin_monthly_hours_csv")
    @guards.admin_required
    def admin_monthly_hours_csv():
        month = parse_date_arg(request.args.get("month"), "month", default=today_local())
        rows = hours.export_rows(current_role=g.caller.role, month=month)
        return _write_csv(rows=rows, filename=f"monthly_hours_{month.strftime('%Y%m')}.csv")
