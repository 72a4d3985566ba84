from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..auth.model import Capability
from ..common.http import current_principal, json_errors, parse_date_arg
from ..container import Container
from ..core.enums import ApprovalRole
from ..core.exceptions import ValidationError
from ..exports.spreadsheet import XLSX_MIMETYPE, to_xlsx_bytes


def register(app: Flask, container: Container) -> None:
    service = container.daily_report_service
    mover = container.move_employee_service

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _workspace_from_payload(principal, payload: dict):
        """Open the selection and replay the client's in-memory edits onto it."""

        ws = service.open(
            principal,
            parse_date_arg(payload.get("date")),
            str(payload.get("project_id") or ""),
            str(payload.get("crew_id") or ""),
        )
        for employee_id in payload.get("removed") or ():
            service.remove_manual_employee(principal, ws, str(employee_id))
        for employee_id in payload.get("added") or ():
            service.add_manual_employee(principal, ws, str(employee_id))
        for row in payload.get("rows") or ():
            employee_id = str(row.get("employee_id") or "")
            if not employee_id:
                raise ValidationError("Each row needs an employee_id")
            if ws.sheet is None:
                raise ValidationError("Select a single crew to edit its report")
            ws.sheet.apply_row(employee_id, row)
        return ws

    @app.route("/api/daily-reports", methods=["GET"], endpoint="daily_report_open")
    @json_errors
    def open_report():
        principal = current_principal()
        ws = service.open(
            principal,
            parse_date_arg(request.args.get("date")),
            request.args.get("project_id", ""),
            request.args.get("crew_id", ""),
        )
        return jsonify({"ok": True, "data": service.to_ui(principal, ws)})

    @app.route("/api/daily-reports/options", methods=["GET"], endpoint="daily_report_options")
    @json_errors
    def report_options():
        options = service.selector_options(current_principal(), request.args.get("project_id") or None)
        return jsonify({"ok": True, "data": options})

    @app.route("/api/daily-reports/save", methods=["POST"], endpoint="daily_report_save")
    @json_errors
    def save_report():
        principal = current_principal()
        ws = _workspace_from_payload(principal, _payload())
        service.save(principal, ws)
        return jsonify({"ok": True, "message": "Report saved", "data": service.to_ui(principal, ws)})

    @app.route("/api/daily-reports/notify", methods=["POST"], endpoint="daily_report_notify")
    @json_errors
    def notify_report():
        principal = current_principal()
        payload = _payload()
        if payload.get("report_id") and not payload.get("rows"):
            report = service.notify_report(principal, str(payload["report_id"]))
            return jsonify({"ok": True, "message": "Report notified", "report_id": report.report_id})

        ws = _workspace_from_payload(principal, payload)
        service.notify(principal, ws)
        return jsonify({"ok": True, "message": "Report notified", "data": service.to_ui(principal, ws)})

    @app.route("/api/daily-reports/move-destinations", methods=["GET"], endpoint="daily_report_move_destinations")
    @json_errors
    def move_destinations():
        principal = current_principal()
        container.authorizer.require(principal, Capability.DAILY_REPORTS_MOVE_EMPLOYEE)
        crews = mover.move_destinations(parse_date_arg(request.args.get("date")), request.args.get("crew_id", ""))
        return jsonify({"ok": True, "data": [{"crew_id": c.crew_id, "name": c.name} for c in crews]})

    @app.route("/api/daily-reports/move", methods=["POST"], endpoint="daily_report_move")
    @json_errors
    def move_employee():
        principal = current_principal()
        payload = _payload()
        dest = mover.move(
            principal,
            parse_date_arg(payload.get("date")),
            str(payload.get("source_crew_id") or ""),
            str(payload.get("dest_crew_id") or ""),
            str(payload.get("employee_id") or ""),
        )
        return jsonify({"ok": True, "message": "Employee moved", "report_id": dest.report_id})

    @app.route("/api/daily-reports/approve", methods=["POST"], endpoint="daily_report_approve")
    @json_errors
    def approve_report():
        principal = current_principal()
        payload = _payload()
        try:
            role = ApprovalRole(str(payload.get("role") or ""))
        except ValueError:
            raise ValidationError("Unknown approval role") from None
        report = service.approve(principal, str(payload.get("report_id") or ""), role)
        return jsonify({"ok": True, "message": "Approval recorded", "report_id": report.report_id})

    @app.route("/api/daily-reports/<report_id>", methods=["DELETE"], endpoint="daily_report_delete")
    @json_errors
    def delete_report(report_id: str):
        service.delete(current_principal(), report_id)
        return jsonify({"ok": True, "message": "Report deleted"})

    @app.route("/api/daily-reports/export", methods=["GET"], endpoint="daily_report_export")
    @json_errors
    def export_report():
        principal = current_principal()
        report_date = parse_date_arg(request.args.get("date"))
        ws = service.open(principal, report_date, request.args.get("project_id", ""), request.args.get("crew_id", ""))
        content = to_xlsx_bytes(service.export_rows(ws), "DailyReport")
        return send_file(
            io.BytesIO(content),
            download_name=f"daily_report_{report_date:%Y%m%d}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
