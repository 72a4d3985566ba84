from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.http import current_principal, json_errors, parse_date_arg
from ..container import Container
from ..core.enums import ActivityFilter, ApprovalRole
from ..core.exceptions import ValidationError
from ..exports.spreadsheet import XLSX_MIMETYPE, to_xlsx_bytes
from .service import PermissionInput


def register(app: Flask, container: Container) -> None:
    service = container.permission_service

    def _input() -> PermissionInput:
        payload = request.get_json(silent=True) or {}
        return PermissionInput(
            employee_id=str(payload.get("employee_id") or ""),
            absence_type_id=str(payload.get("absence_type_id") or ""),
            start_date=parse_date_arg(payload.get("start_date"), "Start date"),
            end_date=parse_date_arg(payload.get("end_date"), "End date"),
            observations=str(payload.get("observations") or ""),
            designated_supervisor_id=payload.get("designated_supervisor_id") or None,
            designated_hr_id=payload.get("designated_hr_id") or None,
        )

    def _filters() -> dict:
        try:
            activity = ActivityFilter(request.args.get("activity", ActivityFilter.ALL.value))
        except ValueError:
            raise ValidationError("Unknown activity filter") from None
        return {"search": request.args.get("search", ""), "activity": activity}

    @app.route("/api/permissions", methods=["GET"], endpoint="permissions_list")
    @json_errors
    def list_permissions():
        rows = service.list(current_principal(), **_filters())
        return jsonify({"ok": True, "data": rows})

    @app.route("/api/permissions", methods=["POST"], endpoint="permissions_create")
    @json_errors
    def create_permission():
        permission_id = service.create(current_principal(), _input())
        return jsonify({"ok": True, "message": "Permission created", "permission_id": permission_id}), 201

    @app.route("/api/permissions/<permission_id>", methods=["PUT"], endpoint="permissions_update")
    @json_errors
    def update_permission(permission_id: str):
        service.update(current_principal(), permission_id, _input())
        return jsonify({"ok": True, "message": "Permission updated"})

    @app.route("/api/permissions/<permission_id>", methods=["DELETE"], endpoint="permissions_delete")
    @json_errors
    def delete_permission(permission_id: str):
        service.delete(current_principal(), permission_id)
        return jsonify({"ok": True, "message": "Permission deleted"})

    @app.route("/api/permissions/<permission_id>/approve", methods=["POST"], endpoint="permissions_approve")
    @json_errors
    def approve_permission(permission_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            role = ApprovalRole(str(payload.get("role") or ""))
        except ValueError:
            raise ValidationError("Unknown approval role") from None
        permission = service.approve(current_principal(), permission_id, role)
        return jsonify({"ok": True, "message": "Approval recorded", "status": permission.status.value})

    @app.route("/api/permissions/export", methods=["GET"], endpoint="permissions_export")
    @json_errors
    def export_permissions():
        rows = service.export_rows(current_principal(), **_filters())
        return send_file(
            io.BytesIO(to_xlsx_bytes(rows, "Permissions")),
            download_name="permissions.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
