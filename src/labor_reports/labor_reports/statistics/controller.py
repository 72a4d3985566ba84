from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_errors, parse_date_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/statistics", methods=["GET"], endpoint="statistics")
    @json_errors
    def statistics():
        stats = container.statistics_service.build(
            current_principal(),
            parse_date_arg(request.args.get("start"), "Start date"),
            parse_date_arg(request.args.get("end"), "End date"),
            project_ids=request.args.getlist("project_id"),
            crew_ids=request.args.getlist("crew_id"),
        )
        return jsonify({"ok": True, "data": stats.to_dict()})
