from __future__ import annotations

from io import BytesIO

from flask import Flask, request, send_file

from ..common.http import api_view, current_principal
from ..container import Container
from .model import ExportFile


def _send(export: ExportFile):
    response = send_file(
        BytesIO(export.content),
        mimetype=export.mimetype,
        as_attachment=export.disposition == "attachment",
        download_name=export.filename,
    )
    response.headers["Content-Disposition"] = export.content_disposition
    return response


def register(app: Flask, container: Container) -> None:
    service = container.export_service

    @app.route("/api/timesheets/export", methods=["GET"], endpoint="export_timesheets")
    @api_view
    def export_timesheets():
        args = request.args
        prepared = service.range_report(
            current_principal(),
            start_date=args.get("start_date"),
            end_date=args.get("end_date"),
            status=args.get("status"),
            employee_id=args.get("employee_id"),
            location_id=args.get("location_id"),
        )
        return _send(service.render(prepared, args.get("format")))

    @app.route("/api/timesheets/<int:timesheet_id>/export", methods=["GET"], endpoint="export_timesheet")
    @api_view
    def export_timesheet(timesheet_id: int):
        prepared = service.timesheet_report(current_principal(), timesheet_id)
        return _send(service.render(prepared, request.args.get("format")))
