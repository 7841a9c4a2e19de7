from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.http import api_view, current_principal
from ..container import Container
from ..punches.controller import day_to_dict
from .model import Timesheet


def timesheet_to_dict(ts: Timesheet) -> dict:
    return {
        "id": ts.timesheet_id,
        "employee_id": ts.employee_id,
        "period_start": ts.period_start.isoformat(),
        "period_end": ts.period_end.isoformat(),
        "status": ts.status.value,
        "reviewed_by": ts.reviewed_by,
        "reviewed_at": ts.reviewed_at.isoformat() if ts.reviewed_at else None,
        "review_comment": ts.review_comment,
    }


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["GET"], endpoint="get_timesheet")
    @api_view
    def get_timesheet(timesheet_id: int):
        detail = service.get_detail(current_principal(), timesheet_id)
        return jsonify(
            {
                "timesheet": timesheet_to_dict(detail.timesheet),
                "totals": detail.totals.as_dict(),
                "entries": [day_to_dict(d) for d in detail.days],
            }
        )

    @app.route("/api/timesheets/<int:timesheet_id>/status", methods=["PUT"], endpoint="change_timesheet_status")
    @api_view
    def change_timesheet_status(timesheet_id: int):
        body = request.get_json(silent=True) or {}
        ts = service.change_status(
            current_principal(),
            timesheet_id,
            body.get("status"),
            review_comment=body.get("review_comment"),
        )
        return jsonify({"success": True, "timesheet": timesheet_to_dict(ts)})

    @app.route("/api/timesheets/bulk-status", methods=["PUT"], endpoint="bulk_timesheet_status")
    @api_view
    def bulk_timesheet_status():
        body = request.get_json(silent=True) or {}
        results = service.bulk_change_status(
            current_principal(),
            body.get("timesheet_ids") or [],
            body.get("status"),
            review_comment=body.get("review_comment"),
        )
        return jsonify(
            {
                "success": all(r.success for r in results),
                "updated": sum(1 for r in results if r.success),
                "failed": sum(1 for r in results if not r.success),
                "results": [asdict(r) for r in results],
            }
        )

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["PUT"], endpoint="update_timesheet")
    @api_view
    def update_timesheet(timesheet_id: int):
        body = request.get_json(silent=True) or {}
        ts = service.update_period(
            current_principal(),
            timesheet_id,
            period_start=body.get("period_start"),
            period_end=body.get("period_end"),
        )
        return jsonify({"success": True, "timesheet": timesheet_to_dict(ts)})

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["DELETE"], endpoint="delete_timesheet")
    @api_view
    def delete_timesheet(timesheet_id: int):
        service.delete(current_principal(), timesheet_id)
        return jsonify({"success": True})
