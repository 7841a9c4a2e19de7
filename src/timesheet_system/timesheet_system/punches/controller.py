from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import api_view, current_principal
from ..container import Container
from .model import DayAggregate, EntryKey


def day_to_dict(day: DayAggregate) -> dict:
    return {
        "id": str(EntryKey(day.employee_id, day.work_date)),
        "employee_id": day.employee_id,
        "date": day.work_date.isoformat(),
        "clock_in": day.clock_in.isoformat() if day.clock_in else None,
        "clock_out": day.clock_out.isoformat() if day.clock_out else None,
        "breaks": [{"start": b.start.isoformat(), "end": b.end.isoformat()} for b in day.break_intervals],
        "break_count": day.break_count,
        "work_minutes": day.work_minutes,
        "break_minutes": day.break_minutes,
        "location_id": day.location_id,
        "anomalies": [a.value for a in day.anomalies],
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/timesheets/entries/<entry_id>", methods=["PUT"], endpoint="update_time_entry")
    @api_view
    def update_time_entry(entry_id: str):
        payload = request.get_json(silent=True) or {}
        day = container.punch_service.apply_correction(current_principal(), entry_id, payload)
        return jsonify({"success": True, "entry": day_to_dict(day)})
