from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date, month_label, parse_iso_date, today_utc
from ..core.exceptions import AggregationError, FetchError, ValidationError, WriteError
from ..container import Container
from .daily import summarize_day
from .export import export_monthly_csv

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _fail(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    def _filter(name: str) -> Optional[str]:
        value = (request.args.get(name) or "").strip()
        return value or None

    def _parse_date(value: Optional[str], default: date) -> date:
        if not value:
            return default
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid date {value!r} (YYYY-MM-DD)")

    def _month_start() -> date:
        today = today_utc()
        return _parse_date(request.args.get("month"), date(today.year, today.month, 1))

    def _record_json(r) -> dict:
        def students(refs):
            return [{"_id": s.student_id, "name": s.display_name, "regNo": s.display_reg_no} for s in refs]

        return {
            "_id": r.record_id,
            "date": format_iso_date(r.day),
            "class": r.class_id,
            "timeslot": r.timeslot_id,
            "totalStudents": r.total_students,
            "presentStudents": students(r.present_students),
            "absentStudents": students(r.absent_students),
            "lateStudents": students(r.late_students),
            "notes": r.notes,
        }

    @app.route("/api/reports/daily", methods=["GET"], endpoint="daily_report")
    def daily_report():
        try:
            day = _parse_date(request.args.get("date"), today_utc())
            records = container.attendance_service.compute_daily_summary(day, _filter("classId"), _filter("timeslotId"))
        except ValidationError as e:
            return _fail(str(e), 400)
        except FetchError as e:
            return _fail(str(e), 502)

        return jsonify(
            {
                "success": True,
                "data": {
                    "date": format_iso_date(day),
                    "records": [_record_json(r) for r in records],
                    "stats": summarize_day(records).as_dict(),
                },
            }
        )

    def _monthly():
        month_start = _month_start()
        tallies = container.aggregator.compute_monthly_report(month_start, _filter("classId"), _filter("timeslotId"))
        return month_start, tallies

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="monthly_report")
    def monthly_report():
        try:
            month_start, tallies = _monthly()
        except ValidationError as e:
            return _fail(str(e), 400)
        except AggregationError as e:
            return _fail(str(e), 502)

        return jsonify(
            {
                "success": True,
                "data": {
                    "monthStart": format_iso_date(month_start),
                    "label": month_label(month_start),
                    "students": [t.as_dict() for t in tallies],
                },
            }
        )

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="monthly_report_csv")
    def monthly_report_csv():
        try:
            month_start, tallies = _monthly()
        except ValidationError as e:
            return _fail(str(e), 400)
        except AggregationError as e:
            return _fail(str(e), 502)

        filename = f"attendance_{month_start.strftime('%Y-%m')}.csv"
        return app.response_class(
            export_monthly_csv(tallies),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        data = request.get_json(silent=True) or {}
        try:
            class_id = data.get("class") or ""
            timeslot_id = data.get("timeslot") or ""
            day = _parse_date(data.get("date"), today_utc())
            marks = data.get("marks") or {}
            if not isinstance(marks, dict):
                raise ValidationError("marks must be an object of studentId -> mark")

            students = container.attendance_service.list_roster(class_id)
            record = container.attendance_service.mark_attendance(
                students, marks, class_id, timeslot_id, day, notes=data.get("notes")
            )
        except ValidationError as e:
            return _fail(str(e), 400)
        except (FetchError, WriteError) as e:
            return _fail(str(e), 502)
        except Exception:
            logger.exception("Unexpected error while saving attendance")
            return _fail("Failed to save attendance", 500)

        return jsonify(
            {
                "success": True,
                "data": {
                    "date": format_iso_date(record.day),
                    "class": record.class_id,
                    "timeslot": record.timeslot_id,
                    "totalStudents": record.total_students,
                    "presentStudents": list(record.present_ids),
                    "absentStudents": list(record.absent_ids),
                    "lateStudents": list(record.late_ids),
                    "notes": record.notes,
                },
            }
        ), 201
