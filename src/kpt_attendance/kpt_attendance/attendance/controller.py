from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, login_required, payload
from ..container import Container
from ..core.enums import MarkStatus, RosterSort
from ..core.exceptions import ValidationError
from ..store.codec import assignment_to_dict, attendance_to_dict, student_to_dict
from .model import AttendanceSession


def _session_json(s: AttendanceSession) -> dict:
    return {
        "branch": s.branch.value,
        "semester": s.semester,
        "subject": s.subject,
        "date": s.date.isoformat(),
        "roster": [student_to_dict(st) for st in s.roster],
        "marks": {k: v.value for k, v in s.marks.items()},
        "stats": s.counts(),
    }


def _apply_marks(s: AttendanceSession, marks: dict) -> None:
    for student_id, status in (marks or {}).items():
        try:
            s.mark(student_id, MarkStatus(status))
        except KeyError:
            raise ValidationError(f"Student {student_id} is not in this session")
        except ValueError:
            raise ValidationError(f"Invalid mark {status!r}; use P or A")


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _sort_arg(value) -> RosterSort:
        try:
            return RosterSort(value or RosterSort.NAME.value)
        except ValueError:
            raise ValidationError("Sort must be 'name' or 'reg'")

    @app.route("/api/attendance/assignments", methods=["GET"], endpoint="attendance_assignments")
    @login_required
    def attendance_assignments():
        return jsonify({"assignments": [assignment_to_dict(a) for a in svc.assignments_for(current_actor())]})

    @app.route("/api/attendance/session", methods=["GET"], endpoint="attendance_session_start")
    @login_required
    def attendance_session_start():
        s = svc.start_session(
            current_actor(),
            branch=request.args.get("branch", ""),
            semester=request.args.get("semester", ""),
            subject=request.args.get("subject", ""),
            sort=_sort_arg(request.args.get("sort")),
        )
        return jsonify(_session_json(s))

    @app.route("/api/attendance/session", methods=["POST"], endpoint="attendance_session_save")
    @login_required
    def attendance_session_save():
        """Save marks for a new session, or for the session of `record_id` when editing."""

        data = payload()
        actor = current_actor()
        if data.get("record_id"):
            s = svc.edit_session(actor, str(data["record_id"]))
        else:
            s = svc.start_session(
                actor,
                branch=data.get("branch", ""),
                semester=data.get("semester", ""),
                subject=data.get("subject", ""),
            )
        _apply_marks(s, data.get("marks") or {})
        records = svc.save_session(actor, s)
        return jsonify({"success": True, "message": "Attendance saved successfully!", "saved": len(records)})

    @app.route("/api/attendance/records/<record_id>/session", methods=["GET"], endpoint="attendance_session_edit")
    @login_required
    def attendance_session_edit(record_id: str):
        s = svc.edit_session(current_actor(), record_id, sort=_sort_arg(request.args.get("sort")))
        return jsonify(_session_json(s))

    @app.route("/api/attendance/recent", methods=["GET"], endpoint="attendance_recent")
    @login_required
    def attendance_recent():
        return jsonify({"records": [attendance_to_dict(r) for r in svc.recent_records(current_actor())]})
