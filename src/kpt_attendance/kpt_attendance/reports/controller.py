from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, login_required
from ..container import Container
from .export import report_filename, report_to_csv, report_to_xlsx
from .model import AttendanceReport

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    svc = container.report_service

    def _build() -> AttendanceReport:
        return svc.build_report(
            current_actor(),
            branch=request.args.get("branch", ""),
            semester=request.args.get("semester", "1"),
            search=request.args.get("search", ""),
        )

    def _download(body: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports", methods=["GET"], endpoint="reports_view")
    @login_required
    def reports_view():
        report = _build()
        return jsonify(
            {
                "branch": report.branch.value,
                "semester": report.semester,
                "rows": [
                    {
                        "studentId": r.student_id,
                        "rollNumber": r.roll_number,
                        "regNumber": r.reg_number,
                        "name": r.name,
                        "totalClasses": r.total_classes,
                        "present": r.present,
                        "percentage": round(r.percentage, 2),
                        "status": r.status.value,
                    }
                    for r in report.rows
                ],
            }
        )

    @app.route("/api/reports.csv", methods=["GET"], endpoint="reports_csv")
    @login_required
    def reports_csv():
        report = _build()
        filename = report_filename(report, prefix=container.report_file_prefix)
        return _download(report_to_csv(report), mimetype="text/csv", filename=filename)

    @app.route("/api/reports.xlsx", methods=["GET"], endpoint="reports_xlsx")
    @login_required
    def reports_xlsx():
        report = _build()
        filename = report_filename(report, prefix=container.report_file_prefix, ext="xlsx")
        return _download(report_to_xlsx(report), mimetype=XLSX_MIMETYPE, filename=filename)

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        stats = svc.dashboard_stats(current_actor())
        return jsonify(
            {
                "total": stats.total_students,
                "present": stats.present_today,
                "absent": stats.absent_today,
                "defaulters": stats.defaulters,
                "branches": stats.branch_counts,
            }
        )
