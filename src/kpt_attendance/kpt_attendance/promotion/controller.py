from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_actor, login_required, payload
from ..container import Container
from ..store.codec import student_to_dict
from .model import PromotionLog


def _log_summary(log: PromotionLog) -> dict:
    # Snapshots stay server-side.
    return {
        "id": log.id,
        "date": log.date.isoformat(),
        "performedBy": log.performed_by,
        "type": log.type.value,
        "studentCount": log.student_count,
        "advancedCount": log.advanced_count,
        "archivedCount": log.archived_count,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.promotion_service

    @app.route("/api/promotion", methods=["POST"], endpoint="promotion_run")
    @login_required
    def promotion_run():
        log = svc.promote(current_actor(), payload().get("cycle", ""))
        return jsonify(
            {
                "success": True,
                "message": f"Successfully promoted {log.student_count} students!",
                "log": _log_summary(log),
            }
        )

    @app.route("/api/promotion/logs", methods=["GET"], endpoint="promotion_logs")
    @login_required
    def promotion_logs():
        return jsonify({"logs": [_log_summary(log) for log in svc.list_logs(current_actor())]})

    @app.route("/api/promotion/logs/<log_id>/undo", methods=["POST"], endpoint="promotion_undo")
    @login_required
    def promotion_undo(log_id: str):
        svc.undo(current_actor(), log_id)
        return jsonify({"success": True, "message": "Promotion undone"})

    @app.route("/api/archive", methods=["GET"], endpoint="archive_list")
    @login_required
    def archive_list():
        return jsonify({"students": [student_to_dict(s) for s in svc.list_archived(current_actor())]})

    @app.route("/api/archive/<student_id>/restore", methods=["POST"], endpoint="archive_restore")
    @login_required
    def archive_restore(student_id: str):
        student = svc.restore(current_actor(), student_id)
        return jsonify({"success": True, "student": student_to_dict(student)})

    @app.route("/api/archive/<student_id>", methods=["DELETE"], endpoint="archive_delete")
    @login_required
    def archive_delete(student_id: str):
        svc.delete_permanently(current_actor(), student_id)
        return jsonify({"success": True})

    @app.route("/api/archive", methods=["DELETE"], endpoint="archive_clear")
    @login_required
    def archive_clear():
        removed = svc.clear_all(current_actor())
        return jsonify({"success": True, "removed": removed})
