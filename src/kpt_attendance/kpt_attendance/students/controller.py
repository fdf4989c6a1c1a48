from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, login_required, payload
from ..container import Container
from ..store.codec import student_to_dict


def register(app: Flask, container: Container) -> None:
    svc = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @login_required
    def students_list():
        students = svc.list_active(current_actor(), search=request.args.get("search", ""))
        return jsonify({"students": [student_to_dict(s) for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @login_required
    def students_create():
        data = payload()
        student = svc.create(
            current_actor(),
            name=data.get("name", ""),
            reg_number=data.get("regNumber", ""),
            branch=data.get("branch", ""),
            semester=data.get("semester", 1),
            section=data.get("section", ""),
            roll_number=data.get("rollNumber", ""),
        )
        return jsonify({"success": True, "student": student_to_dict(student)}), 201

    @app.route("/api/students/<student_id>", methods=["PUT", "PATCH"], endpoint="students_update")
    @login_required
    def students_update(student_id: str):
        data = payload()
        student = svc.update(
            current_actor(),
            student_id,
            name=data.get("name"),
            roll_number=data.get("rollNumber"),
            reg_number=data.get("regNumber"),
            branch=data.get("branch"),
            semester=data.get("semester"),
            section=data.get("section"),
        )
        return jsonify({"success": True, "student": student_to_dict(student)})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @login_required
    def students_delete(student_id: str):
        svc.delete(current_actor(), student_id)
        return jsonify({"success": True})

    @app.route("/api/students/import", methods=["POST"], endpoint="students_import")
    @login_required
    def students_import():
        upload = request.files.get("file")
        if upload is not None:
            text = upload.read().decode("utf-8-sig")
        else:
            text = payload().get("text", "")

        result = svc.bulk_import(current_actor(), text)
        return jsonify({"success": True, "created": result.created, "errors": result.errors})
