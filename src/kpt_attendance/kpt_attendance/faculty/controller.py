from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, login_required, payload
from ..container import Container
from ..store.codec import assignment_to_dict, faculty_to_dict


def register(app: Flask, container: Container) -> None:
    svc = container.faculty_service

    @app.route("/api/faculty", methods=["GET"], endpoint="faculty_list")
    @login_required
    def faculty_list():
        faculty = svc.list_visible(current_actor(), search=request.args.get("search", ""))
        return jsonify(
            {
                "faculty": [
                    {**faculty_to_dict(f), "assignments": [assignment_to_dict(a) for a in svc.assignments_for(f.id)]}
                    for f in faculty
                ]
            }
        )

    @app.route("/api/faculty", methods=["POST"], endpoint="faculty_create")
    @login_required
    def faculty_create():
        data = payload()
        fac = svc.add_faculty(
            current_actor(),
            name=data.get("name", ""),
            employee_id=data.get("employeeId", ""),
            department=data.get("department", ""),
        )
        return jsonify({"success": True, "faculty": faculty_to_dict(fac)}), 201

    @app.route("/api/faculty/<faculty_id>", methods=["DELETE"], endpoint="faculty_delete")
    @login_required
    def faculty_delete(faculty_id: str):
        svc.delete_faculty(current_actor(), faculty_id)
        return jsonify({"success": True})

    @app.route("/api/faculty/<faculty_id>/assignments", methods=["POST"], endpoint="assignment_create")
    @login_required
    def assignment_create(faculty_id: str):
        data = payload()
        asgn = svc.assign_class(
            current_actor(),
            faculty_id,
            branch=data.get("branch", ""),
            semester=data.get("semester", ""),
            subject=data.get("subject", ""),
        )
        return jsonify({"success": True, "assignment": assignment_to_dict(asgn)}), 201

    @app.route("/api/assignments/<assignment_id>", methods=["DELETE"], endpoint="assignment_delete")
    @login_required
    def assignment_delete(assignment_id: str):
        svc.remove_assignment(current_actor(), assignment_id)
        return jsonify({"success": True})

    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    @login_required
    def subjects_list():
        return jsonify({"subjects": svc.list_subjects()})
