from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activity", methods=["GET"], endpoint="activity_list")
    @login_required
    def activity_list():
        entries = container.audit_service.recent(current_actor(), limit=request.args.get("limit", 100, type=int))
        return jsonify(
            {
                "activity": [
                    {"timestamp": e.timestamp.isoformat(), "user": e.user, "action": e.action} for e in entries
                ]
            }
        )
