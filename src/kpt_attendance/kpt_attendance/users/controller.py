from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import current_actor, login_required, payload
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session.update(s_user.to_session())

        return jsonify({"success": True, "user": s_user.to_session()})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        actor = current_actor()
        return jsonify(
            {
                "user_id": actor.id,
                "name": actor.name,
                "role": actor.role.value,
                "department": actor.department.value if actor.department else None,
            }
        )

    @app.route("/api/me/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = payload()
        container.user_service.change_password(
            current_actor(),
            new_password=data.get("new_password", ""),
            confirm_password=data.get("confirm_password", ""),
        )
        return jsonify({"success": True, "message": "Password updated successfully"})
