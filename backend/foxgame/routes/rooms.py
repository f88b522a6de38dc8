from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms")
def list_public_rooms():
    coordinator = current_app.extensions["foxgame"]
    return jsonify({"rooms": coordinator.public_rooms()})


@bp.get("/rooms/<code>")
def get_room(code: str):
    summary = current_app.extensions["foxgame"].room_summary(code)
    if summary is None:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(summary)
