from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    coordinator = current_app.extensions["foxgame"]
    return jsonify({"ok": True, "rooms": coordinator.room_count()})
