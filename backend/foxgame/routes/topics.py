from __future__ import annotations

from flask import Blueprint, jsonify

from ..game.words import list_topics

bp = Blueprint("topics", __name__)


@bp.get("/topics")
def get_topics():
    return jsonify({"topics": list_topics()})
