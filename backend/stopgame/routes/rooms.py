from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game.views import room_summary

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    room = current_app.extensions["stopgame"].get_room(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(room_summary(room))
