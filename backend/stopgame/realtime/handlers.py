from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO

from ..game.errors import GameError
from ..game.service import RoomRegistry
from ..utils.ip import client_ip
from . import events

log = logging.getLogger(__name__)


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _reject(event: str, exc: GameError) -> dict:
    log.info("%s rejected sid=%s: %s", event, request.sid, exc)
    return {"ok": False, "error": str(exc)}


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        log.info("connect sid=%s ip=%s", request.sid, client_ip(request))

    @socketio.on(events.CREATE_ROOM)
    def create_room(data=None):
        payload = _payload(data)
        try:
            room = registry.create_room(request.sid, payload.get("name"))
        except GameError as exc:
            return _reject(events.CREATE_ROOM, exc)
        return {"ok": True, "code": room.code}

    @socketio.on(events.JOIN_ROOM)
    def join_room(data=None):
        payload = _payload(data)
        try:
            room = registry.join_room(request.sid, payload.get("code"), payload.get("name"))
        except GameError as exc:
            return _reject(events.JOIN_ROOM, exc)
        return {"ok": True, "code": room.code}

    @socketio.on(events.UPDATE_SETTINGS)
    def update_settings(data=None):
        payload = _payload(data)
        try:
            registry.update_settings(request.sid, payload.get("categories"), payload.get("roundSeconds"))
        except GameError as exc:
            return _reject(events.UPDATE_SETTINGS, exc)
        return {"ok": True}

    @socketio.on(events.START_ROUND)
    def start_round(data=None):
        try:
            registry.start_round(request.sid)
        except GameError as exc:
            return _reject(events.START_ROUND, exc)
        return {"ok": True}

    @socketio.on(events.SUBMIT_ANSWERS)
    def submit_answers(data=None):
        payload = _payload(data)
        try:
            registry.submit_answers(request.sid, payload.get("answers"))
        except GameError as exc:
            return _reject(events.SUBMIT_ANSWERS, exc)
        return {"ok": True}

    @socketio.on(events.CALL_STOP)
    def call_stop(data=None):
        try:
            registry.call_stop(request.sid)
        except GameError as exc:
            return _reject(events.CALL_STOP, exc)
        return {"ok": True}

    @socketio.on(events.LEAVE_ROOM)
    def leave_room(data=None):
        registry.leave(request.sid)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(*args):
        # A dropped connection is the same as leaving.
        left = registry.leave(request.sid)
        log.info("disconnect sid=%s left_room=%s", request.sid, left)
