from __future__ import annotations

import logging
from typing import Any, Callable

from .models import Room, RoundResults
from ..realtime import events

log = logging.getLogger(__name__)

# emit(event, payload, sid)
Emitter = Callable[[str, dict, str], Any]


def room_view(room: Room, viewer_id: str | None = None) -> dict:
    """Room state as one member sees it.

    Submissions are reduced to the ids of who has submitted; answer text
    never leaves the server before the round ends.
    """
    players = [
        {
            "id": p.id,
            "name": p.name,
            "score": p.score,
            "isHost": p.id == room.host_id,
        }
        for p in room.players.values()
    ]
    players.sort(key=lambda p: (-p["score"], p["name"]))

    round_payload = None
    if room.round is not None:
        round_payload = {
            "number": room.round.number,
            "letter": room.round.letter,
            "startedAt": room.round.started_at_ms,
            "endsAt": room.round.ends_at_ms,
            "stopRequestedBy": room.round.stop_requested_by,
            "submittedPlayerIds": list(room.round.submissions.keys()),
        }

    return {
        "code": room.code,
        "me": viewer_id,
        "hostId": room.host_id,
        "status": room.status,
        "settings": {
            "categories": list(room.settings.categories),
            "roundSeconds": room.settings.round_seconds,
        },
        "players": players,
        "round": round_payload,
        "lastResults": room.last_results.to_dict() if room.last_results else None,
    }


def room_summary(room: Room) -> dict:
    return {
        "code": room.code,
        "status": room.status,
        "playerCount": len(room.players),
        "joinable": room.status != "round",
    }


class Broadcaster:
    def __init__(self, emit: Emitter):
        self._emit = emit

    def room_state(self, room: Room) -> None:
        for pid in list(room.players.keys()):
            self._emit(events.ROOM_STATE, room_view(room, pid), pid)

    def round_results(self, room: Room, results: RoundResults) -> None:
        payload = results.to_dict()
        for pid in list(room.players.keys()):
            self._emit(events.ROUND_RESULTS, payload, pid)
        log.debug("round_results room=%s round=%s sent to %d", room.code, results.round_number, len(room.players))
