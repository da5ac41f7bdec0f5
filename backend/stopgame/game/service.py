from __future__ import annotations

import logging
import random
import string
import time
from collections.abc import Mapping
from threading import RLock
from typing import Any, Callable

from . import errors
from .codes import generate_room_code
from .models import EndReason, Player, Room, Round, RoundResults, Settings
from .rules import (
    clean_answer,
    parse_round_seconds,
    sanitize_categories,
    sanitize_name,
    sanitize_room_code,
)
from .scoring import score_round
from .timer import RoundTimer
from .views import Broadcaster, Emitter

log = logging.getLogger(__name__)

LETTERS = string.ascii_uppercase


def now_ms() -> int:
    return int(time.time() * 1000)


class RoomRegistry:
    """All live rooms of this process and every transition applied to them.

    One re-entrant lock serializes actor events and timer fires, so a
    transition and the pushes it causes finish before the next one starts.
    Methods raise a ``GameError`` subclass before touching any state when an
    operation is rejected.
    """

    def __init__(
        self,
        emit: Emitter,
        timer: RoundTimer,
        config: Mapping[str, Any] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        config = config or {}
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}
        self._member_index: dict[str, str] = {}
        self._broadcast = Broadcaster(emit)
        self._timer = timer
        self._rng = rng or random.SystemRandom()
        self._clock = clock

        self.default_round_seconds = int(config.get("ROUND_DURATION_SEC", 60))
        self.min_round_seconds = int(config.get("MIN_ROUND_SEC", 20))
        self.max_round_seconds = int(config.get("MAX_ROUND_SEC", 180))
        self.stop_grace_sec = float(config.get("STOP_GRACE_SEC", 5))
        self.min_players = int(config.get("MIN_PLAYERS", 2))

    # -- lookups --------------------------------------------------------

    def get_room(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get(sanitize_room_code(code))

    def room_of(self, sid: str) -> Room | None:
        with self._lock:
            code = self._member_index.get(sid)
            return self._rooms.get(code) if code else None

    def list_rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def _require_room(self, sid: str) -> Room:
        room = self.room_of(sid)
        if room is None:
            raise errors.NotInRoom()
        return room

    # -- membership -----------------------------------------------------

    def create_room(self, sid: str, name: Any) -> Room:
        with self._lock:
            safe_name = sanitize_name(name)
            if not safe_name:
                raise errors.InvalidName()

            self._leave_locked(sid)

            code = generate_room_code(lambda c: c in self._rooms, self._rng)
            now = self._clock()
            room = Room(
                code=code,
                host_id=sid,
                settings=Settings(round_seconds=self.default_round_seconds),
                created_at_ms=now,
            )
            room.players[sid] = Player(id=sid, name=safe_name, joined_at_ms=now)
            self._rooms[code] = room
            self._member_index[sid] = code

            log.info("room created code=%s host=%s", code, sid)
            self._broadcast.room_state(room)
            return room

    def join_room(self, sid: str, code: Any, name: Any) -> Room:
        with self._lock:
            room_code = sanitize_room_code(code)
            if not room_code:
                raise errors.RoomNotFound("Enter a room code")

            room = self._rooms.get(room_code)
            if room is None:
                raise errors.RoomNotFound()
            if room.status == "round":
                raise errors.RoundInProgress("Round already in progress. Wait for the next round.")

            safe_name = sanitize_name(name)
            if not safe_name:
                raise errors.InvalidName()

            if self._member_index.get(sid) == room_code:
                room.players[sid].name = safe_name
                self._broadcast.room_state(room)
                return room

            self._leave_locked(sid)

            room.players[sid] = Player(id=sid, name=safe_name, joined_at_ms=self._clock())
            self._member_index[sid] = room_code

            log.info("player joined code=%s sid=%s players=%d", room_code, sid, len(room.players))
            self._broadcast.room_state(room)
            return room

    def leave(self, sid: str) -> bool:
        """Remove ``sid`` from its room. Returns False if it was in none."""
        with self._lock:
            return self._leave_locked(sid)

    def _leave_locked(self, sid: str) -> bool:
        code = self._member_index.pop(sid, None)
        if code is None:
            return False
        room = self._rooms.get(code)
        if room is None:
            return False

        room.players.pop(sid, None)
        if room.round is not None:
            room.round.submissions.pop(sid, None)

        if not room.players:
            self._destroy_locked(room)
            return True

        if room.host_id == sid:
            room.host_id = next(iter(room.players))
            log.info("host transferred code=%s host=%s", code, room.host_id)

        if room.all_submitted():
            self._end_round_locked(room, "all_submitted")
            return True

        self._broadcast.room_state(room)
        return True

    def _destroy_locked(self, room: Room) -> None:
        self._timer.cancel(room.code)
        self._rooms.pop(room.code, None)
        for pid in room.players:
            self._member_index.pop(pid, None)
        log.info("room destroyed code=%s", room.code)

    # -- host actions ---------------------------------------------------

    def update_settings(self, sid: str, categories: Any, round_seconds: Any) -> Room:
        with self._lock:
            room = self._require_room(sid)
            if room.host_id != sid:
                raise errors.NotHost("Only the host can change settings")
            if room.status == "round":
                raise errors.RoundInProgress("Wait until the round ends")

            clean_categories = sanitize_categories(categories)
            seconds = parse_round_seconds(round_seconds, self.min_round_seconds, self.max_round_seconds)
            if seconds is None:
                raise errors.InvalidSettings(
                    f"Round time must be between {self.min_round_seconds} and {self.max_round_seconds} seconds"
                )

            room.settings = Settings(categories=clean_categories, round_seconds=seconds)
            self._broadcast.room_state(room)
            return room

    def start_round(self, sid: str) -> Room:
        with self._lock:
            room = self._require_room(sid)
            if room.host_id != sid:
                raise errors.NotHost("Only the host can start rounds")
            if room.status == "round":
                raise errors.RoundInProgress("Round already running")
            if len(room.players) < self.min_players:
                raise errors.NotEnoughPlayers(f"At least {self.min_players} players are required")

            room.round_counter += 1
            room.last_results = None

            now = self._clock()
            duration = room.settings.round_seconds
            room.round = Round(
                number=room.round_counter,
                letter=self._rng.choice(LETTERS),
                started_at_ms=now,
                ends_at_ms=now + duration * 1000,
            )
            room.status = "round"

            self._timer.arm(room.code, duration, self._on_timer, room.code, "time", room.round.number)
            log.info(
                "round started code=%s round=%s letter=%s seconds=%s",
                room.code,
                room.round.number,
                room.round.letter,
                duration,
            )
            self._broadcast.room_state(room)
            return room

    # -- round actions --------------------------------------------------

    def submit_answers(self, sid: str, answers: Any) -> Room:
        with self._lock:
            room = self._require_room(sid)
            if room.status != "round" or room.round is None:
                raise errors.NoActiveRound()

            if not isinstance(answers, Mapping):
                answers = {}
            # A second submission replaces the first.
            room.round.submissions[sid] = {
                category: clean_answer(answers.get(category)) for category in room.settings.categories
            }

            self._broadcast.room_state(room)

            if room.all_submitted():
                self._end_round_locked(room, "all_submitted")
            return room

    def call_stop(self, sid: str) -> Room:
        with self._lock:
            room = self._require_room(sid)
            if room.status != "round" or room.round is None:
                raise errors.NoActiveRound()
            if room.round.stop_requested_by:
                raise errors.AlreadyStopped()

            now = self._clock()
            deadline = min(room.round.ends_at_ms, now + int(self.stop_grace_sec * 1000))
            room.round.stop_requested_by = sid
            room.round.ends_at_ms = deadline

            self._timer.arm(room.code, (deadline - now) / 1000, self._on_timer, room.code, "stop", room.round.number)
            log.info("stop called code=%s round=%s by=%s", room.code, room.round.number, sid)
            self._broadcast.room_state(room)
            return room

    # -- round end ------------------------------------------------------

    def end_round(self, code: str, reason: EndReason, round_number: int | None = None) -> RoundResults | None:
        """End the current round of ``code``; a no-op unless one is running.

        With ``round_number`` the call is also a no-op once that round is over,
        which keeps a late timer from ending a newer round.
        """
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                return None
            if round_number is not None and (room.round is None or room.round.number != round_number):
                return None
            return self._end_round_locked(room, reason)

    def _on_timer(self, code: str, reason: EndReason, round_number: int) -> None:
        if self.end_round(code, reason, round_number) is None:
            log.debug("timer fired for finished round code=%s round=%s", code, round_number)

    def _end_round_locked(self, room: Room, reason: EndReason) -> RoundResults | None:
        if room.status != "round" or room.round is None:
            return None

        self._timer.cancel(room.code)

        current = room.round
        categories = list(room.settings.categories)
        scored = score_round(categories, current.letter, room.players.values(), current.submissions)
        for result in scored:
            room.players[result.id].score = result.total_score

        results = RoundResults(
            round_number=current.number,
            letter=current.letter,
            reason=reason,
            categories=tuple(categories),
            players=tuple(scored),
            generated_at_ms=self._clock(),
        )
        room.last_results = results
        room.round = None
        room.status = "results"

        log.info("round ended code=%s round=%s reason=%s", room.code, results.round_number, reason)
        self._broadcast.round_results(room, results)
        self._broadcast.room_state(room)
        return results

    # -- lifecycle ------------------------------------------------------

    def shutdown(self) -> None:
        with self._lock:
            self._timer.shutdown()
            self._rooms.clear()
            self._member_index.clear()
        log.info("room registry shut down")
