"""Validation errors raised by room operations.

Every error is recoverable and reported only to the actor that caused it.
The message of each instance is what the client shows.
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for all rejected room operations."""

    code = "game_error"
    default_message = "Request rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NotInRoom(GameError):
    code = "not_in_room"
    default_message = "Join a room first"


class RoomNotFound(GameError):
    code = "room_not_found"
    default_message = "Room not found"


class InvalidName(GameError):
    code = "invalid_name"
    default_message = "Enter a player name first"


class InvalidSettings(GameError):
    code = "invalid_settings"
    default_message = "Round time must be between 20 and 180 seconds"


class RoundInProgress(GameError):
    code = "round_in_progress"
    default_message = "Round already in progress"


class NotHost(GameError):
    code = "not_host"
    default_message = "Only the host can do that"


class NotEnoughPlayers(GameError):
    code = "not_enough_players"
    default_message = "At least 2 players are required"


class NoActiveRound(GameError):
    code = "no_active_round"
    default_message = "No active round"


class AlreadyStopped(GameError):
    code = "already_stopped"
    default_message = "STOP already called"
