from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


RoomStatus = Literal["lobby", "round", "results"]
EndReason = Literal["time", "stop", "all_submitted"]

DEFAULT_CATEGORIES = ("Name", "Country", "Animal", "Food", "Color")
DEFAULT_ROUND_SECONDS = 60


@dataclass
class Player:
    id: str
    name: str
    score: int = 0
    joined_at_ms: int = 0


@dataclass
class Settings:
    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    round_seconds: int = DEFAULT_ROUND_SECONDS


@dataclass
class Round:
    number: int
    letter: str
    started_at_ms: int
    ends_at_ms: int
    # player id -> {category -> cleaned answer}
    submissions: dict[str, dict[str, str]] = field(default_factory=dict)
    stop_requested_by: str | None = None


@dataclass(frozen=True)
class CategoryScore:
    answer: str
    normalized: str
    valid: bool
    points: int

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "normalized": self.normalized,
            "valid": self.valid,
            "points": self.points,
        }


@dataclass(frozen=True)
class PlayerResult:
    id: str
    name: str
    round_points: int
    total_score: int
    categories: dict[str, CategoryScore]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "roundPoints": self.round_points,
            "totalScore": self.total_score,
            "categories": {c: s.to_dict() for c, s in self.categories.items()},
        }


@dataclass(frozen=True)
class RoundResults:
    round_number: int
    letter: str
    reason: EndReason
    categories: tuple[str, ...]
    players: tuple[PlayerResult, ...]
    generated_at_ms: int

    def to_dict(self) -> dict:
        return {
            "roundNumber": self.round_number,
            "letter": self.letter,
            "reason": self.reason,
            "categories": list(self.categories),
            "players": [p.to_dict() for p in self.players],
            "generatedAt": self.generated_at_ms,
        }


@dataclass
class Room:
    code: str
    host_id: str
    status: RoomStatus = "lobby"
    settings: Settings = field(default_factory=Settings)
    # Insertion order is join order; host reassignment relies on it.
    players: dict[str, Player] = field(default_factory=dict)
    round_counter: int = 0
    round: Round | None = None
    last_results: RoundResults | None = None
    created_at_ms: int = 0

    def all_submitted(self) -> bool:
        if self.status != "round" or self.round is None or not self.players:
            return False
        return all(pid in self.round.submissions for pid in self.players)
