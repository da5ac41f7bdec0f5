from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from .models import CategoryScore, Player, PlayerResult
from .rules import normalize_answer

UNIQUE_POINTS = 10
SHARED_POINTS = 5


def is_valid_answer(normalized: str, letter: str) -> bool:
    return bool(normalized) and normalized[0].upper() == letter


def score_round(
    categories: Iterable[str],
    letter: str,
    players: Iterable[Player],
    submissions: Mapping[str, Mapping[str, str]],
) -> list[PlayerResult]:
    """Score one round without mutating anything.

    ``total_score`` on each result is the player's current score plus the
    points earned this round. Results are ordered by total desc, round points
    desc, then name and id asc.
    """
    categories = list(categories)
    players = list(players)

    prepared: dict[str, dict[str, tuple[str, str, bool]]] = {}
    frequency: dict[str, Counter] = {c: Counter() for c in categories}

    for player in players:
        submitted = submissions.get(player.id) or {}
        answers = {}
        for category in categories:
            raw = submitted.get(category)
            raw = raw.strip() if isinstance(raw, str) else ""
            normalized = normalize_answer(raw)
            valid = is_valid_answer(normalized, letter)
            answers[category] = (raw, normalized, valid)
            if valid:
                frequency[category][normalized] += 1
        prepared[player.id] = answers

    results: list[PlayerResult] = []
    for player in players:
        breakdown: dict[str, CategoryScore] = {}
        round_points = 0
        for category in categories:
            raw, normalized, valid = prepared[player.id][category]
            points = 0
            if valid:
                points = UNIQUE_POINTS if frequency[category][normalized] == 1 else SHARED_POINTS
            round_points += points
            breakdown[category] = CategoryScore(
                answer=raw, normalized=normalized, valid=valid, points=points
            )

        results.append(
            PlayerResult(
                id=player.id,
                name=player.name,
                round_points=round_points,
                total_score=player.score + round_points,
                categories=breakdown,
            )
        )

    results.sort(key=lambda r: (-r.total_score, -r.round_points, r.name, r.id))
    return results
