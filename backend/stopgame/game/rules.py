from __future__ import annotations

import math
import re
from typing import Any

from .models import DEFAULT_CATEGORIES

MAX_NAME_LEN = 24
MAX_CATEGORY_LEN = 24
MAX_CATEGORIES = 8
MAX_ANSWER_LEN = 48

_WS = re.compile(r"\s+")
_CATEGORY_SPLIT = re.compile(r"[\n,]+")


def _collapse(text: str) -> str:
    return _WS.sub(" ", text.strip())


def sanitize_name(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return _collapse(raw)[:MAX_NAME_LEN].rstrip()


def sanitize_room_code(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip().upper()


def sanitize_categories(raw: Any) -> list[str]:
    """Clean a category list sent by the host.

    Accepts a list or a comma/newline separated string. Falls back to the
    default categories when nothing usable is left.
    """
    if isinstance(raw, (list, tuple)):
        values = list(raw)
    elif isinstance(raw, str):
        values = _CATEGORY_SPLIT.split(raw)
    else:
        values = []

    seen: set[str] = set()
    categories: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        clean = _collapse(value)[:MAX_CATEGORY_LEN].rstrip()
        if not clean:
            continue
        key = clean.lower()
        if key in seen:
            continue
        seen.add(key)
        categories.append(clean)
        if len(categories) >= MAX_CATEGORIES:
            break

    return categories or list(DEFAULT_CATEGORIES)


def parse_round_seconds(raw: Any, minimum: int = 20, maximum: int = 180) -> int | None:
    """Round half up to whole seconds; None when not a number in range."""
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None

    rounded = math.floor(number + 0.5)
    if rounded < minimum or rounded > maximum:
        return None
    return rounded


def clean_answer(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip()[:MAX_ANSWER_LEN].rstrip()


def normalize_answer(answer: str) -> str:
    return _WS.sub(" ", answer.strip().lower())
