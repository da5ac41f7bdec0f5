from __future__ import annotations

import random
from typing import Callable

# No 0/O or 1/I so codes survive being read aloud or typed from a screen.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 5


def generate_room_code(
    is_taken: Callable[[str], bool],
    rng: random.Random | None = None,
) -> str:
    rng = rng or random.SystemRandom()
    while True:
        code = "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        if not is_taken(code):
            return code
