from __future__ import annotations

import itertools
import logging
from threading import Lock
from typing import Any, Callable

log = logging.getLogger(__name__)


class RoundTimer:
    """One pending delayed callback per room.

    Runs on Flask-SocketIO background tasks: ``start_task`` is
    ``socketio.start_background_task`` and ``sleep`` is ``socketio.sleep``,
    so the same code works under eventlet and threading. Tasks cannot be
    killed, so each arm gets a token and the task sleeps in steps of
    ``poll_interval``; once its token is no longer current for the room it
    returns without calling back.
    """

    def __init__(
        self,
        start_task: Callable[..., Any],
        sleep: Callable[[float], Any],
        poll_interval: float = 0.5,
    ):
        self._start_task = start_task
        self._sleep = sleep
        self.poll_interval = poll_interval
        self._lock = Lock()
        self._tokens: dict[str, int] = {}
        self._seq = itertools.count(1)

    def arm(self, key: str, delay_sec: float, callback: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            token = next(self._seq)
            self._tokens[key] = token
        log.debug("timer armed key=%s delay=%.2fs token=%s", key, delay_sec, token)
        self._start_task(self._run, key, token, max(0.0, delay_sec), callback, args)

    def cancel(self, key: str) -> bool:
        with self._lock:
            return self._tokens.pop(key, None) is not None

    def is_armed(self, key: str) -> bool:
        with self._lock:
            return key in self._tokens

    def shutdown(self) -> None:
        with self._lock:
            self._tokens.clear()

    def _current(self, key: str, token: int) -> bool:
        with self._lock:
            return self._tokens.get(key) == token

    def _run(self, key: str, token: int, delay_sec: float, callback: Callable[..., Any], args: tuple) -> None:
        remaining = delay_sec
        while remaining > 0:
            step = min(self.poll_interval, remaining)
            self._sleep(step)
            remaining -= step
            if not self._current(key, token):
                log.debug("timer dropped key=%s token=%s", key, token)
                return

        with self._lock:
            if self._tokens.get(key) != token:
                log.debug("timer dropped key=%s token=%s", key, token)
                return
            del self._tokens[key]

        log.debug("timer fire key=%s token=%s", key, token)
        try:
            callback(*args)
        except Exception:
            log.exception("timer callback failed key=%s", key)
