"""Cancellable repeating tick used for timed quiz attempts."""

from __future__ import annotations

import logging
from threading import Event, Lock, Thread
from typing import Callable, Protocol

from greenpath_app.constants.quiz_constants import COUNTDOWN_TICK_SECONDS

logger = logging.getLogger(__name__)


class Countdown(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...

    def is_running(self) -> bool: ...


CountdownFactory = Callable[[Callable[[], None]], Countdown]


class ThreadCountdown:
    """Calls ``on_tick`` every ``interval`` seconds on a daemon thread until cancelled."""

    def __init__(self, on_tick: Callable[[], None], interval: float = COUNTDOWN_TICK_SECONDS) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._stop = Event()
        self._lock = Lock()
        self._thread: Thread | None = None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._thread = Thread(target=self._run, name="QuizCountdown", daemon=True)
            self._thread.start()

    def cancel(self) -> None:
        # No join: the caller may hold the lock an in-flight tick is waiting on.
        self._stop.set()

    def is_running(self) -> bool:
        return self._thread is not None and not self._stop.is_set()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Countdown tick failed; stopping countdown")
                self._stop.set()


def thread_countdown(on_tick: Callable[[], None]) -> Countdown:
    return ThreadCountdown(on_tick)
