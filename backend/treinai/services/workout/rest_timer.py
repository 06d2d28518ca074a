"""
Rest countdown between sets.

The timer is a pure countdown: callers drive it with ``tick()`` once per
second and it reports every new remaining value to its subscribers and its
completion exactly once to ``on_complete`` listeners. Audible alerts are a
subscriber (``RestAlert``) layered on top, so nothing here depends on audio.
"""

from typing import Callable, List, Optional
import logging

logger = logging.getLogger(__name__)

ALERT_SECONDS = frozenset({3, 2, 1, 0})


class RestTimer:
    def __init__(self, on_complete: Optional[Callable[[], None]] = None):
        self.duration = 0
        self.remaining = 0
        self.running = False
        self.completed = False
        self._tick_listeners: List[Callable[[int], None]] = []
        self._complete_listeners: List[Callable[[], None]] = []
        if on_complete:
            self._complete_listeners.append(on_complete)

    def subscribe(self, listener: Callable[[int], None]) -> None:
        """Register a listener called with each new remaining value"""
        self._tick_listeners.append(listener)

    def on_complete(self, listener: Callable[[], None]) -> None:
        self._complete_listeners.append(listener)

    def start(self, duration: int) -> None:
        # Negative durations are clamped to zero rather than rejected
        if duration < 0:
            logger.warning(f"Negative rest duration {duration}s clamped to 0")
            duration = 0
        self.duration = int(duration)
        self._restart()

    def tick(self) -> None:
        if not self.running or self.completed:
            return
        self.remaining = max(0, self.remaining - 1)
        self._notify(self.remaining)
        if self.remaining == 0:
            self._complete()

    def toggle(self) -> None:
        """Pause or resume without touching the remaining time"""
        if self.completed:
            return
        self.running = not self.running

    def reset(self) -> None:
        self._restart()

    def skip(self) -> None:
        """Complete immediately regardless of the remaining time"""
        if self.completed:
            return
        self._complete()

    @property
    def progress_percent(self) -> float:
        if self.duration <= 0:
            return 100.0
        return (self.duration - self.remaining) / self.duration * 100

    def _restart(self) -> None:
        self.remaining = self.duration
        self.running = True
        self.completed = False
        self._notify(self.remaining)
        if self.remaining == 0:
            self._complete()

    def _notify(self, remaining: int) -> None:
        for listener in list(self._tick_listeners):
            listener(remaining)

    def _complete(self) -> None:
        self.running = False
        self.completed = True
        for listener in list(self._complete_listeners):
            listener()


class RestAlert:
    """Plays an alert on the last seconds of a countdown.

    ``player`` is whatever produces the sound; a failing player is logged and
    ignored so the countdown itself is never affected.
    """

    def __init__(self, player: Callable[[int], None], enabled: bool = True):
        self.player = player
        self.enabled = enabled

    def __call__(self, remaining: int) -> None:
        if not self.enabled or remaining not in ALERT_SECONDS:
            return
        try:
            self.player(remaining)
        except Exception as e:
            logger.warning(f"Rest alert failed at {remaining}s: {e}")

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled
