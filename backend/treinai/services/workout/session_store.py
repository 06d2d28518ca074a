from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging
import time

from treinai.core.config import settings
from treinai.services.workout.session import WorkoutSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    pass


@dataclass
class _Entry:
    session: WorkoutSession
    owner_id: str
    last_synced: float
    last_access: float


class WorkoutSessionStore:
    """In-process registry of live workout sessions.

    Sessions are advanced lazily: each access replays one tick per whole
    second elapsed on the monotonic clock since the previous access. Entries
    not touched for ``ttl_seconds`` are dropped.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, session: WorkoutSession, owner_id: str) -> WorkoutSession:
        self.purge_expired()
        now = self._clock()
        self._entries[session.id] = _Entry(session=session, owner_id=owner_id, last_synced=now, last_access=now)
        logger.info(f"Started session {session.id} for workout {session.workout_id}")
        return session

    def get(self, session_id: str, owner_id: str) -> WorkoutSession:
        entry = self._entries.get(session_id)
        if entry is None or entry.owner_id != owner_id:
            raise SessionNotFoundError(session_id)
        now = self._clock()
        if now - entry.last_access > self.ttl_seconds:
            self._entries.pop(session_id, None)
            raise SessionNotFoundError(session_id)
        self._sync(entry, now)
        entry.last_access = now
        return entry.session

    def find_active(self, owner_id: str, workout_id: str) -> Optional[WorkoutSession]:
        self.purge_expired()
        for entry in list(self._entries.values()):
            session = entry.session
            if entry.owner_id == owner_id and session.workout_id == workout_id and not session.is_terminal:
                return self.get(session.id, owner_id)
        return None

    def discard(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [sid for sid, e in self._entries.items() if now - e.last_access > self.ttl_seconds]
        for sid in expired:
            del self._entries[sid]
        if expired:
            logger.info(f"Dropped {len(expired)} expired workout sessions")
        return len(expired)

    @staticmethod
    def _sync(entry: _Entry, now: float) -> None:
        whole = int(now - entry.last_synced)
        if whole > 0:
            entry.session.advance(whole)
            entry.last_synced += whole


session_store = WorkoutSessionStore(ttl_seconds=settings.session_ttl_hours * 3600)
