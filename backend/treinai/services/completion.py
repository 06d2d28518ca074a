"""
Workout completion: records a finished workout and performs the day's
check-in, returning the authoritative streak/XP state.

The database work runs in a worker thread on its own session, so it is
never tied to the lifetime of the request that started it. A workout
session is recorded at most once: repeating the call with the same
``session_id`` returns the current state without writing again.
"""

from datetime import date, datetime, timezone
from typing import Callable, List, Optional
import asyncio
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from treinai.db.base import SessionLocal
from treinai.models.coaching import Student
from treinai.models.workout import Workout, WorkoutHistory
from treinai.services.gamification import CheckInService, GamificationState

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    pass


class WorkoutCompletionService:
    def __init__(
        self,
        student_id: str,
        session_factory: Callable[[], Session] = SessionLocal,
        today: Callable[[], date] = date.today,
    ):
        self.student_id = student_id
        self._session_factory = session_factory
        self._today = today

    async def complete_workout(
        self,
        workout_id: str,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> GamificationState:
        return await asyncio.to_thread(self._complete, workout_id, duration_minutes, notes, session_id)

    def _complete(
        self,
        workout_id: str,
        duration_minutes: Optional[int],
        notes: Optional[str],
        session_id: Optional[str],
    ) -> GamificationState:
        db = self._session_factory()
        try:
            return self._record(db, workout_id, duration_minutes, notes, session_id)
        finally:
            db.close()

    def _already_recorded(self, db: Session, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        return db.query(WorkoutHistory.id).filter(WorkoutHistory.session_id == session_id).first() is not None

    def _record(
        self,
        db: Session,
        workout_id: str,
        duration_minutes: Optional[int],
        notes: Optional[str],
        session_id: Optional[str],
    ) -> GamificationState:
        workout = db.query(Workout).filter(
            Workout.id == workout_id, Workout.student_id == self.student_id
        ).first()
        if not workout:
            raise CompletionError("Workout not found")

        if self._already_recorded(db, session_id):
            logger.info(f"Session {session_id} already recorded; returning current state")
            return CheckInService(db).get_state(self.student_id)

        student = db.query(Student).filter(Student.id == self.student_id).first()
        if not student:
            raise CompletionError("Student not found")

        now = datetime.now(timezone.utc)
        try:
            db.add(WorkoutHistory(
                workout_id=workout.id,
                student_id=student.id,
                session_id=session_id,
                completed_at=now,
                duration_minutes=duration_minutes or None,
                notes=notes or None,
            ))
            student.last_workout_at = now
            db.add(student)
            state = CheckInService(db).increment_streak(student.id, self._today(), commit=False)
            db.commit()
        except IntegrityError:
            # Lost a race with another writer for the same session
            db.rollback()
            if self._already_recorded(db, session_id):
                return CheckInService(db).get_state(self.student_id)
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error completing workout {workout_id} for student {self.student_id}: {e}")
            raise

        logger.info(f"Workout {workout_id} completed by student {self.student_id} ({duration_minutes} min)")
        return state

    def history(self, limit: Optional[int] = None) -> List[WorkoutHistory]:
        db = self._session_factory()
        try:
            query = (
                db.query(WorkoutHistory)
                .options(selectinload(WorkoutHistory.workout))
                .filter(WorkoutHistory.student_id == self.student_id)
                .order_by(WorkoutHistory.completed_at.desc())
            )
            if limit:
                query = query.limit(limit)
            return query.all()
        finally:
            db.close()
