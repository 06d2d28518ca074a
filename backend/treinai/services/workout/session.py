"""
Workout session runtime.

One ``WorkoutSession`` is one attempt at a workout. It owns the per-exercise
progress, the elapsed-time counter and at most one rest countdown, and moves
between browsing the exercise list, performing one exercise, resting, and
the terminal finished/closed states. Time only advances through ``tick()``;
the caller decides how ticks map to wall-clock seconds.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence
import asyncio
import logging
import uuid

from treinai.services.workout.exercise_detail import (
    DEMO_UNAVAILABLE,
    INSTRUCTIONS_UNAVAILABLE,
    DetailView,
    ExerciseDetailController,
    SetOutcome,
)
from treinai.services.workout.progress import (
    SessionProgress,
    all_exercises_complete,
    completed_exercises_count,
    progress_percent,
    total_sets,
    total_sets_completed,
)
from treinai.services.workout.rest_timer import RestAlert, RestTimer
from treinai.services.workout.types import PlannedExercise, format_clock

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    browsing = "browsing"
    exercise_open = "exercise_open"
    resting = "resting"
    finished = "finished"
    closed = "closed"


class SessionStateError(Exception):
    """Requested action is not valid in the session's current state"""


class FinalizeInProgressError(SessionStateError):
    """A finish call for this session is already in flight"""


class SessionFinalizeError(Exception):
    """The completion collaborator failed; the session can be finished again"""


class EmptyWorkoutError(ValueError):
    """The workout has no exercises to perform"""


class UnknownExerciseError(LookupError):
    pass


class CompletionCollaborator(Protocol):
    async def complete_workout(
        self,
        workout_id: str,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> Any:
        ...


class WorkoutSession:
    def __init__(
        self,
        workout_id: str,
        workout_name: str,
        exercises: Sequence[PlannedExercise],
        pause_rest_with_workout: bool = False,
        alert_player: Optional[Callable[[int], None]] = None,
        session_id: Optional[str] = None,
    ):
        if not exercises:
            raise EmptyWorkoutError("This workout has no exercises yet")

        self.id = session_id or str(uuid.uuid4())
        self.workout_id = workout_id
        self.workout_name = workout_name
        self.exercises = tuple(sorted(exercises, key=lambda ex: ex.order_index))
        self.pause_rest_with_workout = pause_rest_with_workout

        self.progress = SessionProgress(self.exercises)
        self.elapsed_seconds = 0
        self.paused = False

        self.pending_alerts: List[int] = []
        self.rest_alert = RestAlert(alert_player or self.pending_alerts.append)

        self._detail: Optional[ExerciseDetailController] = None
        self._rest: Optional[RestTimer] = None
        self._rest_exercise_id: Optional[str] = None

        self._finalizing = False
        self._finished = False
        self._closed = False
        self.last_finalize_error: Optional[str] = None
        self.finish_result: Any = None
        self.summary: Optional[Dict[str, Any]] = None

    # ----- State -----

    @property
    def state(self) -> SessionState:
        if self._closed:
            return SessionState.closed
        if self._finished:
            return SessionState.finished
        if self._rest is not None:
            return SessionState.resting
        if self._detail is not None:
            return SessionState.exercise_open
        return SessionState.browsing

    @property
    def is_terminal(self) -> bool:
        return self._finished or self._closed

    @property
    def finalizing(self) -> bool:
        return self._finalizing

    @property
    def detail(self) -> Optional[ExerciseDetailController]:
        return self._detail

    @property
    def rest(self) -> Optional[RestTimer]:
        return self._rest

    @property
    def rest_exercise_id(self) -> Optional[str]:
        return self._rest_exercise_id

    def exercise(self, exercise_id: str) -> PlannedExercise:
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        raise UnknownExerciseError(exercise_id)

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise SessionStateError(f"Session is {self.state.value}; expected {allowed}")

    # ----- Aggregates -----

    @property
    def completed_exercises_count(self) -> int:
        return completed_exercises_count(self.exercises, self.progress.as_dict())

    @property
    def total_sets_completed(self) -> int:
        return total_sets_completed(self.exercises, self.progress.as_dict())

    @property
    def total_sets(self) -> int:
        return total_sets(self.exercises)

    @property
    def progress_percent(self) -> float:
        return progress_percent(self.exercises, self.progress.as_dict())

    @property
    def all_exercises_complete(self) -> bool:
        return all_exercises_complete(self.exercises, self.progress.as_dict())

    @property
    def can_finish(self) -> bool:
        return (
            self.state == SessionState.browsing
            and self.all_exercises_complete
            and not self._finalizing
        )

    @property
    def duration_minutes(self) -> Optional[int]:
        return round(self.elapsed_seconds / 60) or None

    # ----- Exercise detail -----

    def open_exercise(self, exercise_id: str) -> ExerciseDetailController:
        """Open any exercise, complete or not, from the list"""
        if self._finalizing:
            raise FinalizeInProgressError("Workout is being finished")
        self._require(SessionState.browsing)
        exercise = self.exercise(exercise_id)
        self._detail = ExerciseDetailController(
            exercise,
            current_set=lambda: self.progress.completed(exercise.id),
            on_complete_set=lambda: self.progress.record_set(exercise.id),
            on_start_rest=lambda seconds: self._start_rest(exercise.id, seconds),
            on_close=self._close_detail,
        )
        logger.debug(f"Session {self.id}: opened exercise {exercise_id}")
        return self._detail

    def close_exercise(self) -> None:
        if self._detail is None or self.is_terminal:
            raise SessionStateError("No exercise is open")
        self._detail.close()

    def _close_detail(self) -> None:
        self._detail = None

    def show_view(self, view: DetailView) -> None:
        if self._detail is None or self.is_terminal:
            raise SessionStateError("No exercise is open")
        self._detail.show(view)

    def complete_set(self) -> SetOutcome:
        self._require(SessionState.exercise_open)
        return self._detail.complete_set()

    # ----- Rest -----

    def _start_rest(self, exercise_id: str, seconds: int) -> None:
        timer = RestTimer(on_complete=self._end_rest)
        timer.subscribe(self.rest_alert)
        self._rest = timer
        self._rest_exercise_id = exercise_id
        timer.start(seconds)

    def _end_rest(self) -> None:
        # Expiry and skip both just dismiss the overlay; an open detail stays open
        self._rest = None
        self._rest_exercise_id = None

    def skip_rest(self) -> None:
        self._require(SessionState.resting)
        self._rest.skip()

    def toggle_rest(self) -> bool:
        self._require(SessionState.resting)
        self._rest.toggle()
        return self._rest.running

    def reset_rest(self) -> None:
        self._require(SessionState.resting)
        self._rest.reset()

    def toggle_sound(self) -> bool:
        return self.rest_alert.toggle()

    def drain_alerts(self) -> List[int]:
        alerts = list(self.pending_alerts)
        self.pending_alerts.clear()
        return alerts

    # ----- Clock -----

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> bool:
        if self.is_terminal:
            raise SessionStateError(f"Session is {self.state.value}")
        self.paused = not self.paused
        return self.paused

    def tick(self) -> None:
        if self.is_terminal:
            return
        if not self.paused:
            self.elapsed_seconds += 1
        if self._rest is not None and not (self.paused and self.pause_rest_with_workout):
            self._rest.tick()

    def advance(self, seconds: int) -> None:
        for _ in range(max(0, int(seconds))):
            if self.is_terminal:
                break
            self.tick()

    # ----- Lifecycle -----

    async def finish(
        self,
        completion: CompletionCollaborator,
        notes: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Record the workout through the completion collaborator.

        Only allowed from the exercise list once every exercise is complete.
        A failed call leaves the session as it was so the caller can retry.
        A timed-out call keeps running in the background and the session
        stays finalizing until it settles; if it then succeeds the session
        is finished with its result.
        """
        if self._finalizing:
            raise FinalizeInProgressError("Workout is already being finished")
        self._require(SessionState.browsing)
        if not self.all_exercises_complete:
            raise SessionStateError("Complete every exercise before finishing the workout")

        self._finalizing = True
        self.last_finalize_error = None
        summary = self._summary()
        try:
            task = asyncio.ensure_future(completion.complete_workout(
                self.workout_id,
                duration_minutes=self.duration_minutes,
                notes=notes,
                session_id=self.id,
            ))
        except Exception as e:
            self._finalizing = False
            self.last_finalize_error = str(e) or type(e).__name__
            raise SessionFinalizeError(self.last_finalize_error) from e
        task.add_done_callback(lambda t: self._settle_finalize(t, summary))

        try:
            if timeout:
                result = await asyncio.wait_for(asyncio.shield(task), timeout)
            else:
                result = await asyncio.shield(task)
        except Exception as e:
            if not task.done():
                self.last_finalize_error = str(e) or type(e).__name__
                logger.warning(
                    f"Session {self.id}: finishing workout {self.workout_id} still pending: {self.last_finalize_error}"
                )
            raise SessionFinalizeError(self.last_finalize_error or str(e) or type(e).__name__) from e

        self._mark_finished(result, summary)
        return result

    def _settle_finalize(self, task: "asyncio.Future[Any]", summary: Dict[str, Any]) -> None:
        self._finalizing = False
        if task.cancelled():
            self.last_finalize_error = "cancelled"
            return
        error = task.exception()
        if error is not None:
            self.last_finalize_error = str(error) or type(error).__name__
            logger.warning(f"Session {self.id}: finishing workout {self.workout_id} failed: {self.last_finalize_error}")
            return
        self._mark_finished(task.result(), summary)

    def _mark_finished(self, result: Any, summary: Dict[str, Any]) -> None:
        if self._finished:
            return
        self.last_finalize_error = None
        self.summary = summary
        self.finish_result = result
        self._finished = True
        self._rest = None
        self._detail = None
        self.progress.clear()
        logger.info(f"Session {self.id}: workout {self.workout_id} finished in {format_clock(summary['elapsed_seconds'])}")

    def abandon(self) -> None:
        """Close without finishing; in-memory progress is discarded"""
        if self._finalizing:
            raise FinalizeInProgressError("Workout is being finished and can no longer be abandoned")
        if self._finished:
            raise SessionStateError("Session is already finished")
        self._closed = True
        self._rest = None
        self._rest_exercise_id = None
        self._detail = None
        self.progress.clear()
        logger.info(f"Session {self.id}: abandoned after {format_clock(self.elapsed_seconds)}")

    # ----- Serialisation -----

    def _summary(self) -> Dict[str, Any]:
        return {
            "elapsed_seconds": self.elapsed_seconds,
            "duration_minutes": self.duration_minutes,
            "total_sets_completed": self.total_sets_completed,
            "total_sets": self.total_sets,
            "completed_exercises": self.completed_exercises_count,
            "total_exercises": len(self.exercises),
            "progress": self.progress.as_dict(),
        }

    def _detail_snapshot(self) -> Optional[Dict[str, Any]]:
        detail = self._detail
        if detail is None:
            return None
        ex = detail.exercise
        info = ex.exercise
        media = detail.demo_media()
        return {
            "exercise_id": ex.id,
            "name": ex.name,
            "muscle_group": info.muscle_group if info else None,
            "equipment": info.equipment if info else None,
            "sets": ex.sets,
            "reps": ex.reps,
            "rest_seconds": ex.rest_seconds,
            "notes": ex.notes,
            "view": detail.view.value,
            "completed": detail.completed,
            "set_indicator": detail.set_indicator(),
            "primary_action": detail.primary_action.value,
            "primary_label": detail.primary_label,
            "status_text": detail.status_text,
            "media": {
                "kind": media.kind.value,
                "url": media.url,
                "fallback_text": DEMO_UNAVAILABLE if media.url is None else None,
            },
            "instructions": detail.instructions,
            "instructions_fallback": None if detail.instructions else INSTRUCTIONS_UNAVAILABLE,
        }

    def _rest_snapshot(self) -> Optional[Dict[str, Any]]:
        rest = self._rest
        if rest is None:
            return None
        return {
            "exercise_id": self._rest_exercise_id,
            "duration": rest.duration,
            "remaining": rest.remaining,
            "running": rest.running,
            "progress_percent": round(rest.progress_percent, 1),
            "display": format_clock(rest.remaining),
            "sound_enabled": self.rest_alert.enabled,
        }

    def _result_snapshot(self) -> Any:
        result = self.finish_result
        if hasattr(result, "to_dict"):
            return result.to_dict()
        return result

    def snapshot(self) -> Dict[str, Any]:
        # Finished sessions have torn down their progress; show the final counts
        if self._finished and self.summary:
            progress = self.summary["progress"]
        else:
            progress = self.progress.as_dict()
        rows = []
        for position, ex in enumerate(self.exercises, start=1):
            completed = min(progress.get(ex.id, 0), ex.sets)
            rows.append({
                "id": ex.id,
                "exercise_id": ex.exercise_id,
                "position": position,
                "name": ex.name,
                "sets": ex.sets,
                "reps": ex.reps,
                "rest_seconds": ex.rest_seconds,
                "completed": completed,
                "is_complete": completed >= ex.sets,
                "set_indicator": [i < completed for i in range(ex.sets)],
            })

        return {
            "id": self.id,
            "workout_id": self.workout_id,
            "workout_name": self.workout_name,
            "state": self.state.value,
            "elapsed_seconds": self.elapsed_seconds,
            "elapsed_display": format_clock(self.elapsed_seconds),
            "paused": self.paused,
            "exercises": rows,
            "completed_exercises": completed_exercises_count(self.exercises, progress),
            "total_sets_completed": total_sets_completed(self.exercises, progress),
            "total_sets": self.total_sets,
            "progress_percent": round(progress_percent(self.exercises, progress), 1),
            "all_exercises_complete": all_exercises_complete(self.exercises, progress),
            "can_finish": self.can_finish,
            "finalizing": self._finalizing,
            "last_finalize_error": self.last_finalize_error,
            "detail": self._detail_snapshot(),
            "rest": self._rest_snapshot(),
            "alerts": self.drain_alerts(),
            "summary": self.summary,
            "finish_result": self._result_snapshot(),
        }
