from enum import Enum
from typing import Any, Dict, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from treinai.core.config import settings
from treinai.core.context import AuthContext
from treinai.core.deps import get_student_context
from treinai.db.session import get_db
from treinai.services.catalog import WorkoutCatalog
from treinai.services.completion import WorkoutCompletionService
from treinai.services.workout import (
    DetailView,
    EmptyWorkoutError,
    SessionFinalizeError,
    SessionNotFoundError,
    SessionStateError,
    UnknownExerciseError,
    WorkoutSession,
    session_store,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


class SessionStartRequest(BaseModel):
    workout_id: str


class RestAction(str, Enum):
    toggle = "toggle"
    reset = "reset"
    skip = "skip"


class ViewRequest(BaseModel):
    view: DetailView


class FinishRequest(BaseModel):
    notes: Optional[str] = None


class SetResponse(BaseModel):
    recorded: bool
    completed: int
    prescribed: int
    rest_seconds: Optional[int] = None
    exercise_complete: bool
    session: Dict[str, Any]


class FinishResponse(BaseModel):
    status: Literal["finished"]
    gamification: Dict[str, Any]
    session: Dict[str, Any]


def _load(session_id: str, ctx: AuthContext) -> WorkoutSession:
    try:
        return session_store.get(session_id, ctx.user_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


def _conflict(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/", status_code=status.HTTP_201_CREATED)
async def start_session(
    payload: SessionStartRequest,
    ctx: AuthContext = Depends(get_student_context),
    db: Session = Depends(get_db),
):
    """Start (or resume) a session for one of the student's workouts"""
    existing = session_store.find_active(ctx.user_id, payload.workout_id)
    if existing:
        logger.info(f"Resuming session {existing.id} for workout {payload.workout_id}")
        return existing.snapshot()

    wk = WorkoutCatalog(db).get_workout(payload.workout_id)
    if not wk or wk.student_id != ctx.student_id:
        raise HTTPException(status_code=404, detail="Workout not found")

    exercises = WorkoutCatalog(db).load_workout_exercises(wk.id)
    try:
        session = WorkoutSession(
            workout_id=wk.id,
            workout_name=wk.name,
            exercises=exercises,
            pause_rest_with_workout=settings.pause_rest_with_workout,
        )
    except EmptyWorkoutError as e:
        raise _conflict(e)

    session_store.add(session, ctx.user_id)
    return session.snapshot()


@router.get("/{session_id}")
async def get_session(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    return _load(session_id, ctx).snapshot()


@router.post("/{session_id}/exercises/{exercise_id}/open")
async def open_exercise(session_id: str, exercise_id: str, ctx: AuthContext = Depends(get_student_context)):
    session = _load(session_id, ctx)
    try:
        session.open_exercise(exercise_id)
    except UnknownExerciseError:
        raise HTTPException(status_code=404, detail="Exercise not in this workout")
    except SessionStateError as e:
        raise _conflict(e)
    return session.snapshot()


@router.post("/{session_id}/exercise/close")
async def close_exercise(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    session = _load(session_id, ctx)
    try:
        session.close_exercise()
    except SessionStateError as e:
        raise _conflict(e)
    return session.snapshot()


@router.post("/{session_id}/exercise/view")
async def switch_view(session_id: str, payload: ViewRequest, ctx: AuthContext = Depends(get_student_context)):
    session = _load(session_id, ctx)
    try:
        session.show_view(payload.view)
    except SessionStateError as e:
        raise _conflict(e)
    return session.snapshot()


@router.post("/{session_id}/sets", response_model=SetResponse)
async def complete_set(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    session = _load(session_id, ctx)
    try:
        outcome = session.complete_set()
    except SessionStateError as e:
        raise _conflict(e)
    return SetResponse(
        recorded=outcome.recorded,
        completed=outcome.completed,
        prescribed=outcome.prescribed,
        rest_seconds=outcome.rest_seconds,
        exercise_complete=outcome.exercise_complete,
        session=session.snapshot(),
    )


@router.post("/{session_id}/rest/{action}")
async def rest_control(
    session_id: str,
    action: RestAction,
    ctx: AuthContext = Depends(get_student_context),
):
    session = _load(session_id, ctx)
    try:
        if action == RestAction.toggle:
            session.toggle_rest()
        elif action == RestAction.reset:
            session.reset_rest()
        else:
            session.skip_rest()
    except SessionStateError as e:
        raise _conflict(e)
    return session.snapshot()


@router.post("/{session_id}/sound")
async def toggle_sound(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    session = _load(session_id, ctx)
    return {"sound_enabled": session.toggle_sound()}


@router.post("/{session_id}/pause")
async def toggle_pause(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    """Pause or resume the workout clock"""
    session = _load(session_id, ctx)
    try:
        session.toggle_pause()
    except SessionStateError as e:
        raise _conflict(e)
    return session.snapshot()


@router.post("/{session_id}/finish", response_model=FinishResponse)
async def finish_session(
    session_id: str,
    payload: FinishRequest,
    ctx: AuthContext = Depends(get_student_context),
):
    """Record the workout; the finished session is dropped from the store"""
    session = _load(session_id, ctx)
    completion = WorkoutCompletionService(ctx.student_id)
    try:
        state = await session.finish(completion, notes=payload.notes, timeout=settings.finalize_timeout_s)
    except SessionStateError as e:
        # also covers a finish already in flight
        raise _conflict(e)
    except SessionFinalizeError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not record the workout, please try again: {e}",
        )
    snapshot = session.snapshot()
    session_store.discard(session.id)
    return FinishResponse(status="finished", gamification=state.to_dict(), session=snapshot)


@router.delete("/{session_id}")
async def abandon_session(session_id: str, ctx: AuthContext = Depends(get_student_context)):
    """Leave the workout without recording it; progress is lost"""
    session = _load(session_id, ctx)
    try:
        session.abandon()
    except SessionStateError as e:
        raise _conflict(e)
    session_store.discard(session.id)
    return {"status": "abandoned"}
