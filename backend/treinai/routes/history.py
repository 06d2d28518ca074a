from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from treinai.core.context import AuthContext
from treinai.core.deps import get_student_context
from treinai.services.completion import WorkoutCompletionService

router = APIRouter()


class HistoryEntry(BaseModel):
    id: str
    workout_id: Optional[str] = None
    workout_name: Optional[str] = None
    completed_at: Optional[str] = None
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None


@router.get("/", response_model=List[HistoryEntry])
async def list_history(
    limit: Optional[int] = Query(None, ge=1, le=200),
    ctx: AuthContext = Depends(get_student_context),
):
    """Completed workouts, newest first"""
    entries = WorkoutCompletionService(ctx.student_id).history(limit)
    return [
        HistoryEntry(
            id=e.id,
            workout_id=e.workout_id,
            workout_name=e.workout.name if e.workout else None,
            completed_at=e.completed_at.isoformat() if e.completed_at else None,
            duration_minutes=e.duration_minutes,
            notes=e.notes,
        )
        for e in entries
    ]
