from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from treinai.core.context import AuthContext
from treinai.core.deps import get_auth_context, get_professional_context, get_student_context
from treinai.db.session import get_db
from treinai.models.workout import Workout
from treinai.services.catalog import CatalogError, ExerciseInput, WorkoutCatalog, WorkoutNotFoundError

router = APIRouter()


class WorkoutExerciseCreate(BaseModel):
    exercise_id: str
    sets: int = Field(3, ge=1)
    reps: str = "10-12"
    rest_seconds: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class WorkoutCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    student_id: str
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    exercises: List[WorkoutExerciseCreate] = Field(default_factory=list)


class WorkoutExerciseResponse(BaseModel):
    id: str
    exercise_id: str
    sets: int
    reps: str
    rest_seconds: int
    order_index: int
    notes: Optional[str] = None
    name: Optional[str] = None
    muscle_group: Optional[str] = None
    equipment: Optional[str] = None


class WorkoutResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    student_id: str
    professional_id: str
    day_of_week: Optional[int] = None
    is_active: bool
    exercises: List[WorkoutExerciseResponse]


def workout_response(wk: Workout) -> WorkoutResponse:
    return WorkoutResponse(
        id=wk.id,
        name=wk.name,
        description=wk.description,
        student_id=wk.student_id,
        professional_id=wk.professional_id,
        day_of_week=wk.day_of_week,
        is_active=bool(wk.is_active),
        exercises=[
            WorkoutExerciseResponse(
                id=row.id,
                exercise_id=row.exercise_id,
                sets=row.sets,
                reps=row.reps,
                rest_seconds=row.rest_seconds,
                order_index=row.order_index,
                notes=row.notes,
                name=row.exercise.name if row.exercise else None,
                muscle_group=row.exercise.muscle_group if row.exercise else None,
                equipment=row.exercise.equipment if row.exercise else None,
            )
            for row in sorted(wk.exercises, key=lambda r: r.order_index)
        ],
    )


def _can_view(ctx: AuthContext, wk: Workout) -> bool:
    if ctx.is_admin:
        return True
    if ctx.is_student:
        return wk.student_id == ctx.student_id
    return wk.professional_id == ctx.professional_id


@router.get("/", response_model=List[WorkoutResponse])
async def list_workouts(
    student_id: Optional[str] = Query(None),
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Student: own workouts. Professional: authored workouts, optionally for one student."""
    catalog = WorkoutCatalog(db)
    if ctx.is_student:
        if not ctx.student_id:
            return []
        workouts = catalog.list_for_student(ctx.student_id)
    elif ctx.is_professional:
        if not ctx.professional_id:
            return []
        workouts = catalog.list_for_professional(ctx.professional_id, student_id)
    else:
        workouts = db.query(Workout).order_by(Workout.day_of_week.asc()).all()
    return [workout_response(wk) for wk in workouts]


@router.get("/today")
async def todays_workout(
    ctx: AuthContext = Depends(get_student_context),
    db: Session = Depends(get_db),
):
    """Active workout scheduled for today's weekday, if any"""
    wk = WorkoutCatalog(db).todays_workout(ctx.student_id)
    if not wk:
        return {"workout": None, "message": "No workout scheduled for today"}
    return {"workout": workout_response(wk), "message": None}


@router.post("/", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    payload: WorkoutCreate,
    ctx: AuthContext = Depends(get_professional_context),
    db: Session = Depends(get_db),
):
    try:
        wk = WorkoutCatalog(db).create_workout(
            professional_id=ctx.professional_id,
            student_id=payload.student_id,
            name=payload.name,
            description=payload.description,
            day_of_week=payload.day_of_week,
            exercises=[ExerciseInput(**ex.model_dump()) for ex in payload.exercises],
        )
    except CatalogError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return workout_response(wk)


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    wk = WorkoutCatalog(db).get_workout(workout_id)
    if not wk or not _can_view(ctx, wk):
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout_response(wk)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: str,
    ctx: AuthContext = Depends(get_professional_context),
    db: Session = Depends(get_db),
):
    try:
        WorkoutCatalog(db).delete_workout(workout_id, ctx.professional_id)
    except WorkoutNotFoundError:
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"status": "deleted"}
