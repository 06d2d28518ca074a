from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from treinai.core.context import AuthContext
from treinai.core.deps import get_auth_context, require_role
from treinai.db.session import get_db
from treinai.models.user import UserRole
from treinai.models.workout import Exercise
from treinai.services.catalog import WorkoutCatalog

router = APIRouter()


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    muscle_group: str
    equipment: Optional[str] = None
    difficulty: str = "intermediate"
    instructions: List[str] = Field(default_factory=list)
    gif_url: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None


class ExerciseResponse(ExerciseCreate):
    id: str


def exercise_response(ex: Exercise) -> ExerciseResponse:
    return ExerciseResponse(
        id=ex.id,
        name=ex.name,
        description=ex.description or "",
        muscle_group=ex.muscle_group,
        equipment=ex.equipment,
        difficulty=ex.difficulty,
        instructions=list(ex.instructions or []),
        gif_url=ex.gif_url,
        video_url=ex.video_url,
        thumbnail_url=ex.thumbnail_url,
    )


@router.get("/", response_model=List[ExerciseResponse])
async def list_exercises(
    muscle_group: Optional[str] = Query(None),
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return [exercise_response(ex) for ex in WorkoutCatalog(db).list_exercises(muscle_group)]


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    ex = WorkoutCatalog(db).get_exercise(exercise_id)
    if not ex:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise_response(ex)


@router.post("/", response_model=ExerciseResponse)
async def create_exercise(
    payload: ExerciseCreate,
    ctx: AuthContext = Depends(require_role(UserRole.admin, UserRole.professional)),
    db: Session = Depends(get_db),
):
    ex = WorkoutCatalog(db).create_exercise(**payload.model_dump())
    return exercise_response(ex)
