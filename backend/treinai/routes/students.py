from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from treinai.core.context import AuthContext
from treinai.core.deps import get_professional_context, get_student_context
from treinai.db.session import get_db
from treinai.models.coaching import Professional
from treinai.services.accounts import AccountError, AccountService

router = APIRouter()


class StudentResponse(BaseModel):
    id: str
    user_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    age: Optional[int] = None
    goal: Optional[str] = None
    streak_days: int
    xp: int
    level: int
    last_workout_at: Optional[str] = None


class InviteResponse(BaseModel):
    invite_code: str


class LinkRequest(BaseModel):
    invite_code: str


@router.get("/", response_model=List[StudentResponse])
async def list_students(
    ctx: AuthContext = Depends(get_professional_context),
    db: Session = Depends(get_db),
):
    """Students linked to the calling professional"""
    rows = AccountService(db).students_of(ctx.professional_id)
    return [
        StudentResponse(
            id=student.id,
            user_id=student.user_id,
            full_name=profile.full_name if profile else None,
            email=profile.email if profile else None,
            phone=profile.phone if profile else None,
            avatar_url=profile.avatar_url if profile else None,
            age=student.age,
            goal=student.goal,
            streak_days=student.streak_days or 0,
            xp=student.xp or 0,
            level=student.level or 1,
            last_workout_at=student.last_workout_at.isoformat() if student.last_workout_at else None,
        )
        for student, profile in rows
    ]


@router.get("/invite-code", response_model=InviteResponse)
async def get_invite_code(
    ctx: AuthContext = Depends(get_professional_context),
    db: Session = Depends(get_db),
):
    professional = db.query(Professional).filter(Professional.id == ctx.professional_id).first()
    return InviteResponse(invite_code=professional.invite_code)


@router.post("/link")
async def link_to_professional(
    payload: LinkRequest,
    ctx: AuthContext = Depends(get_student_context),
    db: Session = Depends(get_db),
):
    """Link the calling student to a professional by invite code"""
    try:
        student = AccountService(db).link_student(ctx.student_id, payload.invite_code)
    except AccountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"status": "linked", "professional_id": student.professional_id}
